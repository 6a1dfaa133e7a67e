from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from PySide6.QtWidgets import (
    QHBoxLayout,
    QListWidget,
    QMainWindow,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from garage.domain.entities import VehicleDescriptor, VehicleRecord
from garage.presentation.qt.dialogs.message_box import ui_info
from garage.presentation.qt.features.image.image_dialog import ImageAcquisitionDialog
from garage.presentation.qt.features.intake.intake_dialog import VehicleIntakeDialog

logger = logging.getLogger(__name__)


@dataclass
class GarageEntry:
    record: VehicleRecord
    image_url: Optional[str] = None

    def descriptor(self) -> VehicleDescriptor:
        return VehicleDescriptor(
            id=self.record.vin,
            year=self.record.year,
            make=self.record.make,
            model=self.record.model,
            body_class=self.record.body_class,
        )

    def label(self) -> str:
        text = f"{self.record.year} {self.record.make} {self.record.model}  ({self.record.vin})"
        if self.image_url:
            text += "  [image]"
        return text


class MainWindow(QMainWindow):
    """In-memory vehicle list hosting the intake and image dialogs."""

    def __init__(self) -> None:
        super().__init__()
        self.setWindowTitle("Garage")
        self.setMinimumSize(640, 420)
        self.entries: List[GarageEntry] = []
        self._intake: Optional[VehicleIntakeDialog] = None
        self._image: Optional[ImageAcquisitionDialog] = None

        central = QWidget()
        layout = QVBoxLayout(central)
        self.vehicle_list = QListWidget()
        self.vehicle_list.currentRowChanged.connect(self._selection_changed)
        layout.addWidget(self.vehicle_list)

        btn_row = QHBoxLayout()
        self.add_btn = QPushButton("Add Vehicle")
        self.add_btn.setObjectName("primary")
        self.add_btn.clicked.connect(self._open_intake)
        self.image_btn = QPushButton("Set Image")
        self.image_btn.clicked.connect(self._open_image)
        self.image_btn.setEnabled(False)
        btn_row.addWidget(self.add_btn)
        btn_row.addWidget(self.image_btn)
        btn_row.addStretch(1)
        layout.addLayout(btn_row)
        self.setCentralWidget(central)

    def _selection_changed(self, row: int) -> None:
        self.image_btn.setEnabled(0 <= row < len(self.entries))

    def _refresh_list(self) -> None:
        row = self.vehicle_list.currentRow()
        self.vehicle_list.clear()
        for entry in self.entries:
            self.vehicle_list.addItem(entry.label())
        if self.entries:
            self.vehicle_list.setCurrentRow(min(max(row, 0), len(self.entries) - 1))

    # Intake

    def _open_intake(self) -> None:
        if self._intake is None:
            self._intake = VehicleIntakeDialog(
                on_add_vehicle=self._add_vehicle,
                on_close=self._intake_closed,
                parent=self,
            )
        self._intake.present()

    def _add_vehicle(self, record: VehicleRecord) -> None:
        if any(entry.record.vin == record.vin for entry in self.entries):
            ui_info(self, "Add Vehicle", f"{record.vin} is already in the garage.")
            return
        self.entries.append(GarageEntry(record))
        self._refresh_list()
        self.vehicle_list.setCurrentRow(len(self.entries) - 1)
        self.statusBar().showMessage(f"Added {record.year} {record.make} {record.model}", 4000)

    def _intake_closed(self) -> None:
        logger.debug("Intake dialog closed")

    # Image

    def _open_image(self) -> None:
        row = self.vehicle_list.currentRow()
        if not 0 <= row < len(self.entries):
            return
        entry = self.entries[row]
        if self._image is not None:
            self._image.deleteLater()
        self._image = ImageAcquisitionDialog(
            entry.descriptor(),
            on_save=lambda url, target=entry: self._save_image(target, url),
            on_close=self._image_closed,
            parent=self,
        )
        self._image.present()

    def _save_image(self, entry: GarageEntry, image_url: str) -> None:
        entry.image_url = image_url
        self._refresh_list()
        self.statusBar().showMessage("Vehicle image saved", 4000)

    def _image_closed(self) -> None:
        logger.debug("Image dialog closed")
