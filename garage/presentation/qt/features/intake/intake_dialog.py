from __future__ import annotations

from typing import Any, Callable, Optional

from PySide6.QtGui import QCloseEvent
from PySide6.QtWidgets import (
    QDialog,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from garage.application.intake_dialog import IntakeDialogState
from garage.domain.entities import VehicleRecord
from garage.domain.vin import VIN_LENGTH
from garage.presentation.qt.app_vm import get_vm
from garage.presentation.qt.features.intake.scanner_dialog import BarcodeScanDialog
from garage.presentation.qt.style import panel_layout
from garage.presentation.qt.viewmodels import IntakeViewModel


class VehicleIntakeDialog(QDialog):
    def __init__(
        self,
        on_add_vehicle: Callable[[VehicleRecord], None],
        on_close: Callable[[], None],
        parent: Optional[QWidget] = None,
        vm: Optional[IntakeViewModel] = None,
    ) -> None:
        super().__init__(parent)
        self.setWindowTitle("Add Vehicle")
        self.setMinimumWidth(420)
        self.host_on_close = on_close
        self.state = IntakeDialogState(on_add_vehicle=on_add_vehicle, on_close=self._finish)
        self.vm = vm or get_vm().intake_vm()
        self.vm.decode_finished.connect(self._on_decode_done)
        self.scanner = BarcodeScanDialog(
            self.vm,
            on_detected=self._on_barcode,
            on_cancel=self._on_scan_cancelled,
            on_error=self._on_scan_error,
            parent=self,
        )

        layout = QVBoxLayout(self)
        title = QLabel("Add Vehicle")
        title.setObjectName("dialogTitle")
        layout.addWidget(title)

        self.vin_input = QLineEdit()
        self.vin_input.setPlaceholderText("Enter VIN")
        self.vin_input.setMaxLength(VIN_LENGTH)
        self.vin_input.textEdited.connect(self._vin_edited)
        self.vin_input.returnPressed.connect(self._decode)
        layout.addWidget(self.vin_input)

        self.error_label = QLabel()
        self.error_label.setObjectName("error")
        self.error_label.setWordWrap(True)
        layout.addWidget(self.error_label)

        btn_row = QHBoxLayout()
        self.decode_btn = QPushButton("Decode VIN")
        self.decode_btn.setObjectName("primary")
        self.decode_btn.clicked.connect(self._decode)
        self.scan_btn = QPushButton("Scan Barcode")
        self.scan_btn.clicked.connect(self._scan)
        btn_row.addWidget(self.decode_btn)
        btn_row.addWidget(self.scan_btn)
        layout.addLayout(btn_row)

        self.summary, summary_layout = panel_layout()
        self.summary_title = QLabel()
        self.summary_title.setObjectName("vehicleTitle")
        self.summary_body = QLabel()
        self.summary_body.setObjectName("hint")
        self.summary_vin = QLabel()
        self.summary_vin.setObjectName("vinLine")
        self.save_btn = QPushButton("Save Vehicle")
        self.save_btn.setObjectName("primary")
        self.save_btn.clicked.connect(self._save)
        summary_layout.addWidget(self.summary_title)
        summary_layout.addWidget(self.summary_body)
        summary_layout.addWidget(self.summary_vin)
        summary_layout.addWidget(self.save_btn)
        layout.addWidget(self.summary)

        cancel_row = QHBoxLayout()
        cancel_row.addStretch(1)
        cancel_btn = QPushButton("Cancel")
        cancel_btn.clicked.connect(self.reject)
        cancel_row.addWidget(cancel_btn)
        layout.addLayout(cancel_row)

    # Lifecycle

    def present(self) -> None:
        self.state.open()
        self.vin_input.clear()
        self._render()
        self.open()
        self.vin_input.setFocus()

    def reject(self) -> None:
        self.state.request_close()

    def closeEvent(self, event: QCloseEvent) -> None:
        event.ignore()
        self.reject()

    def _finish(self) -> None:
        self.scanner.stop()
        QDialog.reject(self)
        self.host_on_close()

    # Manual entry / decode

    def _vin_edited(self, text: str) -> None:
        self.state.set_vin(text)
        self._render()

    def _decode(self) -> None:
        self._start_lookup(None)

    def _start_lookup(self, vin_override: Optional[str]) -> None:
        request = self.state.start_lookup(vin_override)
        if request is None:
            return
        token, vin = request
        self.vin_input.setText(vin)
        self.vm.decode(token, vin)
        self._render()

    def _on_decode_done(self, payload: Any, err: Any) -> None:
        token, decoded = payload
        if self.state.finish_lookup(token, decoded=decoded, error=err):
            self._render()

    # Barcode

    def _scan(self) -> None:
        if not self.state.start_scan():
            return
        self.scanner.start()
        self._render()

    def _on_barcode(self, text: str) -> None:
        request = self.state.handle_detection(text)
        if request is None:
            self._render()
            return
        token, vin = request
        self.vin_input.setText(vin)
        self.vm.decode(token, vin)
        self._render()

    def _on_scan_cancelled(self) -> None:
        self.state.cancel_scan()
        self._render()

    def _on_scan_error(self, message: str) -> None:
        self.state.fail_scan(message)
        self._render()

    # Confirmation

    def _save(self) -> None:
        self.state.save()

    def _render(self) -> None:
        state = self.state
        busy = state.lookup.is_in_flight
        self.decode_btn.setEnabled(state.can_decode)
        self.vin_input.setEnabled(not busy)
        self.decode_btn.setText("Looking up..." if busy else "Decode VIN")
        self.scan_btn.setEnabled(not busy and not state.scanning)

        error = state.lookup.reason if state.lookup.is_failed else state.scan_error
        self.error_label.setVisible(bool(error))
        self.error_label.setText(error or "")

        decoded = state.decoded
        self.summary.setVisible(decoded is not None)
        if decoded is not None:
            self.summary_title.setText(decoded.title)
            self.summary_body.setText(decoded.body_class or "")
            self.summary_vin.setText(f"VIN: {state.vin}")
        self.save_btn.setEnabled(state.can_save)
