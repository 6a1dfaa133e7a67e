from __future__ import annotations

import logging
from typing import Callable, Optional

from PySide6.QtCore import Qt
from PySide6.QtGui import QCloseEvent, QImage, QPixmap
from PySide6.QtWidgets import QDialog, QLabel, QPushButton, QVBoxLayout, QWidget

from garage.presentation.qt.viewmodels import IntakeViewModel
from garage.presentation.qt.workers import ScanLoop

logger = logging.getLogger(__name__)

CAMERA_UNAVAILABLE_MESSAGE = "Camera is not available."
_VIEW_SIZE = 250


class BarcodeScanDialog(QDialog):
    """Live camera surface. The camera is held only while this dialog is shown."""

    def __init__(
        self,
        vm: IntakeViewModel,
        on_detected: Callable[[str], None],
        on_cancel: Callable[[], None],
        on_error: Callable[[str], None],
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(parent)
        self.setWindowTitle("Scan VIN Barcode")
        self.vm = vm
        self.on_detected = on_detected
        self.on_cancel = on_cancel
        self.on_error = on_error
        self._loop: Optional[ScanLoop] = None

        layout = QVBoxLayout(self)
        title = QLabel("Scan VIN Barcode")
        title.setObjectName("dialogTitle")
        layout.addWidget(title, alignment=Qt.AlignmentFlag.AlignHCenter)
        self.view = QLabel("Starting camera…")
        self.view.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.view.setFixedSize(_VIEW_SIZE, _VIEW_SIZE)
        layout.addWidget(self.view, alignment=Qt.AlignmentFlag.AlignHCenter)
        cancel_btn = QPushButton("Cancel")
        cancel_btn.clicked.connect(self.reject)
        layout.addWidget(cancel_btn)

    def start(self) -> None:
        loop = self.vm.start_scan()
        loop.signals.frame.connect(self._show_frame)
        loop.signals.detected.connect(self._detected)
        loop.signals.failed.connect(self._failed)
        self._loop = loop
        self.open()

    def stop(self) -> None:
        if self._loop is not None:
            self._loop = None
            self.vm.stop_scan()
        if self.isVisible():
            QDialog.reject(self)

    def reject(self) -> None:
        was_scanning = self._loop is not None
        self.stop()
        if was_scanning:
            self.on_cancel()

    def closeEvent(self, event: QCloseEvent) -> None:
        event.ignore()
        self.reject()

    def _show_frame(self, image: QImage) -> None:
        if self._loop is None:
            return
        pixmap = QPixmap.fromImage(image).scaled(
            _VIEW_SIZE,
            _VIEW_SIZE,
            Qt.AspectRatioMode.KeepAspectRatio,
            Qt.TransformationMode.SmoothTransformation,
        )
        self.view.setPixmap(pixmap)

    def _detected(self, text: str) -> None:
        if self._loop is None:
            return
        self.stop()
        self.on_detected(text)

    def _failed(self, exc: object) -> None:
        if self._loop is None:
            return
        logger.warning("Barcode scan failed: %s", exc)
        self.stop()
        self.on_error(CAMERA_UNAVAILABLE_MESSAGE)
