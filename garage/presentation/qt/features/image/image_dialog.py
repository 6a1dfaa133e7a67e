from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from PySide6.QtCore import Qt
from PySide6.QtGui import QCloseEvent, QPixmap
from PySide6.QtWidgets import (
    QDialog,
    QFileDialog,
    QFrame,
    QHBoxLayout,
    QLabel,
    QProgressBar,
    QPushButton,
    QTabWidget,
    QVBoxLayout,
    QWidget,
)

from garage.application.image_dialog import (
    TAB_GENERATE,
    TAB_UPLOAD,
    ImageDialogState,
)
from garage.application.use_cases.image_generation import describe_generation_error
from garage.application.use_cases.image_upload import IMAGE_FILE_FILTER, UPLOAD_FAILED_MESSAGE
from garage.domain.entities import VehicleDescriptor
from garage.infrastructure.imaging.image_fetcher import decode_data_uri
from garage.presentation.qt.app_vm import get_vm
from garage.presentation.qt.style import PREVIEW_HEIGHT
from garage.presentation.qt.viewmodels import ImageDialogViewModel

logger = logging.getLogger(__name__)

_TAB_ORDER = (TAB_GENERATE, TAB_UPLOAD)


def _pixmap_from_bytes(data: Optional[bytes]) -> Optional[QPixmap]:
    if not data:
        return None
    pixmap = QPixmap()
    if not pixmap.loadFromData(data):
        return None
    return pixmap


class ImageAcquisitionDialog(QDialog):
    """Upload or AI-generate a photo for one vehicle.

    The host receives the chosen image through on_save(image_url) and is told
    to close the dialog through on_close(). Dismissal is ignored while a
    generation request is running.
    """

    def __init__(
        self,
        vehicle: VehicleDescriptor,
        on_save: Callable[[str], None],
        on_close: Callable[[], None],
        parent: Optional[QWidget] = None,
        vm: Optional[ImageDialogViewModel] = None,
    ) -> None:
        super().__init__(parent)
        self.setWindowTitle("Add Vehicle Image")
        self.setMinimumWidth(480)
        self.host_on_close = on_close
        self.state = ImageDialogState(vehicle, on_save=on_save, on_close=self._finish)
        self.vm = vm or get_vm().image_dialog_vm()
        self.vm.generation_finished.connect(self._on_generation_done)
        self.vm.upload_finished.connect(self._on_upload_done)
        self.vm.preview_finished.connect(self._on_preview_done)
        self._preview_url: Optional[str] = None

        layout = QVBoxLayout(self)
        title = QLabel("Add Vehicle Image")
        title.setObjectName("dialogTitle")
        layout.addWidget(title)

        self.tabs = QTabWidget()
        self.tabs.addTab(self._build_generate_tab(vehicle), "Generate with AI")
        self.tabs.addTab(self._build_upload_tab(), "Upload Image")
        self.tabs.currentChanged.connect(self._tab_changed)
        layout.addWidget(self.tabs)

        btn_row = QHBoxLayout()
        self.cancel_btn = QPushButton("Cancel")
        self.cancel_btn.clicked.connect(self.reject)
        self.save_btn = QPushButton("Save")
        self.save_btn.setObjectName("primary")
        self.save_btn.clicked.connect(self._save)
        btn_row.addWidget(self.cancel_btn)
        btn_row.addWidget(self.save_btn)
        layout.addLayout(btn_row)

    def _build_generate_tab(self, vehicle: VehicleDescriptor) -> QWidget:
        page = QFrame()
        page.setObjectName("dropZone")
        layout = QVBoxLayout(page)
        self.generate_hint = QLabel(f"Generate an AI image of your {vehicle.title}")
        self.generate_hint.setObjectName("hint")
        self.generate_hint.setWordWrap(True)
        self.generate_btn = QPushButton("Generate Image")
        self.generate_btn.setObjectName("primary")
        self.generate_btn.clicked.connect(self._generate)
        self.busy_bar = QProgressBar()
        self.busy_bar.setRange(0, 0)
        self.busy_bar.setTextVisible(False)
        self.generate_error = QLabel()
        self.generate_error.setObjectName("error")
        self.generate_error.setWordWrap(True)
        self.retry_btn = QPushButton("Try Again")
        self.retry_btn.clicked.connect(self._generate)
        self.generated_preview = QLabel()
        self.generated_preview.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.generated_preview.setMinimumHeight(PREVIEW_HEIGHT)

        layout.addWidget(self.generate_hint)
        layout.addWidget(self.generate_btn)
        layout.addWidget(self.busy_bar)
        layout.addWidget(self.generate_error)
        layout.addWidget(self.retry_btn)
        layout.addWidget(self.generated_preview)
        return page

    def _build_upload_tab(self) -> QWidget:
        page = QFrame()
        page.setObjectName("dropZone")
        layout = QVBoxLayout(page)
        self.choose_btn = QPushButton("Upload a file")
        self.choose_btn.clicked.connect(self._choose_file)
        max_mb = get_vm().settings.max_upload_mb
        self.upload_hint = QLabel(f"PNG, JPG, GIF up to {max_mb:g}MB")
        self.upload_hint.setObjectName("hint")
        self.upload_error = QLabel()
        self.upload_error.setObjectName("error")
        self.upload_error.setWordWrap(True)
        self.uploaded_preview = QLabel()
        self.uploaded_preview.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.uploaded_preview.setMinimumHeight(PREVIEW_HEIGHT)
        self.remove_btn = QPushButton("Remove")
        self.remove_btn.clicked.connect(self._remove_upload)

        layout.addWidget(self.choose_btn)
        layout.addWidget(self.upload_hint)
        layout.addWidget(self.upload_error)
        layout.addWidget(self.uploaded_preview)
        layout.addWidget(self.remove_btn)
        return page

    # Lifecycle

    def present(self) -> None:
        self.state.open()
        self.tabs.blockSignals(True)
        self.tabs.setCurrentIndex(_TAB_ORDER.index(self.state.tab))
        self.tabs.blockSignals(False)
        self._render()
        self.open()

    def reject(self) -> None:
        self.state.request_close()

    def closeEvent(self, event: QCloseEvent) -> None:
        event.ignore()
        self.reject()

    def _finish(self) -> None:
        self._preview_url = None
        self.generated_preview.clear()
        self.uploaded_preview.clear()
        QDialog.reject(self)
        self.host_on_close()

    # Actions

    def _tab_changed(self, index: int) -> None:
        if not self.state.select_tab(_TAB_ORDER[index]):
            self.tabs.blockSignals(True)
            self.tabs.setCurrentIndex(_TAB_ORDER.index(self.state.tab))
            self.tabs.blockSignals(False)
        self._render()

    def _generate(self) -> None:
        request = self.state.start_generation()
        if request is None:
            return
        token, prompt = request
        self._preview_url = None
        self.generated_preview.clear()
        self.uploaded_preview.clear()
        self.vm.generate(token, prompt, self.state.vehicle.id)
        self._render()

    def _on_generation_done(self, payload: Any, err: Any) -> None:
        token, image_url = payload
        message = describe_generation_error(err) if err else None
        if not self.state.finish_generation(token, image_url=image_url, error=message):
            return
        generated = self.state.selection.generated_image
        if generated:
            self._preview_url = generated
            self.vm.fetch_preview(generated)
        self._render()

    def _on_preview_done(self, payload: Any, err: Any) -> None:
        image_url, data = payload
        if image_url != self._preview_url:
            return
        pixmap = None if err else _pixmap_from_bytes(data)
        if pixmap is None:
            if err:
                logger.warning("Generated image download failed: %s", err)
            self._preview_url = None
            self.state.render_failed(image_url)
        else:
            self._show_pixmap(self.generated_preview, pixmap)
        self._render()

    def _choose_file(self) -> None:
        path, _ = QFileDialog.getOpenFileName(self, "Select vehicle image", "", IMAGE_FILE_FILTER)
        if not path:
            return
        token = self.state.begin_upload()
        if token is None:
            return
        self.vm.read_upload(token, path)

    def _on_upload_done(self, payload: Any, err: Any) -> None:
        token, data_uri = payload
        pixmap = None
        if not err:
            try:
                pixmap = _pixmap_from_bytes(decode_data_uri(data_uri))
            except ValueError as exc:
                err = exc
        if err or pixmap is None:
            self.state.fail_upload(token, UPLOAD_FAILED_MESSAGE, cause=err)
            self._render()
            return
        if self.state.apply_upload(token, data_uri):
            self._preview_url = None
            self.generated_preview.clear()
            self._show_pixmap(self.uploaded_preview, pixmap)
        self._render()

    def _remove_upload(self) -> None:
        self.state.remove_upload()
        self.uploaded_preview.clear()
        self._render()

    def _save(self) -> None:
        self.state.save()

    # Rendering

    def _show_pixmap(self, label: QLabel, pixmap: QPixmap) -> None:
        label.setPixmap(
            pixmap.scaledToHeight(PREVIEW_HEIGHT, Qt.TransformationMode.SmoothTransformation)
        )

    def _render(self) -> None:
        state = self.state
        busy = state.generation.is_in_flight
        failed = state.generation.is_failed
        generated = state.selection.generated_image
        uploaded = state.selection.uploaded_image

        self.tabs.tabBar().setEnabled(not busy)
        self.cancel_btn.setEnabled(not busy)
        self.save_btn.setEnabled(state.can_save)

        self.generate_hint.setVisible(not generated)
        self.generate_btn.setVisible(not generated)
        self.generate_btn.setEnabled(not busy)
        self.generate_btn.setText("Generating..." if busy else "Generate Image")
        self.busy_bar.setVisible(busy)
        self.generate_error.setVisible(failed)
        self.generate_error.setText(state.generation.reason or "")
        self.retry_btn.setVisible(failed)
        self.generated_preview.setVisible(bool(generated))

        self.choose_btn.setVisible(not uploaded)
        self.upload_hint.setVisible(not uploaded)
        self.upload_error.setVisible(bool(state.upload_error))
        self.upload_error.setText(state.upload_error or "")
        self.uploaded_preview.setVisible(bool(uploaded))
        self.remove_btn.setVisible(bool(uploaded))
