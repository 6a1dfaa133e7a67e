from __future__ import annotations

from pathlib import Path
from typing import Union

from PySide6.QtCore import QObject, QThreadPool, Signal

from garage.application.use_cases.image_generation import ImageGenerationService
from garage.application.use_cases.image_upload import ImageUploadService
from garage.presentation.qt.workers import Worker


class ImageDialogViewModel(QObject):
    generation_finished = Signal(object, object)
    upload_finished = Signal(object, object)
    preview_finished = Signal(object, object)

    def __init__(self, generation: ImageGenerationService, upload: ImageUploadService) -> None:
        super().__init__()
        self.generation = generation
        self.upload = upload
        self.thread_pool = QThreadPool.globalInstance()

    def generate(self, request_id: int, prompt: str, vehicle_id: str) -> None:
        worker = Worker(self.generation.generate, prompt, vehicle_id)
        worker.signals.finished.connect(
            lambda result, err, rid=request_id: self.generation_finished.emit((rid, result), err)
        )
        self.thread_pool.start(worker)

    def read_upload(self, request_id: int, path: Union[str, Path]) -> None:
        worker = Worker(self.upload.read_as_data_uri, path)
        worker.signals.finished.connect(
            lambda result, err, rid=request_id: self.upload_finished.emit((rid, result), err)
        )
        self.thread_pool.start(worker)

    def fetch_preview(self, image_url: str) -> None:
        worker = Worker(self.generation.fetch_preview, image_url)
        worker.signals.finished.connect(
            lambda result, err, url=image_url: self.preview_finished.emit((url, result), err)
        )
        self.thread_pool.start(worker)

