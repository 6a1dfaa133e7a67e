from __future__ import annotations

from typing import Callable, Optional

from PySide6.QtCore import QObject, QThreadPool, Signal

from garage.application.use_cases.vin_decode import VinDecodeService
from garage.domain.ports import BarcodeScannerPort
from garage.presentation.qt.workers import ScanLoop, Worker


class IntakeViewModel(QObject):
    decode_finished = Signal(object, object)

    def __init__(
        self,
        vin_decode: VinDecodeService,
        scanner_factory: Callable[[], BarcodeScannerPort],
    ) -> None:
        super().__init__()
        self.vin_decode = vin_decode
        self.scanner_factory = scanner_factory
        self.thread_pool = QThreadPool.globalInstance()
        self._scan: Optional[ScanLoop] = None

    def decode(self, request_id: int, vin: str) -> None:
        worker = Worker(self.vin_decode.decode, vin)
        worker.signals.finished.connect(
            lambda result, err, rid=request_id: self.decode_finished.emit((rid, result), err)
        )
        self.thread_pool.start(worker)

    def start_scan(self) -> ScanLoop:
        self.stop_scan()
        loop = ScanLoop(self.scanner_factory())
        self._scan = loop
        self.thread_pool.start(loop)
        return loop

    def stop_scan(self) -> None:
        if self._scan is not None:
            self._scan.stop()
            self._scan = None
