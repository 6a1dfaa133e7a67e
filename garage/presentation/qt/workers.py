from __future__ import annotations

import threading
from typing import Any, Callable

from PySide6.QtCore import QObject, QRunnable, Signal
from PySide6.QtGui import QImage

from garage.domain.ports import BarcodeScannerPort


class WorkerSignals(QObject):
    finished = Signal(object, object)


class Worker(QRunnable):
    def __init__(self, fn: Callable, *args: Any, **kwargs: Any) -> None:
        super().__init__()
        self.fn = fn
        self.args = args
        self.kwargs = kwargs
        self.signals = WorkerSignals()

    def run(self) -> None:
        try:
            result = self.fn(*self.args, **self.kwargs)
            self.signals.finished.emit(result, None)
        except Exception as exc:  # pragma: no cover - UI only
            self.signals.finished.emit(None, exc)


class ScanSignals(QObject):
    frame = Signal(object)
    detected = Signal(str)
    failed = Signal(object)
    stopped = Signal()


def frame_to_image(frame: Any) -> QImage:
    height, width = frame.shape[:2]
    image = QImage(frame.data, width, height, frame.strides[0], QImage.Format.Format_BGR888)
    return image.copy()


class ScanLoop(QRunnable):
    """Holds the camera until the first decoded code, a stop request or an error."""

    def __init__(self, scanner: BarcodeScannerPort) -> None:
        super().__init__()
        self.scanner = scanner
        self.signals = ScanSignals()
        self._stop = threading.Event()

    def stop(self) -> None:
        self._stop.set()

    def run(self) -> None:
        try:
            self.scanner.open()
            while not self._stop.is_set():
                frame, text = self.scanner.read()
                if frame is not None:
                    self.signals.frame.emit(frame_to_image(frame))
                if text:
                    self.signals.detected.emit(text)
                    break
                self._stop.wait(0.03)
        except Exception as exc:
            self.signals.failed.emit(exc)
        finally:
            self.scanner.close()
            self.signals.stopped.emit()
