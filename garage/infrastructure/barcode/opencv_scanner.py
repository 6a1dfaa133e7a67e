from __future__ import annotations

import logging
import threading
from typing import Any, Optional, Tuple

import cv2

from garage.domain.entities import CameraError
from garage.domain.ports import BarcodeScannerPort

logger = logging.getLogger(__name__)


def _make_detector() -> Any:
    # cv2.barcode lives in the main package from OpenCV 4.8 on.
    factory = getattr(getattr(cv2, "barcode", None), "BarcodeDetector", None)
    if factory is None:
        factory = getattr(cv2, "barcode_BarcodeDetector", None)
    if factory is None:
        raise CameraError("OpenCV build has no barcode detector")
    return factory()


def first_decoded_text(decoded: Any) -> Optional[str]:
    if isinstance(decoded, str):
        decoded = (decoded,)
    for text in decoded or ():
        if isinstance(text, str) and text.strip():
            return text.strip()
    return None


class OpenCvBarcodeScanner(BarcodeScannerPort):
    """Reads frames from a local camera and decodes 1D barcodes in them."""

    def __init__(self, camera_index: int = 0) -> None:
        self.camera_index = camera_index
        self._capture: Optional[Any] = None
        self._detector: Optional[Any] = None
        self._lock = threading.Lock()

    @property
    def is_open(self) -> bool:
        return self._capture is not None

    def open(self) -> None:
        with self._lock:
            if self._capture is not None:
                return
            if self._detector is None:
                self._detector = _make_detector()
            capture = cv2.VideoCapture(self.camera_index)
            if not capture.isOpened():
                capture.release()
                raise CameraError(f"Camera {self.camera_index} is not available")
            self._capture = capture
            logger.info("Camera %s acquired", self.camera_index)

    def read(self) -> Tuple[Optional[Any], Optional[str]]:
        with self._lock:
            if self._capture is None:
                return None, None
            ok, frame = self._capture.read()
            if not ok or frame is None:
                return None, None
            result = self._detector.detectAndDecodeMulti(frame)
        found = bool(result[0]) if result else False
        text = first_decoded_text(result[1]) if found and len(result) > 1 else None
        return frame, text

    def close(self) -> None:
        with self._lock:
            capture = self._capture
            self._capture = None
            if capture is None:
                return
            capture.release()
            logger.info("Camera %s released", self.camera_index)
