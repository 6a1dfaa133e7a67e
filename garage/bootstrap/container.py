from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from garage.application.use_cases import (
    ImageGenerationService,
    ImageUploadService,
    VinDecodeService,
)
from garage.config import Settings, load_settings
from garage.domain.ports import BarcodeScannerPort
from garage.infrastructure.imaging.generation_client import ImageGenerationClient
from garage.infrastructure.imaging.image_fetcher import UrlImageFetcher
from garage.infrastructure.vpic.vpic_client import VpicClient

ScannerFactory = Callable[[], BarcodeScannerPort]


@dataclass
class AppContainer:
    settings: Settings
    vin_decode: VinDecodeService
    image_generation: ImageGenerationService
    image_upload: ImageUploadService
    scanner_factory: ScannerFactory


def _opencv_scanner_factory(camera_index: int) -> ScannerFactory:
    def create() -> BarcodeScannerPort:
        # cv2 is only imported once a scan is requested.
        from garage.infrastructure.barcode.opencv_scanner import OpenCvBarcodeScanner

        return OpenCvBarcodeScanner(camera_index)

    return create


def build_container(settings: Optional[Settings] = None) -> AppContainer:
    settings = settings or load_settings()
    generator = ImageGenerationClient(settings.image_api_url, timeout=settings.image_timeout)
    fetcher = UrlImageFetcher(timeout=settings.image_timeout)
    decoder = VpicClient(settings.vpic_api_base, timeout=settings.vin_timeout)

    return AppContainer(
        settings=settings,
        vin_decode=VinDecodeService(decoder),
        image_generation=ImageGenerationService(generator, fetcher),
        image_upload=ImageUploadService(settings.max_upload_bytes),
        scanner_factory=_opencv_scanner_factory(settings.camera_index),
    )


_container: Optional[AppContainer] = None


def get_container() -> AppContainer:
    global _container
    if _container is None:
        _container = build_container()
    return _container


def set_container(container: Optional[AppContainer]) -> None:
    global _container
    _container = container
