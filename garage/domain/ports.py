from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional, Tuple

from garage.domain.entities import DecodedVin


class VinDecoderPort(ABC):
    @abstractmethod
    def decode(self, vin: str) -> Optional[DecodedVin]:
        """Return the decoded descriptor, None when nothing usable came back.

        Raises ExternalServiceError on transport or service failure.
        """


class ImageGeneratorPort(ABC):
    @abstractmethod
    def generate(self, prompt: str, vehicle_id: str) -> str:
        """Return the generated image URL."""


class ImageFetcherPort(ABC):
    @abstractmethod
    def fetch(self, url: str) -> bytes:
        ...


class BarcodeScannerPort(ABC):
    """Camera-backed scanner. The camera is held between open() and close()."""

    @abstractmethod
    def open(self) -> None:
        ...

    @abstractmethod
    def read(self) -> Tuple[Optional[Any], Optional[str]]:
        """Grab one frame; return (frame, decoded_text_or_None)."""

    @abstractmethod
    def close(self) -> None:
        ...

    @property
    @abstractmethod
    def is_open(self) -> bool:
        ...
