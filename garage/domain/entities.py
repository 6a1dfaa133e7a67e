from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


class AppError(Exception):
    pass


class ExternalServiceError(AppError):
    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ServiceUnavailableError(ExternalServiceError):
    pass


class InvalidResponseError(ExternalServiceError):
    pass


class ImageReadError(AppError):
    pass


class CameraError(AppError):
    pass


@dataclass(frozen=True)
class VehicleDescriptor:
    id: str
    year: str
    make: str
    model: str
    body_class: Optional[str] = None
    color: Optional[str] = None

    @property
    def title(self) -> str:
        return " ".join(part for part in (self.year, self.make, self.model) if part)


@dataclass(frozen=True)
class DecodedVin:
    make: str = ""
    model: str = ""
    year: str = ""
    body_class: Optional[str] = None

    def is_complete(self) -> bool:
        return bool(self.make and self.model and self.year)

    @property
    def title(self) -> str:
        return " ".join(part for part in (self.year, self.make, self.model) if part)


@dataclass(frozen=True)
class VehicleRecord:
    vin: str
    make: str
    model: str
    year: str
    body_class: Optional[str] = None

    @classmethod
    def from_decoded(cls, decoded: DecodedVin, vin: str) -> "VehicleRecord":
        return cls(
            vin=vin,
            make=decoded.make,
            model=decoded.model,
            year=decoded.year,
            body_class=decoded.body_class or None,
        )
