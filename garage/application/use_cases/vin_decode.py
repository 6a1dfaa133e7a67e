from __future__ import annotations

from typing import Optional

from garage.domain.entities import DecodedVin
from garage.domain.ports import VinDecoderPort
from garage.domain.vin import normalize_vin


class VinDecodeService:
    def __init__(self, decoder: VinDecoderPort) -> None:
        self.decoder = decoder

    def decode(self, vin: str) -> Optional[DecodedVin]:
        value = normalize_vin(vin)
        if not value:
            return None
        return self.decoder.decode(value)
