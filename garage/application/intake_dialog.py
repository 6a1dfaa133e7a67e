from __future__ import annotations

import logging
from typing import Callable, Optional, Tuple

from garage.application.operation import OperationStatus, RequestTokens
from garage.domain.entities import DecodedVin, VehicleRecord
from garage.domain.vin import clamp_vin_input, is_decodable_length, normalize_vin

logger = logging.getLogger(__name__)

COULD_NOT_DECODE_MESSAGE = "Could not decode this VIN. Please check and try again."
LOOKUP_FAILED_MESSAGE = "Failed to look up VIN."


class IntakeDialogState:
    """VIN entry, barcode capture, decode and confirmation for one intake."""

    def __init__(
        self,
        on_add_vehicle: Callable[[VehicleRecord], None],
        on_close: Callable[[], None],
    ) -> None:
        self.on_add_vehicle = on_add_vehicle
        self.on_close = on_close
        self.is_open = False
        self.vin = ""
        self.decoded: Optional[DecodedVin] = None
        self.decoded_vin: Optional[str] = None
        self.lookup = OperationStatus.idle()
        self.scanning = False
        self.scan_error: Optional[str] = None
        self._tokens = RequestTokens()

    def open(self) -> None:
        self._reset()
        self._tokens.activate()
        self.is_open = True

    def request_close(self) -> None:
        self._tokens.invalidate()
        self._reset()
        self.is_open = False
        self.on_close()

    def _reset(self) -> None:
        self.vin = ""
        self.decoded = None
        self.decoded_vin = None
        self.lookup = OperationStatus.idle()
        self.scanning = False
        self.scan_error = None

    # Manual entry

    def set_vin(self, text: str) -> None:
        if self.lookup.is_in_flight:
            return
        self.vin = clamp_vin_input(text)
        if self.decoded is not None and normalize_vin(self.vin) != self.decoded_vin:
            self.decoded = None
            self.decoded_vin = None

    @property
    def can_decode(self) -> bool:
        return self.is_open and not self.lookup.is_in_flight and is_decodable_length(normalize_vin(self.vin))

    # Decode

    def start_lookup(self, vin_override: Optional[str] = None) -> Optional[Tuple[int, str]]:
        if not self.is_open or self.lookup.is_in_flight:
            return None
        if vin_override is None:
            candidate = normalize_vin(self.vin)
            if not is_decodable_length(candidate):
                return None
        else:
            candidate = normalize_vin(vin_override)
            if not candidate:
                return None
        self.vin = candidate
        self.decoded = None
        self.decoded_vin = None
        self.scan_error = None
        self.lookup = OperationStatus.in_flight()
        return self._tokens.next(), candidate

    def finish_lookup(
        self,
        token: int,
        decoded: Optional[DecodedVin] = None,
        error: Optional[BaseException] = None,
    ) -> bool:
        if not self._tokens.is_current(token):
            return False
        if error is not None:
            logger.warning("VIN lookup failed for %s: %s", self.vin, error)
            self.lookup = OperationStatus.failed(LOOKUP_FAILED_MESSAGE)
            return True
        if decoded is None or not decoded.is_complete():
            logger.info("VIN %s did not decode to make/model/year", self.vin)
            self.lookup = OperationStatus.failed(COULD_NOT_DECODE_MESSAGE)
            return True
        self.decoded = decoded
        self.decoded_vin = self.vin
        self.lookup = OperationStatus.idle()
        return True

    # Barcode

    def start_scan(self) -> bool:
        if not self.is_open or self.scanning or self.lookup.is_in_flight:
            return False
        self.scan_error = None
        self.scanning = True
        return True

    def cancel_scan(self) -> None:
        self.scanning = False

    def fail_scan(self, reason: str) -> None:
        if not self.scanning:
            return
        logger.warning("Barcode scan stopped: %s", reason)
        self.scanning = False
        self.scan_error = reason

    def handle_detection(self, text: Optional[str]) -> Optional[Tuple[int, str]]:
        if not self.scanning:
            return None
        value = (text or "").strip()
        if not value:
            return None
        self.scanning = False
        return self.start_lookup(value)

    # Confirmation

    @property
    def can_save(self) -> bool:
        return self.is_open and self.decoded is not None

    def save(self) -> None:
        try:
            decoded = self.decoded
            if self.is_open and decoded is not None and self.decoded_vin:
                record = VehicleRecord.from_decoded(decoded, self.decoded_vin)
                logger.info("Adding vehicle %s", record.vin)
                self.on_add_vehicle(record)
        finally:
            self.request_close()
