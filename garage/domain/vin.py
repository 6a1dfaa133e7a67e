from __future__ import annotations

VIN_LENGTH = 17


def normalize_vin(vin: str) -> str:
    return (vin or "").strip().upper()


def clamp_vin_input(text: str) -> str:
    return (text or "")[:VIN_LENGTH]


def is_decodable_length(vin: str) -> bool:
    return len(vin or "") == VIN_LENGTH
