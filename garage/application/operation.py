from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

IDLE = "idle"
IN_FLIGHT = "in_flight"
FAILED = "failed"


@dataclass(frozen=True)
class OperationStatus:
    """Idle, in flight or failed. Success is the presence of a result."""

    state: str = IDLE
    reason: Optional[str] = None

    @classmethod
    def idle(cls) -> "OperationStatus":
        return cls(IDLE)

    @classmethod
    def in_flight(cls) -> "OperationStatus":
        return cls(IN_FLIGHT)

    @classmethod
    def failed(cls, reason: str) -> "OperationStatus":
        return cls(FAILED, reason)

    @property
    def is_in_flight(self) -> bool:
        return self.state == IN_FLIGHT

    @property
    def is_failed(self) -> bool:
        return self.state == FAILED


class RequestTokens:
    """Hands out request ids; only the latest id issued while open is current."""

    def __init__(self) -> None:
        self._latest = 0
        self._alive = False

    def activate(self) -> None:
        self._alive = True

    def invalidate(self) -> None:
        self._alive = False
        self._latest += 1

    def next(self) -> int:
        self._latest += 1
        return self._latest

    def is_current(self, token: int) -> bool:
        return self._alive and token == self._latest
