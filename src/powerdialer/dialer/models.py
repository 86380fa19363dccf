from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from powerdialer.telephony.interface import CallState


@dataclass(frozen=True)
class DialAttempt:
    """A dial attempt that did not connect.

    `call_state` is None when the dial service raised; `error` always carries
    the failure reason.
    """

    phone_number: str
    error: str
    call_state: Optional[CallState] = None


@dataclass(frozen=True)
class ConnectResult:
    """Summary returned after a connect() invocation."""

    connected_number: Optional[str] = None
    rounds: int = 0
    dialed: List[str] = field(default_factory=list)
    failed: List[DialAttempt] = field(default_factory=list)
    exhausted: bool = False

    @property
    def connected(self) -> bool:
        return self.connected_number is not None
