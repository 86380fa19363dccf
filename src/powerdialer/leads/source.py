"""
Lead source contract and an in-memory implementation.
"""
from __future__ import annotations

from collections import deque
from typing import Iterable, Protocol


class LeadSource(Protocol):
    """Yields phone numbers to dial, one per call.

    Returns None once exhausted, and keeps returning None on later calls.
    """

    def next_lead(self) -> str | None:  # pragma: no cover - runtime protocol
        ...


class InMemoryLeadSource:
    """FIFO lead source backed by a list of phone numbers."""

    def __init__(self, numbers: Iterable[str] = ()) -> None:
        self._numbers: deque[str] = deque(numbers)

    def next_lead(self) -> str | None:
        if not self._numbers:
            return None
        return self._numbers.popleft()

    def add(self, phone_number: str) -> None:
        self._numbers.append(phone_number)

    @property
    def remaining(self) -> int:
        return len(self._numbers)

    def __len__(self) -> int:
        return len(self._numbers)
