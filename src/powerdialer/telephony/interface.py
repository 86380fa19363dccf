"""
Dial service interface definition.

A dial service attempts to connect an agent with a phone number and reports
the terminal CallState of that attempt, possibly after an arbitrary delay.
Transport or provider failures are raised as DialServiceError instead.
"""

from abc import ABC
from enum import Enum
from typing import Any

import anyio


class CallState(str, Enum):
    """Terminal outcome of a single dial attempt."""

    CREATED = "created"
    ALERTING = "alerting"
    CONNECTED = "connected"
    DISCONNECTED = "disconnected"
    FAILED = "failed"

    def __str__(self) -> str:
        return f"{self.__class__.__name__}.{self.name}"


class DialServiceError(Exception):
    """Base exception for dial service errors."""

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        provider_response: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.error_code = error_code
        self.provider_response = provider_response or {}


class DialService(ABC):
    """Abstract interface for dialing backends.

    Async backends override `dial`. Blocking backends only implement
    `dial_sync`; the default `dial` runs it in a worker thread.
    """

    async def dial(self, agent_id: str, phone_number: str) -> CallState:
        """Dial phone_number on behalf of agent_id and return the outcome."""
        return await anyio.to_thread.run_sync(self.dial_sync, agent_id, phone_number)

    def dial_sync(self, agent_id: str, phone_number: str) -> CallState:
        raise NotImplementedError(f"{self.__class__.__name__} does not implement dial_sync")
