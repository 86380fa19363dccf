"""
Mock dial service for tests and local runs.

Each phone number is mapped to a DialScenario describing how long the
attempt takes and whether it ends in a CallState or a service error.
"""

import logging
from dataclasses import dataclass
from typing import Mapping

import anyio

from powerdialer.telephony.interface import CallState, DialService, DialServiceError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DialScenario:
    """Scripted outcome for one phone number."""

    state: CallState | None = None
    error: str | None = None
    delay_seconds: float = 0.0

    def __post_init__(self) -> None:
        if (self.state is None) == (self.error is None):
            raise ValueError('A scenario must specify either "state" or "error"')
        if self.delay_seconds < 0:
            raise ValueError("delay_seconds must be >= 0")


class MockDialService(DialService):
    """Dial service that replays configured scenarios."""

    def __init__(self, scenarios: Mapping[str, DialScenario] | None = None) -> None:
        self._scenarios: dict[str, DialScenario] = dict(scenarios or {})
        self._calls: list[tuple[str, str]] = []

    def reset(self) -> None:
        self._scenarios.clear()
        self._calls.clear()

    def configure(self, phone_number: str, scenario: DialScenario) -> None:
        self._scenarios[phone_number] = scenario

    @property
    def calls(self) -> list[tuple[str, str]]:
        """(agent_id, phone_number) pairs in the order dial was invoked."""
        return self._calls.copy()

    @property
    def dialed_numbers(self) -> list[str]:
        return [number for _, number in self._calls]

    async def dial(self, agent_id: str, phone_number: str) -> CallState:
        logger.debug(
            "Mock: dialing",
            extra={"to": phone_number, "for_agent": agent_id},
        )
        self._calls.append((agent_id, phone_number))

        scenario = self._scenarios.get(phone_number)
        if scenario is None:
            raise DialServiceError(
                message="Matching scenario was not found",
                error_code="MOCK_NO_SCENARIO",
            )

        if scenario.delay_seconds > 0:
            await anyio.sleep(scenario.delay_seconds)

        if scenario.error is not None:
            raise DialServiceError(message=scenario.error, error_code="MOCK_ERROR")

        return scenario.state
