"""
Pytest configuration and fixtures for the power dialer tests.
"""
from __future__ import annotations

import logging
from collections.abc import Callable, Mapping

import pytest

from powerdialer.agent.state_machine import Agent
from powerdialer.config import DialerSettings
from powerdialer.dialer.service import PowerDialer
from powerdialer.leads.source import InMemoryLeadSource
from powerdialer.telephony.interface import CallState
from powerdialer.telephony.mock_adapter import DialScenario, MockDialService

LEAD_1 = "+12123334444"
LEAD_2 = "+12123334449"
LEAD_3 = "+12123334447"


def connected(delay_seconds: float = 0.0) -> DialScenario:
    return DialScenario(state=CallState.CONNECTED, delay_seconds=delay_seconds)


def ended_in(state: CallState, delay_seconds: float = 0.0) -> DialScenario:
    return DialScenario(state=state, delay_seconds=delay_seconds)


def raises(message: str, delay_seconds: float = 0.0) -> DialScenario:
    return DialScenario(error=message, delay_seconds=delay_seconds)


@pytest.fixture
def agent() -> Agent:
    return Agent("agent1")


@pytest.fixture
def make_dialer(agent: Agent) -> Callable[..., PowerDialer]:
    """Build a dialer whose leads are the scenario keys, in insertion order."""

    def _make(
        scenarios: Mapping[str, DialScenario],
        **settings_overrides,
    ) -> PowerDialer:
        settings = DialerSettings(**settings_overrides)
        return PowerDialer(
            agent,
            InMemoryLeadSource(list(scenarios)),
            MockDialService(scenarios),
            settings,
        )

    return _make


@pytest.fixture
def dialer_logs(caplog: pytest.LogCaptureFixture) -> Callable[[], list[str]]:
    """Warning-and-above messages from powerdialer loggers, as "[LEVEL] message"."""
    caplog.set_level(logging.INFO)

    def _logs() -> list[str]:
        return [
            f"[{record.levelname}] {record.getMessage()}"
            for record in caplog.records
            if record.name.startswith("powerdialer") and record.levelno >= logging.WARNING
        ]

    return _logs
