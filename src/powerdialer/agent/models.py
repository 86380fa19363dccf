"""
Domain models for the agent lifecycle.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class AgentState(str, Enum):
    """States of a customer support agent."""

    AVAILABLE = "available"  # logged in, idle
    WAITING = "waiting"  # waiting to be connected to a customer
    BUSY = "busy"  # talking to a customer
    UNAVAILABLE = "unavailable"  # logged out

    def __str__(self) -> str:
        return f"{self.__class__.__name__}.{self.name}"


@dataclass(frozen=True)
class AgentSnapshot:
    """Point-in-time copy of an agent record."""

    agent_id: str
    state: AgentState
    current_lead: str = ""
    is_logging_out: bool = False

    @property
    def on_call(self) -> bool:
        return self.state == AgentState.BUSY
