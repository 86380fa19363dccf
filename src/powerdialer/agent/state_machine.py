"""
Agent lifecycle state machine.

Guarded transitions over a single agent record. A violated guard is logged
at error level and raised as IllegalStateTransition; the record is left as it
was. Operations are expected to be invoked sequentially for a given agent.
"""
from __future__ import annotations

import logging

from powerdialer.agent.models import AgentSnapshot, AgentState
from powerdialer.shared.exceptions import IllegalStateTransition
from powerdialer.shared.logging import get_logger


class Agent:
    """One agent's lifecycle: login, logout and call notifications."""

    def __init__(self, agent_id: str, logger: logging.Logger | None = None) -> None:
        self._agent_id = agent_id
        self._logger = logger or get_logger(__name__)
        self.state = AgentState.UNAVAILABLE
        self.current_lead = ""  # phone number of the current customer
        self.is_logging_out = False  # logout requested during a call

    @property
    def agent_id(self) -> str:
        return self._agent_id

    def snapshot(self) -> AgentSnapshot:
        return AgentSnapshot(
            agent_id=self._agent_id,
            state=self.state,
            current_lead=self.current_lead,
            is_logging_out=self.is_logging_out,
        )

    def require_state(self, required: AgentState) -> None:
        """Raise IllegalStateTransition unless the agent is in `required`."""
        if self.state != required:
            error = IllegalStateTransition(self._agent_id, required, self.state)
            self._logger.error(error.message)
            raise error

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------

    def login(self) -> None:
        """Agent logs in and can be connected with customers."""
        self.require_state(AgentState.UNAVAILABLE)
        self.state = AgentState.AVAILABLE

    def logout(self) -> None:
        """Agent logs out and should not be connected with customers anymore.

        An idle agent leaves immediately. A waiting or busy agent is logged
        out once the pending call concludes. Logging out twice is a no-op.
        """
        if self.state == AgentState.AVAILABLE:
            self.state = AgentState.UNAVAILABLE
        elif self.state in (AgentState.WAITING, AgentState.BUSY):
            self.is_logging_out = True

    def call_started(self, phone_number: str) -> None:
        """Agent is connected with a customer."""
        self.require_state(AgentState.WAITING)
        self.state = AgentState.BUSY
        self.current_lead = phone_number

    def call_failed(self) -> None:
        """Call unexpectedly ended; the agent can be connected again."""
        self.require_state(AgentState.BUSY)
        self._logger.warning(
            'Call failed for agent="%s" lead="%s"', self._agent_id, self.current_lead
        )
        self._finish_call()

    def call_ended(self) -> None:
        """Call ended normally; the agent can be connected again."""
        self.require_state(AgentState.BUSY)
        self._finish_call()

    # ------------------------------------------------------------------
    # Dialer-driven writes
    # ------------------------------------------------------------------

    def begin_dialing(self) -> None:
        """Dialer committed to a round of dial attempts for this agent."""
        if self.state == AgentState.WAITING:
            return
        self.require_state(AgentState.AVAILABLE)
        self.state = AgentState.WAITING

    def finish_dialing(self) -> None:
        """Dialer ran out of leads without connecting the agent."""
        self._release()

    def _finish_call(self) -> None:
        self.current_lead = ""
        self._release()

    def _release(self) -> None:
        # apply a deferred logout, if any
        if self.is_logging_out:
            self.is_logging_out = False
            self.state = AgentState.UNAVAILABLE
        else:
            self.state = AgentState.AVAILABLE

    def __repr__(self) -> str:
        return (
            f"Agent(agent_id={self._agent_id!r}, state={self.state}, "
            f"current_lead={self.current_lead!r}, is_logging_out={self.is_logging_out})"
        )
