"""Power dialer: agent availability state machine and concurrent outbound dialing."""

from powerdialer.agent import Agent, AgentSnapshot, AgentState
from powerdialer.dialer import ConnectResult, DialAttempt, PowerDialer
from powerdialer.shared.exceptions import DialAttemptFailed, IllegalStateTransition
from powerdialer.telephony.interface import CallState, DialService, DialServiceError

__all__ = [
    "Agent",
    "AgentSnapshot",
    "AgentState",
    "CallState",
    "ConnectResult",
    "DialAttempt",
    "DialAttemptFailed",
    "DialService",
    "DialServiceError",
    "IllegalStateTransition",
    "PowerDialer",
]
