"""
Agent lifecycle state machine and models.
"""

from powerdialer.agent.models import AgentSnapshot, AgentState
from powerdialer.agent.state_machine import Agent

__all__ = ["Agent", "AgentSnapshot", "AgentState"]
