"""
Custom exceptions for the power dialer.

Only IllegalStateTransition crosses the Agent/Dialer public boundary.
DialAttemptFailed is absorbed by the dialer's round loop.
"""

from typing import Any


class AppError(Exception):
    """Base exception for application errors."""

    def __init__(self, message: str, code: str = "APP_ERROR") -> None:
        self.message = message
        self.code = code
        super().__init__(message)


class ConfigurationError(AppError):
    """Invalid configuration passed in code."""

    def __init__(self, message: str) -> None:
        super().__init__(message, "CONFIGURATION_ERROR")


class IllegalStateTransition(AppError):
    """An Agent/Dialer operation was invoked in a state that forbids it."""

    def __init__(
        self,
        agent_id: str,
        required_state: Any,
        current_state: Any,
    ) -> None:
        super().__init__(
            f'Agent "{agent_id}" must be in {required_state.name} state. '
            f'Current state is "{current_state}"',
            "ILLEGAL_STATE_TRANSITION",
        )
        self.agent_id = agent_id
        self.required_state = required_state
        self.current_state = current_state


class DialAttemptFailed(AppError):
    """A single dial attempt failed: service error or non-CONNECTED outcome."""

    def __init__(
        self,
        message: str,
        phone_number: str,
        call_state: Any | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message, "DIAL_ATTEMPT_FAILED")
        self.phone_number = phone_number
        self.call_state = call_state
        self.cause = cause
