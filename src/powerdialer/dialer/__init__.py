"""
Concurrent dialing orchestration.
"""

from powerdialer.dialer.models import ConnectResult, DialAttempt
from powerdialer.dialer.service import PowerDialer

__all__ = ["ConnectResult", "DialAttempt", "PowerDialer"]
