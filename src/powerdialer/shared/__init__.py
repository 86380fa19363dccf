"""
Shared utilities: exceptions and structured logging.
"""

__all__ = [
    "exceptions",
    "logging",
]
