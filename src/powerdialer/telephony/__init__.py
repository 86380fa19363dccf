"""
Telephony package.

Keep package import side-effects to a minimum; import the interface and
adapters from their modules.
"""

__all__ = [
    "interface",
    "mock_adapter",
]
