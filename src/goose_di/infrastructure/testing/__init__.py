"""
Testing utilities module.

Provides helpers for testing code configured with goose-di.
"""

from .utilities import MockScope, create_mock_injector

__all__ = [
    "create_mock_injector",
    "MockScope",
]
