"""
Infrastructure layer - Consumers of the injector.

This layer builds on the public injector API: a FastAPI server bootstrap
and helpers for tests. It depends on both Application and Domain layers.
"""

from . import fastapi_integration, testing

__all__ = [
    "fastapi_integration",
    "testing",
]
