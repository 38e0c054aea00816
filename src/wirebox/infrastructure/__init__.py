"""
Infrastructure layer - External integrations.

This layer contains integrations with external frameworks and tools.
It depends on both Application and Domain layers. The FastAPI integration is
imported on demand since FastAPI is an optional dependency.
"""

from . import facades, testing

__all__ = [
    "facades",
    "testing",
]
