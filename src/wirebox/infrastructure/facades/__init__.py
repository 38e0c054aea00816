"""
Facades module.

Static-style accessors that forward to objects resolved from the process-wide container.
"""

from .facade import Facade, FacadeMeta

__all__ = [
    "Facade",
    "FacadeMeta",
]
