"""
wirebox: Runtime dependency-resolution container with autowiring.

Public API exports for the wirebox package.
"""

# Application exports
from wirebox.application.container import Container

# Domain exports
from wirebox.domain.exceptions import (
    CircularAliasError,
    CircularDependencyError,
    DIException,
    MissingMethodError,
    NotInstantiableError,
    UnresolvableDependencyError,
)
from wirebox.domain.settings import ContainerSettings

__version__ = "0.1.0"

__all__ = [
    # Container
    "Container",
    "ContainerSettings",
    # Exceptions
    "DIException",
    "NotInstantiableError",
    "UnresolvableDependencyError",
    "MissingMethodError",
    "CircularDependencyError",
    "CircularAliasError",
]
