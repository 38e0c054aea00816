"""
Domain layer - Core business logic and models.

This layer contains the fundamental business rules and models for dependency injection.
It has no dependencies on other layers.
"""

from .enums import CallbackPhase
from .exceptions import (
    CircularAliasError,
    CircularDependencyError,
    DIException,
    MissingMethodError,
    NotInstantiableError,
    UnresolvableDependencyError,
    describe,
)
from .interfaces import Factory, IBuilder, IContainer, IInstanceCache, Params
from .models import Binding, Identifier, Tag
from .settings import ContainerSettings

__all__ = [
    # Enums
    "CallbackPhase",
    # Exceptions
    "DIException",
    "NotInstantiableError",
    "UnresolvableDependencyError",
    "MissingMethodError",
    "CircularDependencyError",
    "CircularAliasError",
    "describe",
    # Interfaces
    "IContainer",
    "IBuilder",
    "IInstanceCache",
    "Factory",
    "Params",
    # Models
    "Binding",
    "Identifier",
    "Tag",
    # Settings
    "ContainerSettings",
]
