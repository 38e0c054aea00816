"""
Application layer - Use cases and orchestration.

This layer contains the use cases that orchestrate domain objects.
It depends only on the Domain layer.
"""

from .build_stack import BuildStack, ResolutionChain
from .builder import DependencyBuilder
from .callback_bus import CallbackBus
from .container import Container, ContextualBindingBuilder
from .instance_cache import InstanceCache
from .invoker import CallInvoker
from .registry import MISSING, BindingRegistry

__all__ = [
    "Container",
    "ContextualBindingBuilder",
    "BindingRegistry",
    "InstanceCache",
    "CallbackBus",
    "DependencyBuilder",
    "CallInvoker",
    "BuildStack",
    "ResolutionChain",
    "MISSING",
]
