from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Mapping, Optional, Sequence, Union

from wirebox.domain.models import Binding, Identifier

Params = Optional[Union[Mapping[Any, Any], Sequence[Any]]]


class IContainer(ABC):
    """Abstract interface for dependency injection container operations."""

    @abstractmethod
    def bind(self, abstract: Any, concrete: Any = None, shared: bool = False) -> None:
        """Register a binding with the container.

        Args:
            abstract: The identifier to bind, or a one-item ``{abstract: alias}`` dict.
            concrete: A factory function or identifier. ``None`` binds the abstract to itself.
            shared: Whether the resolved object is cached.
        """

    @abstractmethod
    def make(self, abstract: Identifier, params: Params = None) -> Any:
        """Resolve the given identifier from the container.

        Args:
            abstract: The identifier to resolve.
            params: Explicit constructor or factory parameters.
        """

    @abstractmethod
    def build(self, concrete: Any, params: Params = None) -> Any:
        """Instantiate a concrete, autowiring its constructor dependencies.

        Args:
            concrete: A factory function, class or dotted class path.
            params: Explicit constructor or factory parameters.
        """

    @abstractmethod
    def call(self, callback: Any, params: Params = None, default_method: Optional[str] = None) -> Any:
        """Call a callable, injecting its missing arguments.

        Args:
            callback: A callable, a ``(receiver, method)`` pair or a ``"Type@method"`` string.
            params: Explicit arguments, matched by name.
            default_method: Method to call when the target carries none.
        """

    @abstractmethod
    def bound(self, abstract: Identifier) -> bool:
        """Determine if the given identifier has been bound."""

    @abstractmethod
    def get_contextual_concrete(self, abstract: Identifier) -> Any:
        """Get the override for ``abstract`` scoped to the consumer being built, if any."""

    @abstractmethod
    def get_bindings(self) -> Dict[Any, Binding]:
        """Get a copy of the current bindings."""

    @abstractmethod
    def flush(self) -> None:
        """Clear all bindings, aliases, resolved flags and instances."""


class IBuilder(ABC):
    """Abstract interface for constructing concretes."""

    @abstractmethod
    def build(self, concrete: Any, params: Dict[Any, Any], container: IContainer) -> Any:
        """Build ``concrete``, resolving its constructor dependencies.

        Args:
            concrete: A factory function, class or dotted class path.
            params: Explicit parameters, keyed by name or position.
            container: The container to resolve dependencies from.

        Returns:
            The constructed object.

        Raises:
            NotInstantiableError: If the concrete cannot be instantiated.
            UnresolvableDependencyError: If a primitive parameter has no value.
            CircularDependencyError: If the concrete is already being built.
        """


class IInstanceCache(ABC):
    """Abstract interface for storing shared instances and resolved flags."""

    @abstractmethod
    def has(self, abstract: Identifier) -> bool:
        """Determine if a shared instance is cached for ``abstract``."""

    @abstractmethod
    def get(self, abstract: Identifier) -> Any:
        """Return the cached instance for ``abstract``."""

    @abstractmethod
    def put(self, abstract: Identifier, instance: Any) -> None:
        """Cache ``instance`` under ``abstract``."""

    @abstractmethod
    def forget(self, abstract: Identifier) -> None:
        """Drop the cached instance for ``abstract``, if any."""

    @abstractmethod
    def clear(self) -> None:
        """Drop every cached instance."""


Factory = Callable[..., Any]
