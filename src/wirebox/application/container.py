import logging
from typing import Any, Callable, ClassVar, Dict, List, Mapping, Optional, Tuple

from wirebox.application.build_stack import BuildStack, ResolutionChain
from wirebox.application.builder import DependencyBuilder
from wirebox.application.callback_bus import CallbackBus
from wirebox.application.environment import export_env_file
from wirebox.application.instance_cache import InstanceCache
from wirebox.application.introspection import invoke_leading, is_factory, normalize
from wirebox.application.invoker import CallInvoker
from wirebox.application.registry import MISSING, BindingRegistry
from wirebox.domain import (
    Binding,
    CallbackPhase,
    ContainerSettings,
    Factory,
    IBuilder,
    IContainer,
    Identifier,
    Params,
)

logger = logging.getLogger(__name__)


class ContextualBindingBuilder:
    """Fluent ``when(consumer).needs(dependency).give(implementation)`` helper."""

    def __init__(self, container: "Container", consumer: Identifier) -> None:
        self._container = container
        self._consumer = consumer
        self._needs: Optional[Identifier] = None

    def needs(self, abstract: Identifier) -> "ContextualBindingBuilder":
        self._needs = abstract
        return self

    def give(self, implementation: Any) -> None:
        if self._needs is None:
            raise ValueError("Call needs() before give().")
        self._container.add_contextual_binding(self._consumer, self._needs, implementation)


class Container(IContainer):
    """Main dependency injection container.

    Maps abstract identifiers (strings or classes) to concretes, builds object
    graphs by autowiring constructors, caches shared instances and fires
    lifecycle callbacks.

    Attributes:
        _registry: Bindings, aliases, contextual bindings, tags and extenders.
        _instances: Shared instances and resolved flags.
        _callbacks: Resolving, after-resolving and rebinding callbacks.
        _build_stack: Concretes currently being built.
        _resolving: Abstracts currently being resolved by ``make``.
        _builder: Component responsible for autowiring constructors.
        _invoker: Component responsible for injecting callable arguments.
    """

    _instance: ClassVar[Optional["Container"]] = None

    def __init__(self, settings: Optional[ContainerSettings] = None) -> None:
        """Initialize the container with empty registries.

        Args:
            settings: Container settings. Read from ``WIREBOX_*`` environment variables when omitted.
        """
        self._settings = settings if settings is not None else ContainerSettings()
        self._registry = BindingRegistry()
        self._instances = InstanceCache()
        self._callbacks = CallbackBus()
        self._build_stack = BuildStack()
        self._resolving = ResolutionChain()
        self._builder: IBuilder = DependencyBuilder(self._build_stack)
        self._invoker = CallInvoker()

        if self._settings.env_file is not None:
            export_env_file(self._settings.env_file, self._settings.env_override)

    # Process-wide instance

    @classmethod
    def get_instance(cls) -> "Container":
        """Get the globally available container, creating it on first use."""
        if Container._instance is None:
            Container._instance = cls()
        return Container._instance

    @classmethod
    def set_instance(cls, container: Optional["Container"]) -> None:
        """Set (or, with ``None``, reset) the globally available container."""
        Container._instance = container

    # Introspection

    def bound(self, abstract: Identifier) -> bool:
        """Determine if the given abstract has a binding, an instance or is an alias."""
        abstract = normalize(abstract)
        return self._registry.has_binding(abstract) or self._instances.has(abstract) or self.is_alias(abstract)

    def resolved(self, abstract: Identifier) -> bool:
        """Determine if the given abstract has been resolved at least once."""
        abstract = normalize(abstract)
        if self.is_alias(abstract):
            abstract = self._registry.get_alias(abstract)
        return self._instances.was_resolved(abstract) or self._instances.has(abstract)

    def is_alias(self, name: Identifier) -> bool:
        return self._registry.is_alias(name)

    def is_shared(self, abstract: Identifier) -> bool:
        """Determine if the given abstract is shared (cached instance or shared binding)."""
        abstract = normalize(abstract)
        if self._instances.has(abstract):
            return True
        binding = self._registry.get_binding(abstract)
        return binding is not None and binding.shared

    def get_bindings(self) -> Dict[Any, Binding]:
        return self._registry.get_bindings_copy()

    def get_registry_copy(self) -> BindingRegistry:
        """Get an independent copy of the registrations, for derived containers."""
        return self._registry.copy()

    def get_build_stack(self) -> List[Any]:
        """Get the concretes currently being built, bottom first."""
        return self._build_stack.snapshot()

    # Registration

    def bind(self, abstract: Any, concrete: Any = None, shared: bool = False) -> None:
        """Register a binding with the container.

        Args:
            abstract: The identifier, or a one-item ``{abstract: alias}`` dict.
            concrete: Factory function or identifier; ``None`` binds the abstract to itself.
            shared: Whether the resolved object is cached.

        Example:
            >>> container.bind(PaymentGateway, StripeGateway)
            >>> container.bind("mailer", lambda c: SmtpMailer(c.make(Settings)), shared=True)
            >>> container.bind({StripeGateway: "payments"})  # alias + self binding
        """
        abstract = normalize(abstract)
        concrete = normalize(concrete)

        if isinstance(abstract, dict):
            abstract, alias = self._extract_alias(abstract)
            self.alias(abstract, alias)

        self._drop_stale_instances(abstract)

        if concrete is None:
            concrete = abstract

        self._registry.set_binding(abstract, concrete, shared)

        if self.resolved(abstract):
            self._rebound(abstract)

    def bind_if(self, abstract: Any, concrete: Any = None, shared: bool = False) -> None:
        """Register a binding only if the abstract is not bound yet."""
        key = self._extract_alias(normalize(abstract))[0] if isinstance(abstract, dict) else abstract
        if not self.bound(key):
            self.bind(abstract, concrete, shared)

    def singleton(self, abstract: Any, concrete: Any = None) -> None:
        """Register a shared binding."""
        self.bind(abstract, concrete, True)

    def share(self, factory: Factory) -> Factory:
        """Wrap a factory so that it builds at most once.

        Example:
            >>> container.bind("clock", container.share(lambda c: SystemClock()))
        """
        built: List[Any] = []

        def shared(container: IContainer) -> Any:
            if not built:
                built.append(invoke_leading(factory, container))
            return built[0]

        return shared

    def instance(self, abstract: Any, instance: Any) -> Any:
        """Register an existing object as shared.

        Any alias stored under the key is removed. Rebinding callbacks fire
        when the key was already bound.

        Returns:
            The registered instance.
        """
        abstract = normalize(abstract)

        if isinstance(abstract, dict):
            abstract, alias = self._extract_alias(abstract)
            self.alias(abstract, alias)

        self._registry.drop_alias(abstract)

        bound = self.bound(abstract)
        self._instances.put(abstract, instance)
        logger.debug("Registered instance for %r", abstract)

        if bound:
            self._rebound(abstract)
        return instance

    def alias(self, abstract: Identifier, alias: Identifier) -> None:
        """Make ``alias`` resolve to ``abstract``."""
        self._registry.add_alias(abstract, alias)

    def tag(self, abstracts: Any, *tags: Any) -> None:
        """Assign one or more tags to one or more abstracts.

        Example:
            >>> container.tag([CpuReport, MemoryReport], "reports")
            >>> container.tag(DiskReport, ["reports", "storage"])
        """
        if len(tags) == 1 and isinstance(tags[0], (list, tuple)):
            tags = tuple(tags[0])
        members = abstracts if isinstance(abstracts, (list, tuple)) else [abstracts]
        for tag in tags:
            for abstract in members:
                self._registry.add_tag(tag, abstract)

    def tagged(self, tag: str) -> List[Any]:
        """Resolve every abstract registered under ``tag``, in registration order."""
        return [self.make(abstract) for abstract in self._registry.get_tagged(tag)]

    def extend(self, abstract: Identifier, decorator: Callable[..., Any]) -> None:
        """Decorate an abstract's object after it is built.

        When an instance is already cached, the decorator applies immediately
        and rebinding callbacks fire; otherwise it applies on the next build.
        """
        abstract = normalize(abstract)
        if self._instances.has(abstract):
            self._instances.put(abstract, invoke_leading(decorator, self._instances.get(abstract), self))
            self._rebound(abstract)
        else:
            self._registry.add_extender(abstract, decorator)

    def add_contextual_binding(self, consumer: Identifier, dependency: Identifier, implementation: Any) -> None:
        """Override ``dependency`` while ``consumer`` is being built.

        ``dependency`` may be ``"$name"`` to give a primitive constructor
        parameter a literal value or a factory.
        """
        self._registry.add_contextual(consumer, dependency, implementation)

    def when(self, consumer: Identifier) -> ContextualBindingBuilder:
        """Start a fluent contextual binding.

        Example:
            >>> container.when(ReportService).needs(Storage).give(S3Storage)
            >>> container.when(ReportService).needs("$bucket").give("reports")
        """
        return ContextualBindingBuilder(self, consumer)

    # Callbacks

    def resolving(self, abstract: Any, callback: Optional[Callable[..., Any]] = None) -> None:
        """Register a callback fired with ``(obj, container)`` when an object is resolved."""
        self._callbacks.register(CallbackPhase.RESOLVING, abstract, callback)

    def after_resolving(self, abstract: Any, callback: Optional[Callable[..., Any]] = None) -> None:
        """Register a callback fired after every resolving callback has run."""
        self._callbacks.register(CallbackPhase.AFTER_RESOLVING, abstract, callback)

    def rebinding(self, abstract: Identifier, callback: Callable[..., Any]) -> Any:
        """Register a callback fired with ``(container, instance)`` when ``abstract`` is rebound.

        Returns:
            The resolved abstract when it is already bound, else ``None``.
        """
        self._callbacks.add_rebinding(abstract, callback)
        if self.bound(abstract):
            return self.make(abstract)
        return None

    def refresh(self, abstract: Identifier, target: Any, method: str) -> Any:
        """Call ``target.method(instance)`` whenever ``abstract`` is rebound."""
        return self.rebinding(abstract, lambda container, instance: getattr(target, method)(instance))

    def _rebound(self, abstract: Identifier) -> None:
        instance = self.make(abstract)
        self._callbacks.fire_rebound(abstract, instance, self)

    # Resolution

    def make(self, abstract: Identifier, params: Params = None) -> Any:
        """Resolve the given abstract from the container.

        Args:
            abstract: The identifier to resolve.
            params: Explicit constructor or factory parameters.

        Returns:
            The cached instance when one exists, otherwise a freshly built,
            extended object (cached when the binding is shared).

        Raises:
            NotInstantiableError: If the concrete cannot be instantiated.
            UnresolvableDependencyError: If a primitive parameter has no value.
            CircularDependencyError: If the object graph contains a cycle.
            CircularAliasError: If the alias chain loops.

        Example:
            >>> container.singleton(Logger, lambda c: CountingLogger())
            >>> container.make(Logger) is container.make(Logger)
            True
        """
        abstract = self._registry.get_alias(normalize(abstract))

        if self._instances.has(abstract):
            return self._instances.get(abstract)

        params = self._as_params(params)
        concrete = self._get_concrete(abstract)

        with self._resolving.frame(abstract, concrete):
            if self._is_buildable(concrete, abstract):
                obj = self.build(concrete, params)
            else:
                obj = self.make(concrete, params)

        for extender in self._registry.get_extenders(abstract):
            obj = invoke_leading(extender, obj, self)

        if self.is_shared(abstract):
            self._instances.put(abstract, obj)

        self._callbacks.fire_resolving(abstract, obj, self)

        self._instances.mark_resolved(abstract)
        return obj

    def build(self, concrete: Any, params: Params = None) -> Any:
        """Instantiate a concrete, autowiring its constructor dependencies."""
        return self._builder.build(normalize(concrete), self._as_params(params), self)

    def call(self, callback: Any, params: Params = None, default_method: Optional[str] = None) -> Any:
        """Call a callable, injecting its missing arguments.

        Example:
            >>> container.call("app.reports.ReportService@render", {"report_id": 5})
            >>> container.call(send_digest, {"day": "monday"})
        """
        return self._invoker.call(callback, self._as_params(params), default_method, self)

    def wrap(self, callback: Any, params: Params = None) -> Callable[[], Any]:
        """Return a zero-argument callable that performs ``call(callback, params)``."""
        return lambda: self.call(callback, params)

    def get_contextual_concrete(self, abstract: Identifier) -> Any:
        """Get the override of ``abstract`` for the consumer on top of the build stack.

        Returns:
            The override, or ``MISSING`` when there is none.
        """
        return self._registry.get_contextual(self._build_stack.peek(), abstract)

    def _get_concrete(self, abstract: Identifier) -> Any:
        concrete = self.get_contextual_concrete(abstract)
        if concrete is not MISSING:
            return concrete

        binding = self._registry.get_binding(abstract)
        if binding is None:
            return abstract
        return binding.concrete

    @staticmethod
    def _is_buildable(concrete: Any, abstract: Identifier) -> bool:
        return concrete is abstract or concrete == abstract or is_factory(concrete)

    @staticmethod
    def _as_params(params: Params) -> Dict[Any, Any]:
        if params is None:
            return {}
        if isinstance(params, Mapping):
            return dict(params)
        return dict(enumerate(params))

    @staticmethod
    def _extract_alias(definition: Dict[Any, Any]) -> Tuple[Any, Any]:
        abstract, alias = next(iter(definition.items()))
        return normalize(abstract), normalize(alias)

    # Named access

    def has(self, key: Identifier) -> bool:
        """Alias of ``bound``."""
        return self.bound(key)

    def resolve(self, key: Identifier) -> Any:
        """Alias of ``make`` without params."""
        return self.make(key)

    def register(self, key: Identifier, value: Any) -> None:
        """Bind ``key`` to a factory, or to a factory returning ``value`` as-is."""
        if not is_factory(value):
            literal = value
            value = lambda: literal  # noqa: E731
        self.bind(key, value)

    def unregister(self, key: Identifier) -> None:
        """Drop the binding, cached instance and resolved flag of ``key``."""
        key = normalize(key)
        self._registry.remove_binding(key)
        self._instances.forget(key)
        self._instances.unmark_resolved(key)

    # Teardown

    def _drop_stale_instances(self, abstract: Identifier) -> None:
        self._instances.forget(abstract)
        self._registry.drop_alias(abstract)

    def forget_instance(self, abstract: Identifier) -> None:
        """Remove a resolved instance from the instance cache."""
        self._instances.forget(normalize(abstract))

    def forget_instances(self) -> None:
        """Clear all of the instances from the container."""
        self._instances.clear()

    def flush(self) -> None:
        """Flush the container of all bindings, aliases, resolved flags and instances.

        Tags, callbacks, contextual bindings and extenders are kept.
        """
        self._registry.clear()
        self._instances.clear_resolved()
        self._instances.clear()
        self._build_stack.clear()
        self._resolving.clear()
