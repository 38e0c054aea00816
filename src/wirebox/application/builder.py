import inspect
import logging
from typing import Any, Dict, List, Tuple

from wirebox.application.build_stack import BuildStack
from wirebox.application.introspection import (
    class_dependency,
    has_default,
    injectable_parameters,
    invoke_leading,
    is_factory,
    is_instantiable,
    locate,
)
from wirebox.application.registry import MISSING
from wirebox.domain import IBuilder, IContainer, NotInstantiableError, UnresolvableDependencyError

logger = logging.getLogger(__name__)


class DependencyBuilder(IBuilder):
    """Builds concretes using constructor introspection and type hints.

    Uses Python's inspect module to analyze constructor signatures. Parameters
    annotated with a (non-builtin) class are resolved through the container;
    other parameters come from explicit params, contextual ``"$name"``
    overrides or their defaults.

    Attributes:
        _stack: The construction stack shared with the container.
    """

    def __init__(self, build_stack: BuildStack) -> None:
        self._stack = build_stack

    def build(self, concrete: Any, params: Dict[Any, Any], container: IContainer) -> Any:
        """Build ``concrete`` with all of its constructor dependencies injected.

        Args:
            concrete: A factory function, class or dotted class path.
            params: Explicit parameters keyed by name, or by position for int keys.
            container: The container to resolve class dependencies from.

        Returns:
            The factory's result verbatim, or a new instance of the class.

        Raises:
            NotInstantiableError: If the concrete is abstract, a Protocol or not a class.
            UnresolvableDependencyError: If a primitive parameter has no value.
            CircularDependencyError: If the concrete is already being built.

        Example:
            >>> class UserService:
            ...     def __init__(self, db: DatabaseConnection, page_size: int = 20):
            ...         self.db = db
            ...         self.page_size = page_size
            >>>
            >>> builder.build(UserService, {"page_size": 50}, container)
        """
        if is_factory(concrete):
            return invoke_leading(concrete, container, params)

        target = locate(concrete) if isinstance(concrete, str) else concrete
        if target is None or not is_instantiable(target):
            raise NotInstantiableError(concrete, self._stack.snapshot())

        logger.debug("Building %r", target)
        with self._stack.frame(target):
            parameters = self._constructor_parameters(target)
            args, kwargs = self._get_dependencies(target, parameters, self._key_by_position(parameters, params), container)

        return target(*args, **kwargs)

    @staticmethod
    def _constructor_parameters(target: type) -> List[inspect.Parameter]:
        try:
            return injectable_parameters(target.__init__)
        except (TypeError, ValueError):
            # Builtin constructors without a retrievable signature
            return []

    @staticmethod
    def _key_by_position(parameters: List[inspect.Parameter], params: Dict[Any, Any]) -> Dict[Any, Any]:
        """Re-key integer (positional) params onto parameter names."""
        keyed: Dict[Any, Any] = {}
        for key, value in params.items():
            if isinstance(key, int) and not isinstance(key, bool):
                if key < len(parameters):
                    keyed[parameters[key].name] = value
            else:
                keyed[key] = value
        return keyed

    def _get_dependencies(
        self,
        target: type,
        parameters: List[inspect.Parameter],
        params: Dict[Any, Any],
        container: IContainer,
    ) -> Tuple[List[Any], Dict[str, Any]]:
        args: List[Any] = []
        kwargs: Dict[str, Any] = {}
        for parameter in parameters:
            if parameter.name in params:
                value = params[parameter.name]
            else:
                dependency = class_dependency(parameter.annotation)
                if dependency is None:
                    value = self._resolve_primitive(target, parameter, container)
                else:
                    value = self._resolve_class(dependency, parameter, container)

            if parameter.kind == inspect.Parameter.KEYWORD_ONLY:
                kwargs[parameter.name] = value
            else:
                args.append(value)
        return args, kwargs

    @staticmethod
    def _resolve_primitive(target: type, parameter: inspect.Parameter, container: IContainer) -> Any:
        concrete = container.get_contextual_concrete(f"${parameter.name}")
        if concrete is not MISSING:
            if is_factory(concrete):
                return invoke_leading(concrete, container)
            return concrete

        if has_default(parameter):
            return parameter.default

        raise UnresolvableDependencyError(parameter.name, target)

    @staticmethod
    def _resolve_class(dependency: type, parameter: inspect.Parameter, container: IContainer) -> Any:
        try:
            return container.make(dependency)
        except (UnresolvableDependencyError, NotInstantiableError):
            if has_default(parameter):
                return parameter.default
            raise
