import inspect
from typing import Any, Callable, Dict, List, Optional, Tuple

from wirebox.application.introspection import class_dependency, has_default, injectable_parameters, locate
from wirebox.domain import IContainer, MissingMethodError, NotInstantiableError


class CallInvoker:
    """Calls functions and methods, injecting their missing arguments.

    Arguments are matched by name against the explicit params first, then
    class-annotated parameters are resolved through the container, then
    defaults apply. A parameter that none of these can satisfy is omitted
    rather than reported; explicit params left unmatched are appended
    positionally after the resolved arguments.
    """

    def call(
        self,
        callback: Any,
        params: Dict[Any, Any],
        default_method: Optional[str],
        container: IContainer,
    ) -> Any:
        """Call ``callback`` with its dependencies injected.

        Args:
            callback: A callable, a ``(receiver, "method")`` pair, a
                ``"Type@method"`` or ``"Type::method"`` string.
            params: Explicit arguments keyed by parameter name.
            default_method: Method called on the resolved target when the target names none.
            container: The container resolving class dependencies and ``Type@`` receivers.

        Raises:
            MissingMethodError: If a ``Type@method`` target carries no method name.

        Example:
            >>> invoker.call("app.reports.ReportService@render", {"report_id": 5}, None, container)
        """
        if self._is_at_descriptor(callback) or default_method:
            return self._call_class(callback, params, default_method, container)

        target = self._get_call_target(callback)
        args, kwargs = self._get_method_dependencies(target, params, container)
        return target(*args, **kwargs)

    @staticmethod
    def _is_at_descriptor(callback: Any) -> bool:
        return isinstance(callback, str) and "@" in callback

    def _call_class(
        self,
        target: Any,
        params: Dict[Any, Any],
        default_method: Optional[str],
        container: IContainer,
    ) -> Any:
        segments = target.split("@") if isinstance(target, str) else [target]
        method = segments[1] if len(segments) == 2 else default_method
        if not method:
            raise MissingMethodError(target)
        return self.call((container.make(segments[0]), method), params, None, container)

    @staticmethod
    def _get_call_target(callback: Any) -> Callable[..., Any]:
        if isinstance(callback, str) and "::" in callback:
            callback = tuple(callback.split("::", 1))

        if isinstance(callback, (tuple, list)) and len(callback) == 2 and isinstance(callback[1], str):
            receiver, method = callback
            if isinstance(receiver, str):
                located = locate(receiver)
                if located is None:
                    raise NotInstantiableError(receiver)
                receiver = located
            return getattr(receiver, method)

        return callback

    @staticmethod
    def _get_method_dependencies(
        target: Callable[..., Any],
        params: Dict[Any, Any],
        container: IContainer,
    ) -> Tuple[List[Any], Dict[str, Any]]:
        pool = dict(params)
        args: List[Any] = []
        kwargs: Dict[str, Any] = {}
        for parameter in injectable_parameters(target):
            if parameter.name in pool:
                value = pool.pop(parameter.name)
            else:
                dependency = class_dependency(parameter.annotation)
                if dependency is not None:
                    value = container.make(dependency)
                elif has_default(parameter):
                    value = parameter.default
                else:
                    continue

            if parameter.kind == inspect.Parameter.KEYWORD_ONLY:
                kwargs[parameter.name] = value
            else:
                args.append(value)

        args.extend(pool.values())
        return args, kwargs
