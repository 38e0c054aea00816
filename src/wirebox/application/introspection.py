"""Application layer - Signature and identifier introspection helpers."""

import importlib
import inspect
import typing
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, get_type_hints

from wirebox.domain import Identifier

_INJECTABLE_KINDS = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
    inspect.Parameter.KEYWORD_ONLY,
)


def normalize(identifier: Any) -> Any:
    """Strip the leading namespace separator from string identifiers.

    Example:
        >>> normalize(".app.services.Mailer")
        'app.services.Mailer'
    """
    if isinstance(identifier, str):
        return identifier.lstrip(".")
    return identifier


def is_factory(concrete: Any) -> bool:
    """A factory is any callable that is not a class."""
    return callable(concrete) and not inspect.isclass(concrete)


def locate(path: str) -> Optional[type]:
    """Locate a class by dotted path (``package.module.Name``).

    Returns:
        The located object, or ``None`` if nothing importable matches.
    """
    parts = path.split(".")
    for split in range(len(parts) - 1, 0, -1):
        module_name = ".".join(parts[:split])
        try:
            target: Any = importlib.import_module(module_name)
        except ImportError:
            continue
        try:
            for attribute in parts[split:]:
                target = getattr(target, attribute)
        except AttributeError:
            return None
        return target
    return None


def is_instantiable(concrete: Any) -> bool:
    """Classes that are neither abstract, a Protocol nor an Enum can be instantiated."""
    if not inspect.isclass(concrete):
        return False
    if issubclass(concrete, Enum):
        return False
    if inspect.isabstract(concrete):
        return False
    return not getattr(concrete, "_is_protocol", False)


def class_dependency(annotation: Any) -> Optional[type]:
    """Return the class a parameter depends on, or ``None`` for primitives.

    ``Optional[X]`` is unwrapped to ``X``. Builtin types (``int``, ``str``,
    ``list``...) are primitives, as are enums and unresolved string
    annotations.
    """
    if annotation is inspect.Parameter.empty:
        return None
    if typing.get_origin(annotation) is typing.Union:
        members = [arg for arg in typing.get_args(annotation) if arg is not type(None)]
        if len(members) != 1:
            return None
        annotation = members[0]
    if not inspect.isclass(annotation):
        return None
    if annotation.__module__ == "builtins":
        return None
    if issubclass(annotation, Enum):
        return None
    return annotation


def resolve_hints(target: Callable[..., Any]) -> Dict[str, Any]:
    """Evaluate the type hints of ``target``.

    Returns an empty dict when the hints cannot be evaluated, for example
    when they name classes local to a function.
    """
    try:
        return get_type_hints(target)
    except (NameError, TypeError, AttributeError):
        return {}


def injectable_parameters(target: Callable[..., Any]) -> List[inspect.Parameter]:
    """Return the parameters of ``target`` that can receive injected values.

    ``self`` and ``*args``/``**kwargs`` are excluded. Annotations are replaced
    by their evaluated type hints where available; otherwise the raw
    signature annotations are kept.
    """
    signature = inspect.signature(target)
    hints = resolve_hints(target)
    parameters = []
    for name, parameter in signature.parameters.items():
        if name == "self" or parameter.kind not in _INJECTABLE_KINDS:
            continue
        if name in hints:
            parameter = parameter.replace(annotation=hints[name])
        parameters.append(parameter)
    return parameters


def has_default(parameter: inspect.Parameter) -> bool:
    return parameter.default is not inspect.Parameter.empty


def positional_capacity(target: Callable[..., Any]) -> Optional[int]:
    """Number of positional arguments ``target`` accepts, ``None`` if unbounded."""
    try:
        signature = inspect.signature(target)
    except (TypeError, ValueError):
        return None
    count = 0
    for parameter in signature.parameters.values():
        if parameter.kind == inspect.Parameter.VAR_POSITIONAL:
            return None
        if parameter.kind in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD):
            count += 1
    return count


def invoke_leading(target: Callable[..., Any], *args: Any) -> Any:
    """Invoke ``target`` with as many leading ``args`` as it accepts.

    Example:
        >>> invoke_leading(lambda c: c, "container", {"ignored": True})
        'container'
    """
    capacity = positional_capacity(target)
    if capacity is not None:
        args = args[:capacity]
    return target(*args)


def first_parameter_class(callback: Callable[..., Any]) -> Optional[type]:
    """Return the class annotation of the first parameter of ``callback``, if any."""
    parameters = injectable_parameters(callback)
    if not parameters:
        return None
    return class_dependency(parameters[0].annotation)
