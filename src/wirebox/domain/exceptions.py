from typing import Any, List, Optional, Sequence


def describe(identifier: Any) -> str:
    """Human readable name for an identifier (class or string key)."""
    if isinstance(identifier, type):
        return identifier.__name__
    return str(identifier)


class DIException(Exception):
    """Base exception for DI-related errors."""


class NotInstantiableError(DIException):
    """Raised when a concrete cannot be instantiated.

    This occurs when:
    - The concrete is an abstract class or a Protocol.
    - The concrete is a string that does not locate a class.
    - The concrete is neither a class nor a factory.

    Attributes:
        concrete: The concrete that could not be built.
        build_stack: The consumers being built when the attempt was made.
    """

    def __init__(self, concrete: Any, build_stack: Optional[Sequence[Any]] = None) -> None:
        self.concrete = concrete
        self.build_stack: List[Any] = list(build_stack or [])
        message = f"Target [{describe(concrete)}] is not instantiable"
        if self.build_stack:
            previous = ", ".join(describe(item) for item in self.build_stack)
            message += f" while building [{previous}]"
        super().__init__(message + ".")


class UnresolvableDependencyError(DIException):
    """Raised when a primitive constructor parameter has no value.

    Attributes:
        parameter: Name of the parameter.
        declaring: The class declaring the parameter.
    """

    def __init__(self, parameter: str, declaring: Any) -> None:
        self.parameter = parameter
        self.declaring = declaring
        super().__init__(f"Unresolvable dependency resolving [{parameter}] in class {describe(declaring)}")


class MissingMethodError(DIException):
    """Raised when a call target carries no method name."""

    def __init__(self, target: Any) -> None:
        self.target = target
        super().__init__(f"Method not provided for call target [{describe(target)}].")


class CircularDependencyError(DIException):
    """Raised when a circular dependency is detected.

    Attributes:
        dependency_chain: List of concretes involved in the circular dependency.
    """

    def __init__(self, dependency_chain: Sequence[Any]) -> None:
        self.dependency_chain = list(dependency_chain)
        message = f"Circular dependency detected: {' -> '.join(describe(item) for item in self.dependency_chain)}"
        super().__init__(message)


class CircularAliasError(DIException):
    """Raised when an alias chain loops back on itself.

    Attributes:
        alias_chain: The identifiers visited, ending with the repeated one.
    """

    def __init__(self, alias_chain: Sequence[Any]) -> None:
        self.alias_chain = list(alias_chain)
        super().__init__(f"Circular alias detected: {' -> '.join(describe(item) for item in self.alias_chain)}")
