"""Application layer - Construction stack with circular dependency detection."""

import threading
from contextlib import contextmanager
from typing import Any, Iterator, List, Optional, Tuple

from wirebox.domain import CircularDependencyError


class BuildStack:
    """Tracks the concretes currently being built.

    The top of the stack scopes contextual bindings, the whole stack feeds
    diagnostics, and a concrete appearing twice means a circular dependency.
    Uses thread-local storage so each thread sees only its own frames.

    Attributes:
        _local: Thread-local storage for the stack.
    """

    def __init__(self) -> None:
        """Initialize the build stack with thread-local storage."""
        self._local = threading.local()

    def _get_stack(self) -> List[Any]:
        """Get the current thread's build stack.

        Returns:
            The build stack for the current thread.
        """
        if not hasattr(self._local, "stack"):
            self._local.stack = []
        return self._local.stack

    def push(self, concrete: Any) -> None:
        """Add a concrete to the build stack.

        Args:
            concrete: The concrete about to be built.

        Raises:
            CircularDependencyError: If the concrete is already in the stack.

        Example:
            >>> stack = BuildStack()
            >>> stack.push(ServiceA)
            >>> stack.push(ServiceB)
            >>> stack.push(ServiceA)  # Raises CircularDependencyError
        """
        stack = self._get_stack()

        if concrete in stack:
            cycle_start_index = stack.index(concrete)
            cycle = stack[cycle_start_index:] + [concrete]
            raise CircularDependencyError(cycle)

        stack.append(concrete)

    def pop(self) -> None:
        """Remove the most recent concrete from the build stack."""
        stack = self._get_stack()
        if stack:
            stack.pop()

    @contextmanager
    def frame(self, concrete: Any) -> Iterator[None]:
        """Push ``concrete`` for the duration of the block, popping on every exit path."""
        self.push(concrete)
        try:
            yield
        finally:
            self.pop()

    def peek(self) -> Optional[Any]:
        """Return the concrete currently being built, or ``None``."""
        stack = self._get_stack()
        return stack[-1] if stack else None

    def snapshot(self) -> List[Any]:
        """Return a copy of the stack, bottom first."""
        return list(self._get_stack())

    def __len__(self) -> int:
        return len(self._get_stack())

    def clear(self) -> None:
        """Clear the entire build stack.

        Useful for testing or error recovery.
        """
        if hasattr(self._local, "stack"):
            self._local.stack.clear()


class ResolutionChain(BuildStack):
    """Tracks the abstracts ``make`` is resolving, each with the concrete it resolved to.

    Bindings to other identifiers and factory functions never reach the build
    stack, so loops through them are caught here. The same abstract resolving
    to a different concrete (a contextual decorator) is not a cycle.

    Example:
        >>> chain = ResolutionChain()
        >>> with chain.frame("a", "b"):
        ...     with chain.frame("b", "a"):
        ...         with chain.frame("a", "b"):  # Raises CircularDependencyError(["a", "b", "a"])
        ...             pass
    """

    def push(self, entry: Tuple[Any, Any]) -> None:
        stack = self._get_stack()

        if entry in stack:
            cycle_start_index = stack.index(entry)
            cycle = [abstract for abstract, _ in stack[cycle_start_index:]] + [entry[0]]
            raise CircularDependencyError(cycle)

        stack.append(entry)

    @contextmanager
    def frame(self, abstract: Any, concrete: Any = None) -> Iterator[None]:  # type: ignore[override]
        """Hold ``(abstract, concrete)`` for the duration of the block."""
        with super().frame((abstract, concrete)):
            yield
