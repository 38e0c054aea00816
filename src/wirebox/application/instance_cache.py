from typing import Any, Dict, Set

from wirebox.domain import IInstanceCache, Identifier


class InstanceCache(IInstanceCache):
    """Stores shared instances and the sticky "resolved" flags.

    An identifier stays marked as resolved after its instance is forgotten;
    only ``clear_resolved`` (or ``unmark_resolved``) resets the flag.

    Attributes:
        _instances: Cached objects keyed by canonical identifier.
        _resolved: Identifiers that have been resolved at least once.
    """

    def __init__(self) -> None:
        """Initialize the cache with no instances and no resolved flags."""
        self._instances: Dict[Any, Any] = {}
        self._resolved: Set[Any] = set()

    def has(self, abstract: Identifier) -> bool:
        return abstract in self._instances

    def get(self, abstract: Identifier) -> Any:
        """Return the cached instance.

        Raises:
            KeyError: If nothing is cached for ``abstract``.
        """
        return self._instances[abstract]

    def put(self, abstract: Identifier, instance: Any) -> None:
        self._instances[abstract] = instance

    def forget(self, abstract: Identifier) -> None:
        self._instances.pop(abstract, None)

    def clear(self) -> None:
        """Drop every cached instance, keeping the resolved flags."""
        self._instances.clear()

    def mark_resolved(self, abstract: Identifier) -> None:
        self._resolved.add(abstract)

    def was_resolved(self, abstract: Identifier) -> bool:
        return abstract in self._resolved

    def unmark_resolved(self, abstract: Identifier) -> None:
        self._resolved.discard(abstract)

    def clear_resolved(self) -> None:
        self._resolved.clear()

    def get_instances_copy(self) -> Dict[Any, Any]:
        """Get a copy of the cached instances."""
        return self._instances.copy()
