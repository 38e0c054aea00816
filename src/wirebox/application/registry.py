"""Application layer - Bindings, aliases, contextual overrides, tags and extenders."""

import logging
from typing import Any, Callable, Dict, List, Optional

from wirebox.application.introspection import normalize
from wirebox.domain import Binding, CircularAliasError, Identifier, Tag

logger = logging.getLogger(__name__)

MISSING = object()


def dotted_path(cls: type) -> str:
    return f"{cls.__module__}.{cls.__qualname__}"


class BindingRegistry:
    """Stores everything the container knows before resolution.

    Registration never validates and never fails: each call overwrites any
    prior state for its key.

    Attributes:
        _bindings: Abstract -> Binding.
        _aliases: Alias -> the identifier it points to.
        _contextual: Consumer -> (dependency -> implementation).
        _tags: Tag name -> Tag.
        _extenders: Abstract -> decorators in registration order.
    """

    def __init__(self) -> None:
        self._bindings: Dict[Any, Binding] = {}
        self._aliases: Dict[Any, Any] = {}
        self._contextual: Dict[Any, Dict[Any, Any]] = {}
        self._tags: Dict[str, Tag] = {}
        self._extenders: Dict[Any, List[Callable[..., Any]]] = {}

    # Bindings

    def set_binding(self, abstract: Identifier, concrete: Any, shared: bool) -> None:
        self._bindings[abstract] = Binding(concrete=concrete, shared=shared)
        logger.debug("Bound %r to %r (shared=%s)", abstract, concrete, shared)

    def get_binding(self, abstract: Identifier) -> Optional[Binding]:
        return self._bindings.get(abstract)

    def has_binding(self, abstract: Identifier) -> bool:
        return abstract in self._bindings

    def remove_binding(self, abstract: Identifier) -> None:
        self._bindings.pop(abstract, None)

    def get_bindings_copy(self) -> Dict[Any, Binding]:
        """Get a copy of the bindings."""
        return self._bindings.copy()

    # Aliases

    def add_alias(self, abstract: Identifier, alias: Identifier) -> None:
        self._aliases[normalize(alias)] = normalize(abstract)
        logger.debug("Aliased %r to %r", alias, abstract)

    def is_alias(self, name: Identifier) -> bool:
        return normalize(name) in self._aliases

    def drop_alias(self, name: Identifier) -> None:
        self._aliases.pop(name, None)

    def get_alias(self, abstract: Identifier) -> Any:
        """Follow the alias chain of ``abstract`` to its canonical identifier.

        Raises:
            CircularAliasError: If the chain visits an identifier twice.

        Example:
            >>> registry.add_alias("mailer", "mail")
            >>> registry.add_alias("mail", "m")
            >>> registry.get_alias("m")
            'mailer'
        """
        visited = [abstract]
        while abstract in self._aliases:
            abstract = self._aliases[abstract]
            if abstract in visited:
                raise CircularAliasError(visited + [abstract])
            visited.append(abstract)
        return abstract

    def get_aliases_copy(self) -> Dict[Any, Any]:
        return self._aliases.copy()

    # Contextual bindings

    def add_contextual(self, consumer: Identifier, dependency: Identifier, implementation: Any) -> None:
        dependency = normalize(dependency)
        # "$name" overrides carry literal values
        if not (isinstance(dependency, str) and dependency.startswith("$")):
            implementation = normalize(implementation)
        self._contextual.setdefault(normalize(consumer), {})[dependency] = implementation
        logger.debug("When building %r, %r resolves to %r", consumer, dependency, implementation)

    def get_contextual(self, consumer: Any, dependency: Identifier) -> Any:
        """Return the override of ``dependency`` for ``consumer``, or ``MISSING``.

        A class consumer also matches overrides registered under its dotted path.
        """
        candidates = [consumer]
        if isinstance(consumer, type):
            candidates.append(dotted_path(consumer))
        for candidate in candidates:
            overrides = self._contextual.get(candidate)
            if overrides is not None and dependency in overrides:
                return overrides[dependency]
        return MISSING

    def get_contextual_copy(self) -> Dict[Any, Dict[Any, Any]]:
        return {consumer: dict(overrides) for consumer, overrides in self._contextual.items()}

    # Tags

    def add_tag(self, tag: str, abstract: Identifier) -> None:
        if tag not in self._tags:
            self._tags[tag] = Tag(name=tag)
        self._tags[tag].add(normalize(abstract))

    def get_tagged(self, tag: str) -> List[Any]:
        if tag not in self._tags:
            return []
        return list(self._tags[tag].members)

    def get_tags_copy(self) -> Dict[str, Tag]:
        return {name: tag.model_copy(deep=True) for name, tag in self._tags.items()}

    # Extenders

    def add_extender(self, abstract: Identifier, decorator: Callable[..., Any]) -> None:
        self._extenders.setdefault(abstract, []).append(decorator)

    def get_extenders(self, abstract: Identifier) -> List[Callable[..., Any]]:
        return list(self._extenders.get(abstract, []))

    def copy(self) -> "BindingRegistry":
        """Create an independent registry holding the same registrations."""
        clone = BindingRegistry()
        clone._bindings = self.get_bindings_copy()
        clone._aliases = self.get_aliases_copy()
        clone._contextual = self.get_contextual_copy()
        clone._tags = self.get_tags_copy()
        clone._extenders = {abstract: list(decorators) for abstract, decorators in self._extenders.items()}
        return clone

    def clear(self) -> None:
        """Clear bindings and aliases.

        Contextual bindings, tags and extenders survive a flush.
        """
        self._bindings.clear()
        self._aliases.clear()
