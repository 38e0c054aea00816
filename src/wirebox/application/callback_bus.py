"""Application layer - Resolving, after-resolving and rebinding callbacks."""

import logging
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional

from wirebox.application.introspection import first_parameter_class, invoke_leading, normalize
from wirebox.domain import CallbackPhase, Identifier

if TYPE_CHECKING:
    from wirebox.domain import IContainer

logger = logging.getLogger(__name__)

Callback = Callable[..., Any]


class CallbackBus:
    """Registries for lifecycle callbacks.

    Resolution callbacks are either global (fire for every resolution) or
    type-scoped. A type-scoped callback fires when its key equals the resolved
    abstract, or when its key is a class and the resolved object is an
    instance of it.

    Attributes:
        _global: Phase -> global callbacks.
        _scoped: Phase -> (type key -> callbacks).
        _rebound: Abstract -> rebinding callbacks.
    """

    def __init__(self) -> None:
        self._global: Dict[CallbackPhase, List[Callback]] = {phase: [] for phase in CallbackPhase}
        self._scoped: Dict[CallbackPhase, Dict[Any, List[Callback]]] = {phase: {} for phase in CallbackPhase}
        self._rebound: Dict[Any, List[Callback]] = {}

    def register(self, phase: CallbackPhase, abstract: Any, callback: Optional[Callback] = None) -> None:
        """Register a resolution callback for ``phase``.

        Args:
            phase: When the callback fires.
            abstract: The type key, or the callback itself when ``callback`` is omitted.
            callback: The callback, receiving ``(obj, container)``.

        With a single callable argument, the class annotation of its first
        parameter becomes the type key; without one the callback is global.
        A type key without a callback registers nothing.

        Example:
            >>> bus.register(CallbackPhase.RESOLVING, lambda obj, c: audit(obj))  # global
            >>> bus.register(CallbackPhase.RESOLVING, Mailer, configure_mailer)  # scoped
        """
        if callback is None:
            if isinstance(abstract, (str, type)) or not callable(abstract):
                logger.debug("Ignoring %s registration for %r without a callback", phase, abstract)
                return
            callback = abstract
            hint = first_parameter_class(callback)
            if hint is None:
                self._global[phase].append(callback)
                return
            abstract = hint
        self._scoped[phase].setdefault(normalize(abstract), []).append(callback)

    @staticmethod
    def _matches(key: Any, abstract: Identifier, obj: Any) -> bool:
        if key == abstract:
            return True
        if not isinstance(key, type):
            return False
        try:
            return isinstance(obj, key)
        except TypeError:
            # Protocols that are not runtime checkable
            return False

    def _callbacks_for_type(self, phase: CallbackPhase, abstract: Identifier, obj: Any) -> List[Callback]:
        results: List[Callback] = []
        for key, callbacks in self._scoped[phase].items():
            if self._matches(key, abstract, obj):
                results.extend(callbacks)
        return results

    def fire_resolving(self, abstract: Identifier, obj: Any, container: "IContainer") -> None:
        """Fire global resolving, scoped resolving, global after and scoped after callbacks, in that order."""
        for phase in (CallbackPhase.RESOLVING, CallbackPhase.AFTER_RESOLVING):
            for callback in self._global[phase]:
                invoke_leading(callback, obj, container)
            for callback in self._callbacks_for_type(phase, abstract, obj):
                invoke_leading(callback, obj, container)

    def add_rebinding(self, abstract: Identifier, callback: Callback) -> None:
        self._rebound.setdefault(normalize(abstract), []).append(callback)

    def get_rebinding(self, abstract: Identifier) -> List[Callback]:
        return list(self._rebound.get(abstract, []))

    def fire_rebound(self, abstract: Identifier, instance: Any, container: "IContainer") -> None:
        """Fire the rebinding callbacks of ``abstract`` with ``(container, instance)``."""
        callbacks = self.get_rebinding(abstract)
        if callbacks:
            logger.debug("Firing %d rebinding callback(s) for %r", len(callbacks), abstract)
        for callback in callbacks:
            invoke_leading(callback, container, instance)
