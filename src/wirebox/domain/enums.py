from enum import Enum


class CallbackPhase(str, Enum):
    """When a resolution callback fires relative to the others.

    Attributes:
        RESOLVING: Fired first, right after the object is built and cached.
        AFTER_RESOLVING: Fired once every resolving callback has run.
    """

    RESOLVING = "resolving"
    AFTER_RESOLVING = "after_resolving"

    def __str__(self) -> str:
        return self.value
