from typing import Any, ClassVar, Optional

from wirebox.application import Container


class FacadeMeta(type):
    """Metaclass forwarding unknown public class attributes to the facade root."""

    def __getattr__(cls, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        return getattr(cls.get_facade_root(), name)


class Facade(metaclass=FacadeMeta):
    """Static-style proxy to an object resolved from the process-wide container.

    Each attribute access resolves ``accessor`` against
    ``Container.get_instance()`` and forwards to the resolved object, so
    shared and non-shared bindings keep their own semantics. Subclassing
    ``Facade`` is the explicit opt-in to ambient container access.

    Attributes:
        accessor: The identifier resolved on each access.

    Example:
        >>> class Log(Facade):
        ...     accessor = "log"
        >>>
        >>> Container.get_instance().singleton("log", lambda c: FileLogger("/var/log/app.log"))
        >>> Log.info("started")  # Container.get_instance().make("log").info("started")
    """

    accessor: ClassVar[Optional[Any]] = None

    @classmethod
    def get_facade_accessor(cls) -> Any:
        """Get the identifier of the component behind the facade.

        Raises:
            RuntimeError: If the facade declares no accessor.
        """
        if cls.accessor is None:
            raise RuntimeError(f"Facade {cls.__name__} does not declare an accessor.")
        return cls.accessor

    @classmethod
    def get_facade_root(cls) -> Any:
        """Resolve the object behind the facade."""
        return Container.get_instance().make(cls.get_facade_accessor())

    @classmethod
    def swap(cls, instance: Any) -> None:
        """Install ``instance`` behind the facade, e.g. a test double."""
        Container.get_instance().instance(cls.get_facade_accessor(), instance)
