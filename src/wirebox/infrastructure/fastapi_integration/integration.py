import functools
import inspect
from typing import Any, Awaitable, Callable, Iterable, TypeVar

from fastapi import BackgroundTasks, FastAPI, Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import HTTPConnection
from starlette.responses import Response

from wirebox.application import Container
from wirebox.application.introspection import class_dependency, has_default, injectable_parameters
from wirebox.domain import Identifier

T = TypeVar("T")

_FRAMEWORK_TYPES = (HTTPConnection, Response, BackgroundTasks)


def create_fastapi_dependency(container: Container, key: Identifier) -> Callable[[], Any]:
    """Create a FastAPI Depends() callable that resolves from the container.

    The resolved object follows the binding's semantics: shared bindings
    yield the same instance for every request, others a fresh one.

    Args:
        container: The container to resolve from.
        key: The identifier to resolve when the dependency is called.

    Returns:
        A callable that FastAPI can use with Depends().

    Example:
        >>> container = Container()
        >>> container.singleton(UserRepository)
        >>>
        >>> get_user_repo = create_fastapi_dependency(container, UserRepository)
        >>>
        >>> @app.get("/users")
        >>> async def list_users(repo: UserRepository = Depends(get_user_repo)):
        ...     return await repo.get_all()
    """

    def dependency() -> Any:
        """Resolve the dependency from the container."""
        return container.make(key)

    return dependency


def create_request_dependency(key: Identifier) -> Callable[[Request], Any]:
    """Create a FastAPI dependency that resolves from the request's container.

    Requires the ContainerMiddleware to be installed.

    Args:
        key: The identifier to resolve.

    Returns:
        A callable that resolves from ``request.state.container``.

    Example:
        >>> app.add_middleware(ContainerMiddleware, container=container, forget=["request_context"])
        >>>
        >>> get_request_context = create_request_dependency("request_context")
        >>>
        >>> @app.get("/process")
        >>> async def process_request(ctx=Depends(get_request_context)):
        ...     return {"request_id": ctx.request_id}
    """

    def request_dependency(request: Request) -> Any:
        """Resolve from the request's container."""
        if not hasattr(request.state, "container"):
            raise RuntimeError("Request does not carry a container. Did you forget to add ContainerMiddleware?")
        container: Container = request.state.container
        return container.make(key)

    return request_dependency


class ContainerMiddleware(BaseHTTPMiddleware):
    """Middleware that exposes the container on each request.

    The container is accessible via ``request.state.container``. Shared
    identifiers listed in ``forget`` are dropped from the instance cache once
    the response is produced, so they are rebuilt for the next request.

    Attributes:
        container: The container attached to each request.
        forget: Identifiers whose cached instances are per-request.
    """

    def __init__(self, app: FastAPI, container: Container, forget: Iterable[Identifier] = ()):
        """Initialize the middleware.

        Args:
            app: The FastAPI/Starlette application.
            container: The container to attach to each request.
            forget: Identifiers whose instances are forgotten after each request.
        """
        super().__init__(app)
        self.container = container
        self.forget = list(forget)

    async def dispatch(self, request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
        """Attach the container to the request and execute the endpoint.

        Args:
            request: The incoming HTTP request.
            call_next: The next middleware or endpoint handler.

        Returns:
            The response from the endpoint.
        """
        request.state.container = self.container

        try:
            response = await call_next(request)
            return response
        finally:
            for key in self.forget:
                self.container.forget_instance(key)


def _is_injected(parameter: inspect.Parameter) -> bool:
    dependency = class_dependency(parameter.annotation)
    if dependency is None or has_default(parameter):
        return False
    return not issubclass(dependency, _FRAMEWORK_TYPES)


def inject_dependencies(container: Container) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """Decorator that injects class-typed parameters of an async endpoint.

    Class-annotated parameters without a default are hidden from FastAPI and
    resolved from the container through ``container.call``; every other
    parameter (path, query, body, ``Request``, ``Depends``) is left to FastAPI.

    Args:
        container: The container to resolve dependencies from.

    Returns:
        A decorator function.

    Example:
        >>> @app.get("/users")
        >>> @inject_dependencies(container)
        >>> async def list_users(user_service: UserService, limit: int = 10):
        ...     return await user_service.get_all(limit)
    """

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        """Wrap the function with dependency injection logic."""
        injected = {parameter.name for parameter in injectable_parameters(func) if _is_injected(parameter)}
        signature = inspect.signature(func)
        visible = [parameter for name, parameter in signature.parameters.items() if name not in injected]

        @functools.wraps(func)
        async def wrapper(**kwargs: Any) -> T:
            """Resolve dependencies and call the original function."""
            return await container.call(func, kwargs)

        wrapper.__signature__ = signature.replace(parameters=visible)  # type: ignore[attr-defined]
        return wrapper

    return decorator
