"""Resolve needle-di dependencies in FastAPI endpoints.

``install_container`` attaches the application container to the app and, by
default, a child container to every request. ``Provide`` declares an endpoint
parameter resolved from the request's container:

    >>> container = DIContainer().register(UnitOfWork, lifetime=Lifetime.SCOPED)
    >>> app = FastAPI()
    >>> install_container(app, container)
    >>>
    >>> @app.post("/orders")
    >>> async def create_order(uow: UnitOfWork = Provide(UnitOfWork)):
    ...     ...
"""

import logging
from typing import Any, Callable, Optional, Sequence, Type, TypeVar

from fastapi import Depends, FastAPI, Request
from starlette.types import ASGIApp, Receive, Scope, Send

from needle_di.domain import IContainer

T = TypeVar("T")

logger = logging.getLogger(__name__)

APP_STATE_KEY = "needle_container"
REQUEST_STATE_KEY = "needle_scope"


class RequestScopeMiddleware:
    """ASGI middleware giving each HTTP or websocket connection a child container.

    The child is stored in the connection state and dropped with it. Scoped
    types not yet created by the application container get one instance per
    request; singletons stay shared through the root.

    Attributes:
        app: The wrapped ASGI application.
        container: The container each request scope is created from.
    """

    def __init__(self, app: ASGIApp, container: IContainer) -> None:
        self.app = app
        self.container = container

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] in ("http", "websocket"):
            scope.setdefault("state", {})[REQUEST_STATE_KEY] = self.container.scope()
        await self.app(scope, receive, send)


def install_container(app: FastAPI, container: IContainer, *, per_request_scope: bool = True) -> None:
    """Make ``container`` the source of ``Provide`` dependencies for ``app``.

    Args:
        app: The FastAPI application.
        container: The application (usually root) container.
        per_request_scope: Whether each request resolves from its own child
            container. When False, every request resolves from ``container``.
    """
    setattr(app.state, APP_STATE_KEY, container)
    if per_request_scope:
        app.add_middleware(RequestScopeMiddleware, container=container)
    logger.debug("Installed DI container on application (per_request_scope=%s)", per_request_scope)


def get_request_container(request: Request) -> IContainer:
    """Return the container requests should resolve from.

    The request's own child container if the middleware created one, else the
    container installed on the application.

    Raises:
        RuntimeError: If no container was installed on the application.
    """
    request_scope = getattr(request.state, REQUEST_STATE_KEY, None)
    if request_scope is not None:
        return request_scope

    container = getattr(request.app.state, APP_STATE_KEY, None)
    if container is None:
        raise RuntimeError("No DI container is installed on this application. Call install_container(app, container).")
    return container


def Provide(
    dependency_type: Type[T],
    args: Optional[Sequence[Any]] = None,
    *,
    required: bool = True,
) -> Any:
    """Declare an endpoint parameter resolved from the request's container.

    Args:
        dependency_type: Interface or concrete type to resolve.
        args: Constructor arguments overriding the stored ones.
        required: When True an unregistered type raises ``UnresolvableError``;
            when False the parameter receives None.

    Returns:
        A ``Depends`` marker for use as a parameter default.
    """
    return Depends(resolver_for(dependency_type, args, required=required))


def resolver_for(
    dependency_type: Type[T],
    args: Optional[Sequence[Any]] = None,
    *,
    required: bool = True,
) -> Callable[[IContainer], Optional[T]]:
    """Build the dependency callable behind ``Provide``."""

    def resolve_dependency(container: IContainer = Depends(get_request_container)) -> Optional[T]:
        if required:
            return container.resolve_required(dependency_type, args)
        return container.resolve(dependency_type, args)

    resolve_dependency.__name__ = f"resolve_{getattr(dependency_type, '__name__', 'dependency')}"
    return resolve_dependency
