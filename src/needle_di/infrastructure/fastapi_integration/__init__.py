"""
FastAPI integration module.

Provides helpers for resolving needle-di dependencies in FastAPI endpoints,
with one child container per request.
"""

from .integration import (
    Provide,
    RequestScopeMiddleware,
    get_request_container,
    install_container,
    resolver_for,
)

__all__ = [
    "Provide",
    "RequestScopeMiddleware",
    "get_request_container",
    "install_container",
    "resolver_for",
]
