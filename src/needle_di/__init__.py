"""
needle-di: Hierarchical dependency injection container with scoped lifetimes.

Public API exports for the needle-di package.
"""

# Application exports
from needle_di.application.container import DIContainer

# Domain exports
from needle_di.domain.enums import Lifetime
from needle_di.domain.exceptions import (
    ConstructorMismatchError,
    DIException,
    InjectionError,
    RegistrationError,
    UnresolvableError,
)
from needle_di.domain.markers import Inject, dependency
from needle_di.domain.models import TypeDefinition

__version__ = "0.1.0"

__all__ = [
    # Container
    "DIContainer",
    # Enums
    "Lifetime",
    # Markers
    "Inject",
    "dependency",
    # Models
    "TypeDefinition",
    # Exceptions
    "DIException",
    "UnresolvableError",
    "ConstructorMismatchError",
    "InjectionError",
    "RegistrationError",
]
