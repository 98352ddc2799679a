"""
Domain layer - Core models and rules.

This layer contains the lifetimes, registration models, markers and errors of
the container. It has no dependencies on other layers.
"""

from .enums import Lifetime
from .exceptions import (
    ConstructorMismatchError,
    DIException,
    InjectionError,
    RegistrationError,
    UnresolvableError,
)
from .interfaces import IContainer, IInstantiator, IResolver
from .markers import Inject, dependency, get_dependency_marker, injection_slots
from .models import DependencyMarker, InjectionSlot, TypeDefinition

__all__ = [
    # Enums
    "Lifetime",
    # Exceptions
    "DIException",
    "UnresolvableError",
    "ConstructorMismatchError",
    "InjectionError",
    "RegistrationError",
    # Interfaces
    "IContainer",
    "IResolver",
    "IInstantiator",
    # Markers
    "Inject",
    "dependency",
    "get_dependency_marker",
    "injection_slots",
    # Models
    "TypeDefinition",
    "DependencyMarker",
    "InjectionSlot",
]
