"""
Application layer - Container hierarchy and resolution.

This layer contains the container nodes and the components they orchestrate.
It depends only on the Domain layer.
"""

from .auto_registrar import AutoRegistrar
from .container import DIContainer
from .instance_cache import InstanceCache
from .instantiator import Instantiator
from .resolver import LifetimeResolver
from .type_store import TypeDefinitionStore

__all__ = [
    "DIContainer",
    "LifetimeResolver",
    "Instantiator",
    "AutoRegistrar",
    "TypeDefinitionStore",
    "InstanceCache",
]
