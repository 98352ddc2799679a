"""Application layer - Per-node type definitions and interface aliases."""

import logging
from typing import Any, Dict, ItemsView, Iterator, Optional, Sequence, Type, Union

from needle_di.domain import Lifetime, TypeDefinition

logger = logging.getLogger(__name__)


class TypeDefinitionStore:
    """Maps concrete types to their definitions and interfaces to concrete types.

    The first registration of a type (or interface) wins; later ones are
    ignored without error. Lookups are local to this store; walking the
    container hierarchy is the container's job.

    Attributes:
        _definitions: Concrete type to definition.
        _aliases: Interface type to concrete type.
    """

    def __init__(self) -> None:
        """Initialize an empty store."""
        self._definitions: Dict[Type, TypeDefinition] = {}
        self._aliases: Dict[Type, Type] = {}

    def register(
        self,
        concrete_type: Type,
        lifetime: Union[Lifetime, str] = Lifetime.TRANSIENT,
        args: Optional[Sequence[Any]] = None,
    ) -> bool:
        """Register a concrete type unless it is already registered here.

        Args:
            concrete_type: The type to register.
            lifetime: How instances are reused.
            args: Stored constructor arguments.

        Returns:
            True if the definition was inserted, False if one already existed.
        """
        if concrete_type in self._definitions:
            logger.debug("Ignoring duplicate registration of %s", concrete_type.__name__)
            return False

        self._definitions[concrete_type] = TypeDefinition(lifetime=lifetime, args=args)
        logger.debug("Registered %s as %s", concrete_type.__name__, self._definitions[concrete_type].lifetime)
        return True

    def register_alias(
        self,
        interface_type: Type,
        concrete_type: Type,
        lifetime: Union[Lifetime, str] = Lifetime.TRANSIENT,
        args: Optional[Sequence[Any]] = None,
    ) -> bool:
        """Bind an interface to a concrete type and register the concrete type.

        Both the alias and the definition follow first-wins independently.

        Returns:
            True if the alias was inserted.
        """
        inserted = interface_type not in self._aliases
        if inserted:
            self._aliases[interface_type] = concrete_type
            logger.debug("Bound %s to %s", interface_type.__name__, concrete_type.__name__)
        else:
            logger.debug("Ignoring duplicate binding of %s", interface_type.__name__)

        self.register(concrete_type, lifetime, args)
        return inserted

    def lookup(self, concrete_type: Type) -> Optional[TypeDefinition]:
        """Return the local definition of ``concrete_type``, or None."""
        return self._definitions.get(concrete_type)

    def lookup_alias(self, interface_type: Type) -> Optional[Type]:
        """Return the concrete type bound locally to ``interface_type``, or None."""
        return self._aliases.get(interface_type)

    def items(self) -> ItemsView[Type, TypeDefinition]:
        """Registered (concrete type, definition) pairs."""
        return self._definitions.items()

    def __contains__(self, concrete_type: object) -> bool:
        return concrete_type in self._definitions

    def __iter__(self) -> Iterator[Type]:
        return iter(self._definitions)

    def __len__(self) -> int:
        return len(self._definitions)
