from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Optional, Sequence, Type, TypeVar, Union

from needle_di.domain.enums import Lifetime
from needle_di.domain.models import TypeDefinition

T = TypeVar("T")


class IContainer(ABC):
    """Abstract interface for a node of the container hierarchy."""

    @property
    @abstractmethod
    def parent(self) -> Optional["IContainer"]:
        """The parent node, or None for the root."""

    @abstractmethod
    def register(
        self,
        dependency_type: Type,
        implementation: Optional[Type] = None,
        *,
        lifetime: Union[Lifetime, str] = Lifetime.TRANSIENT,
        args: Optional[Sequence[Any]] = None,
    ) -> "IContainer":
        """Register a concrete type, or an implementation behind an interface.

        Args:
            dependency_type: The concrete type, or the interface when ``implementation`` is given.
            implementation: Optional concrete type bound to ``dependency_type``.
            lifetime: How instances are reused.
            args: Stored constructor arguments.
        """

    @abstractmethod
    def resolve(self, dependency_type: Type[T], args: Optional[Sequence[Any]] = None) -> Optional[T]:
        """Resolve an instance of the requested type, or None when it is not registered.

        Args:
            dependency_type: The type to resolve.
            args: Constructor arguments overriding the stored ones for this call.
        """

    @abstractmethod
    def resolve_required(self, dependency_type: Type[T], args: Optional[Sequence[Any]] = None) -> T:
        """Resolve an instance of the requested type, raising when it is not registered."""

    @abstractmethod
    def resolve_definition(self, concrete_type: Type) -> Optional[TypeDefinition]:
        """Return the nearest definition of ``concrete_type`` from this node toward the root."""

    @abstractmethod
    def scope(self) -> "IContainer":
        """Create and return a child container."""

    @abstractmethod
    def get_registry_copy(self) -> Dict[Type, TypeDefinition]:
        """Get a copy of the definitions registered at this node."""


class IResolver(ABC):
    """Abstract interface for lifetime-aware resolution over the container hierarchy."""

    @abstractmethod
    def resolve(
        self,
        dependency_type: Type[T],
        node: IContainer,
        args: Optional[Sequence[Any]] = None,
    ) -> Optional[T]:
        """Resolve ``dependency_type`` starting at ``node``.

        Args:
            dependency_type: Interface or concrete type to resolve.
            node: The container the request starts from.
            args: Optional constructor argument override.

        Returns:
            The instance, or None when no definition exists in the chain.
        """


class IInstantiator(ABC):
    """Abstract interface for constructing and injecting instances."""

    @abstractmethod
    def instantiate(
        self,
        concrete_type: Type[T],
        args: Optional[Sequence[Any]],
        resolve: Callable[[Type], Any],
    ) -> T:
        """Construct ``concrete_type`` and populate its injection targets.

        Args:
            concrete_type: The type to construct.
            args: Constructor arguments, or None for none.
            resolve: Callback resolving each injected dependency type.

        Raises:
            ConstructorMismatchError: If the arguments do not fit the constructor.
        """
