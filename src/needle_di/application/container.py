import inspect
import logging
from typing import (
    Any,
    Dict,
    Iterable,
    Iterator,
    Mapping,
    Optional,
    Sequence,
    Tuple,
    Type,
    TypeVar,
    Union,
)

from needle_di.application.auto_registrar import AutoRegistrar, Source
from needle_di.application.instance_cache import InstanceCache
from needle_di.application.resolver import LifetimeResolver
from needle_di.application.type_store import TypeDefinitionStore
from needle_di.domain import (
    IContainer,
    Lifetime,
    RegistrationError,
    TypeDefinition,
)

T = TypeVar("T")

logger = logging.getLogger(__name__)


class DIContainer(IContainer):
    """Main dependency injection container, one node of a container tree.

    Each node owns its registrations and its instance cache and keeps a
    reference to its parent. Registrations made in a scope are visible to that
    scope and its descendants only; nothing a child does changes its parent.

    Attributes:
        _parent: The parent node, None for the root.
        _type_store: Definitions and interface bindings registered at this node.
        _instance_cache: Instances this node created.
        _resolver: Component dispatching resolution by lifetime.
        _auto_registrar: Component registering ``@dependency``-marked classes.
    """

    def __init__(self, parent: Optional["DIContainer"] = None) -> None:
        """Initialize a container node.

        Args:
            parent: Parent container. Omit to create a root container.
        """
        self._parent = parent
        self._type_store = TypeDefinitionStore()
        self._instance_cache = InstanceCache()
        self._resolver = parent._resolver if parent is not None else LifetimeResolver()
        self._auto_registrar = AutoRegistrar()

    @property
    def parent(self) -> Optional["DIContainer"]:
        return self._parent

    @property
    def is_root(self) -> bool:
        return self._parent is None

    @property
    def root(self) -> "DIContainer":
        node = self
        while node._parent is not None:
            node = node._parent
        return node

    @property
    def depth(self) -> int:
        """Number of ancestors of this node; 0 for the root."""
        depth, node = 0, self._parent
        while node is not None:
            depth, node = depth + 1, node._parent
        return depth

    @property
    def type_store(self) -> TypeDefinitionStore:
        return self._type_store

    @property
    def instance_cache(self) -> InstanceCache:
        return self._instance_cache

    def register(
        self,
        dependency_type: Type,
        implementation: Optional[Type] = None,
        *,
        lifetime: Union[Lifetime, str] = Lifetime.TRANSIENT,
        args: Optional[Sequence[Any]] = None,
    ) -> "DIContainer":
        """Register a concrete type, or an implementation behind an interface.

        The first registration of a type at this node wins; repeating it is a
        no-op. Constructors are not checked until the type is resolved.

        Args:
            dependency_type: The concrete type, or the interface when
                ``implementation`` is given.
            implementation: Concrete type resolved for ``dependency_type``.
            lifetime: How instances are reused. Defaults to transient.
            args: Constructor arguments stored for the type.

        Returns:
            This container, for chaining.

        Raises:
            RegistrationError: If ``implementation`` does not satisfy ``dependency_type``.
            pydantic.ValidationError: If ``lifetime`` is not a valid lifetime.

        Example:
            >>> container = (
            ...     DIContainer()
            ...     .register(Settings, lifetime=Lifetime.SINGLETON, args=["prod"])
            ...     .register(Repository, SqlRepository, lifetime=Lifetime.SCOPED)
            ... )
        """
        _ensure_class(dependency_type)
        if implementation is None:
            self._type_store.register(dependency_type, lifetime, args)
            return self

        _ensure_class(implementation)
        _ensure_implements(dependency_type, implementation)
        self._type_store.register_alias(dependency_type, implementation, lifetime, args)
        return self

    def _register_many(
        self,
        dependencies: Union[Iterable[Type], Mapping[Type, Type]],
        lifetime: Lifetime,
    ) -> None:
        if isinstance(dependencies, Mapping):
            for interface_type, implementation in dependencies.items():
                self.register(interface_type, implementation, lifetime=lifetime)
        else:
            for dependency_type in dependencies:
                self.register(dependency_type, lifetime=lifetime)

    def register_singletons(self, dependencies: Union[Iterable[Type], Mapping[Type, Type]]) -> None:
        """Register multiple singleton dependencies at once.

        Args:
            dependencies: Concrete types, or a mapping of interfaces to implementations.

        Example:
            >>> container.register_singletons([Settings, ConnectionPool])
            >>> container.register_singletons({Clock: SystemClock})
        """
        self._register_many(dependencies, Lifetime.SINGLETON)

    def register_scoped(self, dependencies: Union[Iterable[Type], Mapping[Type, Type]]) -> None:
        """Register multiple scoped dependencies at once.

        Args:
            dependencies: Concrete types, or a mapping of interfaces to implementations.
        """
        self._register_many(dependencies, Lifetime.SCOPED)

    def register_transients(self, dependencies: Union[Iterable[Type], Mapping[Type, Type]]) -> None:
        """Register multiple transient dependencies at once.

        Args:
            dependencies: Concrete types, or a mapping of interfaces to implementations.
        """
        self._register_many(dependencies, Lifetime.TRANSIENT)

    def auto_register(self, *sources: Source) -> "DIContainer":
        """Register every ``@dependency``-marked class found in ``sources``.

        Without sources, the global namespace of the calling module is scanned,
        so every marked class defined in or imported into it is registered.

        Args:
            *sources: Modules, namespaces or classes to scan.

        Returns:
            This container, for chaining.

        Example:
            >>> from myapp import services
            >>> container = DIContainer().auto_register(services)
        """
        if not sources:
            frame = inspect.currentframe()
            try:
                sources = (frame.f_back.f_globals,)
            finally:
                del frame
        self._auto_registrar.register_all(self, *sources)
        return self

    def resolve(self, dependency_type: Type[T], args: Optional[Sequence[Any]] = None) -> Optional[T]:
        """Resolve an instance of the specified type.

        Args:
            dependency_type: Interface or concrete type to resolve.
            args: Constructor arguments overriding the stored ones for this call.

        Returns:
            The instance, or None if the type is not registered in this
            container or any of its ancestors.

        Raises:
            ConstructorMismatchError: If the instance cannot be constructed with the arguments.
            UnresolvableError: If an injected dependency is not registered.
            ValueError: If ``args`` is a string instead of a sequence of arguments.

        Example:
            >>> report_service = container.resolve(ReportService)
        """
        return self._resolver.resolve(dependency_type, self, args)

    def resolve_required(self, dependency_type: Type[T], args: Optional[Sequence[Any]] = None) -> T:
        """Resolve an instance of the specified type, failing if it is not registered.

        Raises:
            UnresolvableError: If the type is not registered in the container chain.
            ConstructorMismatchError: If the instance cannot be constructed with the arguments.
            ValueError: If ``args`` is a string instead of a sequence of arguments.
        """
        return self._resolver.resolve_required(dependency_type, self, args)

    def resolve_definition(self, concrete_type: Type) -> Optional[TypeDefinition]:
        """Return the definition of ``concrete_type`` nearest to this node, or None."""
        node: Optional[DIContainer] = self
        while node is not None:
            definition = node._type_store.lookup(concrete_type)
            if definition is not None:
                return definition
            node = node._parent
        return None

    def resolve_alias(self, interface_type: Type) -> Optional[Type]:
        """Return the implementation bound to ``interface_type`` nearest to this node, or None."""
        node: Optional[DIContainer] = self
        while node is not None:
            implementation = node._type_store.lookup_alias(interface_type)
            if implementation is not None:
                return implementation
            node = node._parent
        return None

    def resolve_concrete_type(self, dependency_type: Type) -> Type:
        """Return the concrete type requested by ``dependency_type`` at this node.

        Levels are searched from this node toward the root and the nearest level
        mentioning the type decides: its interface binding if it has one, else
        the type itself if registered there. A type no level mentions is its
        own concrete type.
        """
        node: Optional[DIContainer] = self
        while node is not None:
            implementation = node._type_store.lookup_alias(dependency_type)
            if implementation is not None:
                return implementation
            if dependency_type in node._type_store:
                return dependency_type
            node = node._parent
        return dependency_type

    def scope(self) -> "DIContainer":
        """Create a child container.

        The child sees every registration of its ancestors and may add its own.
        Scoped instances already created by an ancestor are reused; otherwise
        the child creates and keeps its own.

        Example:
            >>> with container.scope() as request_scope:
            ...     unit_of_work = request_scope.resolve_required(UnitOfWork)
        """
        child = DIContainer(parent=self)
        logger.debug("Created scope at depth %d", child.depth)
        return child

    def create_scope(self) -> "DIContainer":
        """Alias of ``scope``."""
        return self.scope()

    def get_registry_copy(self) -> Dict[Type, TypeDefinition]:
        """Return a copy of the definitions registered at this node (ancestors excluded)."""
        return dict(self._type_store.items())

    def __iter__(self) -> Iterator[Tuple[Type, TypeDefinition]]:
        return iter(list(self._type_store.items()))

    def __contains__(self, dependency_type: object) -> bool:
        return dependency_type in self._type_store

    def __len__(self) -> int:
        return len(self._type_store)

    def __enter__(self) -> "DIContainer":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> bool:
        # Nothing is torn down; the caller simply drops the container.
        return False

    def __repr__(self) -> str:
        return f"DIContainer(depth={self.depth}, registrations={len(self)})"


def _ensure_class(candidate: Any) -> None:
    if not isinstance(candidate, type):
        raise RegistrationError(f"Only classes can be registered, got {candidate!r}")


def _ensure_implements(interface_type: Type, implementation: Type) -> None:
    """Raise RegistrationError unless ``implementation`` satisfies ``interface_type``.

    Protocols that are not runtime-checkable are accepted structurally.
    """
    try:
        satisfied = issubclass(implementation, interface_type)
    except TypeError:
        if getattr(interface_type, "_is_protocol", False):
            return
        raise
    if not satisfied:
        raise RegistrationError(
            f"{implementation.__name__} does not implement {interface_type.__name__} and cannot be bound to it"
        )
