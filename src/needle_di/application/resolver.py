import logging
from typing import TYPE_CHECKING, Any, Optional, Sequence, Type

from needle_di.application.instantiator import Instantiator
from needle_di.domain import IInstantiator, IResolver, Lifetime, TypeDefinition, UnresolvableError
from needle_di.domain.models import coerce_args

if TYPE_CHECKING:
    from needle_di.application.container import DIContainer

logger = logging.getLogger(__name__)


class LifetimeResolver(IResolver):
    """Resolves types over the container hierarchy according to their lifetime.

    - Singleton: created once, cached at the root. Requests from a scope are
      delegated to the parent until they reach the root.
    - Scoped: reused if the requesting node or any ancestor already holds an
      instance; otherwise created and cached at the requesting node.
    - Transient: created on every request, never cached.

    Attributes:
        _instantiator: Component constructing and injecting new instances.
    """

    def __init__(self, instantiator: Optional[IInstantiator] = None) -> None:
        """Initialize the resolver.

        Args:
            instantiator: Optional instantiator; defaults to ``Instantiator()``.
        """
        self._instantiator: IInstantiator = instantiator or Instantiator()

    def resolve(
        self,
        dependency_type: Type,
        node: "DIContainer",
        args: Optional[Sequence[Any]] = None,
    ) -> Optional[Any]:
        """Resolve ``dependency_type`` starting at ``node``.

        The nearest container mentioning ``dependency_type`` decides what it
        means: a binding there maps it to its implementation, a registration
        there resolves the type itself. A scope registering a type therefore
        shadows an ancestor binding the same type to another implementation.

        Args:
            dependency_type: Interface or concrete type to resolve.
            node: The container the request starts from.
            args: Constructor arguments overriding the stored ones. Ignored when
                an existing instance is reused.

        Returns:
            The instance, or None if no definition exists from ``node`` to the root.

        Raises:
            ConstructorMismatchError: If a new instance cannot be constructed.
            UnresolvableError: If an injected dependency is not registered.
            ValueError: If ``args`` is a string rather than a sequence of arguments.
        """
        args = coerce_args(args)
        concrete_type = node.resolve_concrete_type(dependency_type)
        definition = node.resolve_definition(concrete_type)
        if definition is None:
            return None

        if definition.lifetime == Lifetime.SINGLETON:
            return self._resolve_singleton(concrete_type, definition, node, args)

        if definition.lifetime == Lifetime.SCOPED:
            return self._resolve_scoped(concrete_type, definition, node, args)

        # Lifetime.TRANSIENT
        return self._instantiate(concrete_type, definition, node, args)

    def resolve_required(
        self,
        dependency_type: Type,
        node: "DIContainer",
        args: Optional[Sequence[Any]] = None,
    ) -> Any:
        """Resolve ``dependency_type`` like ``resolve``, raising instead of returning None.

        Raises:
            UnresolvableError: If the type is not registered anywhere in the chain.
        """
        instance = self.resolve(dependency_type, node, args)
        if instance is None:
            raise UnresolvableError(dependency_type, self._missing_reason(dependency_type, node))
        return instance

    @staticmethod
    def _missing_reason(dependency_type: Type, node: "DIContainer") -> str:
        definition = node.resolve_definition(node.resolve_concrete_type(dependency_type))
        if definition is not None and definition.lifetime == Lifetime.SINGLETON:
            return (
                "It is registered as a singleton below the root container; "
                "singletons are created at the root and must be registered there."
            )
        return "No registration found in the container chain."

    def _resolve_singleton(
        self,
        concrete_type: Type,
        definition: TypeDefinition,
        node: "DIContainer",
        args: Optional[Sequence[Any]],
    ) -> Optional[Any]:
        if node.parent is not None:
            # Construction arguments of a singleton are fixed at the root.
            return self.resolve(concrete_type, node.parent)

        cached = node.instance_cache.get(concrete_type)
        if cached is not None:
            return cached

        instance = self._instantiate(concrete_type, definition, node, args)
        node.instance_cache.add(concrete_type, instance)
        logger.debug("Cached singleton %s at the root container", concrete_type.__name__)
        return instance

    def _resolve_scoped(
        self,
        concrete_type: Type,
        definition: TypeDefinition,
        node: "DIContainer",
        args: Optional[Sequence[Any]],
    ) -> Any:
        ancestor: Optional["DIContainer"] = node
        while ancestor is not None:
            cached = ancestor.instance_cache.get(concrete_type)
            if cached is not None:
                return cached
            ancestor = ancestor.parent

        instance = self._instantiate(concrete_type, definition, node, args)
        node.instance_cache.add(concrete_type, instance)
        logger.debug("Cached scoped %s at container depth %d", concrete_type.__name__, node.depth)
        return instance

    def _instantiate(
        self,
        concrete_type: Type,
        definition: TypeDefinition,
        node: "DIContainer",
        args: Optional[Sequence[Any]],
    ) -> Any:
        return self._instantiator.instantiate(
            concrete_type,
            args if args is not None else definition.args,
            lambda injected_type: self.resolve_required(injected_type, node),
        )
