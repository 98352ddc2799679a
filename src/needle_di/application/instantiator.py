import inspect
import logging
from typing import Any, Callable, Dict, Optional, Sequence, Type, get_type_hints

from needle_di.domain import ConstructorMismatchError, IInstantiator, injection_slots

logger = logging.getLogger(__name__)

# int is acceptable where float or complex is annotated
_NUMERIC_WIDENING: Dict[type, tuple] = {
    float: (int, float),
    complex: (int, float, complex),
}


class Instantiator(IInstantiator):
    """Constructs instances and populates their injection targets.

    Uses Python's inspect module to check the supplied arguments against the
    constructor signature before calling it, then resolves every ``Inject``
    member of the type through the supplied callback.
    """

    def instantiate(
        self,
        concrete_type: Type,
        args: Optional[Sequence[Any]],
        resolve: Callable[[Type], Any],
    ) -> Any:
        """Construct ``concrete_type`` and inject its dependencies.

        Args:
            concrete_type: The type to construct.
            args: Positional constructor arguments, or None for none.
            resolve: Resolves a dependency type to an instance; called once per
                injection target, in declaration order.

        Returns:
            Instance with every injection target assigned.

        Raises:
            ConstructorMismatchError: If the arguments do not fit the constructor.

        Example:
            >>> class Greeter:
            ...     clock = Inject(Clock)
            ...
            ...     def __init__(self, greeting: str):
            ...         self.greeting = greeting
            >>>
            >>> greeter = Instantiator().instantiate(Greeter, ("Hello",), container.resolve_required)
        """
        args = tuple(args) if args is not None else ()
        self._check_arguments(concrete_type, args)

        instance = concrete_type(*args)
        logger.debug("Constructed %s", concrete_type.__name__)

        for slot in injection_slots(concrete_type):
            slot.assign(instance, resolve(slot.dependency_type))

        return instance

    def _check_arguments(self, concrete_type: Type, args: tuple) -> None:
        """Raise ConstructorMismatchError unless ``args`` fit the constructor of ``concrete_type``."""
        if inspect.isabstract(concrete_type):
            raise ConstructorMismatchError(concrete_type, args, "abstract types cannot be constructed")

        try:
            signature = inspect.signature(concrete_type)
        except (TypeError, ValueError):
            # Some builtins expose no signature; the call itself is the check.
            return

        try:
            bound = signature.bind(*args)
        except TypeError as e:
            raise ConstructorMismatchError(concrete_type, args, str(e)) from e

        type_hints = self._constructor_hints(concrete_type)
        for param_name, value in bound.arguments.items():
            param = signature.parameters[param_name]
            if param.kind is inspect.Parameter.VAR_POSITIONAL:
                continue
            hint = type_hints.get(param_name)
            if not self._matches(value, hint):
                raise ConstructorMismatchError(
                    concrete_type,
                    args,
                    f"parameter '{param_name}' expects {hint.__name__}, got {type(value).__name__}",
                )

    @staticmethod
    def _constructor_hints(concrete_type: Type) -> Dict[str, Any]:
        init = concrete_type.__init__
        if init is object.__init__:
            return {}
        try:
            return get_type_hints(init)
        except Exception:
            logger.debug("Could not evaluate constructor hints of %s; checking arity only", concrete_type.__name__)
            return {}

    @staticmethod
    def _matches(value: Any, hint: Any) -> bool:
        """Whether ``value`` satisfies ``hint`` when the hint is a plain class."""
        if value is None or not isinstance(hint, type) or hint is Any:
            return True
        try:
            return isinstance(value, _NUMERIC_WIDENING.get(hint, hint))
        except TypeError:
            # Non-runtime-checkable protocols and similar cannot be checked.
            return True
