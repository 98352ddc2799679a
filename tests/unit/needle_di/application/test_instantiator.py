"""Unit tests for Instantiator."""

from abc import ABC, abstractmethod
from typing import Any, List
from unittest.mock import Mock

import pytest

from needle_di.application.instantiator import Instantiator
from needle_di.domain import ConstructorMismatchError, Inject


class Logger:
    pass


class Repository:
    pass


class CtorService:
    def __init__(self, nice_property: str):
        self.nice_property = nice_property


class InjectedService:
    logger = Inject(Logger)
    repository = Inject(Repository)


class TestConstruction:
    """Test cases for constructor invocation."""

    def test_no_args(self):
        """Test constructing a type with a parameterless constructor."""

        class Plain:
            pass

        instance = Instantiator().instantiate(Plain, None, Mock())

        assert isinstance(instance, Plain)

    def test_positional_args(self):
        """Test that arguments are passed positionally."""
        instance = Instantiator().instantiate(CtorService, ("Very cool!",), Mock())

        assert instance.nice_property == "Very cool!"

    def test_list_args(self):
        """Test that any sequence of arguments is accepted."""
        instance = Instantiator().instantiate(CtorService, ["Custom parameter!"], Mock())

        assert instance.nice_property == "Custom parameter!"

    def test_missing_argument_raises_mismatch(self):
        """Test that a missing required argument is a constructor mismatch."""
        with pytest.raises(ConstructorMismatchError) as exc_info:
            Instantiator().instantiate(CtorService, None, Mock())

        assert exc_info.value.cls is CtorService
        assert exc_info.value.args_supplied == ()

    def test_too_many_arguments_raise_mismatch(self):
        """Test that surplus arguments are a constructor mismatch."""

        class Plain:
            pass

        with pytest.raises(ConstructorMismatchError):
            Instantiator().instantiate(Plain, ("unexpected",), Mock())

    def test_wrong_argument_type_raises_mismatch(self):
        """Test that an argument of the wrong annotated type is a mismatch."""
        with pytest.raises(ConstructorMismatchError, match="expects str, got int"):
            Instantiator().instantiate(CtorService, (42,), Mock())

    def test_int_accepted_for_float(self):
        """Test that an int satisfies a float annotation."""

        class Rate:
            def __init__(self, value: float):
                self.value = value

        assert Instantiator().instantiate(Rate, (3,), Mock()).value == 3

    def test_unchecked_annotations(self):
        """Test that generic, Any and unannotated parameters are not type-checked."""

        class Flexible:
            def __init__(self, items: List[int], anything: Any, untyped):
                self.items = items

        instance = Instantiator().instantiate(Flexible, ("not a list", object(), None), Mock())

        assert instance.items == "not a list"

    def test_none_argument_not_type_checked(self):
        """Test that None is accepted for an annotated parameter."""
        assert Instantiator().instantiate(CtorService, (None,), Mock()).nice_property is None

    def test_variadic_constructor(self):
        """Test that variadic constructors accept any number of arguments."""

        class Bag:
            def __init__(self, *items: str):
                self.items = items

        assert Instantiator().instantiate(Bag, ("a", "b", "c"), Mock()).items == ("a", "b", "c")

    def test_abstract_type_raises_mismatch(self):
        """Test that abstract types cannot be constructed."""

        class IService(ABC):
            @abstractmethod
            def run(self) -> None: ...

        with pytest.raises(ConstructorMismatchError, match="abstract"):
            Instantiator().instantiate(IService, None, Mock())

    def test_constructor_errors_propagate_unchanged(self):
        """Test that exceptions raised by the constructor itself are not wrapped."""

        class Failing:
            def __init__(self):
                raise RuntimeError("boom")

        with pytest.raises(RuntimeError, match="boom"):
            Instantiator().instantiate(Failing, None, Mock())


class TestInjection:
    """Test cases for member injection."""

    def test_injection_targets_are_resolved(self):
        """Test that every injection target is resolved and assigned."""
        logger, repository = Logger(), Repository()
        resolved = {Logger: logger, Repository: repository}
        resolve = Mock(side_effect=lambda dependency_type: resolved[dependency_type])

        instance = Instantiator().instantiate(InjectedService, None, resolve)

        assert instance.logger is logger
        assert instance.repository is repository
        assert [call.args[0] for call in resolve.call_args_list] == [Logger, Repository]

    def test_injection_happens_after_construction(self):
        """Test that members are injected after the constructor returns."""
        seen_in_init = []

        class Observer:
            logger = Inject(Logger)

            def __init__(self):
                seen_in_init.append("logger" in self.__dict__)

        instance = Instantiator().instantiate(Observer, None, lambda dependency_type: Logger())

        assert seen_in_init == [False]
        assert isinstance(instance.logger, Logger)

    def test_resolution_failure_propagates(self):
        """Test that a failing dependency aborts the instantiation."""

        def resolve(dependency_type):
            raise LookupError(dependency_type.__name__)

        with pytest.raises(LookupError, match="Logger"):
            Instantiator().instantiate(InjectedService, None, resolve)

    def test_type_without_targets_does_not_resolve(self):
        """Test that no resolution happens for a type without injection targets."""
        resolve = Mock()

        Instantiator().instantiate(CtorService, ("x",), resolve)

        resolve.assert_not_called()
