"""Unit tests for the dependency and injection markers."""

import pytest

from needle_di.domain.enums import Lifetime
from needle_di.domain.exceptions import InjectionError
from needle_di.domain.markers import Inject, dependency, get_dependency_marker, injection_slots


class Clock:
    pass


class Repository:
    pass


class AnnotatedService:
    clock: Clock = Inject()
    repository = Inject(Repository)


class TestDependencyDecorator:
    """Test cases for the @dependency class decorator."""

    def test_decorator_tags_class(self):
        """Test that the decorator attaches the lifetime tag."""

        @dependency(Lifetime.SCOPED)
        class UnitOfWork:
            pass

        marker = get_dependency_marker(UnitOfWork)
        assert marker is not None
        assert marker.lifetime == Lifetime.SCOPED

    def test_decorator_defaults_to_transient(self):
        """Test that the default lifetime is transient."""

        @dependency()
        class Handler:
            pass

        assert get_dependency_marker(Handler).lifetime == Lifetime.TRANSIENT

    def test_decorator_accepts_string_lifetime(self):
        """Test that lifetimes can be given as strings."""

        @dependency("singleton")
        class Settings:
            pass

        assert get_dependency_marker(Settings).lifetime is Lifetime.SINGLETON

    def test_decorator_returns_same_class(self):
        """Test that the class itself is returned."""

        class Plain:
            pass

        assert dependency()(Plain) is Plain

    def test_marker_is_not_inherited(self):
        """Test that subclasses of a tagged class are not tagged."""

        @dependency(Lifetime.SINGLETON)
        class Base:
            pass

        class Derived(Base):
            pass

        assert get_dependency_marker(Derived) is None

    def test_untagged_and_non_class_values(self):
        """Test that untagged classes and other objects have no marker."""

        class Plain:
            pass

        assert get_dependency_marker(Plain) is None
        assert get_dependency_marker("not a class") is None
        assert get_dependency_marker(42) is None


class TestInjectDescriptor:
    """Test cases for the Inject descriptor."""

    def test_class_access_returns_descriptor(self):
        """Test that accessing the member on the class returns the descriptor."""
        assert isinstance(AnnotatedService.repository, Inject)

    def test_reading_before_injection_raises(self):
        """Test that an uninjected member cannot be read."""
        service = AnnotatedService()

        with pytest.raises(AttributeError, match="has not been injected"):
            _ = service.repository

    def test_public_assignment_is_rejected(self):
        """Test that the member is read-only to normal code."""
        service = AnnotatedService()

        with pytest.raises(AttributeError, match="read-only"):
            service.repository = Repository()

    def test_inject_assigns_value(self):
        """Test that the privileged setter assigns the member."""
        service = AnnotatedService()
        repository = Repository()

        AnnotatedService.__dict__["repository"].inject(service, repository)

        assert service.repository is repository

    def test_dependency_type_from_annotation(self):
        """Test that the type is taken from the annotation when not given."""
        assert AnnotatedService.__dict__["clock"].dependency_type is Clock

    def test_explicit_dependency_type(self):
        """Test that an explicit type is used as given."""
        assert AnnotatedService.__dict__["repository"].dependency_type is Repository

    def test_missing_type_raises(self):
        """Test that a member with neither a type nor an annotation is rejected."""

        class Broken:
            dep = Inject()

        with pytest.raises(InjectionError, match="Broken.dep.*explicit type or an annotation"):
            _ = Broken.__dict__["dep"].dependency_type

    def test_string_annotation_is_evaluated_in_module(self):
        """Test that a quoted annotation resolves against the declaring module."""

        class Quoted:
            clock: "Clock" = Inject()

        assert Quoted.__dict__["clock"].dependency_type is Clock

    def test_unknown_string_annotation_raises(self):
        """Test that an annotation naming an unknown type is reported for its member."""

        class Dangling:
            clock: "NotDefinedAnywhere" = Inject()  # noqa: F821

        with pytest.raises(InjectionError, match="Dangling.clock") as exc_info:
            _ = Dangling.__dict__["clock"].dependency_type

        assert "NotDefinedAnywhere" in exc_info.value.reason

    def test_inject_into_slotted_instance_raises(self):
        """Test that instances without a __dict__ cannot receive injected members."""

        class Slotted:
            __slots__ = ()
            clock = Inject(Clock)

        with pytest.raises(InjectionError, match="__slots__"):
            Slotted.__dict__["clock"].inject(Slotted(), Clock())


class TestInjectionSlots:
    """Test cases for injection slot collection."""

    def test_slots_in_declaration_order(self):
        """Test that slots follow the declaration order."""
        slots = injection_slots(AnnotatedService)

        assert [slot.name for slot in slots] == ["clock", "repository"]
        assert [slot.dependency_type for slot in slots] == [Clock, Repository]

    def test_class_without_slots(self):
        """Test that a class without injection targets has no slots."""

        class Plain:
            value = 1

        assert injection_slots(Plain) == []

    def test_base_class_slots_come_first(self):
        """Test that inherited slots precede the subclass's own slots."""

        class Base:
            clock = Inject(Clock)

        class Derived(Base):
            repository = Inject(Repository)

        assert [slot.name for slot in injection_slots(Derived)] == ["clock", "repository"]

    def test_subclass_redeclaration_replaces_base_slot(self):
        """Test that a redeclared slot keeps its position with the new type."""

        class SpecialClock(Clock):
            pass

        class Base:
            clock = Inject(Clock)
            repository = Inject(Repository)

        class Derived(Base):
            clock = Inject(SpecialClock)

        slots = injection_slots(Derived)
        assert [slot.name for slot in slots] == ["clock", "repository"]
        assert slots[0].dependency_type is SpecialClock

    def test_subclass_override_with_plain_attribute_removes_slot(self):
        """Test that shadowing a slot with a plain attribute removes it."""

        class Base:
            clock = Inject(Clock)

        class Derived(Base):
            clock = None

        assert injection_slots(Derived) == []

    def test_slot_assign_writes_member(self):
        """Test that the slot setter writes through the descriptor."""
        service = AnnotatedService()
        clock = Clock()

        injection_slots(AnnotatedService)[0].assign(service, clock)

        assert service.clock is clock
