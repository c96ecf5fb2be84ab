"""
Unit tests for Shared Kernel Entity Module.
"""

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError as PydanticValidationError

from shared_kernel.domain import DomainEntityId, Model


class Patient(Model):
    """Test entity."""
    name: str

    def rename(self, name: str) -> None:
        self.name = name
        self._touch()

    def archive(self, by: DomainEntityId) -> None:
        self._soft_delete(by)

    def unarchive(self) -> None:
        self._restore()


class Clinician(Model):
    """Second entity type sharing the identity space."""
    name: str


class TestModel:
    """Tests for Model base class."""

    def test_creation_uses_clock(self, clock) -> None:
        """Test created_at and updated_at come from the clock."""
        patient = Patient(id=DomainEntityId.random(), name="Ada", clock=clock)

        assert patient.created_at == datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)
        assert patient.updated_at == patient.created_at
        assert patient.deleted_at is None
        assert patient.deleted_by is None
        assert patient.is_deleted is False

    def test_updated_at_defaults_to_created_at(self) -> None:
        """Test supplied created_at seeds updated_at."""
        created = datetime(2023, 5, 1, tzinfo=timezone.utc)
        patient = Patient(id=DomainEntityId.random(), name="Ada", created_at=created)
        assert patient.updated_at == created

    def test_updated_before_created_rejected(self) -> None:
        """Test lifecycle ordering is validated."""
        created = datetime(2023, 5, 1, tzinfo=timezone.utc)
        with pytest.raises(PydanticValidationError):
            Patient(
                id=DomainEntityId.random(),
                name="Ada",
                created_at=created,
                updated_at=created - timedelta(seconds=1),
            )

    def test_deleted_by_requires_deleted_at(self) -> None:
        """Test deletion markers must be consistent."""
        with pytest.raises(PydanticValidationError):
            Patient(id=DomainEntityId.random(), name="Ada", deleted_by=DomainEntityId.random())

    def test_extra_fields_forbidden(self) -> None:
        """Test unknown attributes are rejected."""
        with pytest.raises(PydanticValidationError):
            Patient(id=DomainEntityId.random(), name="Ada", nickname="A")

    @pytest.mark.parametrize("field", ["id", "created_at", "updated_at", "deleted_at", "deleted_by"])
    def test_lifecycle_fields_not_assignable(self, field: str) -> None:
        """Test lifecycle fields only change through lifecycle operations."""
        patient = Patient(id=DomainEntityId.random(), name="Ada")
        with pytest.raises(AttributeError):
            setattr(patient, field, None)

    def test_touch_moves_updated_at(self, stepping_clock) -> None:
        """Test business mutations refresh updated_at."""
        patient = Patient(id=DomainEntityId.random(), name="Ada", clock=stepping_clock)
        created = patient.created_at

        patient.rename("Grace")

        assert patient.name == "Grace"
        assert patient.updated_at > created
        assert patient.created_at == created

    def test_touch_never_goes_before_created(self, clock) -> None:
        """Test a clock running behind does not break ordering."""
        patient = Patient(id=DomainEntityId.random(), name="Ada", clock=clock)
        clock.advance(timedelta(hours=-2))

        patient.rename("Grace")

        assert patient.updated_at == patient.created_at

    def test_soft_delete_and_restore(self, stepping_clock) -> None:
        """Test soft deletion sets markers and restore clears them."""
        patient = Patient(id=DomainEntityId.random(), name="Ada", clock=stepping_clock)
        actor = DomainEntityId.random()

        patient.archive(actor)

        assert patient.is_deleted
        assert patient.deleted_by == actor
        assert patient.deleted_at is not None
        assert patient.updated_at >= patient.deleted_at
        deleted_update = patient.updated_at

        patient.unarchive()

        assert not patient.is_deleted
        assert patient.deleted_at is None
        assert patient.deleted_by is None
        assert patient.updated_at > deleted_update

    def test_equality_by_identity(self) -> None:
        """Test entities with the same id are equal regardless of state."""
        entity_id = DomainEntityId.random()
        first = Patient(id=entity_id, name="Ada")
        second = Patient(id=entity_id, name="Grace")
        other = Patient(id=DomainEntityId.random(), name="Ada")

        assert first == second
        assert hash(first) == hash(second)
        assert first != other
        assert len({first, second, other}) == 2

    def test_equality_across_entity_types(self) -> None:
        """Test identity equality spans entity types."""
        entity_id = DomainEntityId.random()
        assert Patient(id=entity_id, name="Ada") == Clinician(id=entity_id, name="Ada")

    def test_not_equal_to_other_objects(self) -> None:
        """Test comparison with non-entities."""
        patient = Patient(id=DomainEntityId.random(), name="Ada")
        assert patient != patient.id
        assert patient != "Ada"

    def test_entity_type_and_repr(self) -> None:
        """Test entity type name and representation."""
        patient = Patient(id=DomainEntityId.random(), name="Ada")
        assert Patient.get_entity_type() == "Patient"
        assert repr(patient) == f"Patient(id={patient.id})"

    def test_parses_string_id(self) -> None:
        """Test identifiers can be supplied in string form."""
        raw = "3f2504e0-4f89-11d3-9a0c-0305e82c3301"
        patient = Patient(id=raw, name="Ada")
        assert patient.id == DomainEntityId.from_string(raw)
