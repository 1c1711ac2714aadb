"""Tests for payload conversion."""

from datetime import datetime

import pytest

from housing.exceptions import InvalidPayloadError
from housing.models import Flat, FlatStatus, House
from housing.serialization import (
    flat_from_payload,
    flat_to_payload,
    house_from_payload,
    house_to_payload,
    serialize_value,
)


class TestSerializeValue:
    """Tests for serialize_value."""

    def test_enum(self) -> None:
        assert serialize_value(FlatStatus.ON_MODERATION) == "on-moderation"

    def test_datetime(self) -> None:
        assert serialize_value(datetime(2024, 1, 2, 3, 4, 5)) == "2024-01-02T03:04:05"

    def test_nested(self) -> None:
        value = {"statuses": [FlatStatus.APPROVED], "at": datetime(2024, 1, 1)}

        assert serialize_value(value) == {
            "statuses": ["approved"],
            "at": "2024-01-01T00:00:00",
        }

    def test_passthrough(self) -> None:
        assert serialize_value(42) == 42
        assert serialize_value(None) is None


class TestHousePayload:
    """Tests for house payloads."""

    def test_to_payload(self) -> None:
        """Test the API field names and timestamp rendering."""
        house = House(
            id="H1",
            address="Main St",
            year=2020,
            developer="Acme",
            created_at=datetime(2024, 1, 1, 12, 0),
        )

        assert house_to_payload(house) == {
            "id": "H1",
            "address": "Main St",
            "year": 2020,
            "developer": "Acme",
            "created_at": "2024-01-01T12:00:00",
            "update_at": None,
        }

    def test_from_payload(self) -> None:
        """Test parsing a creation body; timestamps are dropped."""
        house = house_from_payload(
            {"id": "H1", "address": "Main St", "year": 2020, "created_at": "2000-01-01"}
        )

        assert house == House(id="H1", address="Main St", year=2020)

    def test_numeric_id_kept_as_string(self) -> None:
        house = house_from_payload({"id": 7, "address": "Main St", "year": 2020})

        assert house.id == "7"

    @pytest.mark.parametrize(
        "data",
        [
            {"address": "Main St", "year": 2020},
            {"id": "H1", "year": 2020},
            {"id": "H1", "address": "Main St", "year": "2020"},
            {"id": "H1", "address": "Main St", "year": 2020, "developer": 5},
            ["not", "an", "object"],
        ],
    )
    def test_invalid(self, data) -> None:
        with pytest.raises(InvalidPayloadError):
            house_from_payload(data)


class TestFlatPayload:
    """Tests for flat payloads."""

    def test_to_payload(self) -> None:
        """Test that the unit number is exposed as id."""
        flat = Flat(house_id="H1", unit_number=101, price=100000, rooms=2)

        assert flat_to_payload(flat) == {
            "id": 101,
            "house_id": "H1",
            "price": 100000,
            "rooms": 2,
            "status": "created",
        }

    def test_from_create_payload(self) -> None:
        flat = flat_from_payload({"id": 101, "house_id": "H1", "price": 100000, "rooms": 2})

        assert flat == Flat(house_id="H1", unit_number=101, price=100000, rooms=2)

    def test_from_update_payload(self) -> None:
        """Test that update bodies need only id, house_id and status."""
        flat = flat_from_payload(
            {"id": 101, "house_id": "H1", "status": "approved"}, require_status=True
        )

        assert flat.status == FlatStatus.APPROVED
        assert flat.unit_number == 101

    def test_update_requires_status(self) -> None:
        with pytest.raises(InvalidPayloadError, match="status"):
            flat_from_payload({"id": 101, "house_id": "H1"}, require_status=True)

    def test_unknown_status(self) -> None:
        with pytest.raises(InvalidPayloadError, match="unknown flat status"):
            flat_from_payload({"id": 1, "house_id": "H1", "price": 1, "rooms": 1, "status": "sold"})

    @pytest.mark.parametrize(
        "data",
        [
            {"house_id": "H1", "price": 1, "rooms": 1},
            {"id": 1, "price": 1, "rooms": 1},
            {"id": 1, "house_id": "H1", "rooms": 1},
            {"id": 1, "house_id": "H1", "price": 1.5, "rooms": 1},
            {"id": True, "house_id": "H1", "price": 1, "rooms": 1},
        ],
    )
    def test_invalid(self, data) -> None:
        with pytest.raises(InvalidPayloadError):
            flat_from_payload(data)
