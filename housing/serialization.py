"""Conversion between listing models and the JSON shapes of the API layer.

The API names the unit number ``id`` and the house timestamp ``update_at``;
these helpers are the only place that knows about that spelling.
"""

from datetime import date, datetime
from enum import Enum
from typing import Any

from housing.exceptions import InvalidPayloadError
from housing.models import Flat, FlatStatus, House


def serialize_value(value: Any) -> Any:
    """Serialize a value for JSON output."""
    if isinstance(value, Enum):
        return value.value
    elif isinstance(value, datetime):
        return value.isoformat()
    elif isinstance(value, date):
        return value.isoformat()
    elif isinstance(value, dict):
        return {k: serialize_value(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [serialize_value(v) for v in value]
    return value


def house_to_payload(house: House) -> dict[str, Any]:
    return {
        "id": house.id,
        "address": house.address,
        "year": house.year,
        "developer": house.developer,
        "created_at": serialize_value(house.created_at),
        "update_at": serialize_value(house.updated_at),
    }


def flat_to_payload(flat: Flat) -> dict[str, Any]:
    return {
        "id": flat.unit_number,
        "house_id": flat.house_id,
        "price": flat.price,
        "rooms": flat.rooms,
        "status": serialize_value(flat.status),
    }


def _field(data: dict[str, Any], key: str, kind: type, required: bool = True) -> Any:
    if key not in data or data[key] is None:
        if required:
            raise InvalidPayloadError(f"missing field {key!r}")
        return None
    value = data[key]
    if kind is int and isinstance(value, bool):
        raise InvalidPayloadError(f"field {key!r} must be int")
    if not isinstance(value, kind):
        raise InvalidPayloadError(f"field {key!r} must be {kind.__name__}")
    return value


def house_from_payload(data: dict[str, Any]) -> House:
    """Build a House from a request body.

    House ids may arrive as JSON numbers; they are kept as strings.
    Timestamps in the body are ignored since the core owns them.
    """
    if not isinstance(data, dict):
        raise InvalidPayloadError("house payload must be an object")
    raw_id = data.get("id")
    if isinstance(raw_id, int) and not isinstance(raw_id, bool):
        raw_id = str(raw_id)
    return House(
        id=_field({"id": raw_id}, "id", str),
        address=_field(data, "address", str),
        year=_field(data, "year", int),
        developer=_field(data, "developer", str, required=False),
    )


def flat_from_payload(data: dict[str, Any], require_status: bool = False) -> Flat:
    """Build a Flat from a request body.

    Creation bodies carry price and rooms; update bodies carry status.
    Missing price/rooms default to 0 only when ``require_status`` is set.
    """
    if not isinstance(data, dict):
        raise InvalidPayloadError("flat payload must be an object")
    raw_house_id = data.get("house_id")
    if isinstance(raw_house_id, int) and not isinstance(raw_house_id, bool):
        raw_house_id = str(raw_house_id)

    status = FlatStatus.CREATED
    if require_status or data.get("status") is not None:
        raw_status = _field(data, "status", str)
        try:
            status = FlatStatus(raw_status)
        except ValueError as exc:
            raise InvalidPayloadError(f"unknown flat status {raw_status!r}") from exc

    return Flat(
        house_id=_field({"house_id": raw_house_id}, "house_id", str),
        unit_number=_field(data, "id", int),
        price=_field(data, "price", int, required=not require_status) or 0,
        rooms=_field(data, "rooms", int, required=not require_status) or 0,
        status=status,
    )
