"""House and flat models."""

from dataclasses import dataclass
from datetime import datetime

from housing.models.enums import FlatStatus


@dataclass
class House:
    """Housing development identified by a caller-supplied natural key."""

    id: str
    address: str
    year: int
    developer: str | None = None
    created_at: datetime | None = None  # Set by the core on creation
    updated_at: datetime | None = None  # Bumped when a flat is added


@dataclass
class Flat:
    """Sellable unit, unique by (house_id, unit_number)."""

    house_id: str
    unit_number: int
    price: int
    rooms: int
    status: FlatStatus = FlatStatus.CREATED
