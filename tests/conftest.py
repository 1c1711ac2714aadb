"""Pytest configuration and fixtures."""

from collections.abc import Iterator
from pathlib import Path

import pytest

from housing.models import Flat, House
from housing.service import ListingService
from housing.store import ListingStore


@pytest.fixture
def seed() -> int:
    """Fixed seed for reproducible tests."""
    return 42


@pytest.fixture
def storage_path(tmp_path: Path) -> Path:
    """Path of a fresh SQLite file."""
    return tmp_path / "storage.db"


@pytest.fixture
def store(storage_path: Path) -> Iterator[ListingStore]:
    """Store with its schema created, closed after the test."""
    store = ListingStore(str(storage_path))
    store.init_schema()
    yield store
    store.close()


@pytest.fixture
def service(store: ListingStore) -> ListingService:
    """Service bound to the test store."""
    return ListingService(store)


@pytest.fixture
def sample_house() -> House:
    """Sample house payload."""
    return House(id="H1", address="Main St", year=2020)


@pytest.fixture
def sample_flat() -> Flat:
    """Sample flat payload for the sample house."""
    return Flat(house_id="H1", unit_number=101, price=100000, rooms=2)
