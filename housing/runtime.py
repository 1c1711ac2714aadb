"""Process-wide lifetime of the listings store."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from housing.config import ListingsConfig
from housing.logging import get_logger
from housing.service import ListingService
from housing.store import ListingStore

logger = get_logger(__name__)


@contextmanager
def open_service(config: ListingsConfig | None = None) -> Iterator[ListingService]:
    """Open the store, bootstrap its schema and yield a ready service.

    The store is closed when the block exits, whatever the outcome. A
    ``SchemaError`` from the bootstrap propagates before anything is served.
    """
    config = config or ListingsConfig.from_env()
    config.validate()

    store = ListingStore.from_config(config.store)
    try:
        store.init_schema()
        logger.info("Listings core started (env=%s)", config.env)
        yield ListingService(store)
    finally:
        store.close()
        logger.info("Listings core stopped")
