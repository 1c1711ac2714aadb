#!/usr/bin/env python3
"""Seed a listings store with synthetic houses and flats.

Everything goes through the listing operations, so the seeded data obeys the
same invariants as real traffic: houses are created as moderator, flats as
client, and a share of flats is then approved or declined by the moderator.

Usage::

    python scripts/seed_listings.py --storage-path storage.db --houses 20
"""

import argparse
import logging
import random
import sys
import time
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from housing.config import ListingsConfig, StoreConfig
from housing.exceptions import ConflictError
from housing.generators import FlatGenerator, HouseGenerator
from housing.logging import setup_logging
from housing.models import FlatStatus, Role
from housing.runtime import open_service
from housing.service import ListingService

logger = logging.getLogger(__name__)


def seed(
    service: ListingService,
    num_houses: int,
    flats_per_house: int,
    approve_rate: float,
    decline_rate: float,
    seed_value: int | None,
) -> dict[str, int]:
    """Create houses and flats, then moderate a share of the flats."""
    house_gen = HouseGenerator(seed=seed_value)
    flat_gen = FlatGenerator(seed=seed_value)
    counts = {"houses": 0, "flats": 0, "approved": 0, "declined": 0, "skipped": 0}

    for house in house_gen.generate_batch(num_houses):
        try:
            service.create_house(house, Role.MODERATOR)
        except ConflictError:
            counts["skipped"] += 1
            continue
        counts["houses"] += 1

        for flat in flat_gen.generate_for_house(house.id, flats_per_house):
            created = service.create_flat(flat)
            counts["flats"] += 1

            roll = random.random()
            if roll < approve_rate:
                created.status = FlatStatus.APPROVED
                counts["approved"] += 1
            elif roll < approve_rate + decline_rate:
                created.status = FlatStatus.DECLINED
                counts["declined"] += 1
            else:
                continue
            service.update_flat(created, Role.MODERATOR)

    return counts


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed a listings store with synthetic data")
    parser.add_argument("--storage-path", default=None, help="SQLite file or SQLAlchemy URL")
    parser.add_argument("--houses", type=int, default=10, help="Number of houses")
    parser.add_argument("--flats-per-house", type=int, default=20, help="Flats per house")
    parser.add_argument("--approve-rate", type=float, default=0.6, help="Share of flats approved")
    parser.add_argument("--decline-rate", type=float, default=0.1, help="Share of flats declined")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--log-level", default=None, help="Override log level")
    args = parser.parse_args()

    if args.approve_rate + args.decline_rate > 1:
        parser.error("--approve-rate plus --decline-rate must not exceed 1")

    config = ListingsConfig.from_env()
    if args.storage_path:
        config.store = StoreConfig(
            storage_path=args.storage_path,
            echo=config.store.echo,
            timeout_seconds=config.store.timeout_seconds,
        )
    if args.log_level:
        config.log_level = args.log_level

    level, format_type = config.logging_options()
    setup_logging(level=level, format_type=format_type)

    t0 = time.perf_counter()
    with open_service(config) as service:
        counts = seed(
            service,
            num_houses=args.houses,
            flats_per_house=args.flats_per_house,
            approve_rate=args.approve_rate,
            decline_rate=args.decline_rate,
            seed_value=args.seed,
        )
        totals = service.store.summary()

    logger.info("Seeded %s in %.1fs", counts, time.perf_counter() - t0)
    logger.info("Store now holds %d houses and %d flats", totals["houses"], totals["flats"])


if __name__ == "__main__":
    main()
