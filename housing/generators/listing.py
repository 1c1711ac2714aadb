"""House and flat generators."""

import random
from datetime import date
from typing import Iterator

from housing.generators.base import BaseGenerator
from housing.models import Flat, House


class HouseGenerator(BaseGenerator):
    """Generate synthetic houses with unique ids."""

    OLDEST_YEAR = 1950
    DEVELOPER_RATE = 0.8  # Share of houses with a known developer

    def generate(self) -> House:
        """Generate a house.

        Returns
        -------
        House
            House without timestamps; the core sets them on creation.
        """
        developer = self.fake.company() if random.random() < self.DEVELOPER_RATE else None
        return House(
            id=self.fake.uuid4(),
            address=self.fake.address().replace("\n", ", "),
            year=random.randint(self.OLDEST_YEAR, date.today().year),
            developer=developer,
        )

    def generate_batch(self, count: int) -> Iterator[House]:
        """Generate ``count`` houses."""
        for _ in range(count):
            yield self.generate()


class FlatGenerator(BaseGenerator):
    """Generate synthetic flats for a house."""

    MAX_ROOMS = 5
    PRICE_PER_ROOM = (1_500_000, 6_000_000)

    def generate(self, house_id: str, unit_number: int) -> Flat:
        """Generate a flat with a price scaled by its room count."""
        rooms = random.randint(1, self.MAX_ROOMS)
        low, high = self.PRICE_PER_ROOM
        price = rooms * random.randint(low, high) // 1000 * 1000
        return Flat(house_id=house_id, unit_number=unit_number, price=price, rooms=rooms)

    def generate_for_house(self, house_id: str, count: int, first_unit: int = 1) -> Iterator[Flat]:
        """Generate ``count`` flats with consecutive unit numbers."""
        for unit_number in range(first_unit, first_unit + count):
            yield self.generate(house_id, unit_number)
