"""Synthetic data generators for seeding listing stores."""

from housing.generators.listing import FlatGenerator, HouseGenerator

__all__ = ["FlatGenerator", "HouseGenerator"]
