"""Domain models for housing listings."""

from housing.models.enums import FlatStatus, Role
from housing.models.listing import Flat, House

__all__ = ["Flat", "FlatStatus", "House", "Role"]
