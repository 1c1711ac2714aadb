"""Storage and consistency core for housing listings."""

from housing.models import Flat, FlatStatus, House, Role
from housing.service import ListingService
from housing.store import ListingStore

__version__ = "0.1.0"

__all__ = [
    "Flat",
    "FlatStatus",
    "House",
    "ListingService",
    "ListingStore",
    "Role",
    "__version__",
]
