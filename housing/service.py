"""Listing operations: role-gated, invariant-preserving use of the store."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import replace
from datetime import datetime

from housing.exceptions import (
    ConflictError,
    ConstraintViolationError,
    ForbiddenError,
    InvalidPayloadError,
    ListingsError,
    NotFoundError,
    PartialSuccessError,
    ReferentialIntegrityError,
)
from housing.logging import get_logger
from housing.models import Flat, FlatStatus, House, Role
from housing.store import ListingStore

logger = get_logger(__name__)


def _require_moderator(role: Role, action: str) -> None:
    if role != Role.MODERATOR:
        logger.warning("Rejected %s for role %s", action, getattr(role, "value", role))
        raise ForbiddenError(f"{action} requires the moderator role")


def _require_int(name: str, value: object, minimum: int | None = None) -> None:
    # bool is an int subclass but never a valid count or price
    if not isinstance(value, int) or isinstance(value, bool):
        raise InvalidPayloadError(f"{name} must be an integer, got {value!r}")
    if minimum is not None and value < minimum:
        raise InvalidPayloadError(f"{name} must be >= {minimum}, got {value}")


def _require_text(name: str, value: object) -> None:
    if not isinstance(value, str) or not value.strip():
        raise InvalidPayloadError(f"{name} must be a non-empty string")


def validate_house(house: House) -> None:
    """Raise InvalidPayloadError if the house cannot be stored."""
    _require_text("id", house.id)
    _require_text("address", house.address)
    _require_int("year", house.year)
    if house.developer is not None and not isinstance(house.developer, str):
        raise InvalidPayloadError("developer must be a string")


def validate_flat(flat: Flat) -> None:
    """Raise InvalidPayloadError if the flat cannot be stored."""
    _require_text("house_id", flat.house_id)
    _require_int("unit_number", flat.unit_number)
    _require_int("price", flat.price, minimum=0)
    _require_int("rooms", flat.rooms, minimum=1)


class ListingService:
    """Create, update and query houses and flats.

    Every check-then-act sequence runs inside one store transaction, so two
    callers racing on the same key cannot both pass the existence check.

    Parameters
    ----------
    store : ListingStore
        Shared store handle.
    clock : Callable[[], datetime]
        Source of creation timestamps.
    """

    def __init__(
        self,
        store: ListingStore,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.store = store
        self.clock = clock

    def create_house(self, house: House, role: Role) -> House:
        """Create a house and return it as stored.

        Raises
        ------
        ForbiddenError
            If ``role`` is not moderator.
        ConflictError
            If a house with the same id exists.
        """
        _require_moderator(role, "create house")
        validate_house(house)

        to_insert = replace(house, created_at=self.clock(), updated_at=None)
        try:
            with self.store.transaction() as tx:
                if tx.find_house_by_natural_id(house.id) is not None:
                    raise ConflictError(f"house already exists: {house.id!r}")
                row_id = tx.insert_house(to_insert)
                created = tx.find_house_by_row_id(row_id)
        except ConstraintViolationError as exc:
            raise ConflictError(f"house already exists: {house.id!r}") from exc

        if created is None:
            raise NotFoundError(f"house {house.id!r} vanished after insert")
        logger.info(
            "Created house %s", created.id, extra={"extra": {"house_id": created.id}}
        )
        return created

    def create_flat(self, flat: Flat) -> Flat:
        """Create a flat with status ``created`` and bump its house timestamp.

        Open to every role.

        Raises
        ------
        ReferentialIntegrityError
            If the house does not exist.
        ConflictError
            If the house already has a flat with this unit number.
        PartialSuccessError
            If the flat was stored but the house timestamp was not bumped.
        """
        validate_flat(flat)

        to_insert = replace(flat, status=FlatStatus.CREATED)
        try:
            with self.store.transaction() as tx:
                if tx.find_house_by_natural_id(flat.house_id) is None:
                    raise ReferentialIntegrityError(
                        f"house does not exist: {flat.house_id!r}"
                    )
                if tx.find_flat(flat.house_id, flat.unit_number) is not None:
                    raise ConflictError(
                        f"flat already exists: {flat.unit_number} in house {flat.house_id!r}"
                    )
                tx.insert_flat(to_insert)
                created = tx.find_flat(flat.house_id, flat.unit_number)
        except ConstraintViolationError as exc:
            raise ConflictError(
                f"flat already exists: {flat.unit_number} in house {flat.house_id!r}"
            ) from exc

        if created is None:
            raise NotFoundError(f"flat {flat.unit_number} vanished after insert")
        logger.info(
            "Created flat %s in house %s",
            created.unit_number,
            created.house_id,
            extra={"extra": {"house_id": created.house_id, "unit_number": created.unit_number}},
        )

        try:
            self.store.touch_house_updated_at(flat.house_id, now=self.clock())
        except ListingsError as exc:
            logger.error(
                "Flat %s stored but house %s timestamp not updated: %s",
                created.unit_number,
                created.house_id,
                exc,
            )
            raise PartialSuccessError(
                f"flat created but house {flat.house_id!r} timestamp not updated",
                flat=created,
                cause=exc,
            ) from exc
        return created

    def touch_house(self, house_id: str) -> House:
        """Bump a house's updated_at; the retry path after PartialSuccessError."""
        with self.store.transaction() as tx:
            tx.touch_house_updated_at(house_id, now=self.clock())
            house = tx.find_house_by_natural_id(house_id)
        logger.info("Touched house %s", house_id)
        return house

    def update_flat(self, flat: Flat, role: Role) -> Flat:
        """Set a flat's status and return the flat as stored.

        Only ``status`` is applied; price and rooms in the payload are
        ignored. Any status may follow any other.

        Raises
        ------
        ForbiddenError
            If ``role`` is not moderator.
        NotFoundError
            If the flat does not exist.
        """
        _require_moderator(role, "update flat")
        try:
            status = FlatStatus(flat.status)
        except ValueError as exc:
            raise InvalidPayloadError(f"unknown flat status {flat.status!r}") from exc

        with self.store.transaction() as tx:
            updated = tx.update_flat_status(flat.house_id, flat.unit_number, status)
        logger.info(
            "Flat %s in house %s is now %s",
            updated.unit_number,
            updated.house_id,
            updated.status.value,
            extra={
                "extra": {
                    "house_id": updated.house_id,
                    "unit_number": updated.unit_number,
                    "status": updated.status.value,
                }
            },
        )
        return updated

    def list_flats_by_house(self, house_id: str, role: Role) -> list[Flat]:
        """Get the flats of a house visible to ``role``.

        Moderators see every flat; clients only approved ones.
        """
        approved_only = role != Role.MODERATOR
        with self.store.transaction() as tx:
            flats = tx.list_flats_by_house(house_id, approved_only=approved_only)
        logger.debug(
            "Listed %d flats of house %s (approved_only=%s)",
            len(flats),
            house_id,
            approved_only,
        )
        return flats
