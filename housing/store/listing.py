"""Relational listings store with transactional check-then-act support."""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager, nullcontext
from datetime import datetime, timedelta

from sqlalchemy import create_engine, event, func, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from housing.config import StoreConfig
from housing.exceptions import (
    ConstraintViolationError,
    NotFoundError,
    SchemaError,
    StoreError,
)
from housing.logging import get_logger
from housing.models import Flat, FlatStatus, House
from housing.store.schema import Base, FlatRow, HouseRow, UserRow

logger = get_logger(__name__)

_MEMORY_URLS = {"sqlite://", "sqlite:///:memory:"}
_TICK = timedelta(microseconds=1)


def _wrap(op: str, exc: SQLAlchemyError) -> StoreError:
    """Translate a SQLAlchemy failure into a store error naming the primitive."""
    if isinstance(exc, IntegrityError):
        return ConstraintViolationError(f"{op}: {exc.orig}")
    return StoreError(f"{op}: {exc}")


def _house_from_row(row: HouseRow) -> House:
    return House(
        id=row.unique_id,
        address=row.address,
        year=row.year,
        developer=row.developer,
        created_at=row.created_at,
        updated_at=row.update_at,
    )


def _flat_from_row(row: FlatRow) -> Flat:
    return Flat(
        house_id=row.house_unique_id,
        unit_number=row.flat_id,
        price=row.price,
        rooms=row.rooms,
        status=FlatStatus(row.status),
    )


def _create_engine(url: str, echo: bool, timeout_seconds: float) -> Engine:
    """Create an engine; SQLite gets foreign keys and immediate write locks."""
    if not url.startswith("sqlite"):
        return create_engine(url, echo=echo, pool_pre_ping=True)

    connect_args = {"timeout": timeout_seconds, "check_same_thread": False}
    if url in _MEMORY_URLS:
        engine = create_engine(
            url, echo=echo, connect_args=connect_args, poolclass=StaticPool
        )
    else:
        engine = create_engine(url, echo=echo, connect_args=connect_args)

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragmas(dbapi_connection, connection_record):
        # pysqlite must not emit its own BEGIN; the "begin" hook does it.
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _begin_immediate(conn):
        # Take the write lock up front so check-then-act sequences serialize.
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    return engine


class StoreTransaction:
    """Store primitives bound to one open transaction.

    Obtained from ``ListingStore.transaction()``. Everything done through
    one instance commits or rolls back together.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    # Houses
    def find_house_by_natural_id(self, house_id: str) -> House | None:
        """Get a house by its caller-supplied id."""
        row = self._house_row("store.find_house_by_natural_id", house_id)
        return _house_from_row(row) if row is not None else None

    def find_house_by_row_id(self, row_id: int) -> House | None:
        """Get a house by its generated row id."""
        try:
            row = self.session.get(HouseRow, row_id)
        except SQLAlchemyError as exc:
            raise _wrap("store.find_house_by_row_id", exc) from exc
        return _house_from_row(row) if row is not None else None

    def insert_house(self, house: House) -> int:
        """Insert a house and return its generated row id."""
        row = HouseRow(
            unique_id=house.id,
            address=house.address,
            year=house.year,
            developer=house.developer,
            created_at=house.created_at or datetime.now(),
            update_at=house.updated_at,
        )
        try:
            self.session.add(row)
            self.session.flush()
        except SQLAlchemyError as exc:
            raise _wrap("store.insert_house", exc) from exc
        return row.id

    def touch_house_updated_at(self, house_id: str, now: datetime | None = None) -> datetime:
        """Set the house's updated_at to now and return the stored value.

        The new value is always strictly greater than the previous one, even
        when two touches land within the same clock tick.

        Raises
        ------
        NotFoundError
            If no house has ``house_id``.
        """
        op = "store.touch_house_updated_at"
        row = self._house_row(op, house_id)
        if row is None:
            raise NotFoundError(f"{op}: house {house_id!r} does not exist")

        stamp = now or datetime.now()
        if row.update_at is not None and stamp <= row.update_at:
            stamp = row.update_at + _TICK
        row.update_at = stamp
        try:
            self.session.flush()
        except SQLAlchemyError as exc:
            raise _wrap(op, exc) from exc
        return stamp

    # Flats
    def find_flat(self, house_id: str, unit_number: int) -> Flat | None:
        """Get a flat by house id and unit number."""
        row = self._flat_row("store.find_flat", house_id, unit_number)
        return _flat_from_row(row) if row is not None else None

    def insert_flat(self, flat: Flat) -> int:
        """Insert a flat as given and return its generated row id."""
        row = FlatRow(
            house_unique_id=flat.house_id,
            flat_id=flat.unit_number,
            price=flat.price,
            rooms=flat.rooms,
            status=FlatStatus(flat.status).value,
        )
        try:
            self.session.add(row)
            self.session.flush()
        except SQLAlchemyError as exc:
            raise _wrap("store.insert_flat", exc) from exc
        return row.id

    def update_flat_status(self, house_id: str, unit_number: int, status: FlatStatus) -> Flat:
        """Change a flat's status and return the row as stored.

        Raises
        ------
        NotFoundError
            If the flat does not exist.
        """
        op = "store.update_flat_status"
        row = self._flat_row(op, house_id, unit_number)
        if row is None:
            raise NotFoundError(
                f"{op}: flat {unit_number} does not exist in house {house_id!r}"
            )

        row.status = FlatStatus(status).value
        try:
            self.session.flush()
            self.session.refresh(row)
        except SQLAlchemyError as exc:
            raise _wrap(op, exc) from exc
        return _flat_from_row(row)

    def list_flats_by_house(self, house_id: str, approved_only: bool) -> list[Flat]:
        """Get flats of a house in insertion order."""
        stmt = select(FlatRow).where(FlatRow.house_unique_id == house_id)
        if approved_only:
            stmt = stmt.where(FlatRow.status == FlatStatus.APPROVED.value)
        stmt = stmt.order_by(FlatRow.id)
        try:
            rows = self.session.scalars(stmt).all()
        except SQLAlchemyError as exc:
            raise _wrap("store.list_flats_by_house", exc) from exc
        return [_flat_from_row(row) for row in rows]

    def summary(self) -> dict[str, int]:
        """Return row counts of all tables."""
        counts = {}
        try:
            for name, model in (("houses", HouseRow), ("flats", FlatRow), ("users", UserRow)):
                counts[name] = self.session.scalar(select(func.count()).select_from(model))
        except SQLAlchemyError as exc:
            raise _wrap("store.summary", exc) from exc
        return counts

    def _house_row(self, op: str, house_id: str) -> HouseRow | None:
        stmt = select(HouseRow).where(HouseRow.unique_id == house_id)
        try:
            return self.session.scalars(stmt).first()
        except SQLAlchemyError as exc:
            raise _wrap(op, exc) from exc

    def _flat_row(self, op: str, house_id: str, unit_number: int) -> FlatRow | None:
        stmt = select(FlatRow).where(
            FlatRow.house_unique_id == house_id,
            FlatRow.flat_id == unit_number,
        )
        try:
            return self.session.scalars(stmt).first()
        except SQLAlchemyError as exc:
            raise _wrap(op, exc) from exc


class ListingStore:
    """Durable store for houses and flats.

    One instance is shared by the whole process: it is created at startup,
    handed to the operations that need it, and closed at shutdown.

    Parameters
    ----------
    url : str
        SQLAlchemy URL, or a plain file path for a SQLite database.
    echo : bool
        Log every SQL statement.
    timeout_seconds : float
        How long a SQLite connection waits for a competing write lock.
    """

    def __init__(self, url: str, echo: bool = False, timeout_seconds: float = 5.0) -> None:
        if "://" not in url:
            url = f"sqlite:///{url}"
        self.engine = _create_engine(url, echo, timeout_seconds)
        self._session_factory = sessionmaker(
            bind=self.engine, autoflush=False, expire_on_commit=False
        )
        # In-memory databases live on a single shared connection, so only one
        # transaction may be open on it at a time.
        self._memory_lock = threading.Lock() if url in _MEMORY_URLS else None
        self._closed = False

    @classmethod
    def from_config(cls, config: StoreConfig) -> "ListingStore":
        """Create a store from configuration."""
        return cls(config.url, echo=config.echo, timeout_seconds=config.timeout_seconds)

    @property
    def closed(self) -> bool:
        return self._closed

    def init_schema(self) -> None:
        """Create all tables in one transaction if they do not exist yet.

        Raises
        ------
        SchemaError
            If any statement fails; nothing is left half-created.
        """
        if self._closed:
            raise SchemaError("store.init_schema: store is closed")
        try:
            with self._exclusive(), self.engine.begin() as conn:
                Base.metadata.create_all(conn)
        except SQLAlchemyError as exc:
            raise SchemaError(f"store.init_schema: {exc}") from exc
        logger.info("Schema ready at %s", self.engine.url.render_as_string(hide_password=True))

    @contextmanager
    def transaction(self) -> Iterator[StoreTransaction]:
        """Open one all-or-nothing unit of work.

        Commits when the block exits normally and rolls back on any
        exception. Database failures surface as ``StoreError``.
        """
        if self._closed:
            raise StoreError("store.transaction: store is closed")
        with self._exclusive():
            session = self._session_factory()
            try:
                with session.begin():
                    yield StoreTransaction(session)
            except SQLAlchemyError as exc:
                raise _wrap("store.transaction", exc) from exc
            finally:
                session.close()

    def _exclusive(self):
        if self._memory_lock is None:
            return nullcontext()
        return self._memory_lock

    # Single-primitive shortcuts, each in its own transaction
    def find_house_by_natural_id(self, house_id: str) -> House | None:
        with self.transaction() as tx:
            return tx.find_house_by_natural_id(house_id)

    def insert_house(self, house: House) -> int:
        with self.transaction() as tx:
            return tx.insert_house(house)

    def touch_house_updated_at(self, house_id: str, now: datetime | None = None) -> datetime:
        with self.transaction() as tx:
            return tx.touch_house_updated_at(house_id, now)

    def find_flat(self, house_id: str, unit_number: int) -> Flat | None:
        with self.transaction() as tx:
            return tx.find_flat(house_id, unit_number)

    def insert_flat(self, flat: Flat) -> int:
        with self.transaction() as tx:
            return tx.insert_flat(flat)

    def update_flat_status(self, house_id: str, unit_number: int, status: FlatStatus) -> Flat:
        with self.transaction() as tx:
            return tx.update_flat_status(house_id, unit_number, status)

    def list_flats_by_house(self, house_id: str, approved_only: bool) -> list[Flat]:
        with self.transaction() as tx:
            return tx.list_flats_by_house(house_id, approved_only)

    def summary(self) -> dict[str, int]:
        with self.transaction() as tx:
            return tx.summary()

    def close(self) -> None:
        """Release all pooled connections. Safe to call more than once."""
        if self._closed:
            return
        self.engine.dispose()
        self._closed = True
        logger.debug("Store closed")
