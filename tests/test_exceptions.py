"""Tests for custom exception hierarchy."""

from housing.exceptions import (
    ConfigurationError,
    ConflictError,
    ConstraintViolationError,
    ForbiddenError,
    InvalidPayloadError,
    ListingsError,
    NotFoundError,
    PartialSuccessError,
    ReferentialIntegrityError,
    SchemaError,
    StoreError,
)
from housing.models import Flat


class TestExceptionHierarchy:
    """Test exception inheritance chain."""

    def test_listings_error_is_exception(self) -> None:
        assert isinstance(ListingsError("test"), Exception)

    def test_caller_errors_are_listings_errors(self) -> None:
        for cls in (ForbiddenError, NotFoundError, ConflictError, InvalidPayloadError):
            assert isinstance(cls("test"), ListingsError)

    def test_referential_integrity_is_not_found(self) -> None:
        err = ReferentialIntegrityError("test")
        assert isinstance(err, NotFoundError)
        assert isinstance(err, ListingsError)

    def test_store_family(self) -> None:
        assert isinstance(ConstraintViolationError("test"), StoreError)
        assert isinstance(SchemaError("test"), StoreError)
        assert isinstance(StoreError("test"), ListingsError)

    def test_configuration_error_is_listings_error(self) -> None:
        assert isinstance(ConfigurationError("test"), ListingsError)

    def test_conflict_is_not_store_error(self) -> None:
        assert not isinstance(ConflictError("test"), StoreError)

    def test_exception_message(self) -> None:
        err = ReferentialIntegrityError("house does not exist: 'H1'")
        assert str(err) == "house does not exist: 'H1'"


class TestPartialSuccessError:
    """Tests for PartialSuccessError payload."""

    def test_carries_flat_and_cause(self) -> None:
        flat = Flat(house_id="H1", unit_number=1, price=1, rooms=1)
        cause = NotFoundError("house vanished")

        err = PartialSuccessError("flat created", flat=flat, cause=cause)

        assert err.flat is flat
        assert err.cause is cause
        assert str(err) == "flat created"
        assert not isinstance(err, StoreError)

    def test_cause_optional(self) -> None:
        flat = Flat(house_id="H1", unit_number=1, price=1, rooms=1)

        assert PartialSuccessError("flat created", flat=flat).cause is None
