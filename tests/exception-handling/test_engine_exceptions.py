"""
Tests for the pricing engine exception hierarchy.
"""
import pytest

from enums.validation_error_kind import ValidationErrorKind
from exceptions import (
    PricingEngineException,
    TierException,
    InvalidTierError,
    PricingException,
    InvalidQuantityError,
    UnconfiguredOptionError,
    AddOnException,
    AddOnNotFoundException,
    InvalidSubFieldValueError,
    InvalidAddOnSetError,
    ConfigurationException,
    ValidationError,
    ProductConfigNotFoundException,
    ProductNotPublishedException,
    VersionConflict,
)
from models.validation import ValidationIssueDTO


class TestHierarchy:

    @pytest.mark.parametrize("exc,parent", [
        (InvalidTierError('min_quantity', -1, "must be >= 0"), TierException),
        (InvalidQuantityError(0), PricingException),
        (UnconfiguredOptionError('addon_id', "foil"), PricingException),
        (AddOnNotFoundException("foil"), AddOnException),
        (InvalidSubFieldValueError("banding", 'items_per_bundle', 0, "must be at least 1"), AddOnException),
        (InvalidAddOnSetError("set-1", 'addon_id', "foil", "add-on is not in this set"), AddOnException),
        (ValidationError("bc-001", []), ConfigurationException),
        (ProductConfigNotFoundException("bc-001"), ConfigurationException),
        (ProductNotPublishedException("bc-001"), ConfigurationException),
        (VersionConflict("bc-001", 1, 2), ConfigurationException),
    ])
    def test_parents(self, exc, parent):
        assert isinstance(exc, parent)
        assert isinstance(exc, PricingEngineException)

    def test_single_handler_catches_all(self):
        with pytest.raises(PricingEngineException):
            raise InvalidQuantityError(-3)


class TestDetails:

    def test_invalid_quantity(self):
        exc = InvalidQuantityError(0)

        assert exc.details == {'field': 'quantity', 'value': 0, 'reason': "quantity must be a positive integer"}
        assert "Invalid quantity 0" in str(exc)

    def test_unconfigured_option_with_product(self):
        exc = UnconfiguredOptionError('paper_stock_id', "kraft", "bc-001")

        assert str(exc) == "paper_stock_id 'kraft' is not configured for product bc-001"
        assert exc.details['field'] == 'paper_stock_id'
        assert exc.details['value'] == "kraft"

    def test_invalid_tier(self):
        exc = InvalidTierError('discount_percentage', 120, "must be between 0 and 100")
        assert exc.details == {'field': 'discount_percentage', 'value': 120, 'reason': "must be between 0 and 100"}

    def test_version_conflict(self):
        exc = VersionConflict("bc-001", 3, 4)

        assert exc.expected_version == 3
        assert exc.actual_version == 4
        assert "expected 3, found 4" in str(exc)

    def test_validation_error_carries_all_errors(self):
        errors = [
            ValidationIssueDTO(kind=ValidationErrorKind.MISSING_PAPER_STOCK, field='paper_stocks', value=0,
                               message="At least one paper stock must be attached"),
            ValidationIssueDTO(kind=ValidationErrorKind.NON_POSITIVE_BASE_PRICE, field='base_price', value="0",
                               message="Base price must be greater than 0"),
        ]

        exc = ValidationError("bc-001", errors)

        assert exc.errors == errors
        assert "2 validation error(s)" in str(exc)
        assert "MISSING_PAPER_STOCK" in str(exc)
        assert exc.details['errors'][1]['field'] == 'base_price'

    def test_repr_includes_details(self):
        assert repr(AddOnNotFoundException("foil")) == "AddOnNotFoundException('Add-on foil not found', addon_id=foil)"
