"""
Product Configuration Validation

Runs the structural checks a draft product configuration must pass before it
can be published. Every check runs independently and all violations are
reported together.
"""

import logging

from enums.validation_error_kind import ValidationErrorKind
from exceptions.configuration import ValidationError
from models.product_config import ProductConfigDTO
from models.validation import ValidationIssueDTO, ValidationResultDTO
from services.addon_set import AddOnSetService
from services.tier_table import TierTableService
from utils.money import ZERO

logger = logging.getLogger(__name__)


class ProductValidationService:
    """Publication gate for product configurations."""

    @staticmethod
    def validate(config: ProductConfigDTO) -> ValidationResultDTO:
        """
        Validate a product configuration.

        Checks:
        - At least one paper stock, exactly one of them default
        - Quantity selection (group or at least one quantity)
        - Size selection (group or at least one size)
        - Rush: rush_days below production_time, rush_fee not negative
        - Gang run: min_gang_quantity >= 1, max_gang_quantity > min_gang_quantity
        - base_price > 0
        - Tier table normalized
        - Add-on sets: unique sort order per placement, no repeated add-on

        Returns:
            ValidationResultDTO with ok=True and no errors, or ok=False and every violation
        """
        errors = []
        errors.extend(ProductValidationService._check_paper_stocks(config))
        errors.extend(ProductValidationService._check_selections(config))
        errors.extend(ProductValidationService._check_rush(config))
        errors.extend(ProductValidationService._check_gang_run(config))
        errors.extend(ProductValidationService._check_base_price(config))
        errors.extend(ProductValidationService._check_tiers(config))
        errors.extend(ProductValidationService._check_addon_sets(config))

        if errors:
            logger.info(f"Product {config.product_id} failed validation with {len(errors)} error(s)")

        return ValidationResultDTO(ok=not errors, errors=errors)

    @staticmethod
    def validate_or_raise(config: ProductConfigDTO) -> None:
        """
        Raises:
            ValidationError: Carrying the complete list of violations
        """
        result = ProductValidationService.validate(config)
        if not result.ok:
            raise ValidationError(config.product_id, result.errors)

    @staticmethod
    def _check_paper_stocks(config: ProductConfigDTO) -> list[ValidationIssueDTO]:
        if not config.paper_stocks:
            return [ValidationIssueDTO(
                kind=ValidationErrorKind.MISSING_PAPER_STOCK,
                field='paper_stocks',
                value=0,
                message="At least one paper stock must be attached"
            )]

        default_count = sum(1 for stock in config.paper_stocks if stock.is_default)
        if default_count != 1:
            return [ValidationIssueDTO(
                kind=ValidationErrorKind.DEFAULT_PAPER_STOCK_COUNT,
                field='paper_stocks.is_default',
                value=default_count,
                message=f"Exactly one paper stock must be default, found {default_count}"
            )]

        return []

    @staticmethod
    def _check_selections(config: ProductConfigDTO) -> list[ValidationIssueDTO]:
        errors = []
        if not config.quantity_group_id and not config.quantities:
            errors.append(ValidationIssueDTO(
                kind=ValidationErrorKind.MISSING_QUANTITY_SELECTION,
                field='quantities',
                value=None,
                message="A quantity group or at least one quantity is required"
            ))
        if not config.size_group_id and not config.sizes:
            errors.append(ValidationIssueDTO(
                kind=ValidationErrorKind.MISSING_SIZE_SELECTION,
                field='sizes',
                value=None,
                message="A size group or at least one size is required"
            ))
        return errors

    @staticmethod
    def _check_rush(config: ProductConfigDTO) -> list[ValidationIssueDTO]:
        if not config.rush_available:
            return []

        errors = []
        if config.rush_days is None or config.rush_days >= config.production_time:
            errors.append(ValidationIssueDTO(
                kind=ValidationErrorKind.RUSH_DAYS_NOT_BELOW_PRODUCTION_TIME,
                field='rush_days',
                value=config.rush_days,
                message=f"Rush days must be less than production time ({config.production_time})"
            ))
        if config.rush_fee < ZERO:
            errors.append(ValidationIssueDTO(
                kind=ValidationErrorKind.NEGATIVE_RUSH_FEE,
                field='rush_fee',
                value=str(config.rush_fee),
                message="Rush fee cannot be negative"
            ))
        return errors

    @staticmethod
    def _check_gang_run(config: ProductConfigDTO) -> list[ValidationIssueDTO]:
        gang_run = config.gang_run
        if not gang_run.eligible:
            return []

        errors = []
        if gang_run.min_gang_quantity is None or gang_run.min_gang_quantity < 1:
            errors.append(ValidationIssueDTO(
                kind=ValidationErrorKind.GANG_RUN_MIN_QUANTITY,
                field='gang_run.min_gang_quantity',
                value=gang_run.min_gang_quantity,
                message="Minimum gang quantity must be at least 1"
            ))
        if (gang_run.max_gang_quantity is None
                or gang_run.min_gang_quantity is None
                or gang_run.max_gang_quantity <= gang_run.min_gang_quantity):
            errors.append(ValidationIssueDTO(
                kind=ValidationErrorKind.GANG_RUN_RANGE,
                field='gang_run.max_gang_quantity',
                value=gang_run.max_gang_quantity,
                message="Maximum gang quantity must be greater than the minimum"
            ))
        return errors

    @staticmethod
    def _check_base_price(config: ProductConfigDTO) -> list[ValidationIssueDTO]:
        if config.base_price > ZERO:
            return []
        return [ValidationIssueDTO(
            kind=ValidationErrorKind.NON_POSITIVE_BASE_PRICE,
            field='base_price',
            value=str(config.base_price),
            message="Base price must be greater than 0"
        )]

    @staticmethod
    def _check_tiers(config: ProductConfigDTO) -> list[ValidationIssueDTO]:
        problem = TierTableService.find_coverage_problem(config.pricing_tiers)
        if problem is None:
            return []
        return [ValidationIssueDTO(
            kind=ValidationErrorKind.TIER_TABLE_NOT_NORMALIZED,
            field='pricing_tiers',
            value=len(config.pricing_tiers),
            message=problem
        )]

    @staticmethod
    def _check_addon_sets(config: ProductConfigDTO) -> list[ValidationIssueDTO]:
        errors = []
        for addon_set in config.addon_sets:
            for position, sort_order in AddOnSetService.find_sort_order_conflicts(addon_set):
                errors.append(ValidationIssueDTO(
                    kind=ValidationErrorKind.DUPLICATE_ADDON_SORT_ORDER,
                    field=f"addon_sets.{addon_set.id}.sort_order",
                    value=sort_order,
                    message=f"Sort order {sort_order} is used twice in {position.value} of set '{addon_set.name or addon_set.id}'"
                ))

            addon_ids = addon_set.addon_ids
            for addon_id in sorted({a for a in addon_ids if addon_ids.count(a) > 1}):
                errors.append(ValidationIssueDTO(
                    kind=ValidationErrorKind.DUPLICATE_ADDON_IN_SET,
                    field=f"addon_sets.{addon_set.id}.items",
                    value=addon_id,
                    message=f"Add-on {addon_id} appears more than once in set '{addon_set.name or addon_set.id}'"
                ))
        return errors
