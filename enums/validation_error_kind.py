from enum import Enum


class ValidationErrorKind(str, Enum):
    """Structural problems that block a product configuration from being published."""

    MISSING_PAPER_STOCK = "MISSING_PAPER_STOCK"
    DEFAULT_PAPER_STOCK_COUNT = "DEFAULT_PAPER_STOCK_COUNT"
    MISSING_QUANTITY_SELECTION = "MISSING_QUANTITY_SELECTION"
    MISSING_SIZE_SELECTION = "MISSING_SIZE_SELECTION"
    RUSH_DAYS_NOT_BELOW_PRODUCTION_TIME = "RUSH_DAYS_NOT_BELOW_PRODUCTION_TIME"
    NEGATIVE_RUSH_FEE = "NEGATIVE_RUSH_FEE"
    GANG_RUN_MIN_QUANTITY = "GANG_RUN_MIN_QUANTITY"
    GANG_RUN_RANGE = "GANG_RUN_RANGE"
    NON_POSITIVE_BASE_PRICE = "NON_POSITIVE_BASE_PRICE"
    TIER_TABLE_NOT_NORMALIZED = "TIER_TABLE_NOT_NORMALIZED"
    DUPLICATE_ADDON_SORT_ORDER = "DUPLICATE_ADDON_SORT_ORDER"
    DUPLICATE_ADDON_IN_SET = "DUPLICATE_ADDON_IN_SET"
