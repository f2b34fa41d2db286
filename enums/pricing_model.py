from enum import Enum


class PricingModel(str, Enum):
    """How an add-on's cost is derived from the order."""

    FLAT = "FLAT"            # Charged once per order
    PER_UNIT = "PER_UNIT"    # Charged once per printed piece
    CUSTOM = "CUSTOM"        # Choices, setup fee, per-piece and per-bundle components
