"""
Pricing tier exceptions.
"""

from .base import PricingEngineException


class TierException(PricingEngineException):
    """Base exception for tier table errors."""
    pass


class InvalidTierError(TierException):
    """Raised when a tier has malformed bounds or price, or cannot be placed in the table."""

    def __init__(self, field: str, value, reason: str):
        super().__init__(
            f"Invalid pricing tier {field}={value}: {reason}",
            details={'field': field, 'value': value, 'reason': reason}
        )
        self.field = field
        self.value = value
        self.reason = reason
