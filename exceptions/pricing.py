"""
Price resolution exceptions.
"""

from .base import PricingEngineException


class PricingException(PricingEngineException):
    """Base exception for price resolution errors."""
    pass


class InvalidQuantityError(PricingException):
    """Raised when the requested quantity is non-positive or cannot be priced."""

    def __init__(self, quantity, reason: str = "quantity must be a positive integer"):
        super().__init__(
            f"Invalid quantity {quantity}: {reason}",
            details={'field': 'quantity', 'value': quantity, 'reason': reason}
        )
        self.quantity = quantity
        self.reason = reason


class UnconfiguredOptionError(PricingException):
    """
    Raised when a selection references an option the product does not offer.

    Covers add-ons not attached to any of the product's sets, paper stocks not
    attached to the product, choice values outside an add-on's choices and rush
    requests on products without rush service.
    """

    def __init__(self, field: str, value, product_id: str | None = None):
        if product_id:
            message = f"{field} '{value}' is not configured for product {product_id}"
        else:
            message = f"{field} '{value}' is not configured"
        super().__init__(
            message,
            details={'field': field, 'value': value, 'product_id': product_id}
        )
        self.field = field
        self.value = value
        self.product_id = product_id
