"""
Product configuration exceptions.
"""

from .base import PricingEngineException


class ConfigurationException(PricingEngineException):
    """Base exception for product configuration errors."""
    pass


class ValidationError(ConfigurationException):
    """
    Raised when a product configuration fails structural validation.

    Always carries the complete list of violations, never only the first one.
    """

    def __init__(self, product_id: str, errors: list):
        kinds = ', '.join(str(error.kind.value) for error in errors)
        super().__init__(
            f"Product {product_id} configuration has {len(errors)} validation error(s): {kinds}",
            details={'product_id': product_id, 'errors': [error.model_dump(mode='json') for error in errors]}
        )
        self.product_id = product_id
        self.errors = errors


class ProductConfigNotFoundException(ConfigurationException):
    """Raised when no configuration is stored for a product."""

    def __init__(self, product_id: str):
        super().__init__(
            f"Configuration for product {product_id} not found",
            details={'product_id': product_id}
        )
        self.product_id = product_id


class ProductNotPublishedException(ConfigurationException):
    """Raised when a storefront price is requested for an unpublished configuration."""

    def __init__(self, product_id: str):
        super().__init__(
            f"Product {product_id} is not published",
            details={'product_id': product_id}
        )
        self.product_id = product_id


class VersionConflict(ConfigurationException):
    """
    Raised when a save races with another writer of the same product.

    The only retryable engine error: reload, reapply the edit, save again.
    """

    def __init__(self, product_id: str, expected_version: int, actual_version: int | None):
        super().__init__(
            f"Version conflict for product {product_id}: expected {expected_version}, found {actual_version}",
            details={'product_id': product_id, 'expected_version': expected_version, 'actual_version': actual_version}
        )
        self.product_id = product_id
        self.expected_version = expected_version
        self.actual_version = actual_version
