"""
Add-on related exceptions.
"""

from .base import PricingEngineException


class AddOnException(PricingEngineException):
    """Base exception for add-on errors."""
    pass


class AddOnNotFoundException(AddOnException):
    """Raised when an add-on definition is not in the catalog."""

    def __init__(self, addon_id: str):
        super().__init__(
            f"Add-on {addon_id} not found",
            details={'addon_id': addon_id}
        )
        self.addon_id = addon_id


class InvalidSubFieldValueError(AddOnException):
    """Raised when a customer-supplied sub-field value fails its field definition."""

    def __init__(self, addon_id: str, field: str, value, reason: str):
        super().__init__(
            f"Invalid value {value!r} for field '{field}' of add-on {addon_id}: {reason}",
            details={'addon_id': addon_id, 'field': field, 'value': value, 'reason': reason}
        )
        self.addon_id = addon_id
        self.field = field
        self.value = value
        self.reason = reason


class InvalidAddOnSetError(AddOnException):
    """Raised when an add-on set edit references a missing item or index."""

    def __init__(self, set_id: str | None, field: str, value, reason: str):
        super().__init__(
            f"Invalid add-on set edit ({field}={value}): {reason}",
            details={'set_id': set_id, 'field': field, 'value': value, 'reason': reason}
        )
        self.set_id = set_id
        self.field = field
        self.value = value
        self.reason = reason
