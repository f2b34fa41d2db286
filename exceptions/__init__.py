"""
Custom exceptions for the pricing engine.

This module provides a hierarchy of custom exceptions for consistent error handling
throughout the engine.

Exception Hierarchy:
--------------------
PricingEngineException (base)
├── TierException
│   └── InvalidTierError
├── PricingException
│   ├── InvalidQuantityError
│   └── UnconfiguredOptionError
├── AddOnException
│   ├── AddOnNotFoundException
│   ├── InvalidSubFieldValueError
│   └── InvalidAddOnSetError
└── ConfigurationException
    ├── ValidationError
    ├── ProductConfigNotFoundException
    ├── ProductNotPublishedException
    └── VersionConflict

Usage:
------
Services raise specific exceptions:
    raise InvalidQuantityError(quantity=0)

Callers catch and render a precise message from the details:
    try:
        breakdown = PricingService.resolve_price(config, selection, add_ons)
    except UnconfiguredOptionError as e:
        return {"error": str(e), "field": e.field}
"""

from .base import PricingEngineException
from .tier import TierException, InvalidTierError
from .pricing import PricingException, InvalidQuantityError, UnconfiguredOptionError
from .addon import AddOnException, AddOnNotFoundException, InvalidSubFieldValueError, InvalidAddOnSetError
from .configuration import (
    ConfigurationException,
    ValidationError,
    ProductConfigNotFoundException,
    ProductNotPublishedException,
    VersionConflict
)

__all__ = [
    # Base
    'PricingEngineException',

    # Tier
    'TierException',
    'InvalidTierError',

    # Pricing
    'PricingException',
    'InvalidQuantityError',
    'UnconfiguredOptionError',

    # Add-on
    'AddOnException',
    'AddOnNotFoundException',
    'InvalidSubFieldValueError',
    'InvalidAddOnSetError',

    # Configuration
    'ConfigurationException',
    'ValidationError',
    'ProductConfigNotFoundException',
    'ProductNotPublishedException',
    'VersionConflict',
]
