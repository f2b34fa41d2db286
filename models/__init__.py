"""
Models Package

This file ensures all SQLAlchemy models are imported and registered on
Base.metadata, which create_db_and_tables() relies on.
"""

from models.base import Base
from models.addon import AddOn
from models.product_config import ProductConfig

__all__ = [
    'Base',
    'AddOn',
    'ProductConfig',
]
