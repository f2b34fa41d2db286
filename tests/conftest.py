"""
Pytest configuration and fixtures for tests.

This file is automatically loaded by pytest and provides shared fixtures
and configuration for all tests.
"""

import os
import sys
from decimal import Decimal

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

# Set required environment variables before importing app modules
os.environ.setdefault('RUNTIME_ENVIRONMENT', 'TEST')
os.environ.setdefault('DB_URL', 'sqlite+aiosqlite:///:memory:')
os.environ.setdefault('CURRENCY', 'USD')
os.environ.setdefault('PRICE_DECIMAL_PLACES', '2')
os.environ.setdefault('DUPLICATE_TIER_POLICY', 'REPLACE')

# Add parent directory to Python path so tests can import modules
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from models.addon import AddOnDefinitionDTO
from models.addon_set import AddOnSetDTO, AddOnSetItemDTO
from models.gang_run import GangRunConfigDTO
from models.paper_stock import ProductPaperStockDTO
from models.pricing_tier import PricingTierDTO
from models.product_config import ProductConfigDTO


# ============================================================================
# Database Fixtures
# ============================================================================

@pytest_asyncio.fixture
async def test_engine():
    """Create test database engine (in-memory SQLite shared by all sessions)."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool
    )

    # Import and create all tables
    from db import Base
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def test_session(test_engine):
    """Create test database session."""
    async_session_maker = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False
    )

    async with async_session_maker() as session:
        yield session
        await session.rollback()


# ============================================================================
# Product Fixtures
# ============================================================================

@pytest.fixture
def business_card_tiers():
    """Normalized tier table of a business card product."""
    return [
        PricingTierDTO(min_quantity=1, max_quantity=99, price_per_unit=Decimal("1.50")),
        PricingTierDTO(min_quantity=100, max_quantity=249, price_per_unit=Decimal("1.30"), discount_percentage=Decimal("5")),
        PricingTierDTO(min_quantity=250, max_quantity=499, price_per_unit=Decimal("1.20"), discount_percentage=Decimal("10")),
        PricingTierDTO(min_quantity=500, max_quantity=999, price_per_unit=Decimal("1.00"), discount_percentage=Decimal("15")),
        PricingTierDTO(min_quantity=1000, max_quantity=4999, price_per_unit=Decimal("0.90"), discount_percentage=Decimal("20")),
        PricingTierDTO(min_quantity=5000, max_quantity=None, price_per_unit=Decimal("0.80"), discount_percentage=Decimal("30")),
    ]


@pytest.fixture
def paper_stocks():
    return [
        ProductPaperStockDTO(paper_stock_id="14pt-gloss", name="14pt Gloss", is_default=True),
        ProductPaperStockDTO(paper_stock_id="16pt-matte", name="16pt Matte", additional_cost=Decimal("0.05")),
        ProductPaperStockDTO(paper_stock_id="32pt-suede", name="32pt Suede", multiplier=Decimal("1.5")),
    ]


@pytest.fixture
def catalog():
    """Add-on catalog keyed by id."""
    definitions = [
        AddOnDefinitionDTO(
            id="rounded-corners",
            name="Rounded Corners",
            addon_type="corner_rounding",
            configuration={"pricing_model": "FLAT", "price": "50.00"},
        ),
        AddOnDefinitionDTO(
            id="digital-proof",
            name="Digital Proof",
            configuration={"pricing_model": "FLAT", "price": "5.00"},
            mandatory=True,
        ),
        AddOnDefinitionDTO(
            id="uv-coating",
            name="UV Coating",
            configuration={"pricing_model": "PER_UNIT", "price_per_unit": "0.02"},
        ),
        AddOnDefinitionDTO(
            id="folding",
            name="Folding",
            addon_type="folding",
            configuration={
                "pricing_model": "CUSTOM",
                "input_type": "SELECT",
                "choices": [
                    {"value": "half", "label": "Half Fold", "additional_price": "10.00"},
                    {"value": "tri", "label": "Tri Fold", "additional_price": "15.00"},
                ],
                "price_per_piece": "0.01",
            },
        ),
        AddOnDefinitionDTO(
            id="banding",
            name="Banding",
            addon_type="banding",
            configuration={
                "pricing_model": "CUSTOM",
                "price_per_bundle": "2.00",
                "items_per_bundle": 100,
                "sub_fields": [
                    {"key": "items_per_bundle", "field_type": "NUMBER", "min_value": "1"},
                ],
            },
        ),
        AddOnDefinitionDTO(
            id="variable-data",
            name="Variable Data",
            addon_type="variable_data",
            configuration={
                "pricing_model": "CUSTOM",
                "setup_fee": "60.00",
                "price_per_piece": "0.10",
                "sub_fields": [
                    {"key": "locations", "field_type": "NUMBER", "required": True, "min_value": "1", "max_value": "4"},
                ],
            },
        ),
    ]
    return {definition.id: definition for definition in definitions}


@pytest.fixture
def default_addon_set():
    return AddOnSetDTO(
        id="bc-001-default",
        name="Business Card Options",
        items=[
            AddOnSetItemDTO(addon_id="digital-proof", display_position="ABOVE_DROPDOWN", is_default=True, sort_order=0),
            AddOnSetItemDTO(addon_id="rounded-corners", display_position="ABOVE_DROPDOWN", sort_order=1),
            AddOnSetItemDTO(addon_id="banding", display_position="ABOVE_DROPDOWN", sort_order=2),
            AddOnSetItemDTO(addon_id="variable-data", display_position="ABOVE_DROPDOWN", sort_order=3),
            AddOnSetItemDTO(addon_id="uv-coating", display_position="IN_DROPDOWN", sort_order=0),
            AddOnSetItemDTO(addon_id="folding", display_position="IN_DROPDOWN", sort_order=1),
        ]
    )


@pytest.fixture
def product_config(business_card_tiers, paper_stocks, default_addon_set):
    """Valid, publishable business card configuration."""
    return ProductConfigDTO(
        product_id="bc-001",
        name="Standard Business Cards",
        base_price=Decimal("29.99"),
        setup_fee=Decimal("0"),
        production_time=5,
        rush_available=True,
        rush_days=2,
        rush_fee=Decimal("25.00"),
        gang_run=GangRunConfigDTO(eligible=True, min_gang_quantity=100, max_gang_quantity=1000),
        pricing_tiers=business_card_tiers,
        paper_stocks=paper_stocks,
        default_addon_set=default_addon_set,
        quantities=[100, 250, 500, 1000],
        sizes=["3.5x2"],
    )
