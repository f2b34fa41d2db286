from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field
from sqlalchemy import Column, Integer, String, Boolean, DateTime, JSON, CheckConstraint

from models.base import Base
from models.addon_set import AddOnSetDTO
from models.gang_run import GangRunConfigDTO
from models.paper_stock import ProductPaperStockDTO
from models.pricing_tier import PricingTierDTO


class ProductConfig(Base):
    """
    Sellable configuration of one product.

    The whole configuration (tiers, paper stocks, add-on set references, rush
    and gang-run settings) is stored as one JSON payload, so a save either
    replaces all of it or none of it. version implements optimistic locking:
    every save must name the version it was loaded at.
    """
    __tablename__ = 'product_configs'

    product_id = Column(String, primary_key=True)
    version = Column(Integer, nullable=False, default=1)
    is_published = Column(Boolean, nullable=False, default=False)
    payload = Column(JSON, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        CheckConstraint('version > 0', name='check_product_config_version_positive'),
    )


class ProductConfigDTO(BaseModel):
    """
    Immutable-by-convention snapshot of a product configuration.

    Services never mutate a snapshot; edits return a new one via model_copy().
    Each product carries its own tier table and add-on set references.
    """
    product_id: str
    name: str = ""
    base_price: Decimal = Decimal("0")
    setup_fee: Decimal = Decimal("0")
    production_time: int = 0  # Business days
    rush_available: bool = False
    rush_days: int | None = None
    rush_fee: Decimal = Decimal("0")
    gang_run: GangRunConfigDTO = Field(default_factory=GangRunConfigDTO)
    pricing_tiers: list[PricingTierDTO] = []
    paper_stocks: list[ProductPaperStockDTO] = []
    default_addon_set: AddOnSetDTO | None = None
    extra_addon_sets: list[AddOnSetDTO] = []
    quantity_group_id: str | None = None
    quantities: list[int] = []
    size_group_id: str | None = None
    sizes: list[str] = []
    is_published: bool = False
    version: int = 0  # 0 = never saved

    @property
    def addon_sets(self) -> list[AddOnSetDTO]:
        """Default set first, then the extra sets in their stored order."""
        sets = [self.default_addon_set] if self.default_addon_set else []
        return sets + list(self.extra_addon_sets)

    @property
    def attached_addon_ids(self) -> set[str]:
        return {addon_id for addon_set in self.addon_sets for addon_id in addon_set.addon_ids}

    @property
    def default_paper_stock(self) -> ProductPaperStockDTO | None:
        for stock in self.paper_stocks:
            if stock.is_default:
                return stock
        return None

    def get_paper_stock(self, paper_stock_id: str) -> ProductPaperStockDTO | None:
        for stock in self.paper_stocks:
            if stock.paper_stock_id == paper_stock_id:
                return stock
        return None
