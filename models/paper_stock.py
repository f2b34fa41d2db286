from decimal import Decimal

from pydantic import BaseModel, Field


class ProductPaperStockDTO(BaseModel):
    """
    Paper stock attached to a product.

    Both price mechanisms coexist: multiplier scales the tier's unit price,
    additional_cost is then added once per unit.
    """
    paper_stock_id: str
    name: str = ""
    is_default: bool = False
    additional_cost: Decimal = Field(default=Decimal("0"), ge=0)
    multiplier: Decimal = Field(default=Decimal("1"), gt=0)
