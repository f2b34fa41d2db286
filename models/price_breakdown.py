from decimal import Decimal
from typing import Any

from pydantic import BaseModel, field_validator

from models.pricing_tier import PricingTierDTO


class AddOnSelectionDTO(BaseModel):
    """
    Customer's choice for one add-on.

    value is True for a ticked checkbox or the chosen value of a SELECT/RADIO
    add-on; fields holds the conditional sub-field answers.
    """
    value: bool | str = True
    fields: dict[str, Any] = {}


class PriceSelectionDTO(BaseModel):
    """Live storefront selection handed over by the checkout caller."""
    product_id: str
    quantity: int
    paper_stock_id: str | None = None  # None = product's default stock
    selected_add_ons: dict[str, AddOnSelectionDTO] = {}
    rush_requested: bool = False

    @field_validator('selected_add_ons', mode='before')
    @classmethod
    def normalize_selected_add_ons(cls, v):
        """
        Accept shorthand values: True/"value"/{"value": ..., "fields": ...}.

        Unticked entries (False/None) are dropped.
        """
        if not isinstance(v, dict):
            return v
        result = {}
        for addon_id, selection in v.items():
            if selection is None or selection is False:
                continue
            if isinstance(selection, (bool, str)):
                result[addon_id] = {"value": selection}
            else:
                result[addon_id] = selection
        return result


class AddOnLineDTO(BaseModel):
    """Single add-on in a breakdown (e.g. "Perforation: $30.00")."""
    addon_id: str
    name: str
    cost: Decimal
    formula: str
    additional_turnaround_days: int = 0


class PriceBreakdownDTO(BaseModel):
    """
    Itemized price for one pricing request.

    discount_percentage is informational; it is already part of unit_price.
    unit_price is not rounded, so sub-cent tier prices multiply out exactly.
    additional_turnaround_days sums the extra production days of the priced add-ons.
    """
    quantity: int
    unit_price: Decimal
    subtotal: Decimal
    options_total: Decimal
    setup_fee: Decimal
    rush_fee: Decimal
    discount_percentage: Decimal
    total: Decimal
    tier: PricingTierDTO | None = None  # None = flat base price fallback
    paper_stock_id: str | None = None
    add_on_lines: list[AddOnLineDTO] = []
    additional_turnaround_days: int = 0


class QuoteResultDTO(BaseModel):
    """Checkout answer: the price plus whether the quantity may join a gang run."""
    breakdown: PriceBreakdownDTO
    gang_run_allowed: bool
