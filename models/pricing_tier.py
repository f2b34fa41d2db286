from decimal import Decimal

from pydantic import BaseModel


class PricingTierDTO(BaseModel):
    """
    Quantity band with its per-unit price.

    Example table: 1-99: $1.50, 100-249: $1.30 (5%), 5000+: $0.80 (30%)

    price_per_unit is the literal sale price for the band. discount_percentage
    only describes that price for display and is never applied on top of it.
    Bounds are checked by TierTableService, not here, so a malformed tier
    reaches the normalizer and is rejected there with InvalidTierError.
    """
    min_quantity: int
    max_quantity: int | None = None  # None = unbounded
    price_per_unit: Decimal
    discount_percentage: Decimal = Decimal("0")

    def contains(self, quantity: int) -> bool:
        if quantity < self.min_quantity:
            return False
        return self.max_quantity is None or quantity <= self.max_quantity

    @property
    def range_label(self) -> str:
        if self.max_quantity is None:
            return f"{self.min_quantity}+"
        return f"{self.min_quantity}-{self.max_quantity}"
