"""
Tier Table Service

Keeps a product's quantity tiers sorted, gap-free and non-overlapping while an
administrator inserts and removes tiers.
"""

import logging

import config
from enums.duplicate_tier_policy import DuplicateTierPolicy
from exceptions.tier import InvalidTierError
from models.pricing_tier import PricingTierDTO
from utils.money import HUNDRED, ZERO, format_money

logger = logging.getLogger(__name__)


class TierTableService:
    """Service for maintaining quantity tier tables."""

    @staticmethod
    def check_tier(tier: PricingTierDTO) -> None:
        """
        Reject a tier with malformed bounds or price.

        Raises:
            InvalidTierError: min_quantity < 0, price_per_unit < 0 or
                discount_percentage outside [0, 100]
        """
        if tier.min_quantity < 0:
            raise InvalidTierError('min_quantity', tier.min_quantity, "must be >= 0")
        if tier.price_per_unit < ZERO:
            raise InvalidTierError('price_per_unit', tier.price_per_unit, "must be >= 0")
        if tier.discount_percentage < ZERO or tier.discount_percentage > HUNDRED:
            raise InvalidTierError('discount_percentage', tier.discount_percentage, "must be between 0 and 100")

    @staticmethod
    def normalize(tiers: list[PricingTierDTO]) -> list[PricingTierDTO]:
        """
        Sort tiers and recompute their upper bounds.

        Algorithm:
        1. Sort by min_quantity ascending (stable, so insertion order breaks ties)
        2. Keep only the last tier given for a repeated min_quantity
        3. Every tier except the last ends one below the next tier's min_quantity
        4. The last tier is unbounded (max_quantity=None)

        Normalizing an already normalized table returns an equal table.
        The input list and its tiers are left untouched.

        Example:
            [500+, 1-99, 100+] → [1-99, 100-499, 500+]

        Raises:
            InvalidTierError: If any tier fails check_tier()
        """
        for tier in tiers:
            TierTableService.check_tier(tier)

        latest_by_min = {}
        for tier in tiers:
            latest_by_min[tier.min_quantity] = tier
        sorted_tiers = sorted(latest_by_min.values(), key=lambda t: t.min_quantity)

        normalized = []
        for i, tier in enumerate(sorted_tiers):
            if i < len(sorted_tiers) - 1:
                max_quantity = sorted_tiers[i + 1].min_quantity - 1
            else:
                max_quantity = None
            normalized.append(tier.model_copy(update={'max_quantity': max_quantity}))

        return normalized

    @staticmethod
    def insert_tier(
        tiers: list[PricingTierDTO],
        new_tier: PricingTierDTO,
        duplicate_policy: DuplicateTierPolicy | None = None
    ) -> list[PricingTierDTO]:
        """
        Insert a tier and return the re-bounded table.

        Example:
            [1-99, 100-249, 250+] + {min: 500, price: 1.00}
            → [1-99, 100-249, 250-499, 500+]

        Args:
            tiers: Current tier table
            new_tier: Tier to insert; its max_quantity is recomputed
            duplicate_policy: Behaviour when new_tier.min_quantity is already used,
                defaults to config.DUPLICATE_TIER_POLICY

        Returns:
            New normalized tier table

        Raises:
            InvalidTierError: If new_tier is malformed, or duplicates a boundary
                under DuplicateTierPolicy.REJECT
        """
        TierTableService.check_tier(new_tier)
        policy = duplicate_policy or config.DUPLICATE_TIER_POLICY

        duplicate = any(t.min_quantity == new_tier.min_quantity for t in tiers)
        if duplicate:
            if policy == DuplicateTierPolicy.REJECT:
                raise InvalidTierError(
                    'min_quantity', new_tier.min_quantity, "a tier already starts at this quantity"
                )
            logger.info(f"Replacing pricing tier starting at {new_tier.min_quantity}")

        remaining = [t for t in tiers if t.min_quantity != new_tier.min_quantity]
        return TierTableService.normalize(remaining + [new_tier])

    @staticmethod
    def remove_tier(tiers: list[PricingTierDTO], index: int) -> list[PricingTierDTO]:
        """
        Remove the tier at index and return the re-bounded table.

        An empty result is valid: pricing then falls back to the product's base price.

        Raises:
            InvalidTierError: If index does not address a tier
        """
        if index < 0 or index >= len(tiers):
            raise InvalidTierError('index', index, f"table has {len(tiers)} tier(s)")

        remaining = tiers[:index] + tiers[index + 1:]
        if not remaining:
            logger.info("Last pricing tier removed, pricing falls back to base price")
        return TierTableService.normalize(remaining)

    @staticmethod
    def find_tier(tiers: list[PricingTierDTO], quantity: int) -> PricingTierDTO | None:
        """
        Find the tier a quantity falls into.

        Quantities below the lowest tier's min_quantity fall into the lowest
        tier, so a normalized table covers every quantity from 0 upwards.

        Returns:
            The matching tier, or None for an empty table
        """
        if not tiers:
            return None

        sorted_tiers = sorted(tiers, key=lambda t: t.min_quantity)
        if quantity < sorted_tiers[0].min_quantity:
            return sorted_tiers[0]

        for tier in sorted_tiers:
            if tier.contains(quantity):
                return tier

        return None

    @staticmethod
    def find_coverage_problem(tiers: list[PricingTierDTO]) -> str | None:
        """
        Describe why a stored tier table is not normalized.

        Checks for:
        - Tiers in ascending min_quantity order
        - No gaps and no overlaps between neighbours
        - Exactly one unbounded tier, and it is the last one
        - Valid bounds and prices

        Returns:
            None if the table is normalized (or empty), otherwise the first problem found
        """
        if not tiers:
            return None

        for i, tier in enumerate(tiers):
            try:
                TierTableService.check_tier(tier)
            except InvalidTierError as e:
                return f"Tier {i + 1}: {e.reason} ({e.field}={e.value})"

        for i in range(len(tiers) - 1):
            current_tier = tiers[i]
            next_tier = tiers[i + 1]

            if current_tier.max_quantity is None:
                return f"Only the last tier can have max_quantity=None (found at tier {i + 1})"

            if current_tier.max_quantity < current_tier.min_quantity:
                return f"Tier {i + 1} ends at {current_tier.max_quantity} before it starts at {current_tier.min_quantity}"

            if next_tier.min_quantity != current_tier.max_quantity + 1:
                if next_tier.min_quantity > current_tier.max_quantity + 1:
                    return f"Gap detected: tier ends at {current_tier.max_quantity}, next starts at {next_tier.min_quantity}"
                return f"Overlap detected: tier ends at {current_tier.max_quantity}, next starts at {next_tier.min_quantity}"

        if tiers[-1].max_quantity is not None:
            return "The last tier must have max_quantity=None (unbounded)"

        return None

    @staticmethod
    def format_tiers(tiers: list[PricingTierDTO], unit: str = "pcs.") -> str | None:
        """
        Format tiers as a price list for display.

        Example output:
            ```
            Quantity pricing:
                 1-99 pcs.:  $1.50
              100-249 pcs.:  $1.30  (5% off)
                5000+ pcs.:  $0.80  (30% off)
            ```

        Returns:
            Formatted string, or None if there are no tiers
        """
        if not tiers:
            return None

        lines = ["Quantity pricing:"]
        for tier in sorted(tiers, key=lambda t: t.min_quantity):
            range_str = f"{tier.range_label} {unit}"
            line = f"  {range_str:>16}: {format_money(tier.price_per_unit):>8}"
            if tier.discount_percentage > ZERO:
                line += f"  ({tier.discount_percentage.normalize():f}% off)"
            lines.append(line)

        return "\n".join(lines)
