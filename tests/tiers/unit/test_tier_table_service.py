"""
TierTableService Unit Tests

Tests cover:
- Inserting tiers and recomputing upper bounds
- Normalization of unsorted tables (sorting, dedupe, rebounding)
- Duplicate boundary policy (replace vs. reject)
- Tier lookup, including quantities below the lowest tier
- Coverage checks and price list formatting
"""

from decimal import Decimal

import pytest

import config
from enums.duplicate_tier_policy import DuplicateTierPolicy
from exceptions.tier import InvalidTierError
from models.pricing_tier import PricingTierDTO
from services.tier_table import TierTableService


def tier(min_quantity, price, max_quantity=None, discount="0"):
    return PricingTierDTO(
        min_quantity=min_quantity,
        max_quantity=max_quantity,
        price_per_unit=Decimal(price),
        discount_percentage=Decimal(discount)
    )


@pytest.fixture
def three_tiers():
    return [
        tier(1, "1.50", 99),
        tier(100, "1.30", 249, "5"),
        tier(250, "1.20", None, "10"),
    ]


class TestInsertTier:

    def test_insert_above_top_tier_closes_old_top(self, three_tiers):
        """Inserting 500+ turns the old 250+ top tier into 250-499."""
        result = TierTableService.insert_tier(three_tiers, tier(500, "1.00"))

        assert [(t.min_quantity, t.max_quantity) for t in result] == [
            (1, 99), (100, 249), (250, 499), (500, None)
        ]
        assert result[-1].price_per_unit == Decimal("1.00")

    def test_insert_between_tiers(self, three_tiers):
        result = TierTableService.insert_tier(three_tiers, tier(50, "1.40"))

        assert [(t.min_quantity, t.max_quantity) for t in result] == [
            (1, 49), (50, 99), (100, 249), (250, None)
        ]

    def test_insert_ignores_given_max_quantity(self, three_tiers):
        result = TierTableService.insert_tier(three_tiers, tier(500, "1.00", max_quantity=600))
        assert result[-1].max_quantity is None

    def test_insert_into_empty_table(self):
        result = TierTableService.insert_tier([], tier(1, "2.00", 10))
        assert result == [tier(1, "2.00", None)]

    def test_input_table_not_mutated(self, three_tiers):
        before = [t.model_copy() for t in three_tiers]
        TierTableService.insert_tier(three_tiers, tier(500, "1.00"))
        assert three_tiers == before

    def test_duplicate_replaces_by_default(self, three_tiers):
        result = TierTableService.insert_tier(
            three_tiers, tier(100, "1.25", discount="7"), DuplicateTierPolicy.REPLACE
        )

        assert len(result) == 3
        assert result[1].price_per_unit == Decimal("1.25")
        assert result[1].max_quantity == 249

    def test_duplicate_rejected_under_reject_policy(self, three_tiers):
        with pytest.raises(InvalidTierError) as exc_info:
            TierTableService.insert_tier(three_tiers, tier(100, "1.25"), DuplicateTierPolicy.REJECT)

        assert exc_info.value.field == 'min_quantity'
        assert exc_info.value.value == 100

    def test_policy_defaults_to_config(self, three_tiers, monkeypatch):
        monkeypatch.setattr(config, 'DUPLICATE_TIER_POLICY', DuplicateTierPolicy.REJECT)

        with pytest.raises(InvalidTierError):
            TierTableService.insert_tier(three_tiers, tier(250, "1.10"))

    @pytest.mark.parametrize("bad_tier,field", [
        (tier(-1, "1.00"), 'min_quantity'),
        (tier(10, "-0.01"), 'price_per_unit'),
        (tier(10, "1.00", discount="101"), 'discount_percentage'),
        (tier(10, "1.00", discount="-5"), 'discount_percentage'),
    ])
    def test_malformed_tier_rejected(self, three_tiers, bad_tier, field):
        with pytest.raises(InvalidTierError) as exc_info:
            TierTableService.insert_tier(three_tiers, bad_tier)
        assert exc_info.value.field == field


class TestRemoveTier:

    def test_remove_middle_tier_extends_previous(self, three_tiers):
        result = TierTableService.remove_tier(three_tiers, 1)
        assert [(t.min_quantity, t.max_quantity) for t in result] == [(1, 249), (250, None)]

    def test_remove_top_tier_unbounds_new_top(self, three_tiers):
        result = TierTableService.remove_tier(three_tiers, 2)
        assert result[-1].min_quantity == 100
        assert result[-1].max_quantity is None

    def test_remove_last_tier_leaves_empty_table(self):
        assert TierTableService.remove_tier([tier(1, "1.50")], 0) == []

    @pytest.mark.parametrize("index", [-1, 3, 10])
    def test_remove_out_of_range(self, three_tiers, index):
        with pytest.raises(InvalidTierError):
            TierTableService.remove_tier(three_tiers, index)


class TestNormalize:

    def test_sorts_and_rebounds(self):
        tiers = [tier(500, "1.00", 10), tier(1, "1.50", 3), tier(100, "1.30")]

        result = TierTableService.normalize(tiers)

        assert [(t.min_quantity, t.max_quantity) for t in result] == [(1, 99), (100, 499), (500, None)]

    def test_last_given_wins_for_repeated_min(self):
        result = TierTableService.normalize([tier(1, "1.50"), tier(1, "1.45")])
        assert result == [tier(1, "1.45", None)]

    def test_idempotent(self):
        tiers = [tier(500, "1.00"), tier(1, "1.50"), tier(100, "1.30"), tier(100, "1.35")]

        once = TierTableService.normalize(tiers)
        twice = TierTableService.normalize(once)

        assert once == twice

    def test_normalized_table_partitions_quantities(self, business_card_tiers):
        tiers = TierTableService.normalize(list(reversed(business_card_tiers)))

        for quantity in range(1, 6000, 7):
            matches = [t for t in tiers if t.contains(quantity)]
            assert len(matches) == 1, f"quantity {quantity} matched {len(matches)} tiers"

        assert TierTableService.find_coverage_problem(tiers) is None


class TestFindTier:

    def test_quantity_in_tier(self, business_card_tiers):
        found = TierTableService.find_tier(business_card_tiers, 150)
        assert (found.min_quantity, found.max_quantity) == (100, 249)

    @pytest.mark.parametrize("quantity,expected_min", [
        (1, 1), (99, 1), (100, 100), (249, 100), (250, 250), (4999, 1000), (5000, 5000), (1_000_000, 5000),
    ])
    def test_boundaries(self, business_card_tiers, quantity, expected_min):
        assert TierTableService.find_tier(business_card_tiers, quantity).min_quantity == expected_min

    def test_below_lowest_tier_uses_lowest(self):
        tiers = [tier(25, "2.00", 49), tier(50, "1.80")]
        assert TierTableService.find_tier(tiers, 10).min_quantity == 25

    def test_empty_table(self):
        assert TierTableService.find_tier([], 10) is None


class TestFindCoverageProblem:

    def test_gap(self):
        problem = TierTableService.find_coverage_problem([tier(1, "1.50", 99), tier(150, "1.30")])
        assert "Gap" in problem

    def test_overlap(self):
        problem = TierTableService.find_coverage_problem([tier(1, "1.50", 120), tier(100, "1.30")])
        assert "Overlap" in problem

    def test_unbounded_middle_tier(self):
        problem = TierTableService.find_coverage_problem([tier(1, "1.50"), tier(100, "1.30")])
        assert "Only the last tier" in problem

    def test_bounded_last_tier(self):
        problem = TierTableService.find_coverage_problem([tier(1, "1.50", 99), tier(100, "1.30", 200)])
        assert "last tier" in problem

    def test_empty_table_is_fine(self):
        assert TierTableService.find_coverage_problem([]) is None


class TestFormatTiers:

    def test_format(self, business_card_tiers):
        text = TierTableService.format_tiers(business_card_tiers)

        assert text.startswith("Quantity pricing:")
        assert "1-99 pcs." in text
        assert "$1.50" in text
        assert "100-249 pcs." in text
        assert "(5% off)" in text
        assert "5000+ pcs." in text
        assert "(30% off)" in text

    def test_format_empty(self):
        assert TierTableService.format_tiers([]) is None
