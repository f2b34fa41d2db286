import logging
import math
from collections.abc import Mapping
from decimal import Decimal

from enums.pricing_model import PricingModel
from exceptions.addon import AddOnNotFoundException, InvalidSubFieldValueError
from exceptions.pricing import InvalidQuantityError, UnconfiguredOptionError
from models.addon import AddOnDefinitionDTO, CustomAddOnConfig
from models.paper_stock import ProductPaperStockDTO
from models.price_breakdown import AddOnLineDTO, AddOnSelectionDTO, PriceBreakdownDTO, PriceSelectionDTO
from models.product_config import ProductConfigDTO
from services.tier_table import TierTableService
from utils.money import ONE, ZERO, format_money, format_unit_price, round_money

logger = logging.getLogger(__name__)


class PricingService:
    """Service for resolving storefront prices from a product configuration."""

    @staticmethod
    def resolve_price(
        config: ProductConfigDTO,
        selection: PriceSelectionDTO,
        add_ons: Mapping[str, AddOnDefinitionDTO]
    ) -> PriceBreakdownDTO:
        """
        Resolve the itemized price for a customer's selection.

        Pure function: no I/O, the same inputs always give the same breakdown,
        inputs are not modified.

        Algorithm:
        1. Find the tier the quantity falls into; with no tiers use the
           product's base_price at 0% discount
        2. unit_price = tier price × paper stock multiplier + paper stock additional_cost
        3. options_total = sum of the selected (and mandatory) add-on costs
        4. subtotal = unit_price × quantity + options_total
        5. total = subtotal + setup_fee + rush_fee (if rush requested)

        The tier's discount_percentage is reported only. Its price_per_unit is
        already the discounted sale price, so applying the percentage again
        would discount twice.

        Example with tiers [1-99 → $1.50, 100-249 → $1.30 (5%)] and quantity 150:
            unit_price = 1.30, subtotal = 195.00, discount_percentage = 5

        Args:
            config: Published product configuration snapshot
            selection: Customer's live selection
            add_ons: Catalog definitions by add-on id (at least the attached ones)

        Returns:
            PriceBreakdownDTO; money totals and add-on lines are rounded to
            config.PRICE_DECIMAL_PLACES, unit_price keeps its full precision

        Raises:
            InvalidQuantityError: quantity <= 0, or no tier and no base price
            UnconfiguredOptionError: selection made for another product, or add-on,
                choice, paper stock or rush not offered by the product
            InvalidSubFieldValueError: sub-field answer fails its definition
            AddOnNotFoundException: attached add-on missing from the catalog
        """
        if selection.product_id != config.product_id:
            raise UnconfiguredOptionError('product_id', selection.product_id, config.product_id)

        quantity = selection.quantity
        if quantity <= 0:
            raise InvalidQuantityError(quantity)

        # Step 1: tier lookup with base price fallback
        tier = TierTableService.find_tier(config.pricing_tiers, quantity)
        if tier is None:
            if config.base_price <= ZERO:
                raise InvalidQuantityError(
                    quantity, "no pricing tier covers this quantity and the product has no base price"
                )
            logger.debug(f"No pricing tiers for product {config.product_id}, using base price")
            price_per_unit = config.base_price
            discount_percentage = ZERO
        else:
            price_per_unit = tier.price_per_unit
            discount_percentage = tier.discount_percentage

        # Step 2: paper stock
        paper_stock = PricingService._select_paper_stock(config, selection)
        multiplier = paper_stock.multiplier if paper_stock else ONE
        additional_cost = paper_stock.additional_cost if paper_stock else ZERO
        # Fractions of a cent stay in the unit price; only money totals are rounded
        unit_price = price_per_unit * multiplier + additional_cost

        if selection.rush_requested and not config.rush_available:
            raise UnconfiguredOptionError('rush_requested', True, config.product_id)

        # Step 3: add-ons
        add_on_lines = PricingService._price_add_ons(config, selection, add_ons)
        options_total = sum((line.cost for line in add_on_lines), ZERO)

        # Steps 4-5: totals
        subtotal = round_money(unit_price * quantity + options_total)
        turnaround_days = sum(line.additional_turnaround_days for line in add_on_lines)
        setup_fee = round_money(config.setup_fee)
        rush_fee = round_money(config.rush_fee) if selection.rush_requested else round_money(ZERO)
        total = round_money(subtotal + setup_fee + rush_fee)

        logger.debug(
            f"Resolved price for product {config.product_id}: qty={quantity}, "
            f"unit={unit_price}, options={options_total}, total={total}"
        )

        return PriceBreakdownDTO(
            quantity=quantity,
            unit_price=unit_price,
            subtotal=subtotal,
            options_total=round_money(options_total),
            setup_fee=setup_fee,
            rush_fee=rush_fee,
            discount_percentage=discount_percentage,
            total=total,
            tier=tier,
            paper_stock_id=paper_stock.paper_stock_id if paper_stock else None,
            add_on_lines=add_on_lines,
            additional_turnaround_days=turnaround_days
        )

    @staticmethod
    def _select_paper_stock(config: ProductConfigDTO, selection: PriceSelectionDTO) -> ProductPaperStockDTO | None:
        if selection.paper_stock_id is None:
            return config.default_paper_stock

        paper_stock = config.get_paper_stock(selection.paper_stock_id)
        if paper_stock is None:
            raise UnconfiguredOptionError('paper_stock_id', selection.paper_stock_id, config.product_id)
        return paper_stock

    @staticmethod
    def _price_add_ons(
        config: ProductConfigDTO,
        selection: PriceSelectionDTO,
        add_ons: Mapping[str, AddOnDefinitionDTO]
    ) -> list[AddOnLineDTO]:
        """
        Price selected add-ons plus mandatory add-ons the customer did not list.

        Lines follow the product's set order, so the breakdown does not depend
        on the order of the selection dict.
        """
        attached_ids = config.attached_addon_ids
        for addon_id in selection.selected_add_ons:
            if addon_id not in attached_ids:
                raise UnconfiguredOptionError('addon_id', addon_id, config.product_id)

        lines = []
        priced_ids = set()
        for addon_set in config.addon_sets:
            for item in addon_set.items:
                if item.addon_id in priced_ids:
                    continue

                definition = add_ons.get(item.addon_id)
                chosen = selection.selected_add_ons.get(item.addon_id)

                if chosen is None:
                    if definition is None or not definition.mandatory or not definition.is_active:
                        continue
                    chosen = PricingService._mandatory_selection(definition)

                if definition is None:
                    raise AddOnNotFoundException(item.addon_id)
                if not definition.is_active:
                    raise UnconfiguredOptionError('addon_id', item.addon_id, config.product_id)

                lines.append(PricingService.price_add_on(definition, chosen, selection.quantity))
                priced_ids.add(item.addon_id)

        return lines

    @staticmethod
    def _mandatory_selection(definition: AddOnDefinitionDTO) -> AddOnSelectionDTO:
        configuration = definition.configuration
        if isinstance(configuration, CustomAddOnConfig) and configuration.input_type.has_choices:
            return AddOnSelectionDTO(value=configuration.choices[0].value)
        return AddOnSelectionDTO(value=True)

    @staticmethod
    def price_add_on(definition: AddOnDefinitionDTO, chosen: AddOnSelectionDTO, quantity: int) -> AddOnLineDTO:
        """
        Price one add-on for the given quantity.

        - FLAT: its price, once per order (a $50 checkbox at qty 1000 costs $50)
        - PER_UNIT: price_per_unit × quantity
        - CUSTOM: chosen value's additional_price + setup_fee
          + price_per_piece × quantity + price_per_bundle × bundles

        Returns:
            AddOnLineDTO with the rounded cost and a human-readable formula
        """
        fields = PricingService._coerce_fields(definition, chosen)
        configuration = definition.configuration

        if definition.pricing_model == PricingModel.FLAT:
            PricingService._require_checkbox(definition, chosen)
            cost = configuration.price
            formula = f"Flat fee: {format_money(cost)}"

        elif definition.pricing_model == PricingModel.PER_UNIT:
            PricingService._require_checkbox(definition, chosen)
            cost = configuration.price_per_unit * quantity
            formula = f"{format_money(configuration.price_per_unit)} × {quantity} units"

        else:
            cost, formula = PricingService._price_custom(definition, chosen, fields, quantity)

        return AddOnLineDTO(
            addon_id=definition.id,
            name=definition.name,
            cost=round_money(cost),
            formula=formula,
            additional_turnaround_days=definition.additional_turnaround_days
        )

    @staticmethod
    def _require_checkbox(definition: AddOnDefinitionDTO, chosen: AddOnSelectionDTO) -> None:
        if chosen.value is not True:
            raise UnconfiguredOptionError(f"{definition.id}.value", chosen.value)

    @staticmethod
    def _price_custom(
        definition: AddOnDefinitionDTO,
        chosen: AddOnSelectionDTO,
        fields: dict,
        quantity: int
    ) -> tuple[Decimal, str]:
        configuration = definition.configuration
        cost = ZERO
        parts = []

        if configuration.input_type.has_choices:
            choice = configuration.get_choice(chosen.value) if isinstance(chosen.value, str) else None
            if choice is None:
                raise UnconfiguredOptionError(f"{definition.id}.value", chosen.value)
            cost += choice.additional_price
            parts.append(f"{choice.label or choice.value}: {format_money(choice.additional_price)}")
        else:
            PricingService._require_checkbox(definition, chosen)

        if configuration.setup_fee > ZERO:
            cost += configuration.setup_fee
            parts.append(f"Setup {format_money(configuration.setup_fee)}")

        if configuration.price_per_piece > ZERO:
            cost += configuration.price_per_piece * quantity
            parts.append(f"{format_money(configuration.price_per_piece)}/pc × {quantity}")

        if configuration.price_per_bundle is not None:
            items_per_bundle = fields.get('items_per_bundle')
            if items_per_bundle is None:
                items_per_bundle = configuration.items_per_bundle
            if items_per_bundle != int(items_per_bundle):
                raise InvalidSubFieldValueError(definition.id, 'items_per_bundle', items_per_bundle, "must be a whole number")
            items_per_bundle = int(items_per_bundle)
            if items_per_bundle < 1:
                raise InvalidSubFieldValueError(definition.id, 'items_per_bundle', items_per_bundle, "must be at least 1")
            bundles = math.ceil(quantity / items_per_bundle)
            cost += configuration.price_per_bundle * bundles
            parts.append(f"{format_money(configuration.price_per_bundle)} × {bundles} bundles")

        formula = " + ".join(parts) if parts else "Included"
        return cost, formula

    @staticmethod
    def _coerce_fields(definition: AddOnDefinitionDTO, chosen: AddOnSelectionDTO) -> dict:
        """
        Validate sub-field answers against the add-on's sub-field definitions.

        Raises:
            InvalidSubFieldValueError: Unknown field, missing required field or bad value
        """
        configuration = definition.configuration
        sub_fields = configuration.sub_fields if isinstance(configuration, CustomAddOnConfig) else []
        known_keys = {field.key for field in sub_fields}

        for key, value in chosen.fields.items():
            if key not in known_keys:
                raise InvalidSubFieldValueError(definition.id, key, value, "unknown field")

        result = {}
        for field in sub_fields:
            raw_value = chosen.fields.get(field.key)
            try:
                result[field.key] = field.coerce(raw_value)
            except ValueError as e:
                raise InvalidSubFieldValueError(definition.id, field.key, raw_value, str(e))

        return result

    @staticmethod
    def format_breakdown(breakdown: PriceBreakdownDTO) -> str:
        """
        Format a price breakdown for display.

        Example output:
            ```
            150 × $1.30 = $195.00 (5% volume discount included)
            Add-ons:
              Rounded Corners: $50.00 (Flat fee: $50.00)
            Setup fee: $25.00
            Total: $270.00
            ```
        """
        line = (
            f"{breakdown.quantity} × {format_unit_price(breakdown.unit_price)} = "
            f"{format_money(breakdown.unit_price * breakdown.quantity)}"
        )
        if breakdown.discount_percentage > ZERO:
            line += f" ({breakdown.discount_percentage.normalize():f}% volume discount included)"
        lines = [line]

        if breakdown.add_on_lines:
            lines.append("Add-ons:")
            for add_on_line in breakdown.add_on_lines:
                lines.append(f"  {add_on_line.name}: {format_money(add_on_line.cost)} ({add_on_line.formula})")

        if breakdown.setup_fee > ZERO:
            lines.append(f"Setup fee: {format_money(breakdown.setup_fee)}")
        if breakdown.rush_fee > ZERO:
            lines.append(f"Rush fee: {format_money(breakdown.rush_fee)}")
        if breakdown.additional_turnaround_days:
            lines.append(f"Additional turnaround: {breakdown.additional_turnaround_days} day(s)")

        lines.append(f"Total: {format_money(breakdown.total)}")
        return "\n".join(lines)
