"""
Add-On Set Service

Maintains the ordered add-on sets and paper stocks of a product while an
administrator edits them:
- Display placement of add-ons (above, in or below the option dropdown)
- Unique sort order per placement bucket
- Exactly one default paper stock whenever the product has any
"""

import logging

from enums.display_position import DisplayPosition
from exceptions.addon import InvalidAddOnSetError
from exceptions.pricing import UnconfiguredOptionError
from models.addon import AddOnDefinitionDTO
from models.addon_set import AddOnSetDTO, AddOnSetItemDTO
from models.paper_stock import ProductPaperStockDTO

logger = logging.getLogger(__name__)

_POSITION_ORDER = {position: index for index, position in enumerate(DisplayPosition)}


class AddOnSetService:
    """Service for add-on set and paper stock edits. Inputs are never mutated."""

    @staticmethod
    def classify_display_position(addon: AddOnDefinitionDTO) -> DisplayPosition:
        """
        Placement for an add-on that is being attached to a set.

        Mandatory add-ons and special types (variable data, perforation,
        banding, corner rounding) go above the dropdown, everything else into it.
        The result is stored on the set item and never re-derived.
        """
        if addon.mandatory:
            return DisplayPosition.ABOVE_DROPDOWN
        return addon.addon_type.default_display_position

    @staticmethod
    def toggle_addon(addon_set: AddOnSetDTO, addon: AddOnDefinitionDTO) -> AddOnSetDTO:
        """
        Detach the add-on if the set contains it, attach it otherwise.

        A newly attached add-on goes to the end of its placement bucket and is
        pre-selected (is_default) when it is mandatory.

        Example:
            >>> updated = AddOnSetService.toggle_addon(addon_set, rounded_corners)
            >>> updated.get_item(rounded_corners.id).display_position
            DisplayPosition.ABOVE_DROPDOWN
        """
        items = AddOnSetService._sorted(addon_set.items)

        if addon_set.get_item(addon.id) is not None:
            remaining = [item for item in items if item.addon_id != addon.id]
            logger.info(f"Detached add-on {addon.id} from set {addon_set.id}")
            return addon_set.model_copy(update={'items': AddOnSetService._renumber(remaining)})

        position = AddOnSetService.classify_display_position(addon)
        new_item = AddOnSetItemDTO(
            addon_id=addon.id,
            display_position=position,
            is_default=addon.mandatory,
            sort_order=AddOnSetService._next_sort_order(items, position)
        )
        logger.info(f"Attached add-on {addon.id} to set {addon_set.id} at {position.value}")
        return addon_set.model_copy(update={'items': AddOnSetService._sorted(items + [new_item])})

    @staticmethod
    def move_to_position(addon_set: AddOnSetDTO, addon_id: str, position: DisplayPosition) -> AddOnSetDTO:
        """
        Move an attached add-on to the end of another placement bucket.

        Raises:
            InvalidAddOnSetError: If the add-on is not in the set
        """
        item = addon_set.get_item(addon_id)
        if item is None:
            raise InvalidAddOnSetError(addon_set.id, 'addon_id', addon_id, "add-on is not in this set")
        if item.display_position == position:
            return addon_set

        others = [i for i in AddOnSetService._sorted(addon_set.items) if i.addon_id != addon_id]
        moved = item.model_copy(update={
            'display_position': position,
            'sort_order': AddOnSetService._next_sort_order(others, position)
        })
        items = AddOnSetService._renumber(AddOnSetService._sorted(others + [moved]))
        return addon_set.model_copy(update={'items': items})

    @staticmethod
    def set_item_default(addon_set: AddOnSetDTO, addon_id: str, is_default: bool) -> AddOnSetDTO:
        """
        Mark an attached add-on as pre-selected (or not).

        Raises:
            InvalidAddOnSetError: If the add-on is not in the set
        """
        if addon_set.get_item(addon_id) is None:
            raise InvalidAddOnSetError(addon_set.id, 'addon_id', addon_id, "add-on is not in this set")

        items = [
            item.model_copy(update={'is_default': is_default}) if item.addon_id == addon_id else item
            for item in addon_set.items
        ]
        return addon_set.model_copy(update={'items': items})

    @staticmethod
    def reorder(items: list[AddOnSetItemDTO], from_index: int, to_index: int) -> list[AddOnSetItemDTO]:
        """
        Move the item at from_index to to_index (drag and drop).

        sort_order is then renumbered 0..n-1 inside every placement bucket,
        following the new list order.

        Raises:
            InvalidAddOnSetError: If either index is out of range
        """
        for name, index in (('from_index', from_index), ('to_index', to_index)):
            if index < 0 or index >= len(items):
                raise InvalidAddOnSetError(None, name, index, f"set has {len(items)} item(s)")

        reordered = list(items)
        item = reordered.pop(from_index)
        reordered.insert(to_index, item)
        return AddOnSetService._renumber(reordered)

    @staticmethod
    def group_by_position(addon_set: AddOnSetDTO) -> dict[DisplayPosition, list[AddOnSetItemDTO]]:
        """
        Split a set into its placement buckets in render order.

        Returns:
            {ABOVE_DROPDOWN: [...], IN_DROPDOWN: [...], BELOW_DROPDOWN: [...]},
            each bucket sorted by sort_order; empty buckets are present
        """
        grouped = {position: [] for position in DisplayPosition}
        for item in AddOnSetService._sorted(addon_set.items):
            grouped[item.display_position].append(item)
        return grouped

    @staticmethod
    def find_sort_order_conflicts(addon_set: AddOnSetDTO) -> list[tuple[DisplayPosition, int]]:
        """Return (bucket, sort_order) pairs used by more than one item."""
        seen = set()
        conflicts = []
        for item in addon_set.items:
            key = (item.display_position, item.sort_order)
            if key in seen and key not in conflicts:
                conflicts.append(key)
            seen.add(key)
        return conflicts

    @staticmethod
    def _sorted(items: list[AddOnSetItemDTO]) -> list[AddOnSetItemDTO]:
        return sorted(items, key=lambda i: (_POSITION_ORDER[i.display_position], i.sort_order))

    @staticmethod
    def _next_sort_order(items: list[AddOnSetItemDTO], position: DisplayPosition) -> int:
        orders = [item.sort_order for item in items if item.display_position == position]
        return max(orders) + 1 if orders else 0

    @staticmethod
    def _renumber(items: list[AddOnSetItemDTO]) -> list[AddOnSetItemDTO]:
        counters = {position: 0 for position in DisplayPosition}
        renumbered = []
        for item in items:
            renumbered.append(item.model_copy(update={'sort_order': counters[item.display_position]}))
            counters[item.display_position] += 1
        return renumbered

    # ------------------------------------------------------------------
    # Paper stocks
    # ------------------------------------------------------------------

    @staticmethod
    def set_default_paper_stock(stocks: list[ProductPaperStockDTO], stock_id: str) -> list[ProductPaperStockDTO]:
        """
        Make stock_id the product's only default paper stock.

        Raises:
            UnconfiguredOptionError: If stock_id is not attached
        """
        if not any(stock.paper_stock_id == stock_id for stock in stocks):
            raise UnconfiguredOptionError('paper_stock_id', stock_id)

        return [
            stock.model_copy(update={'is_default': stock.paper_stock_id == stock_id})
            for stock in stocks
        ]

    @staticmethod
    def add_paper_stock(stocks: list[ProductPaperStockDTO], new_stock: ProductPaperStockDTO) -> list[ProductPaperStockDTO]:
        """
        Attach a paper stock.

        The first stock of a product becomes its default; a stock attached with
        is_default=True takes the default over.

        Raises:
            InvalidAddOnSetError: If the stock is already attached
        """
        if any(stock.paper_stock_id == new_stock.paper_stock_id for stock in stocks):
            raise InvalidAddOnSetError(None, 'paper_stock_id', new_stock.paper_stock_id, "paper stock is already attached")

        updated = list(stocks) + [new_stock]
        if new_stock.is_default:
            return AddOnSetService.set_default_paper_stock(updated, new_stock.paper_stock_id)
        return AddOnSetService._ensure_single_default(updated)

    @staticmethod
    def remove_paper_stock(stocks: list[ProductPaperStockDTO], stock_id: str) -> list[ProductPaperStockDTO]:
        """
        Detach a paper stock.

        Removing the default while other stocks remain promotes the first
        remaining stock (in original order) to default.

        Raises:
            UnconfiguredOptionError: If stock_id is not attached
        """
        if not any(stock.paper_stock_id == stock_id for stock in stocks):
            raise UnconfiguredOptionError('paper_stock_id', stock_id)

        remaining = [stock for stock in stocks if stock.paper_stock_id != stock_id]
        if remaining and not any(stock.is_default for stock in remaining):
            logger.info(f"Default paper stock {stock_id} removed, promoting {remaining[0].paper_stock_id}")
        return AddOnSetService._ensure_single_default(remaining)

    @staticmethod
    def toggle_paper_stock(stocks: list[ProductPaperStockDTO], stock: ProductPaperStockDTO) -> list[ProductPaperStockDTO]:
        """Detach the stock if attached, attach it otherwise."""
        if any(s.paper_stock_id == stock.paper_stock_id for s in stocks):
            return AddOnSetService.remove_paper_stock(stocks, stock.paper_stock_id)
        return AddOnSetService.add_paper_stock(stocks, stock)

    @staticmethod
    def _ensure_single_default(stocks: list[ProductPaperStockDTO]) -> list[ProductPaperStockDTO]:
        """Keep the first default, or promote the first stock when none is default."""
        if not stocks:
            return []

        default_index = next((i for i, stock in enumerate(stocks) if stock.is_default), 0)
        return [
            stock.model_copy(update={'is_default': i == default_index})
            for i, stock in enumerate(stocks)
        ]
