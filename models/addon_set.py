from pydantic import BaseModel

from enums.display_position import DisplayPosition


class AddOnSetItemDTO(BaseModel):
    """Reference to a catalog add-on inside a set, with its placement."""
    addon_id: str
    display_position: DisplayPosition = DisplayPosition.IN_DROPDOWN
    is_default: bool = False  # Pre-selected for the customer
    sort_order: int = 0  # Unique within its display_position bucket


class AddOnSetDTO(BaseModel):
    """Named, ordered bundle of add-ons a product offers."""
    id: str
    name: str = ""
    items: list[AddOnSetItemDTO] = []

    def get_item(self, addon_id: str) -> AddOnSetItemDTO | None:
        for item in self.items:
            if item.addon_id == addon_id:
                return item
        return None

    @property
    def addon_ids(self) -> list[str]:
        return [item.addon_id for item in self.items]
