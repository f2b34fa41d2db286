from enum import Enum

from enums.display_position import DisplayPosition


class AddOnType(str, Enum):
    """
    Closed set of add-on kinds.

    The kind is fixed when the add-on is defined. Special kinds carry their own
    sub-form and are rendered above the option dropdown.
    Examples:
    - VARIABLE_DATA ("variable_data") → special, ABOVE_DROPDOWN
    - STANDARD ("standard") → IN_DROPDOWN
    """

    STANDARD = "standard"

    # Special finishing types
    VARIABLE_DATA = "variable_data"
    PERFORATION = "perforation"
    BANDING = "banding"
    CORNER_ROUNDING = "corner_rounding"

    # Regular custom types
    FOLDING = "folding"
    DESIGN = "design"

    @classmethod
    def from_string(cls, value: str) -> 'AddOnType':
        """
        Convert string to AddOnType enum.

        Handles case-insensitive matching, whitespace and dashes.

        Args:
            value: String value to convert

        Returns:
            AddOnType enum member

        Raises:
            ValueError: If value is not a known add-on type

        Examples:
            >>> AddOnType.from_string("Corner-Rounding")
            AddOnType.CORNER_ROUNDING
            >>> AddOnType.from_string(" banding ")
            AddOnType.BANDING
        """
        if not value:
            raise ValueError("Add-on type cannot be empty")

        normalized = value.strip().lower().replace('-', '_').replace(' ', '_')

        if not normalized:
            raise ValueError("Add-on type cannot be empty")

        for addon_type in cls:
            if addon_type.value == normalized:
                return addon_type

        valid_types = [t.value for t in cls]
        raise ValueError(
            f"Invalid add-on type '{value}'. Valid types: {', '.join(valid_types)}"
        )

    @property
    def is_special(self) -> bool:
        return self in _SPECIAL_TYPES

    @property
    def default_display_position(self) -> DisplayPosition:
        """Placement an add-on of this type gets when it is first attached to a set."""
        if self.is_special:
            return DisplayPosition.ABOVE_DROPDOWN
        return DisplayPosition.IN_DROPDOWN

    @property
    def display_name(self) -> str:
        """
        Examples:
            >>> AddOnType.CORNER_ROUNDING.display_name
            'Corner Rounding'
        """
        return self.name.replace('_', ' ').title()


_SPECIAL_TYPES = frozenset({
    AddOnType.VARIABLE_DATA,
    AddOnType.PERFORATION,
    AddOnType.BANDING,
    AddOnType.CORNER_ROUNDING,
})
