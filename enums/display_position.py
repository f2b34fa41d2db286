from enum import Enum


class DisplayPosition(str, Enum):
    """
    Where an add-on selector renders relative to the primary option dropdown.

    Members are declared in render order.
    """

    ABOVE_DROPDOWN = "ABOVE_DROPDOWN"
    IN_DROPDOWN = "IN_DROPDOWN"
    BELOW_DROPDOWN = "BELOW_DROPDOWN"
