from enum import Enum


class AddOnInputType(str, Enum):
    CHECKBOX = "CHECKBOX"
    SELECT = "SELECT"
    RADIO = "RADIO"

    @property
    def has_choices(self) -> bool:
        return self in (AddOnInputType.SELECT, AddOnInputType.RADIO)
