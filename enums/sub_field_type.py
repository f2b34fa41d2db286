from enum import Enum


class SubFieldType(str, Enum):
    """Value types for the conditional fields shown once an add-on is selected."""

    TEXT = "TEXT"
    NUMBER = "NUMBER"
    SELECT = "SELECT"
    BOOLEAN = "BOOLEAN"
