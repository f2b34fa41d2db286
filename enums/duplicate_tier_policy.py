from enum import Enum


class DuplicateTierPolicy(str, Enum):
    """
    What inserting a tier at an already used min_quantity does.

    REPLACE: the inserted tier takes over the boundary (last write wins)
    REJECT: the insert fails with InvalidTierError
    """

    REPLACE = "REPLACE"
    REJECT = "REJECT"
