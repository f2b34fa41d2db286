from pydantic import BaseModel


class GangRunConfigDTO(BaseModel):
    """
    Gang-run pooling range of a product.

    Bounds are only meaningful when eligible; they are range-checked by the
    configuration validator so a draft can be saved half-filled.
    """
    eligible: bool = False
    min_gang_quantity: int | None = None
    max_gang_quantity: int | None = None
