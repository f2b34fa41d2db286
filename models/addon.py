from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field, field_validator, model_validator
from sqlalchemy import Column, Integer, String, Boolean, DateTime, JSON, CheckConstraint

from models.base import Base
from enums.addon_input_type import AddOnInputType
from enums.addon_type import AddOnType
from enums.pricing_model import PricingModel
from enums.sub_field_type import SubFieldType


# Add-on definitions are global; products reference them by id through add-on sets
class AddOn(Base):
    __tablename__ = 'add_ons'

    id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    description = Column(String, nullable=False, default="")
    pricing_model = Column(String(16), nullable=False)
    addon_type = Column(String(32), nullable=False, default=AddOnType.STANDARD.value)
    configuration = Column(JSON, nullable=False)
    mandatory = Column(Boolean, nullable=False, default=False)
    is_active = Column(Boolean, nullable=False, default=True)
    additional_turnaround_days = Column(Integer, nullable=False, default=0)
    sort_order = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=datetime.utcnow)

    __table_args__ = (
        CheckConstraint('additional_turnaround_days >= 0', name='check_addon_turnaround_non_negative'),
    )


class SubFieldDefinition(BaseModel):
    """
    Conditional field shown once its add-on is selected (e.g. number of
    variable-data locations, items per bundle).
    """
    key: str
    label: str = ""
    field_type: SubFieldType = SubFieldType.TEXT
    required: bool = False
    default: Any = None
    options: list[str] = []
    min_value: Decimal | None = None
    max_value: Decimal | None = None

    @model_validator(mode='after')
    def check_type_specific_settings(self):
        if self.field_type == SubFieldType.SELECT and not self.options:
            raise ValueError(f"SELECT sub-field '{self.key}' needs at least one option")
        if self.min_value is not None and self.max_value is not None and self.min_value > self.max_value:
            raise ValueError(f"Sub-field '{self.key}' has min_value greater than max_value")
        return self

    def coerce(self, value: Any) -> Any:
        """
        Validate a customer-supplied value and return it in its canonical type.

        Missing values fall back to the default.

        Raises:
            ValueError: With the reason when the value does not fit the definition
        """
        if value is None or value == "":
            if self.default is not None:
                value = self.default
            elif self.required:
                raise ValueError("value is required")
            else:
                return None

        if self.field_type == SubFieldType.NUMBER:
            if isinstance(value, bool):
                raise ValueError("expected a number")
            try:
                number = Decimal(str(value))
            except InvalidOperation:
                raise ValueError("expected a number")
            if self.min_value is not None and number < self.min_value:
                raise ValueError(f"must be at least {self.min_value}")
            if self.max_value is not None and number > self.max_value:
                raise ValueError(f"must be at most {self.max_value}")
            return number

        if self.field_type == SubFieldType.BOOLEAN:
            if isinstance(value, bool):
                return value
            if isinstance(value, str) and value.strip().lower() in ("true", "false"):
                return value.strip().lower() == "true"
            raise ValueError("expected true or false")

        if self.field_type == SubFieldType.SELECT:
            if value not in self.options:
                raise ValueError(f"must be one of: {', '.join(self.options)}")
            return value

        return str(value)


class AddOnChoice(BaseModel):
    """One option of a SELECT/RADIO add-on."""
    value: str
    label: str = ""
    additional_price: Decimal = Field(default=Decimal("0"), ge=0)


class FlatAddOnConfig(BaseModel):
    """Charged once per order, e.g. a $5 digital proof."""
    pricing_model: Literal["FLAT"] = "FLAT"
    price: Decimal = Field(ge=0)

    @property
    def input_type(self) -> AddOnInputType:
        return AddOnInputType.CHECKBOX


class PerUnitAddOnConfig(BaseModel):
    """Charged once per printed piece."""
    pricing_model: Literal["PER_UNIT"] = "PER_UNIT"
    price_per_unit: Decimal = Field(ge=0)

    @property
    def input_type(self) -> AddOnInputType:
        return AddOnInputType.CHECKBOX


class CustomAddOnConfig(BaseModel):
    """
    Choice and formula based pricing.

    Cost = chosen choice's additional_price (SELECT/RADIO)
         + setup_fee
         + price_per_piece × quantity
         + price_per_bundle × ceil(quantity / items_per_bundle)
    """
    pricing_model: Literal["CUSTOM"] = "CUSTOM"
    input_type: AddOnInputType = AddOnInputType.CHECKBOX
    choices: list[AddOnChoice] = []
    setup_fee: Decimal = Field(default=Decimal("0"), ge=0)
    price_per_piece: Decimal = Field(default=Decimal("0"), ge=0)
    price_per_bundle: Decimal | None = Field(default=None, ge=0)
    items_per_bundle: int = Field(default=100, ge=1)
    sub_fields: list[SubFieldDefinition] = []

    @model_validator(mode='after')
    def check_choices(self):
        if self.input_type.has_choices and not self.choices:
            raise ValueError(f"{self.input_type.value} add-on needs at least one choice")
        values = [choice.value for choice in self.choices]
        if len(values) != len(set(values)):
            raise ValueError("Choice values must be unique")
        keys = [field.key for field in self.sub_fields]
        if len(keys) != len(set(keys)):
            raise ValueError("Sub-field keys must be unique")
        return self

    def get_choice(self, value: str) -> AddOnChoice | None:
        for choice in self.choices:
            if choice.value == value:
                return choice
        return None


AddOnConfiguration = Annotated[
    Union[FlatAddOnConfig, PerUnitAddOnConfig, CustomAddOnConfig],
    Field(discriminator='pricing_model')
]


class AddOnDefinitionDTO(BaseModel):
    id: str
    name: str
    description: str = ""
    addon_type: AddOnType = AddOnType.STANDARD
    configuration: AddOnConfiguration
    mandatory: bool = False
    is_active: bool = True
    additional_turnaround_days: int = Field(default=0, ge=0)
    sort_order: int = 0

    @field_validator('addon_type', mode='before')
    @classmethod
    def validate_addon_type(cls, v):
        """
        Accept AddOnType directly or any spelling AddOnType.from_string understands.
        """
        if isinstance(v, AddOnType):
            return v
        if isinstance(v, str):
            return AddOnType.from_string(v)
        raise ValueError(f"Add-on type must be string or AddOnType enum, got {type(v)}")

    @property
    def pricing_model(self) -> PricingModel:
        return PricingModel(self.configuration.pricing_model)

    @property
    def input_type(self) -> AddOnInputType:
        return self.configuration.input_type
