"""Shared, cross-feature Pydantic models."""
from typing import Any, List, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from isobom.utils import as_int

# Column order of every BOM table (JSON uses the camelCase aliases).
BOM_FIELDS = (
    "drawing_number",
    "item_no",
    "name",
    "size",
    "length",
    "unit",
    "model_type",
    "description",
    "material",
    "standard",
    "quantity",
    "remarks",
)

_TEXT_FIELDS = tuple(f for f in BOM_FIELDS if f not in ("length", "quantity"))


def _as_text(value: Any) -> str:
    return "" if value is None else str(value)


class RawBOMRecord(BaseModel):
    """One row as returned by the model, before any cleaning.

    Everything is text here; missing keys become "" and unknown keys are dropped.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    drawing_number: str = ""
    item_no: str = ""
    name: str = ""
    size: str = ""
    length: str = ""
    unit: str = ""
    model_type: str = ""
    description: str = ""
    material: str = ""
    standard: str = ""
    quantity: str = ""
    remarks: str = ""

    @field_validator("*", mode="before")
    @classmethod
    def _stringify(cls, value: Any) -> str:
        return _as_text(value)


class BOMItem(BaseModel):
    """A cleaned BOM line, ready for display or export."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    drawing_number: str = Field(default="", description="図番 (Drawing Number)")
    item_no: str = Field(default="", description="No. (Item Number)")
    name: str = Field(default="", description="名称 (Name)")
    size: str = Field(default="", description="サイズ (Size)")
    length: Union[int, float, str] = Field(default="", description="長さ (Length)")
    unit: str = Field(default="", description="単位 (Unit)")
    model_type: str = Field(default="", description="型式 (Model/Type)")
    description: str = Field(default="", description="説明 (Description)")
    material: str = Field(default="", description="材質 (Material)")
    standard: str = Field(default="", description="規格 (Standard)")
    quantity: int = Field(default=1, description="台数 (Quantity)")
    remarks: str = Field(default="", description="注記 (Remarks)")

    @field_validator(*_TEXT_FIELDS, mode="before")
    @classmethod
    def _stringify(cls, value: Any) -> str:
        return _as_text(value)

    @field_validator("length", mode="before")
    @classmethod
    def _length_or_text(cls, value: Any) -> Union[int, float, str]:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return value
        return _as_text(value)

    @field_validator("quantity", mode="before")
    @classmethod
    def _whole_quantity(cls, value: Any) -> int:
        # Last line of defence: whatever got here, quantity leaves as an int.
        return as_int(value, default=1)


class AnalyzedFile(BaseModel):
    """The BOM extracted from one source document."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    file_name: str = Field(description="Original file name, used to name exports.")
    bom_items: List[BOMItem] = Field(default_factory=list)
