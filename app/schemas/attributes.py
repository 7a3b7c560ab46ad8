"""Wire shapes for category attribute definitions."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class InputType(str, Enum):
    TEXT = "text"
    NUMBER = "number"
    DROPDOWN = "dropdown"
    SWITCH = "switch"


INPUT_TYPE_LABELS: dict[InputType, str] = {
    InputType.TEXT: "Text Input",
    InputType.NUMBER: "Number Input",
    InputType.DROPDOWN: "Dropdown Select",
    InputType.SWITCH: "Toggle Switch",
}


class LocalizedText(BaseModel):
    uz: str = ""
    ru: str = ""
    en: str = ""

    @field_validator("uz", "ru", "en", mode="before")
    @classmethod
    def _none_to_empty(cls, v):
        return "" if v is None else v


class AttributeOption(BaseModel):
    value: str = ""
    label: LocalizedText = Field(default_factory=LocalizedText)


class AttributeDefinition(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    category_id: str
    key: str
    type: InputType
    label: LocalizedText
    options: list[AttributeOption] = Field(default_factory=list)
    is_required: bool = False
    sort_order: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def option_values(self) -> list[str]:
        return [opt.value for opt in self.options]


class AttributeDraft(BaseModel):
    """Body of a create request. Field rules are enforced by the store, not here,
    so that every violation is reported with the field that caused it."""

    key: str = ""
    type: str = ""
    label: LocalizedText = Field(default_factory=LocalizedText)
    options: list[AttributeOption] | None = None
    is_required: bool = False
    sort_order: int = 0


class AttributePatch(BaseModel):
    key: str | None = None
    type: str | None = None
    label: LocalizedText | None = None
    options: list[AttributeOption] | None = None
    is_required: bool | None = None
    sort_order: int | None = None


class AttributeListResponse(BaseModel):
    success: bool = True
    attributes: list[AttributeDefinition]
    count: int


class AttributeResponse(BaseModel):
    success: bool = True
    message: str | None = None
    attribute: AttributeDefinition
