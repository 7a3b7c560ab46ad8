"""Dynamic product specification form.

A product's ``specs`` are not fixed columns: each category publishes an
ordered list of attribute definitions and the product form is generated
from it at runtime. ``DynamicSpecForm`` holds the editable state for one
editing session:

    form = DynamicSpecForm()
    form.initialize(schema, stored_specs)
    form.set_value("color", "red")
    specs = form.validate_and_serialize()

Serialized specs are sparse. Blank text, unset numbers and dropdowns and
switches that are off are left out of the map. Zero is a real number and
is kept. Values stored under keys the schema no longer defines (orphans)
are carried through untouched unless the orphan policy says to drop them.
"""

from __future__ import annotations

import json
import logging
import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from app.errors import (
    FormStateError,
    InvalidOptionError,
    InvalidValueError,
    RequiredFieldError,
    SpecFieldError,
    SpecValidationError,
    UnknownFieldError,
)
from app.schemas.attributes import AttributeDefinition, InputType
from app.services.labels import resolve_label

logger = logging.getLogger(__name__)


class FormState(str, Enum):
    UNINITIALIZED = "uninitialized"
    EDITING = "editing"
    VALID = "valid"


class OrphanPolicy(str, Enum):
    PRESERVE = "preserve"
    DROP = "drop"


def parse_number(text: str) -> int | float | None:
    """Parse a form string into an int or a finite float; None if it is not a number."""
    text = text.strip()
    try:
        return int(text)
    except ValueError:
        pass
    try:
        number = float(text)
    except ValueError:
        return None
    return number if math.isfinite(number) else None


# ---------------------------------------------------------------------------
# Per input type behaviour
# ---------------------------------------------------------------------------


class FieldType:
    """How one input type is defaulted, coerced, checked and rendered."""

    widget = "input"

    def default(self) -> Any:
        return ""

    def coerce(self, raw: Any) -> Any:
        """Turn a stored spec value into a working value."""
        return raw

    def is_blank(self, value: Any) -> bool:
        return value is None or value == ""

    def normalize(self, attr: AttributeDefinition, value: Any) -> tuple[Any, SpecFieldError | None]:
        """Return the wire value for a non-blank working value, or an error."""
        return value, None


class TextField(FieldType):
    widget = "input"

    def coerce(self, raw):
        if raw is None:
            return ""
        if isinstance(raw, bool):
            return "true" if raw else "false"
        return raw if isinstance(raw, str) else str(raw)

    def is_blank(self, value):
        return value is None or (isinstance(value, str) and not value.strip())

    def normalize(self, attr, value):
        if not isinstance(value, str):
            return None, InvalidValueError(attr.key, f"{attr.key} must be text")
        return value, None


class NumberField(FieldType):
    widget = "number"

    def default(self):
        return None

    def coerce(self, raw):
        if isinstance(raw, str):
            if not raw.strip():
                return None
            parsed = parse_number(raw)
            return raw if parsed is None else parsed
        return raw

    def is_blank(self, value):
        return value is None or (isinstance(value, str) and not value.strip())

    def normalize(self, attr, value):
        # bool is an int subclass; a switch value is never a number
        if isinstance(value, bool):
            return None, InvalidValueError(attr.key, f"{attr.key} must be a number")
        if isinstance(value, (int, float)):
            if isinstance(value, float) and not math.isfinite(value):
                return None, InvalidValueError(attr.key, f"{attr.key} must be a finite number")
            return value, None
        if isinstance(value, str):
            parsed = parse_number(value)
            if parsed is not None:
                return parsed, None
        return None, InvalidValueError(attr.key, f"{attr.key} must be a number")


class DropdownField(FieldType):
    widget = "select"

    def coerce(self, raw):
        if raw is None:
            return ""
        if isinstance(raw, (int, float)) and not isinstance(raw, bool):
            return str(raw)
        return raw

    def normalize(self, attr, value):
        if value not in attr.option_values():
            return None, InvalidOptionError(attr.key)
        return value, None


class SwitchField(FieldType):
    widget = "switch"

    def default(self):
        return False

    def coerce(self, raw):
        return raw is True or raw == "true"

    def is_blank(self, value):
        return value is None or value is False

    def normalize(self, attr, value):
        if value is not True:
            return None, InvalidValueError(attr.key, f"{attr.key} must be true or false")
        return True, None


FIELD_TYPES: dict[InputType, FieldType] = {
    InputType.TEXT: TextField(),
    InputType.NUMBER: NumberField(),
    InputType.DROPDOWN: DropdownField(),
    InputType.SWITCH: SwitchField(),
}


def field_type(input_type: InputType) -> FieldType:
    try:
        return FIELD_TYPES[input_type]
    except KeyError:
        raise TypeError(f"No form field registered for input type {input_type!r}") from None


# ---------------------------------------------------------------------------
# Rendering descriptors
# ---------------------------------------------------------------------------


@dataclass
class FormOption:
    value: str
    label: str


@dataclass
class FormField:
    key: str
    type: InputType
    widget: str
    label: str
    value: Any
    required: bool
    options: list[FormOption] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "key": self.key,
            "type": self.type.value,
            "widget": self.widget,
            "label": self.label,
            "value": self.value,
            "required": self.required,
            "options": [{"value": o.value, "label": o.label} for o in self.options],
        }


# ---------------------------------------------------------------------------
# Form session
# ---------------------------------------------------------------------------


class DynamicSpecForm:
    """Editable spec values for one product editing session."""

    def __init__(self, orphan_policy: OrphanPolicy = OrphanPolicy.PRESERVE):
        self.orphan_policy = OrphanPolicy(orphan_policy)
        self.state = FormState.UNINITIALIZED
        self._schema: list[AttributeDefinition] = []
        self._by_key: dict[str, AttributeDefinition] = {}
        self._values: dict[str, Any] = {}
        self._orphans: dict[str, Any] = {}
        self._existing: dict[str, Any] = {}
        self._result: dict[str, Any] | None = None

    # -- lifecycle --------------------------------------------------------

    def initialize(
        self,
        schema: Iterable[AttributeDefinition],
        existing: Mapping[str, Any] | None = None,
    ) -> None:
        if self.state is not FormState.UNINITIALIZED:
            raise FormStateError(f"Cannot initialize a form that is {self.state.value}")
        self._load(schema, existing or {})
        self.state = FormState.EDITING

    def reinitialize(
        self,
        schema: Iterable[AttributeDefinition],
        existing: Mapping[str, Any] | None = None,
    ) -> None:
        """Swap in a new schema, e.g. after the product's category changed.

        Edits survive only for attributes present in both schemas with the
        same input type. Orphans are recomputed from the stored values.
        """
        self._require_editing("reinitialize")
        previous = {attr.key: attr for attr in self._schema}
        edited = dict(self._values)
        self._load(schema, self._existing if existing is None else existing)
        for attr in self._schema:
            old = previous.get(attr.key)
            if old is not None and old.type == attr.type:
                self._values[attr.key] = edited[attr.key]

    def _load(self, schema: Iterable[AttributeDefinition], existing: Mapping[str, Any]) -> None:
        self._schema = list(schema)
        self._by_key = {attr.key: attr for attr in self._schema}
        self._existing = dict(existing)
        self._values = {}
        for attr in self._schema:
            ftype = field_type(attr.type)
            if attr.key in existing and existing[attr.key] is not None:
                self._values[attr.key] = ftype.coerce(existing[attr.key])
            else:
                self._values[attr.key] = ftype.default()

        self._orphans = {}
        orphans = {
            k: v for k, v in existing.items() if k not in self._by_key and v is not None
        }
        if orphans and self.orphan_policy is OrphanPolicy.PRESERVE:
            self._orphans = orphans
        elif orphans:
            logger.info("Dropping orphaned spec values: %s", ", ".join(sorted(orphans)))

    # -- editing ----------------------------------------------------------

    def set_value(self, key: str, value: Any) -> None:
        self._require_editing("set_value")
        if key not in self._by_key:
            raise UnknownFieldError(key)
        self._values[key] = value

    def get_value(self, key: str) -> Any:
        if key not in self._by_key:
            raise UnknownFieldError(key)
        return self._values[key]

    @property
    def schema(self) -> list[AttributeDefinition]:
        return list(self._schema)

    @property
    def values(self) -> dict[str, Any]:
        return dict(self._values)

    @property
    def orphans(self) -> dict[str, Any]:
        return dict(self._orphans)

    @property
    def result(self) -> dict[str, Any] | None:
        return None if self._result is None else dict(self._result)

    # -- validation -------------------------------------------------------

    def validate_and_serialize(self) -> dict[str, Any]:
        """Validate every field and return the sparse spec map.

        All field errors are collected and raised together as a
        ``SpecValidationError``; the form stays editable in that case.
        """
        self._require_editing("validate_and_serialize")
        errors: list[SpecFieldError] = []
        output: dict[str, Any] = {}

        for attr in self._schema:
            ftype = field_type(attr.type)
            value = self._values.get(attr.key)
            if ftype.is_blank(value):
                if attr.is_required:
                    errors.append(RequiredFieldError(attr.key))
                continue
            wire_value, error = ftype.normalize(attr, value)
            if error is not None:
                errors.append(error)
                continue
            output[attr.key] = wire_value

        if errors:
            raise SpecValidationError(errors)

        for key, value in self._orphans.items():
            output.setdefault(key, value)

        self._result = output
        self.state = FormState.VALID
        return dict(output)

    # -- rendering --------------------------------------------------------

    def fields(self, lang: str = "uz") -> list[FormField]:
        if self.state is FormState.UNINITIALIZED:
            raise FormStateError("Form has not been initialized")
        rendered = []
        for attr in self._schema:
            ftype = field_type(attr.type)
            options = [
                FormOption(value=opt.value, label=resolve_label(opt.label, lang, opt.value))
                for opt in attr.options
            ]
            rendered.append(
                FormField(
                    key=attr.key,
                    type=attr.type,
                    widget=ftype.widget,
                    label=resolve_label(attr.label, lang, attr.key),
                    value=self._values.get(attr.key),
                    required=attr.is_required,
                    options=options,
                )
            )
        return rendered

    def _require_editing(self, operation: str) -> None:
        if self.state is not FormState.EDITING:
            raise FormStateError(f"Cannot {operation} while the form is {self.state.value}")


# ---------------------------------------------------------------------------
# Wire encoding
# ---------------------------------------------------------------------------


def encode_specs(specs: Mapping[str, Any]) -> str:
    """JSON-encode a sparse spec map for storage or transport."""
    return json.dumps(dict(specs), ensure_ascii=False)


def decode_specs(raw: str | Mapping[str, Any] | None) -> dict[str, Any]:
    """Decode a stored spec map. Null entries are treated as absent."""
    if raw is None or raw == "":
        return {}
    data = json.loads(raw) if isinstance(raw, str) else dict(raw)
    if not isinstance(data, dict):
        raise ValueError("specs must be a JSON object")
    specs: dict[str, Any] = {}
    for key, value in data.items():
        if value is None:
            continue
        if isinstance(value, (dict, list)):
            raise ValueError(f"specs value for {key!r} must be a scalar")
        specs[str(key)] = value
    return specs
