"""Error taxonomy for the attribute schema and product spec form."""

from __future__ import annotations


class MarketplaceError(Exception):
    """Base class for every error raised by this service's domain code."""


class ValidationError(MarketplaceError):
    """A schema draft or patch violates a field-level rule."""

    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


class NotFoundError(MarketplaceError):
    """A referenced category, attribute or product does not exist."""

    def __init__(self, resource: str, identifier: object):
        super().__init__(f"{resource} {identifier!r} not found")
        self.resource = resource
        self.identifier = identifier


class UpstreamError(MarketplaceError):
    """The remote marketplace API failed or could not be reached."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class FormStateError(MarketplaceError):
    """A spec form operation was called in a state that does not allow it."""


# ---------------------------------------------------------------------------
# Per-field spec form errors (collected, never raised on their own)
# ---------------------------------------------------------------------------


class SpecFieldError(MarketplaceError):
    code = "invalid"

    def __init__(self, key: str, message: str | None = None):
        super().__init__(message or self.default_message(key))
        self.key = key
        self.message = str(self)

    def default_message(self, key: str) -> str:
        return f"{key} is invalid"

    def to_dict(self) -> dict:
        return {"key": self.key, "code": self.code, "message": self.message}

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SpecFieldError):
            return NotImplemented
        return type(self) is type(other) and self.key == other.key

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.key))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.key!r})"


class RequiredFieldError(SpecFieldError):
    code = "required"

    def default_message(self, key: str) -> str:
        return f"{key} is required"


class InvalidOptionError(SpecFieldError):
    code = "invalid_option"

    def default_message(self, key: str) -> str:
        return f"{key} is not one of the allowed options"


class InvalidValueError(SpecFieldError):
    code = "invalid_type"

    def default_message(self, key: str) -> str:
        return f"{key} has a value of the wrong type"


class UnknownFieldError(SpecFieldError):
    code = "unknown_field"

    def default_message(self, key: str) -> str:
        return f"{key} is not defined for this category"


class SpecValidationError(MarketplaceError):
    """Aggregate of every field error found in one validation pass."""

    def __init__(self, errors: list[SpecFieldError]):
        keys = ", ".join(e.key for e in errors)
        super().__init__(f"Invalid product specs: {keys}")
        self.errors = list(errors)

    def to_list(self) -> list[dict]:
        return [e.to_dict() for e in self.errors]
