from typing import Any

from pydantic import BaseModel

from enums.validation_error_kind import ValidationErrorKind


class ValidationIssueDTO(BaseModel):
    """Single configuration violation with enough context to render a message."""
    kind: ValidationErrorKind
    field: str
    value: Any = None
    message: str


class ValidationResultDTO(BaseModel):
    ok: bool
    errors: list[ValidationIssueDTO] = []
