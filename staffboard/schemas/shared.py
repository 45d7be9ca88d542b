"""
staffboard.schemas.shared - Reusable Schema Building Blocks

Field types and base models shared by the per-domain schemas:
- Phone / OptionalPhone: digits, spaces, dashes, parentheses and plus sign
- required_text(): trimmed, non-empty, bounded string with a field label
- InputModel: base config for action inputs (trims strings, forbids nothing)
- PaginationInput / FilterInput: page, page_size, search
- DateRangeInput / DateOnlyRangeInput: validated ranges
"""

import re
from datetime import date
from typing import Annotated, Literal

from pydantic import (
    AfterValidator,
    AwareDatetime,
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    StringConstraints,
    ValidationInfo,
    field_validator,
)

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100

SortOrder = Literal["asc", "desc"]
UserRoleName = Literal["admin", "coordinator"]

_PHONE_PATTERN = re.compile(r"^[\d\s\-\(\)\+]+$")


def _check_phone(value: str) -> str:
    if not _PHONE_PATTERN.match(value):
        raise ValueError("Invalid phone format")
    if len(value) < 9:
        raise ValueError("Phone must be at least 9 characters")
    if len(value) > 20:
        raise ValueError("Phone must be at most 20 characters")
    return value


Phone = Annotated[str, AfterValidator(_check_phone)]
OptionalPhone = Phone | None
OptionalEmail = EmailStr | None


def required_text(label: str, max_length: int):
    """
    Build a trimmed, non-empty string type with labelled messages.

    Example:
        >>> name: required_text("Name", 255)
    """

    def check(value: str) -> str:
        if not value:
            raise ValueError(f"{label} is required")
        if len(value) > max_length:
            raise ValueError(f"{label} must be at most {max_length} characters")
        return value

    return Annotated[str, AfterValidator(check)]


def _check_password(value: str) -> str:
    if len(value) < 8:
        raise ValueError("Password must be at least 8 characters")
    return value


# Passwords are taken verbatim
NewPassword = Annotated[
    str, StringConstraints(strip_whitespace=False), AfterValidator(_check_password)
]


class InputModel(BaseModel):
    """Base class for action input schemas."""

    model_config = ConfigDict(str_strip_whitespace=True)


class PaginationInput(InputModel):
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE)


class FilterInput(PaginationInput):
    """Pagination plus free-text search."""

    search: str | None = None


class DateRangeInput(InputModel):
    """Optional datetime range; date_to must not precede date_from."""

    date_from: AwareDatetime | None = None
    date_to: AwareDatetime | None = None

    @field_validator("date_to")
    @classmethod
    def _date_to_after_from(cls, value, info: ValidationInfo):
        start = info.data.get("date_from")
        if value is not None and start is not None and start > value:
            raise ValueError("Start date must be before or equal to end date")
        return value


class DateOnlyRangeInput(InputModel):
    """Inclusive YYYY-MM-DD range for reports."""

    start_date: date
    end_date: date

    @field_validator("end_date")
    @classmethod
    def _end_after_start(cls, value: date, info: ValidationInfo) -> date:
        start = info.data.get("start_date")
        if start is not None and start > value:
            raise ValueError("Start date must be before or equal to end date")
        return value


__all__ = [
    "DEFAULT_PAGE_SIZE",
    "MAX_PAGE_SIZE",
    "DateOnlyRangeInput",
    "DateRangeInput",
    "FilterInput",
    "InputModel",
    "NewPassword",
    "OptionalEmail",
    "OptionalPhone",
    "PaginationInput",
    "Phone",
    "SortOrder",
    "UserRoleName",
    "required_text",
]
