"""Validation of untrusted task input.

Every entry point collects all field errors before returning, so callers can
surface the complete list at once. Request bodies go through the pydantic
input models; list queries are parsed here against the sort allow-lists.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, Mapping, Optional, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from .enums import SortDirection, SortField, TaskStatus
from .filters import ListFilters
from .inputs import (  # noqa: F401
    DESCRIPTION_REQUIRED,
    DESCRIPTION_TYPE,
    STATUS_INVALID,
    STATUS_REQUIRED,
    TITLE_EMPTY,
    TITLE_MAX_LENGTH,
    TITLE_REQUIRED,
    TITLE_TOO_LONG,
    CreateInput,
    PatchInput,
    PutInput,
)

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)

LIMIT_MIN = 1
LIMIT_MAX = 100
DEFAULT_SORT = "created_at:desc"

_STATUSES = ", ".join(TaskStatus.values())
_SORT_FIELDS = ", ".join(f.value for f in SortField)

INVALID_BODY = "Invalid JSON body"
EMPTY_PATCH = "At least one field must be provided"
NOTHING_TO_UPDATE = "No valid fields to update"
QUERY_STATUS_INVALID = f'Query parameter "status" must be one of: {_STATUSES}'
QUERY_SORT_INVALID = (
    f'Query parameter "sort" must be like "{DEFAULT_SORT}" '
    f"and allowed fields are: {_SORT_FIELDS}"
)
QUERY_PAGE_INVALID = 'Query parameter "page" must be a positive integer'
QUERY_LIMIT_INVALID = f'Query parameter "limit" must be between {LIMIT_MIN} and {LIMIT_MAX}'

# Reported when a required key is absent from the payload.
MISSING_MESSAGES = {
    "title": TITLE_REQUIRED,
    "description": DESCRIPTION_REQUIRED,
    "status": STATUS_REQUIRED,
}


@dataclass(frozen=True)
class ValidationResult(Generic[T]):
    data: Optional[T] = None
    errors: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    @classmethod
    def success(cls, data: T) -> "ValidationResult[T]":
        return cls(data=data)

    @classmethod
    def failure(cls, errors: list[str]) -> "ValidationResult[T]":
        return cls(errors=list(errors))


def error_messages(exc: PydanticValidationError) -> list[str]:
    """Flatten pydantic errors into messages, in field declaration order."""
    messages = []
    for error in exc.errors():
        field_name = error["loc"][0] if error["loc"] else None
        if error["type"] == "missing" and field_name in MISSING_MESSAGES:
            messages.append(MISSING_MESSAGES[field_name])
        else:
            messages.append(error["msg"])
    return messages


def _parse_body(model: type[M], body: dict) -> ValidationResult[M]:
    try:
        return ValidationResult.success(model.model_validate(body))
    except PydanticValidationError as exc:
        return ValidationResult.failure(error_messages(exc))


def validate_create(body: object) -> ValidationResult[CreateInput]:
    if not isinstance(body, dict):
        return ValidationResult.failure([INVALID_BODY])
    return _parse_body(CreateInput, body)


def validate_patch(body: object) -> ValidationResult[PatchInput]:
    if not isinstance(body, dict):
        return ValidationResult.failure([INVALID_BODY])
    if not body:
        return ValidationResult.failure([EMPTY_PATCH])

    result = _parse_body(PatchInput, body)
    if result.ok and not result.data.changes():
        return ValidationResult.failure([NOTHING_TO_UPDATE])
    return result


def validate_put(body: object) -> ValidationResult[PutInput]:
    if not isinstance(body, dict):
        return ValidationResult.failure([INVALID_BODY])
    return _parse_body(PutInput, body)


def _parse_sort(raw: str) -> tuple[SortField, SortDirection] | None:
    parts = raw.split(":")
    if len(parts) != 2:
        return None
    field_name, direction = parts[0], parts[1].lower()
    if field_name not in {f.value for f in SortField}:
        return None
    if direction not in {d.value for d in SortDirection}:
        return None
    return SortField(field_name), SortDirection(direction)


def _parse_positive_int(raw: str) -> int | None:
    if not raw.isascii() or not raw.isdigit():
        return None
    return int(raw)


def validate_list_query(query: Mapping[str, str]) -> ValidationResult[ListFilters]:
    errors: list[str] = []
    values: dict[str, object] = {}

    if "status" in query:
        status = str(query["status"])
        if TaskStatus.is_valid(status):
            values["status"] = TaskStatus(status)
        else:
            errors.append(QUERY_STATUS_INVALID)

    if "search" in query:
        values["search"] = str(query["search"]).strip()

    if "sort" in query:
        parsed = _parse_sort(str(query["sort"]))
        if parsed is None:
            errors.append(QUERY_SORT_INVALID)
        else:
            values["sort_field"], values["sort_direction"] = parsed

    if "page" in query:
        page = _parse_positive_int(str(query["page"]))
        if page is None or page < 1:
            errors.append(QUERY_PAGE_INVALID)
        else:
            values["page"] = page

    if "limit" in query:
        limit = _parse_positive_int(str(query["limit"]))
        if limit is None or not LIMIT_MIN <= limit <= LIMIT_MAX:
            errors.append(QUERY_LIMIT_INVALID)
        else:
            values["limit"] = limit

    if errors:
        return ValidationResult.failure(errors)
    return ValidationResult.success(ListFilters(**values))
