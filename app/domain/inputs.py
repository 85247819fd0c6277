from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic_core import PydanticCustomError

from .enums import TaskStatus

CONTENT_FIELDS = ("title", "description", "status")
TITLE_MAX_LENGTH = 255

_STATUSES = ", ".join(TaskStatus.values())

TITLE_REQUIRED = 'Field "title" is required and must be a non-empty string'
TITLE_EMPTY = 'Field "title" must be a non-empty string'
TITLE_TOO_LONG = f'Field "title" must be <= {TITLE_MAX_LENGTH} characters'
DESCRIPTION_TYPE = 'Field "description" must be a string or null'
DESCRIPTION_REQUIRED = 'Field "description" is required for PUT (can be null)'
STATUS_INVALID = f'Field "status" must be one of: {_STATUSES}'
STATUS_REQUIRED = f'Field "status" is required and must be one of: {_STATUSES}'


def _field_error(message: str) -> PydanticCustomError:
    return PydanticCustomError("task_field", message)


def _clean_title(value: object, missing_message: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise _field_error(missing_message)
    title = value.strip()
    if len(title) > TITLE_MAX_LENGTH:
        raise _field_error(TITLE_TOO_LONG)
    return title


def _clean_description(value: object) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise _field_error(DESCRIPTION_TYPE)
    return value.strip() or None


def _clean_status(value: object, message: str) -> TaskStatus:
    if not TaskStatus.is_valid(value):
        raise _field_error(message)
    return TaskStatus(value)


class TaskInput(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    @field_validator("description", mode="before", check_fields=False)
    @classmethod
    def clean_description(cls, value: object) -> str | None:
        return _clean_description(value)


class CreateInput(TaskInput):
    title: str
    description: Optional[str] = None
    status: TaskStatus = TaskStatus.PENDING

    @field_validator("title", mode="before")
    @classmethod
    def clean_title(cls, value: object) -> str:
        return _clean_title(value, TITLE_REQUIRED)

    @field_validator("status", mode="before")
    @classmethod
    def clean_status(cls, value: object) -> TaskStatus:
        return _clean_status(value, STATUS_INVALID)


class PutInput(TaskInput):
    title: str
    description: Optional[str]
    status: TaskStatus

    @field_validator("title", mode="before")
    @classmethod
    def clean_title(cls, value: object) -> str:
        return _clean_title(value, TITLE_REQUIRED)

    @field_validator("status", mode="before")
    @classmethod
    def clean_status(cls, value: object) -> TaskStatus:
        return _clean_status(value, STATUS_REQUIRED)


class PatchInput(TaskInput):
    """Partial update; only fields present in the payload are applied."""

    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[TaskStatus] = None

    @field_validator("title", mode="before")
    @classmethod
    def clean_title(cls, value: object) -> str:
        return _clean_title(value, TITLE_EMPTY)

    @field_validator("status", mode="before")
    @classmethod
    def clean_status(cls, value: object) -> TaskStatus:
        return _clean_status(value, STATUS_INVALID)

    def changes(self) -> dict[str, object]:
        return {
            name: getattr(self, name)
            for name in CONTENT_FIELDS
            if name in self.model_fields_set
        }
