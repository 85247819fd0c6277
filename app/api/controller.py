from __future__ import annotations

from typing import Mapping

from app.domain.entities import TaskEntity
from app.domain.validation import (
    ValidationResult,
    validate_create,
    validate_list_query,
    validate_patch,
    validate_put,
)
from app.infra.repository import TaskStore

from .errors import InputError, NotFoundError, UnsupportedMediaTypeError, ValidationError
from .messages import Request, Response

TASK_NOT_FOUND = "Task not found"
MAX_TASK_ID = 2**63 - 1


def _require_json(request: Request) -> None:
    if not request.is_json():
        raise UnsupportedMediaTypeError()
    if request.body_error is not None:
        raise InputError(f"Invalid JSON: {request.body_error}")


def _unwrap(result: ValidationResult):
    if not result.ok:
        raise ValidationError(result.errors)
    return result.data


def _task_id(params: Mapping[str, str]) -> int:
    digits = params["id"].lstrip("0") or "0"
    # Ids beyond the integer column range cannot exist.
    if len(digits) > len(str(MAX_TASK_ID)) or int(digits) > MAX_TASK_ID:
        raise NotFoundError(TASK_NOT_FOUND)
    return int(digits)


class TaskController:
    def __init__(self, store: TaskStore) -> None:
        self._store = store

    def index(self, request: Request, params: Mapping[str, str]) -> Response:
        filters = _unwrap(validate_list_query(request.query))
        return Response.json(self._store.list(filters), 200)

    def store(self, request: Request, params: Mapping[str, str]) -> Response:
        _require_json(request)
        data = _unwrap(validate_create(request.body))
        task = self._store.create(data)
        return Response.json({"data": task.to_dict()}, 201)

    def show(self, request: Request, params: Mapping[str, str]) -> Response:
        task = self._find_or_404(_task_id(params))
        return Response.json({"data": task.to_dict()}, 200)

    def patch(self, request: Request, params: Mapping[str, str]) -> Response:
        _require_json(request)
        task = self._find_or_404(_task_id(params))
        data = _unwrap(validate_patch(request.body))
        updated = self._store.patch(task.id, data)
        return Response.json({"data": self._present(updated)}, 200)

    def put(self, request: Request, params: Mapping[str, str]) -> Response:
        _require_json(request)
        task = self._find_or_404(_task_id(params))
        data = _unwrap(validate_put(request.body))
        updated = self._store.put(task.id, data)
        return Response.json({"data": self._present(updated)}, 200)

    def destroy(self, request: Request, params: Mapping[str, str]) -> Response:
        if not self._store.delete(_task_id(params)):
            raise NotFoundError(TASK_NOT_FOUND)
        return Response.no_content()

    def _find_or_404(self, task_id: int) -> TaskEntity:
        task = self._store.find(task_id)
        if task is None:
            raise NotFoundError(TASK_NOT_FOUND)
        return task

    @staticmethod
    def _present(task: TaskEntity | None) -> dict:
        # Deleted between lookup and update.
        if task is None:
            raise NotFoundError(TASK_NOT_FOUND)
        return task.to_dict()
