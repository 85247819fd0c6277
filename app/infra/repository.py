from __future__ import annotations

import logging
import math
from contextlib import contextmanager
from typing import Iterator, Optional
from urllib.parse import urlencode

from sqlalchemy import delete, func, or_, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from app.domain.entities import TaskEntity
from app.domain.enums import SortDirection, SortField, TaskStatus
from app.domain.filters import ListFilters
from app.domain.inputs import CONTENT_FIELDS, CreateInput, PatchInput, PutInput

from .models import TaskModel, utcnow

logger = logging.getLogger(__name__)

LIST_PATH = "/tasks"


class StorageFault(RuntimeError):
    """The backing store failed; the request cannot be completed."""


def _to_entity(model: TaskModel) -> TaskEntity:
    return TaskEntity(
        id=model.id,
        title=model.title,
        description=model.description,
        status=TaskStatus(model.status),
        created_at=model.created_at,
        updated_at=model.updated_at,
    )


def _to_columns(values: dict[str, object]) -> dict[str, object]:
    columns = {}
    for key, value in values.items():
        if key not in CONTENT_FIELDS:
            continue
        columns[key] = value.value if isinstance(value, TaskStatus) else value
    return columns


def _filter_conditions(filters: ListFilters) -> list:
    conditions = []

    if filters.status is not None:
        conditions.append(TaskModel.status == filters.status.value)

    if filters.search:
        pattern = f"%{filters.search}%"
        conditions.append(
            or_(
                TaskModel.title.like(pattern),
                TaskModel.description.like(pattern),
            )
        )

    return conditions


def _order_by(filters: ListFilters) -> list:
    column = getattr(TaskModel, filters.sort_field.value)
    descending = filters.sort_direction == SortDirection.DESC
    order = [column.desc() if descending else column.asc()]
    if filters.sort_field != SortField.ID:
        order.append(TaskModel.id.desc() if descending else TaskModel.id.asc())
    return order


def build_list_link(filters: ListFilters, page: int) -> str:
    return f"{LIST_PATH}?{urlencode(filters.query_params(page))}"


class TaskStore:
    def __init__(self, session_factory: sessionmaker) -> None:
        self._session_factory = session_factory

    @contextmanager
    def _session(self) -> Iterator[Session]:
        try:
            with self._session_factory() as session:
                yield session
        except SQLAlchemyError as exc:
            logger.error("Storage failure: %s", exc)
            raise StorageFault("Task storage is unavailable") from exc

    def create(self, data: CreateInput) -> TaskEntity:
        now = utcnow()
        with self._session() as session:
            task = TaskModel(
                title=data.title,
                description=data.description,
                status=data.status.value,
                created_at=now,
                updated_at=now,
            )
            session.add(task)
            session.commit()
            session.refresh(task)
            logger.info("Created task %s", task.id)
            return _to_entity(task)

    def find(self, task_id: int) -> Optional[TaskEntity]:
        with self._session() as session:
            task = session.get(TaskModel, task_id)
            return _to_entity(task) if task else None

    def delete(self, task_id: int) -> bool:
        with self._session() as session:
            result = session.execute(delete(TaskModel).where(TaskModel.id == task_id))
            session.commit()
            removed = result.rowcount > 0
        if removed:
            logger.info("Deleted task %s", task_id)
        return removed

    def patch(self, task_id: int, data: PatchInput) -> Optional[TaskEntity]:
        columns = _to_columns(data.changes())
        if not columns:
            return self.find(task_id)
        self._update(task_id, columns)
        return self.find(task_id)

    def put(self, task_id: int, data: PutInput) -> Optional[TaskEntity]:
        self._update(
            task_id,
            _to_columns({
                "title": data.title,
                "description": data.description,
                "status": data.status,
            }),
        )
        return self.find(task_id)

    def list(self, filters: ListFilters) -> dict:
        conditions = _filter_conditions(filters)

        with self._session() as session:
            total = session.scalar(
                select(func.count()).select_from(TaskModel).where(*conditions)
            ) or 0

            tasks = []
            # Pages past the end are empty; their offset may not even fit a bind.
            if not filters.paginated or filters.offset < total:
                stmt = select(TaskModel).where(*conditions).order_by(*_order_by(filters))
                if filters.paginated:
                    stmt = stmt.limit(filters.limit).offset(filters.offset)
                tasks = [_to_entity(task).to_dict() for task in session.scalars(stmt)]

        if not filters.paginated:
            return {"data": tasks, "meta": {"total": total}}

        total_pages = max(1, math.ceil(total / filters.limit))
        links = {
            "self": build_list_link(filters, filters.page),
            "first": build_list_link(filters, 1),
            "last": build_list_link(filters, total_pages),
        }
        if filters.page > 1:
            links["prev"] = build_list_link(filters, filters.page - 1)
        if filters.page < total_pages:
            links["next"] = build_list_link(filters, filters.page + 1)

        return {
            "data": tasks,
            "meta": {
                "total": total,
                "page": filters.page,
                "limit": filters.limit,
                "total_pages": total_pages,
            },
            "links": links,
        }

    def _update(self, task_id: int, columns: dict[str, object]) -> None:
        with self._session() as session:
            session.execute(
                update(TaskModel)
                .where(TaskModel.id == task_id)
                .values(**columns, updated_at=utcnow())
            )
            session.commit()
        logger.debug("Updated task %s fields=%s", task_id, sorted(columns))
