from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .enums import SortDirection, SortField, TaskStatus


@dataclass(frozen=True)
class ListFilters:
    page: int = 1
    limit: Optional[int] = None
    status: Optional[TaskStatus] = None
    search: str | None = None
    sort_field: SortField = SortField.CREATED_AT
    sort_direction: SortDirection = SortDirection.DESC

    @property
    def sort(self) -> str:
        return f"{self.sort_field.value}:{self.sort_direction.value}"

    @property
    def paginated(self) -> bool:
        return self.limit is not None

    @property
    def offset(self) -> int:
        return (self.page - 1) * (self.limit or 0)

    def query_params(self, page: int) -> dict[str, str | int]:
        """Filter set re-encoded for a list link pointing at ``page``."""
        params: dict[str, str | int] = {"page": page, "sort": self.sort}
        if self.status is not None:
            params["status"] = self.status.value
        if self.search is not None:
            params["search"] = self.search
        if self.limit is not None:
            params["limit"] = self.limit
        return params
