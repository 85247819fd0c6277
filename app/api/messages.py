from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

JSON_CONTENT_TYPE = "application/json; charset=utf-8"


def normalize_path(path: str) -> str:
    path = path.split("?", 1)[0].rstrip("/")
    return path or "/"


@dataclass(frozen=True)
class Request:
    method: str
    path: str
    query: Mapping[str, str] = field(default_factory=dict)
    headers: Mapping[str, str] = field(default_factory=dict)
    body: Any = None
    body_error: Optional[str] = None

    @classmethod
    def build(
        cls,
        method: str,
        path: str,
        query: Mapping[str, str] | None = None,
        headers: Mapping[str, str] | None = None,
        body: Any = None,
        body_error: str | None = None,
    ) -> "Request":
        return cls(
            method=method.upper(),
            path=normalize_path(path),
            query=dict(query or {}),
            headers={name.lower(): value for name, value in (headers or {}).items()},
            body=body,
            body_error=body_error,
        )

    @property
    def content_type(self) -> str:
        return self.headers.get("content-type", "").lower()

    def is_json(self) -> bool:
        return "application/json" in self.content_type


@dataclass
class Response:
    status_code: int = 200
    headers: dict[str, str] = field(default_factory=dict)
    body: Any = None

    @classmethod
    def json(cls, data: Any, status_code: int = 200) -> "Response":
        return cls(status_code, {"Content-Type": JSON_CONTENT_TYPE}, data)

    @classmethod
    def no_content(cls) -> "Response":
        return cls(204, {}, None)

    def render(self) -> bytes:
        if self.status_code == 204 or self.body is None:
            return b""
        if "application/json" in self.headers.get("Content-Type", "").lower():
            return json.dumps(self.body, ensure_ascii=False).encode("utf-8")
        return str(self.body).encode("utf-8")
