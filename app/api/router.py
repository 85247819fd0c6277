from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Mapping

from .errors import MethodNotAllowedError, NotFoundError
from .messages import Request, Response

Handler = Callable[[Request, Mapping[str, str]], Response]


@dataclass(frozen=True)
class Route:
    method: str
    pattern: re.Pattern
    handler: Handler


class Router:
    """Ordered route table; the first entry matching path and method wins.

    A path matched only under other methods yields 405 with an ``Allow``
    header; a path matched by no entry yields 404.
    """

    def __init__(self) -> None:
        self._routes: list[Route] = []

    def add(self, method: str, pattern: str, handler: Handler) -> None:
        self._routes.append(Route(method.upper(), re.compile(pattern), handler))

    def dispatch(self, request: Request) -> Response:
        allowed: list[str] = []

        for route in self._routes:
            match = route.pattern.fullmatch(request.path)
            if match is None:
                continue

            allowed.append(route.method)

            if route.method == request.method:
                return route.handler(request, match.groupdict())

        if allowed:
            return MethodNotAllowedError(allowed).to_response()
        return NotFoundError().to_response()
