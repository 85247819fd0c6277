from __future__ import annotations

from typing import Iterable

from .messages import JSON_CONTENT_TYPE, Response


class ApiError(Exception):
    status_code = 500
    default_message = "Internal Server Error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def payload(self) -> dict:
        return {"error": self.message}

    def to_response(self) -> Response:
        return Response.json(self.payload(), self.status_code)


class InputError(ApiError):
    status_code = 400
    default_message = "Bad Request"


class UnsupportedMediaTypeError(InputError):
    status_code = 415
    default_message = "Content-Type must be application/json"


class ValidationError(ApiError):
    status_code = 422
    default_message = "Unprocessable Entity"

    def __init__(self, errors: Iterable[str]) -> None:
        self.errors = list(errors)
        super().__init__("; ".join(self.errors) or None)

    def payload(self) -> dict:
        return {"errors": self.errors}


class NotFoundError(ApiError):
    status_code = 404
    default_message = "Not Found"


class MethodNotAllowedError(ApiError):
    status_code = 405
    default_message = "Method Not Allowed"

    def __init__(self, allowed: Iterable[str]) -> None:
        self.allowed = sorted(set(allowed))
        super().__init__()

    def to_response(self) -> Response:
        return Response(
            self.status_code,
            {"Content-Type": JSON_CONTENT_TYPE, "Allow": ", ".join(self.allowed)},
            self.payload(),
        )
