from __future__ import annotations

from app.api.messages import Request, Response
from app.api.router import Router


def _handler(name: str):
    def handle(request: Request, params) -> Response:
        return Response.json({"handler": name, "params": dict(params)})

    return handle


def test_dispatch_calls_matching_handler_with_named_params() -> None:
    router = Router()
    router.add("get", r"/tasks/(?P<id>\d+)/(\w+)", _handler("show"))

    response = router.dispatch(Request.build("GET", "/tasks/7/extra"))

    assert response.status_code == 200
    assert response.body == {"handler": "show", "params": {"id": "7"}}


def test_first_registered_route_wins() -> None:
    router = Router()
    router.add("GET", r"/tasks", _handler("first"))
    router.add("GET", r"/tasks", _handler("second"))

    assert router.dispatch(Request.build("GET", "/tasks")).body["handler"] == "first"


def test_wrong_method_on_known_path_is_405() -> None:
    router = Router()
    router.add("GET", r"/tasks", _handler("index"))

    response = router.dispatch(Request.build("DELETE", "/tasks"))

    assert response.status_code == 405
    assert response.headers["Allow"] == "GET"
    assert response.body == {"error": "Method Not Allowed"}


def test_allow_header_is_sorted_and_unique() -> None:
    router = Router()
    router.add("PUT", r"/tasks/(?P<id>\d+)", _handler("put"))
    router.add("GET", r"/tasks/(?P<id>\d+)", _handler("show"))
    router.add("DELETE", r"/tasks/(?P<id>\d+)", _handler("destroy"))
    router.add("GET", r"/tasks/(?P<id>\d+)", _handler("shadowed"))

    response = router.dispatch(Request.build("POST", "/tasks/1"))

    assert response.headers["Allow"] == "DELETE, GET, PUT"


def test_unknown_path_is_404() -> None:
    router = Router()
    router.add("GET", r"/tasks", _handler("index"))

    response = router.dispatch(Request.build("GET", "/projects"))

    assert response.status_code == 404
    assert response.body == {"error": "Not Found"}


def test_pattern_must_match_whole_path() -> None:
    router = Router()
    router.add("GET", r"/tasks/(?P<id>\d+)", _handler("show"))

    assert router.dispatch(Request.build("GET", "/tasks/1/comments")).status_code == 404
    assert router.dispatch(Request.build("GET", "/tasks/abc")).status_code == 404


def test_trailing_slash_is_ignored() -> None:
    router = Router()
    router.add("GET", r"/tasks", _handler("index"))

    assert router.dispatch(Request.build("GET", "/tasks/")).status_code == 200
