from __future__ import annotations

import logging
import sys

import uvicorn
from sqlalchemy.orm import sessionmaker

from app.api.asgi import Application
from app.api.controller import TaskController
from app.api.router import Router
from app.config import SETTINGS
from app.infra.db import build_engine, build_session_factory, init_db
from app.infra.logging import setup_logging
from app.infra.repository import TaskStore

logger = logging.getLogger(__name__)

TASK_ID = r"/tasks/(?P<id>\d+)"


def build_router(controller: TaskController) -> Router:
    router = Router()
    router.add("GET", r"/tasks", controller.index)
    router.add("POST", r"/tasks", controller.store)
    router.add("GET", TASK_ID, controller.show)
    router.add("PATCH", TASK_ID, controller.patch)
    router.add("PUT", TASK_ID, controller.put)
    router.add("DELETE", TASK_ID, controller.destroy)
    return router


def create_app(session_factory: sessionmaker) -> Application:
    controller = TaskController(TaskStore(session_factory))
    return Application(build_router(controller))


def main() -> None:
    setup_logging()
    engine = build_engine(SETTINGS.database_url)
    try:
        init_db(engine)
    except Exception:  # noqa: BLE001
        logger.exception("Database connection failed")
        sys.exit(1)

    app = create_app(build_session_factory(engine))
    logger.info("Serving tasks API on %s:%s", SETTINGS.host, SETTINGS.port)
    uvicorn.run(
        app,
        host=SETTINGS.host,
        port=SETTINGS.port,
        lifespan="off",
        log_config=None,
        access_log=SETTINGS.access_log,
    )


if __name__ == "__main__":
    main()
