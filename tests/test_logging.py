from __future__ import annotations

import logging
from dataclasses import replace

from app.infra import logging as app_logging


def test_server_loggers_use_app_handlers(tmp_path, monkeypatch) -> None:
    monkeypatch.setattr(
        app_logging,
        "SETTINGS",
        replace(app_logging.SETTINGS, log_dir=str(tmp_path / "logs"), access_log=True),
    )
    server = logging.getLogger("uvicorn.error")
    stray = logging.NullHandler()
    server.addHandler(stray)
    server.propagate = False

    app_logging.setup_logging()

    assert (tmp_path / "logs").is_dir()
    assert stray not in server.handlers
    assert server.propagate is True
    assert logging.getLogger("uvicorn.access").level == logging.INFO
    assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING
