from __future__ import annotations

import asyncio
import importlib
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .absences.controller import register as register_absences
from .attendance.controller import register as register_attendance
from .common.datetime_utils import Clock
from .common.logging import get_logger, setup_logging
from .container import Container, ReconcilerOptions, build_container, build_store
from .core.enums import StoreBackend
from .database.bootstrap import apply_schema, list_tables
from .database.store import DocumentStore

log = get_logger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parents[3] / "database" / "schema.sql"


def load_settings():
    load_dotenv(override=False)
    return importlib.import_module(get_settings_module())


def container_from_settings(
    settings,
    *,
    store: Optional[DocumentStore] = None,
    clock: Optional[Clock] = None,
) -> Container:
    setup_logging(
        json_output=bool(getattr(settings, "LOG_JSON", False)),
        log_level=str(getattr(settings, "LOG_LEVEL", "INFO")),
    )

    backend = str(getattr(settings, "STORE_BACKEND", StoreBackend.MEMORY.value))
    db_config = getattr(settings, "DB_CONFIG", None)
    if store is None:
        if backend == StoreBackend.MYSQL.value and bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=SCHEMA_PATH)
            log.info("schema_ready", tables=len(list_tables(db_config)))
        store = build_store(backend, db_config=db_config)

    return build_container(store=store, options=ReconcilerOptions.from_settings(settings), clock=clock)


def create_app(*, store: Optional[DocumentStore] = None, clock: Optional[Clock] = None) -> Flask:
    settings = load_settings()
    app = Flask(__name__)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    container = container_from_settings(settings, store=store, clock=clock)
    app.extensions["absence_reconciler"] = container

    register_absences(app, container)
    register_attendance(app, container)

    return app


async def run_worker(container: Container, *, stop_event: Optional[asyncio.Event] = None) -> None:
    """Run the recurring absence service until ``stop_event`` is set."""

    stop_event = stop_event or asyncio.Event()
    container.scheduler.start()
    try:
        await stop_event.wait()
    finally:
        container.scheduler.stop()
        await container.scheduler.wait_idle()
