from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .container import Container, build_container
from .sync.controller import register as register_sync

logger = logging.getLogger(__name__)


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=logging.DEBUG if app.config["DEBUG"] else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if container is None:
        container = build_container(
            db_root=getattr(settings, "DB_ROOT"),
            firebase_config=getattr(settings, "FIREBASE_CONFIG", None),
            batch_size=int(getattr(settings, "SYNC_BATCH_SIZE", 1)),
            ledger_max_entries=int(getattr(settings, "LEDGER_MAX_ENTRIES", 500)),
            sync_log_max_entries=int(getattr(settings, "SYNC_LOG_MAX_ENTRIES", 100)),
        )
    logger.info("payroll-sync settings=%s db_root=%s", settings_module, container.db_root)

    app.extensions["payroll_sync"] = container
    register_sync(app, container)

    return app
