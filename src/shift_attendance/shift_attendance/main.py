from __future__ import annotations

import importlib
import logging
from pathlib import Path

from dotenv import load_dotenv

from config import get_settings_module

from .container import Container, build_container
from .database.bootstrap import apply_schema, list_tables

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parents[3] / "database" / "schema.sql"


def create_engine() -> Container:
    """Load settings (APP_ENV + .env), configure logging and wire the services."""
    load_dotenv(override=False)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    db_config = dict(getattr(settings, "DB_CONFIG"))
    debug = bool(getattr(settings, "DEBUG", False))

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "DEBUG" if debug else "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    logger.info(
        "settings=%s db=%s@%s:%s/%s",
        settings_module,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )

    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        apply_schema(db_config, schema_path=SCHEMA_PATH)
        logger.info("Schema ready (tables=%s)", len(list_tables(db_config)))

    return build_container(
        db_config=db_config,
        save_attempts=int(getattr(settings, "SAVE_ATTEMPTS", 3)),
    )
