"""
Define application startup and shutdown procedures
"""

import re
from contextlib import asynccontextmanager
from fastapi import FastAPI
from core.config import get_settings
from core.init_db import init_db
from core.logger import logger


def _log_setting(key: str, value):
    """Log a setting, masking sensitive values like passwords and secrets"""
    if ("PASSWORD" in key or "SECRET" in key) and value is not None:
        logger.info("  %s: %s", key, "*****")
    elif "SQLALCHEMY_DATABASE_URI" in key and value is not None:
        # Mask password in database URI if present
        masked_value = re.sub(r"://(.*?):(.*?)@", r"://\1:*****@", value)
        logger.info("  %s: %s", key, masked_value)
    else:
        logger.info("  %s: %s", key, value)


# Handle startup/shutdown tasks
@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info("In lifespan...starting up")

    settings = get_settings()

    logger.info("Configuration Settings:")
    # Computed fields don't appear in vars()
    _log_setting("SQLALCHEMY_DATABASE_URI", settings.SQLALCHEMY_DATABASE_URI)
    for key, value in vars(settings).items():
        _log_setting(key, value)

    try:
        logger.info("Initializing database...")
        init_db()
    except Exception as e:
        logger.error("Database initialization failed: %s", e)
        raise RuntimeError(
            f"Cannot start application: database initialization failed - {e}"
        ) from e

    logger.info("In lifespan...yield")
    try:
        yield
    finally:
        # Shutdown
        logger.info("In lifespan...shutting down")
