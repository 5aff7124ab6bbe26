#!/usr/bin/env python3
"""Container entrypoint: wait for Postgres, migrate and seed, then hand over to uvicorn."""
import os
import sys

import wait_for_db  # noqa: F401

from ckforest.core.config import settings
from ckforest.core.logging import configure_logging
from ckforest.seed import migrate, seed_database

configure_logging()
migrate(settings.DATABASE_URL)
seed_database(settings.DATABASE_URL)

port = os.getenv("PORT", "8000")
os.execv(sys.executable, [sys.executable, "-m", "uvicorn", "ckforest.main:app", "--host", "0.0.0.0", "--port", port])
