#!/usr/bin/env python3
"""
Standalone database initialization script.
Creates every table for the configured database (DATABASE_URL or the local SQLite default).
"""

import sys
import logging
from pathlib import Path

# Add parent directory to path to import app modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import inspect  # noqa: E402

from domain.models.database import engine, init_database  # noqa: E402

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger("mealplanner.init_db")


def main() -> int:
    try:
        init_database()
        tables = inspect(engine).get_table_names()
        logger.info(f"Created {len(tables)} tables: {', '.join(tables)}")
        return 0
    except Exception:
        logger.exception("Database initialization failed")
        return 1


if __name__ == "__main__":
    sys.exit(main())
