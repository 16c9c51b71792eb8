"""Create the database (if needed) and apply database/schema.sql.

Usage: APP_ENV=development python scripts/init_db.py
"""
from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.hr_attendance.hr_attendance.common.logging import configure_logging
from src.hr_attendance.hr_attendance.database.bootstrap import apply_schema, list_tables


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    logger = configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    db_config = dict(settings.DB_CONFIG)
    apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")
    logger.info(
        "schema ready database=%s tables=%s",
        db_config.get("database"),
        ",".join(sorted(list_tables(db_config))),
    )


if __name__ == "__main__":
    main()
