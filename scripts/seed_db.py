"""Insert or reset the demo accounts (admin, employee, intern)."""
from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.hr_attendance.hr_attendance.common.logging import configure_logging
from src.hr_attendance.hr_attendance.database.bootstrap import DEMO_EMPLOYEES, ensure_demo_employees


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    logger = configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    ensure_demo_employees(dict(settings.DB_CONFIG))
    for _, email, password, role, _ in DEMO_EMPLOYEES:
        logger.info("demo account role=%s email=%s password=%s", role, email, password)


if __name__ == "__main__":
    main()
