"""Close sessions left open at the end of the day.

Schedule at or after 22:00 (e.g. cron `5 22 * * *`). Safe to run repeatedly:
records that are already closed are skipped.
"""
from __future__ import annotations

import importlib
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.onpoint_payroll.onpoint_payroll.container import build_container


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    logging.basicConfig(level=str(getattr(settings, "LOG_LEVEL", "INFO")).upper())

    container = build_container(
        db_config=dict(settings.DB_CONFIG),
        auto_close_hour=int(getattr(settings, "AUTO_CLOSE_HOUR", 22)),
    )
    closed = container.attendance_service.auto_close_open_days()
    print(f"OK: auto-closed {closed} open session(s)")


if __name__ == "__main__":
    main()
