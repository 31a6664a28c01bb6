"""End-of-day sweep. Run from cron shortly before midnight:

    59 23 * * * python scripts/mark_absent.py
"""

from __future__ import annotations

import argparse
import importlib
import json
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.qr_attendance.qr_attendance.common.datetime_utils import parse_iso_date
from src.qr_attendance.qr_attendance.common.logging_utils import configure_logging
from src.qr_attendance.qr_attendance.container import build_container


def main() -> int:
    parser = argparse.ArgumentParser(description="Mark Absent / No Time Out for scheduled users.")
    parser.add_argument("--date", help="work date YYYY-MM-DD (default: today)")
    parser.add_argument("--no-backfill", action="store_true", help="skip filling earlier days without records")
    args = parser.parse_args()

    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    container = build_container(
        db_config=dict(settings.DB_CONFIG),
        timezone=getattr(settings, "TIMEZONE", None),
        max_lookback_days=int(getattr(settings, "ATTENDANCE_MAX_LOOKBACK_DAYS", 30)),
    )

    work_date = parse_iso_date(args.date) if args.date else None
    report = container.reconciler.run(work_date, backfill=not args.no_backfill)

    print(json.dumps(report.to_dict(), indent=2))
    return 0 if report.ok else 1


if __name__ == "__main__":
    sys.exit(main())
