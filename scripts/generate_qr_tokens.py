from __future__ import annotations

import argparse
import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.qr_attendance.qr_attendance.common.logging_utils import configure_logging
from src.qr_attendance.qr_attendance.container import build_container


def main() -> None:
    parser = argparse.ArgumentParser(description="Issue QR tokens to users that have none.")
    parser.add_argument("--user-id", type=int, help="regenerate the token of one user instead")
    args = parser.parse_args()

    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    container = build_container(db_config=dict(settings.DB_CONFIG), timezone=getattr(settings, "TIMEZONE", None))

    if args.user_id:
        container.qr_token_service.regenerate(args.user_id)
        print(f"OK: regenerated QR token for user {args.user_id}")
        return

    count = container.qr_token_service.generate_missing()
    print(f"OK: generated {count} QR token(s)")


if __name__ == "__main__":
    main()
