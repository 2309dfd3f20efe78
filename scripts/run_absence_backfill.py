"""Run the absence backfill once, for yesterday or a given YYYY-MM-DD date."""

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

from src.practicum_attendance.practicum_attendance.common.datetime_utils import parse_iso_date
from src.practicum_attendance.practicum_attendance.common.log import configure_logging
from src.practicum_attendance.practicum_attendance.container import build_container


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("date", nargs="?", help="target date (YYYY-MM-DD), yesterday by default")
    args = parser.parse_args(argv)

    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    container = build_container(settings)
    target = parse_iso_date(args.date) if args.date else None
    result = container.absence_scheduler.create_absent_records_for_date(target)
    print(json.dumps(result.to_dict()))
    return 0


if __name__ == "__main__":
    sys.exit(main())
