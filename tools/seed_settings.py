"""
Bootstrap the Google Sheets settings store from a restaurant configuration JSON.

Environment variables `GOOGLE_SHEETS_ID` and `GOOGLE_SERVICE_ACCOUNT_JSON`
select the spreadsheet.
"""

from __future__ import annotations

import argparse
from pathlib import Path

from ordergate.config import get_google_config
from ordergate.settings.models import load_settings_file
from ordergate.settings.repository import settings_rows, zone_rows
from ordergate.sheets.client import SheetsClient


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Seed the settings spreadsheet.")
    parser.add_argument("config", type=Path, help="Restaurant configuration JSON file.")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    settings = load_settings_file(args.config)
    google_cfg = get_google_config()
    client = SheetsClient(google_cfg.sheets_id, google_cfg.service_account_json)
    client.write("Settings!A1", settings_rows(settings))
    client.write("DeliveryZones!A1", zone_rows(settings))
    print(f"[OK] Seeded settings for {settings.name or args.config}")


if __name__ == "__main__":
    main()
