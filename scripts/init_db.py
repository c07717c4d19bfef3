from __future__ import annotations

import importlib

from dotenv import load_dotenv

from site_engineer.config import get_settings_module
from site_engineer.database.bootstrap import apply_schema, list_tables
from site_engineer.database.connection import DBConfig


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    apply_schema(db_config)
    tables = list_tables(db_config)
    print(f"OK: Applied schema.sql -> {DBConfig.from_dict(db_config).describe()} (tables={len(tables)})")


if __name__ == "__main__":
    main()
