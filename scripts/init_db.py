from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.class_attendance.class_attendance.database.bootstrap import apply_schema, list_tables
from src.class_attendance.class_attendance.database.connection import DBConfig
from src.class_attendance.class_attendance.store.mysql_record_store import COLLECTIONS


def main() -> int:
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")

    tables = set(list_tables(db_config))
    missing = sorted(table.name for table in COLLECTIONS.values() if table.name not in tables)
    target = DBConfig.from_dict(db_config).describe()
    if missing:
        print(f"ERROR: {target} is missing tables: {', '.join(missing)}")
        return 1

    print(f"OK: Applied schema.sql -> {target} (tables={len(tables)})")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
