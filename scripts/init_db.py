from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module  # noqa: E402

from src.attendance_kiosk.attendance_kiosk.database.bootstrap import apply_schema, list_tables  # noqa: E402
from src.attendance_kiosk.attendance_kiosk.database.connection import DBConfig, DatabaseConnection  # noqa: E402


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(settings.DB_CONFIG))

    count = apply_schema(conn, schema_path=REPO_ROOT / "database" / "schema.sql")
    tables = list_tables(conn)
    print(f"Applied {count} statements to {conn.config.database}: {', '.join(sorted(tables))}")


if __name__ == "__main__":
    main()
