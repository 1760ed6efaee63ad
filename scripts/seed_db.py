from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module  # noqa: E402

from src.attendance_kiosk.attendance_kiosk.database.bootstrap import apply_seed_sql  # noqa: E402
from src.attendance_kiosk.attendance_kiosk.database.connection import DBConfig, DatabaseConnection  # noqa: E402


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    config = DBConfig.from_dict(settings.DB_CONFIG)
    conn = DatabaseConnection.get_instance(config)

    apply_seed_sql(conn, seed_path=REPO_ROOT / "database" / "seed.sql")

    print(f"OK: Seeded database -> {config.user}@{config.host}:{config.port}/{config.database}")


if __name__ == "__main__":
    main()
