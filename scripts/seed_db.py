"""Load reference data (departments, designations, leave types) and the demo accounts."""

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

from src.employee_management.employee_management.database.bootstrap import (
    DEMO_EMPLOYEES,
    apply_seed_sql,
    ensure_demo_employees,
)


def main() -> None:
    load_dotenv(override=False)
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")

    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    apply_seed_sql(db_config, seed_path=REPO_ROOT / "database" / "seed.sql")
    ensure_demo_employees(db_config)

    print(f"OK: seeded {db_config.get('database')}. Demo logins:")
    for name, email, password, role, _, _ in DEMO_EMPLOYEES:
        print(f"  {role.value:<8} {email} / {password} ({name})")


if __name__ == "__main__":
    main()
