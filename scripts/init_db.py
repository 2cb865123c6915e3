#!/usr/bin/env python
"""Create the payroll tables in the configured database.

Usage:
    python scripts/init_db.py
    python scripts/init_db.py --database-url postgresql://...
    python scripts/init_db.py --drop
"""

import argparse
import sys

from sqlalchemy import create_engine, inspect
from sqlalchemy.exc import SQLAlchemyError

from worklog_payroll.config import get_settings
from worklog_payroll.models import Base


def main() -> int:
    parser = argparse.ArgumentParser(description="Create payroll tables")
    parser.add_argument(
        "--database-url",
        help="Synchronous database URL (default: DATABASE_URL_SYNC)",
    )
    parser.add_argument(
        "--drop",
        action="store_true",
        help="Drop existing payroll tables first (destroys data)",
    )
    args = parser.parse_args()

    database_url = args.database_url or get_settings().database_url_sync
    engine = create_engine(database_url)

    try:
        if args.drop:
            print("Dropping payroll tables...")
            Base.metadata.drop_all(engine)

        Base.metadata.create_all(engine)
        tables = sorted(inspect(engine).get_table_names())
    except SQLAlchemyError as e:
        print(f"ERROR: {e}")
        return 1
    finally:
        engine.dispose()

    print(f"Tables present: {', '.join(tables)}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
