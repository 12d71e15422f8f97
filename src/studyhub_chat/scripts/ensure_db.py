"""Utility script to create or reset the chat tables without Alembic."""
from __future__ import annotations

import argparse
import sys

from sqlalchemy.exc import SQLAlchemyError

from studyhub_chat.core.settings import settings
from studyhub_chat.db.session import create_tables, drop_tables


def main() -> None:
    parser = argparse.ArgumentParser(description="Ensure or reset the chat tables")
    parser.add_argument(
        "--drop-tables",
        action="store_true",
        help="Drop every chat table before creating them again.",
    )
    args = parser.parse_args()

    try:
        if args.drop_tables:
            drop_tables()
            print("[ensure_db] dropped all chat tables")
        create_tables()
    except SQLAlchemyError as exc:
        print(f"[ensure_db] ERROR: {exc}", file=sys.stderr)
        sys.exit(1)
    print(f"[ensure_db] tables ready on {settings.effective_database_url}")


if __name__ == "__main__":
    main()
