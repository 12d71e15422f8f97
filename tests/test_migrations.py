# tests/test_migrations.py
"""The Alembic history builds the same tables the ORM maps."""

from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect

from studyhub_chat.db.session import Base

MIGRATIONS_DIR = Path(__file__).resolve().parents[1] / "migrations"


def test_upgrade_head_creates_chat_schema(tmp_path, monkeypatch) -> None:
    url = f"sqlite:///{tmp_path / 'chat.db'}"
    monkeypatch.setenv("ALEMBIC_URL", url)
    cfg = Config(str(MIGRATIONS_DIR / "alembic.ini"))
    cfg.set_main_option("script_location", str(MIGRATIONS_DIR))

    command.upgrade(cfg, "head")

    engine = create_engine(url)
    try:
        tables = set(inspect(engine).get_table_names())
    finally:
        engine.dispose()
    assert set(Base.metadata.tables) <= tables
    assert "alembic_version" in tables
