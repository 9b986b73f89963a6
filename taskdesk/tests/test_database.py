"""Table creation against throwaway SQLite files."""

import pytest
from sqlalchemy import inspect, text
from sqlmodel import create_engine

from taskdesk.database import create_db_and_tables


@pytest.fixture(name="file_engine")
def file_engine_fixture(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'taskdesk.db'}")
    yield engine
    engine.dispose()


def test_creates_task_and_user_tables(file_engine):
    create_db_and_tables(file_engine)
    assert {"users", "tasks"} <= set(inspect(file_engine).get_table_names())


def test_existing_rows_survive_restart(file_engine):
    create_db_and_tables(file_engine)
    with file_engine.begin() as conn:
        conn.execute(text(
            "INSERT INTO users (id, username, role, created_at) "
            "VALUES ('alice', 'alice', 'user', '2025-01-01 00:00:00')"
        ))

    create_db_and_tables(file_engine)

    with file_engine.connect() as conn:
        assert conn.execute(text("SELECT username FROM users")).scalar_one() == "alice"
