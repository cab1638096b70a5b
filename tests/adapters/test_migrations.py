"""Unit tests for the SQLite migration runner."""

from __future__ import annotations

import sqlite3

import pytest

from todosync.adapters.sqlite.migrations import ALL_MIGRATIONS, Migration, MigrationRunner


class _BrokenMigration(Migration):
    @property
    def version(self) -> int:
        return 2

    @property
    def description(self) -> str:
        return "Always fails"

    def up(self, connection: sqlite3.Connection) -> None:
        raise sqlite3.OperationalError("syntax error")


@pytest.fixture()
def conn():
    connection = sqlite3.connect(":memory:")
    yield connection
    connection.close()


def _tables(conn) -> set[str]:
    rows = conn.execute("SELECT name FROM sqlite_master WHERE type='table'").fetchall()
    return {row[0] for row in rows}


def test_fresh_database_starts_at_zero(conn):
    assert MigrationRunner(conn).get_current_version() == 0


def test_run_all_migrations(conn):
    runner = MigrationRunner(conn)
    applied = runner.run_migrations(ALL_MIGRATIONS)
    assert applied == len(ALL_MIGRATIONS)
    assert runner.get_current_version() == ALL_MIGRATIONS[-1].version
    assert "todos" in _tables(conn)


def test_rerun_is_a_noop(conn):
    runner = MigrationRunner(conn)
    runner.run_migrations(ALL_MIGRATIONS)
    assert runner.run_migrations(ALL_MIGRATIONS) == 0


def test_old_version_rejected(conn):
    runner = MigrationRunner(conn)
    runner.run_migrations(ALL_MIGRATIONS)
    with pytest.raises(ValueError, match="not greater"):
        runner.run_migration(ALL_MIGRATIONS[0])


def test_failed_migration_is_not_recorded(conn):
    runner = MigrationRunner(conn)
    runner.run_migrations(ALL_MIGRATIONS)
    with pytest.raises(RuntimeError, match="Migration 2 failed"):
        runner.run_migration(_BrokenMigration())
    assert runner.get_current_version() == 1
