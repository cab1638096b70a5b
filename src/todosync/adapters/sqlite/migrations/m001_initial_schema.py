"""Initial schema: the todos table and its owner index."""

import sqlite3

from todosync.adapters.sqlite import schema

from .runner import Migration


class InitialSchemaMigration(Migration):
    """Migration 001: Create initial database schema."""

    @property
    def version(self) -> int:
        return 1

    @property
    def description(self) -> str:
        return "Initial database schema"

    def up(self, connection: sqlite3.Connection) -> None:
        connection.execute(schema.CREATE_TODOS_TABLE)
        connection.execute(schema.CREATE_TODOS_OWNER_INDEX)


initial_migration = InitialSchemaMigration()
