"""SQL statements for the local task store."""

CREATE_TODOS_TABLE = """
    CREATE TABLE IF NOT EXISTS todos (
        id TEXT PRIMARY KEY,
        title TEXT NOT NULL,
        completed INTEGER NOT NULL DEFAULT 0,
        user_id TEXT NOT NULL,
        priority INTEGER,
        created_at TEXT NOT NULL,
        updated_at TEXT
    )
"""

CREATE_TODOS_OWNER_INDEX = """
    CREATE INDEX IF NOT EXISTS idx_todos_user_created
    ON todos (user_id, created_at DESC)
"""
