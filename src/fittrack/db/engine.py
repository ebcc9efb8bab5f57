"""Database engine setup and initialization."""

from pathlib import Path

import aiosqlite

from ..config import settings


def get_db_path(data_dir: Path | None = None) -> Path:
    """Get the database file path."""
    if data_dir is None:
        data_dir = settings.data_dir
    data_dir.mkdir(parents=True, exist_ok=True)
    return data_dir / settings.db_name


async def init_db(db_path: Path | None = None) -> None:
    """Initialize the document store schema."""
    if db_path is None:
        db_path = get_db_path()

    async with aiosqlite.connect(db_path) as db:
        # Every entity is a document addressed by its full path, e.g.
        # users/u1/programs/p1/weeks/w1. parent is the collection path.
        await db.execute("""
            CREATE TABLE IF NOT EXISTS documents (
                path TEXT PRIMARY KEY,
                parent TEXT NOT NULL,
                collection TEXT NOT NULL,
                id TEXT NOT NULL,
                user_id TEXT NOT NULL,
                data TEXT NOT NULL DEFAULT '{}',
                created_at TIMESTAMP NOT NULL,
                updated_at TIMESTAMP NOT NULL
            )
        """)

        # Scoped listings and counts
        await db.execute("""
            CREATE INDEX IF NOT EXISTS idx_documents_parent
            ON documents(parent)
        """)
        await db.execute("""
            CREATE INDEX IF NOT EXISTS idx_documents_user_collection
            ON documents(user_id, collection)
        """)
        await db.execute("""
            CREATE INDEX IF NOT EXISTS idx_documents_created
            ON documents(collection, created_at)
        """)

        await db.commit()
