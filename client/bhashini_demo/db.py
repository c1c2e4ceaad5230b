import sqlite3
from pathlib import Path
from typing import Optional, Union

from .config import DB_PATH, logger


def init_database(db_path: Optional[Union[str, Path]] = None) -> None:
    """Initialize SQLite database with the key-value settings table."""
    path = Path(db_path) if db_path is not None else DB_PATH
    path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(path))
    cursor = conn.cursor()

    cursor.executescript(
        """
        CREATE TABLE IF NOT EXISTS settings (
            key TEXT PRIMARY KEY,
            value TEXT NOT NULL,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        );
        """
    )

    conn.commit()
    conn.close()
    logger.info(f"Settings database ready at {path}")


def get_db_connection(db_path: Optional[Union[str, Path]] = None) -> sqlite3.Connection:
    """Get SQLite database connection."""
    return sqlite3.connect(str(db_path if db_path is not None else DB_PATH))
