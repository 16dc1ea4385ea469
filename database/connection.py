"""
Database connection management.

One SQLite connection per application context, stored on ``g``. Grid moves
from several map clients serialize on the file, so writers wait for the
lock instead of failing right away.
"""

import os
import sqlite3
from flask import g, current_app

# ms a writer waits for a competing grid move to finish
BUSY_TIMEOUT_MS = 5000


def get_db():
    """
    Get the database connection of the current app context.

    Returns:
        sqlite3.Connection: Connection with sqlite3.Row rows
    """
    if 'db' not in g:
        db_path = current_app.config.get('DATABASE_PATH', 'instance/zone_map.db')
        if db_path != ':memory:':
            db_dir = os.path.dirname(db_path)
            if db_dir:
                os.makedirs(db_dir, exist_ok=True)

        g.db = sqlite3.connect(db_path, detect_types=sqlite3.PARSE_DECLTYPES)
        g.db.row_factory = sqlite3.Row
        g.db.execute(f'PRAGMA busy_timeout = {BUSY_TIMEOUT_MS}')
        g.db.execute('PRAGMA journal_mode = WAL')
    return g.db


def close_db(e=None):
    """Close the connection at app context teardown."""
    db = g.pop('db', None)
    if db is not None:
        db.close()


def init_db(seed: bool = True):
    """
    Recreate the schema, optionally with the demo establishments.
    WARNING: This will delete all existing positions!

    Args:
        seed: Insert demo establishments after creating the tables
    """
    from database.schema import drop_tables, create_tables, create_indexes
    from database.seed import seed_database

    db = get_db()

    drop_tables(db)
    create_tables(db)
    create_indexes(db)
    if seed:
        seed_database(db)

    db.commit()
    current_app.logger.info(f'Database initialized ({"seeded" if seed else "empty"})')
