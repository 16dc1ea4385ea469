"""
Database schema definitions.
Table creation, indexes, and structure management.
"""


def drop_tables(db):
    """Drop all existing tables."""
    tables = [
        'establishments',
    ]

    for table in tables:
        db.execute(f'DROP TABLE IF EXISTS {table}')


def create_tables(db):
    """Create all database tables."""

    # Establishments placed on zone maps.
    # grid_row/grid_col are NULL only transiently, during a swap.
    db.execute('''
        CREATE TABLE establishments (
            id TEXT PRIMARY KEY,
            name TEXT NOT NULL,
            category TEXT NOT NULL DEFAULT 'bar',
            zone TEXT NOT NULL,
            grid_row INTEGER,
            grid_col INTEGER,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    ''')


def create_indexes(db):
    """Create indexes for query performance and position uniqueness."""
    db.execute('CREATE INDEX idx_establishments_zone ON establishments(zone)')

    # One establishment per cell; NULL positions do not collide
    db.execute('''
        CREATE UNIQUE INDEX idx_establishments_cell
        ON establishments(zone, grid_row, grid_col)
    ''')
