"""
Database tests.
Tests database initialization, seed data and the unique cell constraint.
"""

import sqlite3

import pytest

from database import get_db
from database.seed import DEMO_ESTABLISHMENTS, demo_establishment_id
from map_engine.zones import get_layout


class TestSchema:
    """Tests for schema creation."""

    def test_establishments_table(self, app):
        """Test that the establishments table exists."""
        db = get_db()
        cursor = db.cursor()
        cursor.execute("SELECT name FROM sqlite_master WHERE type='table' ORDER BY name")
        tables = [row[0] for row in cursor.fetchall()]
        assert 'establishments' in tables

    def test_unique_cell_index(self, app):
        """Two establishments cannot share a cell of a zone."""
        db = get_db()
        with pytest.raises(sqlite3.IntegrityError):
            db.execute('''
                INSERT INTO establishments (id, name, zone, grid_row, grid_col)
                VALUES ('dup', 'Duplicate', 'soi6', 1, 2)
            ''')
        db.rollback()

    def test_null_positions_do_not_collide(self, app):
        db = get_db()
        db.execute("INSERT INTO establishments (id, name, zone) VALUES ('u1', 'One', 'soi6')")
        db.execute("INSERT INTO establishments (id, name, zone) VALUES ('u2', 'Two', 'soi6')")
        db.commit()
        count = db.execute(
            "SELECT COUNT(*) FROM establishments WHERE grid_row IS NULL"
        ).fetchone()[0]
        assert count == 2


class TestSeedData:
    """Tests for demo data."""

    def test_seed_counts(self, app):
        db = get_db()
        total = db.execute('SELECT COUNT(*) FROM establishments').fetchone()[0]
        assert total == sum(len(rows) for rows in DEMO_ESTABLISHMENTS.values())

    def test_seed_ids_are_stable(self, app):
        db = get_db()
        row = db.execute(
            'SELECT id FROM establishments WHERE name = ?', ('Kink Club',)
        ).fetchone()
        assert row['id'] == demo_establishment_id('lkmetro', 'Kink Club')

    def test_seed_positions_are_placeable(self):
        """Every demo establishment sits on a valid cell of its zone."""
        for zone, rows in DEMO_ESTABLISHMENTS.items():
            layout = get_layout(zone)
            for name, _, grid_row, grid_col in rows:
                assert layout.is_valid_cell(grid_row, grid_col), f'{zone}: {name}'
