"""
Database seed data.
Demo establishments for fresh database installations.
"""

import uuid

# zone -> [(name, category, grid_row, grid_col)]
DEMO_ESTABLISHMENTS = {
    'soi6': [
        ('Pretty Lady Bar', 'bar', 1, 2),
        ('Sugar Sugar', 'bar', 1, 5),
        ('Panda Bar', 'bar', 2, 3),
        ('Candy Shop', 'bar', 2, 8),
    ],
    'lkmetro': [
        ('Baccara Lounge', 'gogo', 1, 1),
        ('Kink Club', 'gogo', 1, 4),
        ('Pin-Up Bar', 'bar', 2, 8),
        ('Metro Massage', 'massage', 3, 5),
        ('Champagne Corner', 'bar', 4, 9),
    ],
    'treetown': [
        ('Tree Town Sports Bar', 'bar', 1, 3),
        ('Leafy Lounge', 'bar', 2, 9),
        ('Branch Bar', 'bar', 4, 1),
        ('Canopy Club', 'nightclub', 12, 2),
    ],
    'boyztown': [
        ('Sunset Boulevard', 'bar', 1, 1),
        ('Copa Club', 'nightclub', 2, 6),
    ],
}


def demo_establishment_id(zone: str, name: str) -> str:
    """Stable id so re-seeding produces the same establishments."""
    return str(uuid.uuid5(uuid.NAMESPACE_URL, f'zonemap/{zone}/{name}'))


def seed_database(db):
    """Insert initial seed data."""
    for zone, establishments in DEMO_ESTABLISHMENTS.items():
        for name, category, grid_row, grid_col in establishments:
            db.execute('''
                INSERT INTO establishments (id, name, category, zone, grid_row, grid_col)
                VALUES (?, ?, ?, ?, ?, ?)
            ''', (demo_establishment_id(zone, name), name, category, zone, grid_row, grid_col))
