"""
Tests for the zone and grid move API endpoints.
"""

import pytest

from database.seed import demo_establishment_id
from models.establishment import get_establishment_by_id

PRETTY_LADY = demo_establishment_id('soi6', 'Pretty Lady Bar')   # (1, 2)
SUGAR_SUGAR = demo_establishment_id('soi6', 'Sugar Sugar')       # (1, 5)
BACCARA = demo_establishment_id('lkmetro', 'Baccara Lounge')     # (1, 1)
KINK_CLUB = demo_establishment_id('lkmetro', 'Kink Club')        # (1, 4)


def grid_move(client, entity_id, zone, row, col, swap_with_id=None):
    payload = {'entityId': entity_id, 'zone': zone, 'grid_row': row, 'grid_col': col}
    if swap_with_id:
        payload['swap_with_id'] = swap_with_id
    return client.post('/api/grid-move', json=payload)


class TestReadEndpoints:
    """Tests for health, zones and establishments."""

    def test_health(self, client):
        response = client.get('/api/health')
        assert response.status_code == 200
        assert response.get_json()['status'] == 'ok'

    def test_zones(self, client):
        response = client.get('/api/zones')
        zones = {z['zone']: z for z in response.get_json()['data']['zones']}
        assert zones['lkmetro']['shape'] == 'l-shaped'
        assert zones['lkmetro']['cell_count'] == 33
        assert zones['treetown']['cell_count'] == 42

    def test_zone_layout(self, client):
        response = client.get('/api/zones/lkmetro/layout')
        data = response.get_json()['data']
        assert data['zone'] == 'lkmetro'
        assert [3, 1] in data['masked_cells']

    def test_unknown_zone_layout(self, client):
        response = client.get('/api/zones/atlantis/layout')
        assert response.status_code == 404
        assert response.get_json()['reason'] == 'unknown_zone'

    def test_zone_establishments(self, client):
        response = client.get('/api/zones/soi6/establishments')
        data = response.get_json()['data']
        assert data['count'] == 4
        assert data['establishments'][0]['name'] == 'Pretty Lady Bar'

    def test_unknown_zone_establishments(self, client):
        response = client.get('/api/zones/atlantis/establishments')
        assert response.status_code == 404


class TestGridMove:
    """Tests for successful moves and swaps."""

    def test_move_to_empty_cell(self, client):
        response = grid_move(client, PRETTY_LADY, 'soi6', 2, 15)
        assert response.status_code == 200
        data = response.get_json()
        assert data['success']
        assert data['data']['action'] == 'move'
        assert get_establishment_by_id(PRETTY_LADY)['grid_col'] == 15

    def test_coordinates_as_strings(self, client):
        response = grid_move(client, PRETTY_LADY, 'soi6', '2', '15')
        assert response.status_code == 200

    def test_swap(self, client):
        response = grid_move(client, BACCARA, 'lkmetro', 1, 4, swap_with_id=KINK_CLUB)
        assert response.status_code == 200
        positions = {p['id']: (p['grid_row'], p['grid_col'])
                     for p in response.get_json()['data']['positions']}
        assert positions == {BACCARA: (1, 4), KINK_CLUB: (1, 1)}


class TestGridMoveRejections:
    """Tests for rejected grid moves and their status codes."""

    def test_occupied(self, client):
        response = grid_move(client, PRETTY_LADY, 'soi6', 1, 5)
        assert response.status_code == 409
        assert response.get_json()['reason'] == 'occupied'
        assert get_establishment_by_id(PRETTY_LADY)['grid_col'] == 2

    def test_swap_mismatch(self, client):
        response = grid_move(client, PRETTY_LADY, 'soi6', 2, 3, swap_with_id=SUGAR_SUGAR)
        assert response.status_code == 409
        assert response.get_json()['reason'] == 'swap_mismatch'

    def test_masked_cell(self, client):
        response = grid_move(client, BACCARA, 'lkmetro', 3, 1)
        assert response.status_code == 400
        body = response.get_json()
        assert body['reason'] == 'masked_cell'
        assert 'LK Metro' in body['error']

    @pytest.mark.parametrize('row,col', [(0, 1), (5, 1), (1, 10), (1, 0)])
    def test_out_of_bounds(self, client, row, col):
        response = grid_move(client, BACCARA, 'lkmetro', row, col)
        assert response.status_code == 400
        assert response.get_json()['reason'] == 'out_of_bounds'

    def test_non_integer_coordinates(self, client):
        response = grid_move(client, BACCARA, 'lkmetro', 1.5, True)
        assert response.get_json()['reason'] == 'out_of_bounds'

    def test_invalid_id(self, client):
        response = grid_move(client, 'not-a-uuid', 'soi6', 1, 1)
        assert response.status_code == 400
        assert response.get_json()['reason'] == 'invalid_id'

    def test_invalid_swap_id(self, client):
        response = grid_move(client, PRETTY_LADY, 'soi6', 1, 5, swap_with_id='nope')
        assert response.get_json()['reason'] == 'invalid_id'

    def test_missing_fields(self, client):
        response = client.post('/api/grid-move', json={'entityId': PRETTY_LADY})
        assert response.status_code == 400
        assert response.get_json()['reason'] == 'missing_fields'

    def test_no_body(self, client):
        response = client.post('/api/grid-move', data='not json',
                               content_type='text/plain')
        assert response.get_json()['reason'] == 'missing_fields'

    def test_unknown_zone(self, client):
        response = grid_move(client, PRETTY_LADY, 'atlantis', 1, 1)
        assert response.status_code == 400
        assert response.get_json()['reason'] == 'unknown_zone'

    def test_not_found(self, client):
        response = grid_move(client, 'aaaaaaaa-bbbb-4ccc-8ddd-eeeeeeeeeeee', 'soi6', 1, 1)
        assert response.status_code == 404
        assert response.get_json()['reason'] == 'not_found'

    def test_zone_mismatch(self, client):
        response = grid_move(client, KINK_CLUB, 'soi6', 1, 1)
        assert response.status_code == 400
        assert response.get_json()['reason'] == 'zone_mismatch'

    def test_same_entity(self, client):
        response = grid_move(client, PRETTY_LADY, 'soi6', 1, 2, swap_with_id=PRETTY_LADY)
        assert response.get_json()['reason'] == 'same_entity'

    def test_get_not_allowed(self, client):
        response = client.get('/api/grid-move')
        assert response.status_code == 405
        assert not response.get_json()['success']
