"""
Pytest configuration and fixtures.
Ensures tests use an isolated test database, and provides a fake clock and
transport for the map engine.
"""

import os
import uuid
import pytest
import tempfile

# Set test database path BEFORE importing app
# This ensures all tests use an isolated database
TEST_DB_PATH = os.path.join(tempfile.gettempdir(), 'zonemap_test.db')
os.environ['DATABASE_PATH'] = TEST_DB_PATH

from map_engine.controller import InteractionController
from map_engine.feedback import RecordingNotifier
from map_engine.store import OptimisticPositionStore
from map_engine.sync import CommitResponse, SyncClient
from map_engine.viewport import ContainerSize
from map_engine.zones import get_layout

DESKTOP = ContainerSize(1200, 600)
MOBILE = ContainerSize(360, 640)


@pytest.fixture(scope='session', autouse=True)
def setup_test_environment():
    """Set up test environment before any tests run."""
    os.environ['DATABASE_PATH'] = TEST_DB_PATH
    os.environ['FLASK_ENV'] = 'test'

    yield

    # Cleanup: remove test database after all tests
    for suffix in ('', '-wal', '-shm'):
        path = TEST_DB_PATH + suffix
        if os.path.exists(path):
            try:
                os.remove(path)
            except PermissionError:
                pass  # Windows may have file locked


@pytest.fixture
def app():
    """Create test application with isolated database."""
    from app import create_app
    from database import init_db

    # Ensure test database path
    os.environ['DATABASE_PATH'] = TEST_DB_PATH

    app = create_app('test')
    app.config['TESTING'] = True
    app.config['DATABASE_PATH'] = TEST_DB_PATH

    with app.app_context():
        init_db()
        yield app


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()


class FakeClock:
    """Millisecond clock advanced by hand."""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms


class FakeTransport:
    """Records commit payloads and answers with queued responses (200 by default)."""

    def __init__(self, clock: FakeClock = None):
        self.clock = clock
        self.sent = []
        self._responses = []

    def queue(self, status: int = 200, body=None, delay_ms: float = 0, error: Exception = None):
        self._responses.append((status, body, delay_ms, error))

    def send(self, payload, timeout):
        self.sent.append(payload)
        if self._responses:
            status, body, delay_ms, error = self._responses.pop(0)
        else:
            status, body, delay_ms, error = 200, {'success': True}, 0, None
        if delay_ms and self.clock is not None:
            self.clock.advance(delay_ms)
        if error is not None:
            raise error
        return CommitResponse(status, body)


def new_id() -> str:
    return str(uuid.uuid4())


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def transport(clock):
    return FakeTransport(clock)


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def make_controller(clock, transport, notifier):
    """
    Build an edit-mode controller for a zone with establishments placed.

    Usage:
        controller = make_controller('lkmetro', {'a': (1, 1), 'b': (1, 4)})
    """
    def _make(zone, positions, container=DESKTOP, is_mobile=False, can_edit=True):
        controller = InteractionController(
            layout=get_layout(zone),
            store=OptimisticPositionStore(lock_window_ms=500),
            sync_client=SyncClient(transport, timeout_s=10, clock=clock),
            can_edit=can_edit,
            notifier=notifier,
            clock=clock,
            throttle_ms=16,
            container=container,
            is_mobile=is_mobile,
        )
        controller.load_establishments([
            {'id': entity_id, 'zone': zone, 'grid_row': row, 'grid_col': col}
            for entity_id, (row, col) in positions.items()
        ])
        if can_edit:
            controller.enter_edit_mode()
        return controller

    return _make
