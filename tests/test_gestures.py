"""
Tests for the pointer-drag and touch adapters.
"""

import pytest

from map_engine.controller import ControllerState, DropOutcome
from map_engine.feedback import HAPTIC_PATTERNS, Haptics, RecordingHaptics
from map_engine.gestures import (
    PointerDragAdapter,
    PointerEvent,
    TouchAdapter,
    TouchEvent,
    TouchPoint,
)
from map_engine.projector import project
from map_engine.viewport import Point

A = '11111111-1111-4111-8111-111111111111'
B = '22222222-2222-4222-8222-222222222222'

ORIGIN = Point(100, 50)


def client_point(controller, row, col):
    """Client coordinates of a cell centre for a container at ORIGIN."""
    projection = project(controller.layout, row, col, controller.container, controller.is_mobile)
    return projection.x + ORIGIN.x, projection.y + ORIGIN.y


@pytest.fixture
def soi6(make_controller):
    return make_controller('soi6', {A: (1, 2), B: (2, 5)})


class TestPointerDragAdapter:
    """Desktop drag and drop."""

    def test_drag_and_drop(self, soi6, transport):
        adapter = PointerDragAdapter(soi6, origin=ORIGIN)
        assert adapter.drag_start(A, PointerEvent(*client_point(soi6, 1, 2)))
        adapter.drag_over(PointerEvent(*client_point(soi6, 1, 9)))
        assert adapter.drop(PointerEvent(*client_point(soi6, 1, 9))) == DropOutcome.COMMITTED
        assert transport.sent[0]['grid_col'] == 9

        # dragend fires after drop; nothing left to cancel
        assert not adapter.drag_end()

    def test_container_offset_applied(self, soi6):
        adapter = PointerDragAdapter(soi6, origin=ORIGIN)
        assert adapter.to_container(150, 80) == Point(50, 30)

    def test_drag_end_outside_target_cancels(self, soi6, transport):
        adapter = PointerDragAdapter(soi6, origin=ORIGIN)
        adapter.drag_start(A, PointerEvent(*client_point(soi6, 1, 2)))
        adapter.drag_over(PointerEvent(*client_point(soi6, 1, 9)))
        assert adapter.drag_end()
        assert soi6.state == ControllerState.IDLE
        assert transport.sent == []

    def test_set_origin(self, soi6):
        adapter = PointerDragAdapter(soi6)
        adapter.set_origin((10, 20))
        assert adapter.to_container(10, 20) == Point(0, 0)


class TestTouchAdapter:
    """Touch drag with haptics."""

    def test_touch_drag_pulses_tap_and_success(self, soi6, transport):
        haptics = RecordingHaptics()
        adapter = TouchAdapter(soi6, origin=ORIGIN, haptics=haptics)
        start = TouchPoint(*client_point(soi6, 1, 2))
        target = TouchPoint(*client_point(soi6, 2, 5))

        assert adapter.touch_start(A, TouchEvent(touches=[start], changed_touches=[start]))
        adapter.touch_move(TouchEvent(touches=[target], changed_touches=[target]))
        outcome = adapter.touch_end(TouchEvent(touches=[], changed_touches=[target]))

        assert outcome == DropOutcome.COMMITTED
        assert transport.sent[0]['swap_with_id'] == B
        assert haptics.pulses == ['tap', 'success']

    def test_refused_start_has_no_pulse(self, make_controller):
        controller = make_controller('soi6', {A: (1, 2)}, can_edit=False)
        haptics = RecordingHaptics()
        adapter = TouchAdapter(controller, haptics=haptics)
        touch = TouchPoint(0, 0)
        assert not adapter.touch_start(A, TouchEvent(touches=[touch]))
        assert haptics.pulses == []

    def test_failed_drop_has_no_success_pulse(self, soi6, transport):
        transport.queue(status=500, body={'success': False, 'error': 'boom'})
        haptics = RecordingHaptics()
        adapter = TouchAdapter(soi6, origin=ORIGIN, haptics=haptics)
        start = TouchPoint(*client_point(soi6, 1, 2))
        target = TouchPoint(*client_point(soi6, 1, 9))

        adapter.touch_start(A, TouchEvent(touches=[start]))
        adapter.touch_move(TouchEvent(touches=[target]))
        assert adapter.touch_end(TouchEvent(changed_touches=[target])) == DropOutcome.ROLLED_BACK
        assert haptics.pulses == ['tap']

    def test_touch_move_without_touches(self, soi6):
        adapter = TouchAdapter(soi6)
        assert not adapter.touch_move(TouchEvent())

    def test_touch_cancel(self, soi6):
        adapter = TouchAdapter(soi6, origin=ORIGIN)
        adapter.touch_start(A, TouchEvent(touches=[TouchPoint(*client_point(soi6, 1, 2))]))
        assert adapter.touch_cancel()
        assert soi6.session is None


class TestHaptics:

    def test_known_patterns(self):
        assert set(HAPTIC_PATTERNS) >= {'tap', 'success'}

    def test_unknown_pattern(self):
        with pytest.raises(ValueError):
            Haptics().pulse('buzz')
