"""
Gesture adapters.

Translate raw pointer-drag and touch events into the controller's
gesture vocabulary. Client coordinates are made container-relative with
the container origin (the top-left corner of its bounding rect).
"""

import logging
from dataclasses import dataclass, field
from typing import Optional, Sequence

from map_engine.controller import POINTER, TOUCH, DropOutcome, InteractionController
from map_engine.feedback import Haptics
from map_engine.viewport import Point

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PointerEvent:
    client_x: float
    client_y: float


@dataclass(frozen=True)
class TouchPoint:
    client_x: float
    client_y: float
    identifier: int = 0


@dataclass(frozen=True)
class TouchEvent:
    touches: Sequence[TouchPoint] = field(default_factory=tuple)
    changed_touches: Sequence[TouchPoint] = field(default_factory=tuple)


class _GestureAdapter:

    def __init__(self, controller: InteractionController, origin: Point = Point(0, 0)):
        self.controller = controller
        self.origin = Point(*origin)

    def set_origin(self, origin: Point) -> None:
        self.origin = Point(*origin)

    def to_container(self, client_x: float, client_y: float) -> Point:
        return Point(client_x - self.origin.x, client_y - self.origin.y)


class PointerDragAdapter(_GestureAdapter):
    """Desktop drag and drop: dragstart, dragover, drop, dragend."""

    def drag_start(self, entity_id: str, event: Optional[PointerEvent] = None) -> bool:
        point = self.to_container(event.client_x, event.client_y) if event else None
        return self.controller.gesture_start(entity_id, point, source=POINTER)

    def drag_over(self, event: PointerEvent) -> bool:
        return self.controller.gesture_move(self.to_container(event.client_x, event.client_y))

    def drop(self, event: Optional[PointerEvent] = None) -> DropOutcome:
        if event is not None:
            self.controller.gesture_move(self.to_container(event.client_x, event.client_y))
        return self.controller.gesture_end()

    def drag_end(self) -> bool:
        """Fired after every drag; cancels a drag that ended outside a drop target."""
        return self.controller.gesture_cancel()


class TouchAdapter(_GestureAdapter):
    """
    Touch drag: touchstart, touchmove, touchend, touchcancel.

    Pulses 'tap' when a drag is accepted and 'success' when a drop commits.
    """

    def __init__(self, controller: InteractionController, origin: Point = Point(0, 0),
                 haptics: Optional[Haptics] = None):
        super().__init__(controller, origin)
        self.haptics = haptics or Haptics()

    def _first(self, touches: Sequence[TouchPoint]) -> Optional[Point]:
        if not touches:
            return None
        touch = touches[0]
        return self.to_container(touch.client_x, touch.client_y)

    def touch_start(self, entity_id: str, event: TouchEvent) -> bool:
        accepted = self.controller.gesture_start(entity_id, self._first(event.touches), source=TOUCH)
        if accepted:
            self.haptics.pulse('tap')
        return accepted

    def touch_move(self, event: TouchEvent) -> bool:
        point = self._first(event.touches)
        if point is None:
            return False
        return self.controller.gesture_move(point)

    def touch_end(self, event: TouchEvent) -> DropOutcome:
        # touches is empty on release; the lifted finger is in changed_touches
        point = self._first(event.changed_touches)
        if point is not None:
            self.controller.gesture_move(point)
        outcome = self.controller.gesture_end()
        if outcome == DropOutcome.COMMITTED:
            self.haptics.pulse('success')
        return outcome

    def touch_cancel(self, event: Optional[TouchEvent] = None) -> bool:
        return self.controller.gesture_cancel()

