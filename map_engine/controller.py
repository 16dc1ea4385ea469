"""
Interaction controller.

Owns the drag session of one zone map and turns gestures into position
changes:

    IDLE -> DRAGGING -> COMMITTING -> IDLE
                     -> ROLLING_BACK -> IDLE
                     -> CANCELLED -> IDLE

Pointer moves are stored on every call but evaluated at most once per
throttle interval. A drop applies optimistic overrides before the single
commit request and removes them together if the commit fails.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from map_engine.errors import (
    CommitTimeoutError,
    ConcurrentOperationError,
    NetworkError,
)
from map_engine.feedback import Notifier
from map_engine.layout import GridCell, ZoneLayout
from map_engine.projector import project, unproject
from map_engine.resolver import BLOCKED, SWAP, resolve
from map_engine.store import OptimisticPositionStore
from map_engine.sync import CommitRequest, SyncClient
from map_engine.timing import DEFAULT_THROTTLE_MS, Clock, Throttle, monotonic_ms
from map_engine.viewport import (
    DEFAULT_MOBILE_BREAKPOINT,
    ContainerSize,
    Point,
    ResizeDebouncer,
    is_mobile_width,
)
from utils.messages import get_message

logger = logging.getLogger(__name__)

DEFAULT_CONTAINER = ContainerSize(1200, 600)

POINTER = 'pointer'
TOUCH = 'touch'


class ControllerState(str, Enum):
    IDLE = 'idle'
    DRAGGING = 'dragging'
    COMMITTING = 'committing'
    ROLLING_BACK = 'rolling_back'
    CANCELLED = 'cancelled'


class DropOutcome(str, Enum):
    CANCELLED = 'cancelled'
    COMMITTED = 'committed'
    ROLLED_BACK = 'rolled_back'


@dataclass
class DragSession:
    entity_id: str
    origin_cell: GridCell
    source: str = POINTER
    pointer: Optional[Point] = None
    candidate_cell: Optional[GridCell] = None
    candidate_action: str = BLOCKED
    started_at: float = 0.0


StateListener = Callable[[ControllerState, ControllerState], None]


class InteractionController:
    """
    Drag-and-drop state machine for one zone.

    Args:
        layout: Zone layout
        store: Optimistic position store of the zone
        sync_client: Commits position changes to the remote store
        can_edit: Capability flag; without it edit mode cannot be entered
        notifier: Receives user-facing failure messages
        clock: Millisecond clock
        throttle_ms: Minimum interval between candidate evaluations
        container: Initial container size
        is_mobile: Initial device class; derived from the width when None
        mobile_breakpoint: Width below which the container counts as mobile
        resize_debouncer: Debounces container size reports
    """

    def __init__(self, layout: ZoneLayout, store: OptimisticPositionStore,
                 sync_client: SyncClient, can_edit: bool = False,
                 notifier: Optional[Notifier] = None,
                 clock: Optional[Clock] = None,
                 throttle_ms: float = DEFAULT_THROTTLE_MS,
                 container: ContainerSize = DEFAULT_CONTAINER,
                 is_mobile: Optional[bool] = None,
                 mobile_breakpoint: int = DEFAULT_MOBILE_BREAKPOINT,
                 resize_debouncer: Optional[ResizeDebouncer] = None):
        self.layout = layout
        self.store = store
        self.sync_client = sync_client
        self.can_edit = can_edit
        self.notifier = notifier or Notifier()
        self.clock = clock or monotonic_ms
        self.mobile_breakpoint = mobile_breakpoint

        self._throttle = Throttle(throttle_ms)
        self._container = ContainerSize(*container)
        self._is_mobile = (is_mobile if is_mobile is not None
                           else is_mobile_width(self._container.width, mobile_breakpoint))
        self._resize = resize_debouncer or ResizeDebouncer(self._container)

        self._state = ControllerState.IDLE
        self._session: Optional[DragSession] = None
        self._edit_mode = False
        self._listeners: List[StateListener] = []
        self._disposed = False

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def state(self) -> ControllerState:
        return self._state

    @property
    def session(self) -> Optional[DragSession]:
        return self._session

    @property
    def edit_mode(self) -> bool:
        return self._edit_mode

    @property
    def container(self) -> ContainerSize:
        return self._container

    @property
    def is_mobile(self) -> bool:
        return self._is_mobile

    def subscribe(self, listener: StateListener) -> None:
        """Register a callback(old_state, new_state) for every transition."""
        self._listeners.append(listener)

    def _transition(self, new_state: ControllerState) -> None:
        old_state = self._state
        self._state = new_state
        for listener in list(self._listeners):
            listener(old_state, new_state)

    def is_locked(self) -> bool:
        now = self.clock()
        self.store.settle(now)
        return self.store.is_locked(now)

    # ------------------------------------------------------------------
    # Edit mode and data
    # ------------------------------------------------------------------

    def enter_edit_mode(self) -> bool:
        if not self.can_edit:
            logger.debug('[ZoneMap] edit mode refused: missing edit capability')
            return False
        self._edit_mode = True
        return True

    def exit_edit_mode(self) -> None:
        if self._state == ControllerState.DRAGGING:
            self.gesture_cancel()
        self._edit_mode = False

    def load_establishments(self, establishments: Iterable[Mapping[str, Any]]) -> int:
        """
        Replace confirmed positions with establishment records.

        Records of other zones and records whose cell is not placeable in
        the layout are ignored.

        Returns:
            Number of establishments placed
        """
        positions: Dict[str, GridCell] = {}
        for record in establishments:
            if record.get('zone') != self.layout.zone:
                continue
            row, col = record.get('grid_row'), record.get('grid_col')
            if not self.layout.is_valid_cell(row, col):
                logger.warning(
                    f'[ZoneMap] {self.layout.zone}: skipping {record.get("id")} '
                    f'at unplaceable cell ({row}, {col})'
                )
                continue
            positions[str(record['id'])] = GridCell(row, col)

        self.store.load_confirmed(positions)
        logger.debug(f'[ZoneMap] {self.layout.zone}: loaded {len(positions)} establishments')
        return len(positions)

    # ------------------------------------------------------------------
    # Viewport
    # ------------------------------------------------------------------

    def set_viewport(self, container: ContainerSize, is_mobile: Optional[bool] = None) -> None:
        """Apply a new container size right away and re-evaluate a live drag."""
        self._container = ContainerSize(*container)
        self._is_mobile = (is_mobile if is_mobile is not None
                           else is_mobile_width(self._container.width, self.mobile_breakpoint))
        if self._state == ControllerState.DRAGGING and self._session.pointer is not None:
            self._evaluate_candidate()

    def report_resize(self, container: ContainerSize) -> None:
        """Feed a raw container size report through the resize debouncer."""
        self._resize.report(container, self.clock())

    def tick(self) -> None:
        """Apply a debounced resize and settle an elapsed lock window."""
        now = self.clock()
        applied = self._resize.poll(now)
        if applied is not None:
            self.set_viewport(applied)
        self.store.settle(now)

    # ------------------------------------------------------------------
    # Gestures
    # ------------------------------------------------------------------

    def _admit(self, entity_id: str, now: float) -> Optional[GridCell]:
        self.store.settle(now)
        if self._session is not None or self._state != ControllerState.IDLE:
            raise ConcurrentOperationError('A drag session is already active')
        if self.store.has_operation_in_flight():
            raise ConcurrentOperationError('A commit is still in flight')
        if self.store.is_locked(now):
            raise ConcurrentOperationError(
                f'Zone locked for another {self.store.lock_until - now:.0f} ms'
            )
        return self.store.effective_cell(entity_id)

    def gesture_start(self, entity_id: str, point: Optional[Point] = None,
                      source: str = POINTER) -> bool:
        """
        Begin dragging an entity.

        Returns:
            True if a drag session was opened, False if the gesture was refused
        """
        if self._disposed or not self._edit_mode:
            return False

        now = self.clock()
        try:
            origin = self._admit(entity_id, now)
        except ConcurrentOperationError as e:
            logger.debug(f'[ZoneMap] drag of {entity_id} refused: {e}')
            return False
        if origin is None:
            logger.warning(f'[ZoneMap] drag of {entity_id} refused: not placed on this map')
            return False

        self._session = DragSession(
            entity_id=entity_id,
            origin_cell=origin,
            source=source,
            pointer=Point(*point) if point is not None else None,
            started_at=now,
        )
        self._throttle.reset()
        self._transition(ControllerState.DRAGGING)
        logger.debug(f'[ZoneMap] drag started: {entity_id} from {origin} ({source})')
        return True

    def gesture_move(self, point: Point) -> bool:
        """
        Record the pointer and re-evaluate the candidate when the throttle allows.

        Returns:
            True if the candidate was re-evaluated
        """
        if self._state != ControllerState.DRAGGING:
            return False
        self._session.pointer = Point(*point)
        if self._throttle.ready(self.clock()):
            self._evaluate_candidate()
            return True
        return False

    def flush_pending(self) -> bool:
        """Evaluate a pointer move skipped by the throttle."""
        if self._state != ControllerState.DRAGGING or not self._throttle.pending:
            return False
        self._throttle.mark_run(self.clock())
        self._evaluate_candidate()
        return True

    def _evaluate_candidate(self) -> None:
        session = self._session
        if session.pointer is None:
            cell = None
        else:
            cell = unproject(self.layout, session.pointer, self._container, self._is_mobile)
        session.candidate_cell = cell
        session.candidate_action = resolve(
            self.layout, cell, session.entity_id,
            self.store.confirmed, self.store.overrides,
        )

    def gesture_cancel(self) -> bool:
        """Abandon the live drag without side effects."""
        if self._state != ControllerState.DRAGGING:
            return False
        logger.debug(f'[ZoneMap] drag of {self._session.entity_id} cancelled')
        self._cancel()
        return True

    def _cancel(self) -> DropOutcome:
        self._session = None
        self._throttle.reset()
        self._transition(ControllerState.CANCELLED)
        self._transition(ControllerState.IDLE)
        return DropOutcome.CANCELLED

    def gesture_end(self) -> DropOutcome:
        """
        Drop the dragged entity on the current candidate cell.

        Returns:
            CANCELLED for blocked or origin-cell drops, COMMITTED when the
            remote store accepted the change, ROLLED_BACK when it did not
        """
        if self._state != ControllerState.DRAGGING:
            return DropOutcome.CANCELLED

        self.flush_pending()
        session = self._session
        target = session.candidate_cell

        if target is None or session.candidate_action == BLOCKED:
            return self._cancel()
        if target == self.store.effective_cell(session.entity_id):
            return self._cancel()

        # Occupancy may have changed since the last evaluation
        action = resolve(self.layout, target, session.entity_id,
                         self.store.confirmed, self.store.overrides)
        if action == BLOCKED:
            return self._cancel()
        return self._commit(session, target, action)

    # ------------------------------------------------------------------
    # Commit
    # ------------------------------------------------------------------

    def _commit(self, session: DragSession, target: GridCell, action: str) -> DropOutcome:
        dragged_id = session.entity_id
        source_cell = self.store.effective_cell(dragged_id)

        changes = {dragged_id: target}
        swap_with_id = None
        if action == SWAP:
            swap_with_id = self.store.occupant_at(target)
            changes[swap_with_id] = source_cell

        self._session = None
        self._throttle.reset()
        self._transition(ControllerState.COMMITTING)

        try:
            op = self.store.begin(changes, self.clock())
        except ConcurrentOperationError as e:
            logger.debug(f'[ZoneMap] drop of {dragged_id} refused: {e}')
            self._transition(ControllerState.IDLE)
            return DropOutcome.CANCELLED

        request = CommitRequest(
            entity_id=dragged_id,
            grid_row=target.row,
            grid_col=target.col,
            zone=self.layout.zone,
            swap_with_id=swap_with_id,
        )

        try:
            self.sync_client.commit(request)
        except NetworkError as e:
            logger.error(f'[ZoneMap] {action} of {dragged_id} failed: {e}')
            self._transition(ControllerState.ROLLING_BACK)
            self.store.rollback(op)
            self.notifier.error(failure_message(e, request))
            self._transition(ControllerState.IDLE)
            return DropOutcome.ROLLED_BACK
        except Exception:
            self.store.rollback(op)
            self._transition(ControllerState.IDLE)
            raise

        self.store.confirm(op, self.clock())
        logger.info(f'[ZoneMap] {action} of {dragged_id} to {tuple(target)} committed')
        self._transition(ControllerState.IDLE)
        return DropOutcome.COMMITTED

    # ------------------------------------------------------------------
    # Renderer view
    # ------------------------------------------------------------------

    def markers(self) -> List[Dict[str, Any]]:
        """Marker list for the rendering delegate, in (row, col) order."""
        dragged_id = self._session.entity_id if self._session else None
        overrides = self.store.overrides
        result = []
        positions = self.store.effective_positions()
        for entity_id, cell in sorted(positions.items(), key=lambda item: item[1]):
            if not self.layout.is_valid_cell(cell.row, cell.col):
                continue
            projection = project(self.layout, cell.row, cell.col,
                                 self._container, self._is_mobile)
            result.append({
                'id': entity_id,
                'row': cell.row,
                'col': cell.col,
                'x': projection.x,
                'y': projection.y,
                'marker_size': projection.marker_size,
                'is_dragged': entity_id == dragged_id,
                'is_optimistic': entity_id in overrides,
            })
        return result

    def drag_state(self) -> Dict[str, Any]:
        session = self._session
        return {
            'state': self._state.value,
            'entity_id': session.entity_id if session else None,
            'pointer': tuple(session.pointer) if session and session.pointer else None,
            'hover_cell': tuple(session.candidate_cell) if session and session.candidate_cell else None,
            'action': session.candidate_action if session else None,
            'locked': self.is_locked(),
        }

    # ------------------------------------------------------------------
    # Teardown
    # ------------------------------------------------------------------

    def dispose(self) -> None:
        """Tear down the session, overrides and lock."""
        if self._state == ControllerState.DRAGGING:
            self._cancel()
        self.store.reset()
        self._edit_mode = False
        self._listeners.clear()
        self._disposed = True
        logger.debug(f'[ZoneMap] {self.layout.zone}: controller disposed')


def failure_message(error: NetworkError, request: CommitRequest) -> str:
    """User-facing text for a failed commit."""
    if isinstance(error, CommitTimeoutError):
        return get_message('commit_timeout')
    if error.status is None:
        return get_message('network_error')
    if error.reason in ('out_of_bounds', 'masked_cell'):
        return get_message('position_out_of_bounds', row=request.grid_row, col=request.grid_col)
    if error.reason in ('occupied', 'swap_mismatch'):
        return get_message('position_conflict')
    if error.status >= 500:
        return get_message('server_error')
    return get_message('swap_failed' if request.is_swap else 'move_failed')
