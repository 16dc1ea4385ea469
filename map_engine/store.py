"""
Optimistic position store.

Holds the last confirmed positions of a zone, the transient overrides of
the one operation in flight, and the zone-wide lock window armed after a
successful commit.

Override lifecycle:
    begin()    -> overrides applied, operation in flight
    confirm()  -> overrides kept, lock armed for lock_window_ms
    settle()   -> after the lock window, overrides promoted to confirmed
    rollback() -> all overrides of the operation removed together
"""

import itertools
import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional

from map_engine.errors import ConcurrentOperationError
from map_engine.layout import GridCell
from map_engine.resolver import occupant_at

logger = logging.getLogger(__name__)

DEFAULT_LOCK_WINDOW_MS = 500
MAX_OVERRIDES = 2

IN_FLIGHT = 'in_flight'
CONFIRMED = 'confirmed'


@dataclass
class PendingOperation:
    """One move (one change) or swap (two changes) awaiting settlement."""

    token: int
    changes: Dict[str, GridCell]
    previous: Dict[str, GridCell]
    started_at: float
    state: str = IN_FLIGHT
    settle_at: Optional[float] = None
    entity_ids: List[str] = field(default_factory=list)

    @property
    def is_swap(self) -> bool:
        return len(self.changes) == 2


class OptimisticPositionStore:
    """
    Confirmed positions plus the overrides of a single pending operation.

    Args:
        lock_window_ms: Settle window armed after a successful commit
    """

    def __init__(self, lock_window_ms: float = DEFAULT_LOCK_WINDOW_MS):
        self.lock_window_ms = lock_window_ms
        self._confirmed: Dict[str, GridCell] = {}
        self._overrides: Dict[str, GridCell] = {}
        self._pending: Optional[PendingOperation] = None
        self._lock_until = 0.0
        self._tokens = itertools.count(1)

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    @property
    def confirmed(self) -> Mapping[str, GridCell]:
        return MappingProxyType(self._confirmed)

    @property
    def overrides(self) -> Mapping[str, GridCell]:
        return MappingProxyType(self._overrides)

    @property
    def override_count(self) -> int:
        return len(self._overrides)

    @property
    def pending(self) -> Optional[PendingOperation]:
        return self._pending

    @property
    def lock_until(self) -> float:
        return self._lock_until

    def has_operation_in_flight(self) -> bool:
        return self._pending is not None and self._pending.state == IN_FLIGHT

    def is_locked(self, now: float) -> bool:
        return now < self._lock_until

    def confirmed_cell(self, entity_id: str) -> Optional[GridCell]:
        return self._confirmed.get(entity_id)

    def effective_cell(self, entity_id: str) -> Optional[GridCell]:
        """Override if one is pending, confirmed position otherwise."""
        override = self._overrides.get(entity_id)
        if override is not None:
            return override
        return self._confirmed.get(entity_id)

    def effective_positions(self) -> Dict[str, GridCell]:
        positions = dict(self._confirmed)
        positions.update(self._overrides)
        return positions

    def occupant_at(self, cell: GridCell) -> Optional[str]:
        return occupant_at(cell, self._confirmed, self._overrides)

    # ------------------------------------------------------------------
    # Confirmed truth
    # ------------------------------------------------------------------

    def load_confirmed(self, positions: Mapping[str, GridCell]) -> None:
        """
        Replace confirmed positions with fresh server data.

        A confirmed operation whose changes the server already reflects is
        promoted right away; an operation in flight keeps its overrides.
        """
        self._confirmed = {eid: GridCell(*cell) for eid, cell in positions.items()}

        op = self._pending
        if op is None:
            self._overrides.clear()
            return

        if op.state == CONFIRMED and all(
            self._confirmed.get(eid) == cell for eid, cell in op.changes.items()
        ):
            logger.debug(f'[ZoneMap] operation {op.token} reconciled with server data')
            self._finish(op)

    # ------------------------------------------------------------------
    # Operation lifecycle
    # ------------------------------------------------------------------

    def begin(self, changes: Mapping[str, GridCell], now: float) -> PendingOperation:
        """
        Apply the overrides of a new operation atomically.

        Args:
            changes: entity_id -> target cell, one entry for a move, two for a swap
            now: Current time in ms

        Returns:
            The pending operation handle

        Raises:
            ConcurrentOperationError: if another operation has not settled
            ValueError: if changes is empty or larger than a swap
        """
        self.settle(now)
        if self._pending is not None:
            raise ConcurrentOperationError(
                f'Operation {self._pending.token} has not settled yet'
            )
        if not 1 <= len(changes) <= MAX_OVERRIDES:
            raise ValueError(f'An operation changes 1 or 2 entities, got {len(changes)}')

        # Pre-drop cells use the same chained resolution as the resolver
        previous = {eid: self.effective_cell(eid) for eid in changes}
        normalized = {eid: GridCell(*cell) for eid, cell in changes.items()}

        op = PendingOperation(
            token=next(self._tokens),
            changes=normalized,
            previous=previous,
            started_at=now,
            entity_ids=list(normalized),
        )
        self._overrides.update(normalized)
        self._pending = op
        return op

    def confirm(self, op: PendingOperation, now: float) -> bool:
        """Keep the operation's overrides and arm the lock window."""
        if op is not self._pending or op.state != IN_FLIGHT:
            logger.debug(f'[ZoneMap] ignoring confirmation of stale operation {op.token}')
            return False
        op.state = CONFIRMED
        self._lock_until = now + self.lock_window_ms
        op.settle_at = self._lock_until
        return True

    def rollback(self, op: PendingOperation) -> bool:
        """Remove every override of the operation, never just one."""
        if op is not self._pending:
            return False
        for entity_id in op.changes:
            self._overrides.pop(entity_id, None)
        self._pending = None
        return True

    def settle(self, now: float) -> bool:
        """Promote a confirmed operation once its lock window has elapsed."""
        op = self._pending
        if op is None or op.state != CONFIRMED or now < op.settle_at:
            return False
        for entity_id, cell in op.changes.items():
            self._confirmed[entity_id] = cell
        self._finish(op)
        return True

    def _finish(self, op: PendingOperation) -> None:
        for entity_id in op.changes:
            self._overrides.pop(entity_id, None)
        self._pending = None

    def reset(self) -> None:
        """Drop overrides, the pending operation and the lock."""
        self._overrides.clear()
        self._pending = None
        self._lock_until = 0.0
