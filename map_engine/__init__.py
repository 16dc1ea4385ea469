"""
Zone map position engine.

Places establishments on stylized street layouts, turns drag gestures into
move/swap intents and keeps an optimistic view of pending position changes.
"""

from map_engine.controller import ControllerState, DropOutcome, InteractionController
from map_engine.errors import (
    CommitTimeoutError,
    ConcurrentOperationError,
    EngineError,
    InvalidTargetError,
    LayoutError,
    NetworkError,
    UnknownZoneError,
)
from map_engine.layout import GridCell, Segment, ZoneLayout
from map_engine.projector import Projection, project, unproject
from map_engine.resolver import BLOCKED, MOVE, SWAP, resolve
from map_engine.store import OptimisticPositionStore
from map_engine.sync import CommitRequest, CommitResponse, HttpTransport, SyncClient
from map_engine.zones import get_layout, list_zones

__all__ = [
    'ControllerState', 'DropOutcome', 'InteractionController',
    'CommitTimeoutError', 'ConcurrentOperationError', 'EngineError',
    'InvalidTargetError', 'LayoutError', 'NetworkError', 'UnknownZoneError',
    'GridCell', 'Segment', 'ZoneLayout',
    'Projection', 'project', 'unproject',
    'BLOCKED', 'MOVE', 'SWAP', 'resolve',
    'OptimisticPositionStore',
    'CommitRequest', 'CommitResponse', 'HttpTransport', 'SyncClient',
    'get_layout', 'list_zones',
]
