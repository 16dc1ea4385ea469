"""
Controller factory.

Wires layout, store, sync client and controller for one zone from the
application configuration classes.
"""

import logging
from typing import Optional

from config import config
from map_engine.controller import DEFAULT_CONTAINER, InteractionController
from map_engine.feedback import Notifier
from map_engine.store import OptimisticPositionStore
from map_engine.sync import HttpTransport, SyncClient
from map_engine.timing import Clock, monotonic_ms
from map_engine.viewport import ContainerSize, ResizeDebouncer
from map_engine.zones import get_layout

logger = logging.getLogger(__name__)


def build_controller(zone: str, config_name: str = 'default', transport=None,
                     can_edit: bool = False, notifier: Optional[Notifier] = None,
                     clock: Optional[Clock] = None,
                     container: ContainerSize = DEFAULT_CONTAINER) -> InteractionController:
    """
    Build a ready-to-use controller for a zone.

    Args:
        zone: Zone name registered in map_engine.zones
        config_name: Key of the configuration class to read MAP_* settings from
        transport: Commit transport; an HttpTransport to MAP_API_URL when None
        can_edit: Edit capability of the current user
        notifier: User notification sink
        clock: Millisecond clock shared by every timed component
        container: Initial container size

    Returns:
        InteractionController

    Raises:
        UnknownZoneError: if the zone is not registered
    """
    settings = config[config_name]
    clock = clock or monotonic_ms
    layout = get_layout(zone)

    if transport is None:
        transport = HttpTransport(settings.MAP_API_URL)

    controller = InteractionController(
        layout=layout,
        store=OptimisticPositionStore(lock_window_ms=settings.MAP_LOCK_WINDOW_MS),
        sync_client=SyncClient(transport, timeout_s=settings.MAP_COMMIT_TIMEOUT_S, clock=clock),
        can_edit=can_edit,
        notifier=notifier,
        clock=clock,
        throttle_ms=settings.MAP_THROTTLE_MS,
        container=container,
        mobile_breakpoint=settings.MAP_MOBILE_BREAKPOINT,
        resize_debouncer=ResizeDebouncer(container, delay_ms=settings.MAP_RESIZE_DEBOUNCE_MS),
    )
    logger.debug(f'[ZoneMap] controller built for {zone} ({config_name})')
    return controller
