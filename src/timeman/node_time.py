"""
Nodes-as-time emulation.

With a nodes-per-millisecond rate the search budget is expressed in nodes
instead of milliseconds, which makes results independent of hardware speed.
The rate must be well below the engine's real speed or the engine will lose
on time.
"""

import logging
from typing import TYPE_CHECKING

import chess

from .limits import SearchLimits

if TYPE_CHECKING:
    from .manager import AllocatorState

logger = logging.getLogger(__name__)


def apply_nodes_time(state: "AllocatorState", limits: SearchLimits, us: chess.Color, npmsec: int) -> SearchLimits:
    """
    Switch the episode to nodes-as-time and convert the side's clock to nodes.

    Args:
        state: AllocatorState to update (use_nodes_time, available_nodes)
        limits: Limits as received from the protocol layer, left untouched
        us: Side to move
        npmsec: Nodes per millisecond, must be > 0

    Returns:
        Copy of limits with time[us] and inc[us] in nodes
    """
    if not state.use_nodes_time:
        logger.info("Nodes-as-time enabled at %d nodes/ms", npmsec)
    state.use_nodes_time = True

    # Only once at game start
    if not state.available_nodes:
        state.available_nodes = npmsec * limits.time[us]

    return limits.with_side(
        us,
        time=state.available_nodes,
        inc=limits.inc[us] * npmsec,
        npmsec=npmsec,
    )
