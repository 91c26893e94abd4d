"""
Time management for chess engine.
"""

import logging
from dataclasses import dataclass
from typing import Optional

import chess

from .clock import SystemClock
from .evaluation import Evaluator, material_balance, side_to_move_score
from .formulas import compute_budget
from .horizon import moves_to_go
from .limits import SearchLimits
from .node_time import apply_nodes_time
from .options import TimeOptions

logger = logging.getLogger(__name__)


class TimeManagementError(RuntimeError):
    """Base class for time manager usage errors."""


class NodesTimeInactiveError(TimeManagementError):
    """Raised when node budget is advanced outside nodes-as-time mode."""


@dataclass
class AllocatorState:
    """Mutable state kept across the moves of one game."""

    start_time: int = 0
    available_nodes: int = 0
    use_nodes_time: bool = False
    optimum_time: int = 0
    maximum_time: int = 0
    armed: bool = False


@dataclass(frozen=True)
class TimeBudget:
    """Read-only view of the current decision's budget for search workers."""

    optimum: int
    maximum: int
    start_time: int
    use_nodes_time: bool


class TimeManager:
    """
    Computes and holds the time bounds of the current move.

    The control thread calls init() once per move before the search starts;
    search threads then compare elapsed() against optimum() and maximum().
    """

    def __init__(self, clock=None, state: Optional[AllocatorState] = None):
        """
        Args:
            clock: Object with a now() method returning milliseconds
            state: Existing allocator state, a fresh one if None
        """
        self.clock = clock if clock is not None else SystemClock()
        self.state = state if state is not None else AllocatorState()

    @property
    def armed(self) -> bool:
        return self.state.armed

    def optimum(self) -> int:
        return self.state.optimum_time

    def maximum(self) -> int:
        return self.state.maximum_time

    def elapsed(self, nodes: int = 0) -> int:
        """Elapsed search time, in nodes when playing nodes-as-time."""
        if self.state.use_nodes_time:
            return nodes
        return self.clock.now() - self.state.start_time

    def clear(self) -> None:
        """Forget the node budget between games."""
        self.state.available_nodes = 0
        self.state.use_nodes_time = False

    def advance_nodes_time(self, nodes: int) -> None:
        """
        Top up the node budget during nodes-as-time play.

        Raises:
            NodesTimeInactiveError: If nodes-as-time mode is not active
            ValueError: If nodes is negative
        """
        if not self.state.use_nodes_time:
            raise NodesTimeInactiveError("advance_nodes_time() requires nodes-as-time mode")
        if nodes < 0:
            raise ValueError(f"Node budget can only grow, got {nodes}")
        self.state.available_nodes += nodes

    advance_virtual_budget = advance_nodes_time

    def snapshot(self) -> TimeBudget:
        return TimeBudget(
            optimum=self.state.optimum_time,
            maximum=self.state.maximum_time,
            start_time=self.state.start_time,
            use_nodes_time=self.state.use_nodes_time,
        )

    def init(
        self,
        limits: SearchLimits,
        us: chess.Color,
        ply: int,
        options: TimeOptions,
        eval_score: Optional[float] = None,
    ) -> SearchLimits:
        """
        Calculate the time bounds for the move about to be searched.

        Args:
            limits: Clock state from the protocol layer
            us: Side to move
            ply: Half-moves played so far
            options: Engine options (overhead, ponder, nodestime, tunables)
            eval_score: Side-to-move evaluation in centipawns, optional

        Returns:
            The limits the search should use; time and increment are in
            nodes when nodes-as-time is active

        Nodes-as-time stays on for the rest of the game once enabled, so
        elapsed() keeps returning nodes. If a later call passes nodestime=0,
        optimum() and maximum() are computed from the millisecond clock and
        no longer share a unit with elapsed().
        """
        state = self.state
        # movetime searches still need the start time
        state.start_time = limits.start_time
        state.armed = True

        if limits.time[us] == 0:
            return limits

        assert limits.time[us] > 0 and limits.inc[us] >= 0, "negative clock value"

        if options.nodestime:
            limits = apply_nodes_time(state, limits, us, options.nodestime)

        time_ms = limits.time[us]
        mtg = moves_to_go(limits.movestogo, ply, time_ms, options.tune)

        budget = compute_budget(
            time_ms,
            limits.inc[us],
            mtg,
            options.move_overhead,
            ply,
            explicit_horizon=limits.movestogo > 0,
            ponder=options.ponder,
            score=eval_score,
            tune=options.tune,
        )
        state.optimum_time = budget.optimum
        state.maximum_time = budget.maximum

        logger.debug(
            "ply %d: time %d inc %d mtg %d -> optimum %d maximum %d",
            ply, time_ms, limits.inc[us], mtg, budget.optimum, budget.maximum,
        )
        return limits

    def init_from_board(
        self,
        limits: SearchLimits,
        board: chess.Board,
        options: TimeOptions,
        evaluator: Optional[Evaluator] = None,
    ) -> SearchLimits:
        """
        Same as init(), taking side to move, ply and evaluation from a board.

        The material balance scores the position when the eval-based
        extension is on and no evaluator is given.
        """
        score = None
        if options.tune.use_eval_extra:
            score = side_to_move_score(board, evaluator or material_balance)
        return self.init(limits, board.turn, board.ply(), options, eval_score=score)
