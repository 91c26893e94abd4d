"""
Budget formulas: turn a clock state into optimum/maximum search times.

Two regimes are supported:
    1) x basetime (+ z increment), when no movestogo is given
    2) x moves in y seconds (+ z increment)
"""

import math
from dataclasses import dataclass
from typing import Optional

import numpy as np

from .options import TuneParams

SAFETY_MARGIN_MS = 10
MAX_TIME_FRACTION = 0.825
PONDER_BONUS_DIVISOR = 4
LARGE_INCREMENT_MS = 500


@dataclass(frozen=True)
class Budget:
    """Result of one budget computation."""

    optimum: int
    maximum: int
    time_left: int
    opt_scale: float
    max_scale: float
    mtg: int


def time_left(time_ms: int, inc_ms: int, mtg: int, move_overhead: int) -> int:
    """Time available over the horizon, never below 1 ms."""
    return max(1, time_ms + inc_ms * (mtg - 1) - move_overhead * (2 + mtg))


def eval_extra(score: Optional[float], tune: TuneParams) -> float:
    """
    Multiplier on the optimum time based on the side-to-move evaluation.

    Args:
        score: Centipawns from the side to move's point of view, or None
        tune: Tunable parameters (coefficient and clamp bounds)

    Returns:
        Above 1.0 when behind, at most 1.0 when ahead, 1.0 when disabled
    """
    if score is None or not tune.use_eval_extra:
        return 1.0
    extra = 1.0 - tune["eval_extra_coeff"] * score / 100.0
    return float(np.clip(extra, tune["eval_extra_min"], tune["eval_extra_max"]))


def sudden_death_scales(
    time_ms: int, inc_ms: int, ply: int, left: int, extra: float = 1.0
) -> tuple:
    """optScale and maxScale when playing without movestogo."""
    # Use extra time with larger increments
    opt_extra = 1.0 if inc_ms < LARGE_INCREMENT_MS else 1.13

    log_time = np.log10(time_ms / 1000.0)
    opt_constant = min(0.00308 + 0.000319 * log_time, 0.00506)
    max_constant = max(3.39 + 3.01 * log_time, 2.93)

    opt_scale = (
        min(0.0122 + np.power(ply + 2.95, 0.462) * opt_constant, 0.213 * time_ms / left)
        * opt_extra
        * extra
    )
    max_scale = min(6.64, max_constant + ply / 12.0)
    return float(opt_scale), float(max_scale)


def moves_to_go_scales(time_ms: int, ply: int, mtg: int, left: int) -> tuple:
    """optScale and maxScale when the number of moves to the control is known."""
    # mtg can reach 0 after the low-time correction; the cap below then decides
    per_move = (0.88 + ply / 116.4) / mtg if mtg > 0 else math.inf
    opt_scale = min(per_move, 0.88 * time_ms / left)
    max_scale = min(6.3, 1.5 + 0.11 * mtg)
    return opt_scale, max_scale


def compute_budget(
    time_ms: int,
    inc_ms: int,
    mtg: int,
    move_overhead: int,
    ply: int,
    explicit_horizon: bool,
    ponder: bool = False,
    score: Optional[float] = None,
    tune: Optional[TuneParams] = None,
) -> Budget:
    """
    Compute the optimum and maximum time for the coming search.

    Args:
        time_ms: Remaining time for the side to move, must be > 0
        inc_ms: Increment for the side to move
        mtg: Moves-to-go horizon, explicit or estimated
        move_overhead: Milliseconds reserved per move
        ply: Half-moves played so far
        explicit_horizon: True when movestogo came from the time control
        ponder: Grant 25% more optimum time when pondering
        score: Side-to-move evaluation for the eval-based extension
        tune: Tunable parameters

    Returns:
        Budget with optimum/maximum in the same unit as time_ms
    """
    if tune is None:
        tune = TuneParams()

    left = time_left(time_ms, inc_ms, mtg, move_overhead)

    if explicit_horizon:
        opt_scale, max_scale = moves_to_go_scales(time_ms, ply, mtg, left)
    else:
        opt_scale, max_scale = sudden_death_scales(
            time_ms, inc_ms, ply, left, eval_extra(score, tune)
        )

    optimum = int(opt_scale * left)
    cap = MAX_TIME_FRACTION * time_ms - move_overhead
    maximum = max(0, int(min(cap, max_scale * optimum)) - SAFETY_MARGIN_MS)

    if ponder:
        optimum += optimum // PONDER_BONUS_DIVISOR

    return Budget(optimum, maximum, left, opt_scale, max_scale, mtg)
