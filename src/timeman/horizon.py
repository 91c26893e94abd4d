"""
Estimate how many moves are left in the game.
"""

from .options import DEFAULT_HORIZON, HORIZON_BUCKETS, TuneParams

MAX_HORIZON = 50
BUCKET_WIDTH = 10
LOW_TIME_MS = 1000
LOW_TIME_RATIO = 0.05


def move_number(ply: int) -> int:
    """Full-move number for a ply count (two plies per move)."""
    return ply // 2 if ply % 2 == 0 else ply // 2 + 1


def estimate_horizon(ply: int, tune: TuneParams) -> int:
    """
    Look up the expected number of remaining moves.

    Args:
        ply: Half-moves played so far
        tune: Tunable parameters holding the mtg_1..mtg_15 buckets

    Returns:
        The bucket value for move numbers 1-150, DEFAULT_HORIZON otherwise
    """
    if not tune.use_horizon_table:
        return DEFAULT_HORIZON

    n = move_number(ply)
    if not 0 < n <= HORIZON_BUCKETS * BUCKET_WIDTH:
        return DEFAULT_HORIZON

    return int(tune.horizon_table()[(n - 1) // BUCKET_WIDTH])


def correct_for_low_time(mtg: int, time_ms: int) -> int:
    """Shrink the horizon when less than a second is left."""
    if 0 < time_ms < LOW_TIME_MS and mtg / time_ms > LOW_TIME_RATIO:
        return int(time_ms * LOW_TIME_RATIO)
    return mtg


def moves_to_go(movestogo: int, ply: int, time_ms: int, tune: TuneParams) -> int:
    """
    Horizon used by the budget formulas.

    An explicit movestogo wins over the estimate and is capped at
    MAX_HORIZON. The result is corrected for low time and may end up
    below 1.
    """
    if movestogo > 0:
        mtg = min(movestogo, MAX_HORIZON)
    else:
        mtg = estimate_horizon(ply, tune)
    return correct_for_low_time(mtg, time_ms)
