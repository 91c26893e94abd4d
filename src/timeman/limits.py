"""
Search limits handed to the time manager by the protocol layer.
"""

from dataclasses import dataclass, field, replace
from typing import Dict, Optional

import chess

from .clock import now


def _per_color(white: int = 0, black: int = 0) -> Dict[chess.Color, int]:
    return {chess.WHITE: white, chess.BLACK: black}


@dataclass(frozen=True)
class SearchLimits:
    """
    Clock state for one decision.

    Attributes:
        time: Remaining time per color in milliseconds
        inc: Increment per color in milliseconds
        movestogo: Moves until the next time control (0 = sudden death)
        npmsec: Nodes per millisecond when playing nodes-as-time (0 = off)
        start_time: Timestamp (ms) the search clock started at
    """

    time: Dict[chess.Color, int] = field(default_factory=_per_color)
    inc: Dict[chess.Color, int] = field(default_factory=_per_color)
    movestogo: int = 0
    npmsec: int = 0
    start_time: int = field(default_factory=now)

    @classmethod
    def from_clock(
        cls,
        wtime: int = 0,
        btime: int = 0,
        winc: int = 0,
        binc: int = 0,
        movestogo: int = 0,
        start_time: Optional[int] = None,
    ) -> "SearchLimits":
        """Build limits from the usual wtime/btime/winc/binc fields."""
        assert min(wtime, btime, winc, binc, movestogo) >= 0, "negative clock value"
        return cls(
            time=_per_color(wtime, btime),
            inc=_per_color(winc, binc),
            movestogo=movestogo,
            start_time=now() if start_time is None else start_time,
        )

    def use_time_management(self) -> bool:
        return bool(self.time[chess.WHITE] or self.time[chess.BLACK])

    def with_side(
        self,
        us: chess.Color,
        time: Optional[int] = None,
        inc: Optional[int] = None,
        **changes,
    ) -> "SearchLimits":
        """
        Return a copy with one side's clock replaced.

        Args:
            us: Color whose time/increment change
            time: New remaining time, or None to keep it
            inc: New increment, or None to keep it
            **changes: Other fields to replace (e.g. npmsec)
        """
        new_time = dict(self.time)
        new_inc = dict(self.inc)
        if time is not None:
            new_time[us] = time
        if inc is not None:
            new_inc[us] = inc
        return replace(self, time=new_time, inc=new_inc, **changes)
