"""
Time management for chess search.
"""

from .clock import ManualClock, SystemClock
from .formulas import Budget, compute_budget
from .limits import SearchLimits
from .manager import (
    AllocatorState,
    NodesTimeInactiveError,
    TimeBudget,
    TimeManagementError,
    TimeManager,
)
from .options import Param, TimeOptions, TuneParams

__all__ = [
    'AllocatorState', 'Budget', 'ManualClock', 'NodesTimeInactiveError', 'Param',
    'SearchLimits', 'SystemClock', 'TimeBudget', 'TimeManagementError',
    'TimeManager', 'TimeOptions', 'TuneParams', 'compute_budget',
]
