"""
Configuration for the time manager.

Two kinds of settings live here:

- TimeOptions: the engine options the allocator reads every move
  (Move Overhead, Ponder, nodestime).
- TuneParams: tunable constants with declared ranges, loaded once at
  startup and passed to the horizon estimator and the budget formulas.
"""

from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional, Union

HORIZON_BUCKETS = 15
DEFAULT_HORIZON = 50

MOVE_OVERHEAD_RANGE = (0, 5000)
NODESTIME_RANGE = (0, 10000)

Number = Union[int, float]


@dataclass
class Param:
    """A single tunable value with an inclusive valid range."""

    name: str
    value: Number
    low: Number
    high: Number

    def __post_init__(self):
        self.check(self.value)

    def check(self, value: Number) -> Number:
        if not self.low <= value <= self.high:
            raise ValueError(
                f"{self.name}={value} outside of range [{self.low}, {self.high}]"
            )
        return value


def _default_params() -> Dict[str, Param]:
    params = {
        f"mtg_{i}": Param(f"mtg_{i}", DEFAULT_HORIZON, 0, 100)
        for i in range(1, HORIZON_BUCKETS + 1)
    }
    params["eval_extra_coeff"] = Param("eval_extra_coeff", 0.05, 0.0, 1.0)
    params["eval_extra_min"] = Param("eval_extra_min", 0.9, 0.5, 1.0)
    params["eval_extra_max"] = Param("eval_extra_max", 1.25, 1.0, 2.0)
    return params


@dataclass
class TuneParams:
    """
    Named tunable parameters for horizon estimation and eval-based scaling.

    Args:
        use_horizon_table: Look up the horizon from the mtg_1..mtg_15 buckets
            instead of the flat default of 50
        use_eval_extra: Scale the sudden-death optimum by the evaluation
    """

    use_horizon_table: bool = True
    use_eval_extra: bool = False
    params: Dict[str, Param] = field(default_factory=_default_params)

    @classmethod
    def from_mapping(cls, values: Mapping[str, Number], **toggles) -> "TuneParams":
        tune = cls(**toggles)
        for name, value in values.items():
            tune.set(name, value)
        return tune

    def __getitem__(self, name: str) -> Number:
        return self.params[name].value

    def set(self, name: str, value: Number) -> None:
        if name not in self.params:
            raise ValueError(f"Unknown tunable parameter: {name}")
        param = self.params[name]
        param.value = param.check(value)

    def horizon_table(self) -> list:
        return [self[f"mtg_{i}"] for i in range(1, HORIZON_BUCKETS + 1)]


def _parse_bool(value) -> bool:
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return bool(value)


@dataclass(frozen=True)
class TimeOptions:
    """
    Engine options consumed by the allocator.

    Args:
        move_overhead: Milliseconds reserved per move for communication lag
        ponder: Whether the engine thinks on the opponent's time
        nodestime: Nodes per millisecond for nodes-as-time mode (0 disables)
    """

    move_overhead: int = 10
    ponder: bool = False
    nodestime: int = 0
    tune: TuneParams = field(default_factory=TuneParams, compare=False)

    def __post_init__(self):
        low, high = MOVE_OVERHEAD_RANGE
        if not low <= self.move_overhead <= high:
            raise ValueError(f"Move Overhead must be in [{low}, {high}], got {self.move_overhead}")
        low, high = NODESTIME_RANGE
        if not low <= self.nodestime <= high:
            raise ValueError(f"nodestime must be in [{low}, {high}], got {self.nodestime}")

    @classmethod
    def from_uci(cls, options: Mapping[str, object], tune: Optional[TuneParams] = None) -> "TimeOptions":
        """
        Build options from UCI setoption names and (possibly string) values.

        Unknown names are ignored; they belong to other engine components.
        """
        # UCI option names are case-insensitive
        lowered = {name.lower(): value for name, value in options.items()}
        return cls(
            move_overhead=int(lowered.get("move overhead", 10)),
            ponder=_parse_bool(lowered.get("ponder", False)),
            nodestime=int(lowered.get("nodestime", 0)),
            tune=tune if tune is not None else TuneParams(),
        )
