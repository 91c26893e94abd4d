"""Tests for the TimeManager orchestrator."""

import dataclasses

import chess
import pytest

from timeman import (
    ManualClock, NodesTimeInactiveError, SearchLimits, TimeManager, TimeOptions,
    TuneParams,
)


NO_BLACK_QUEEN = "rnb1kbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"


@pytest.fixture
def clock():
    return ManualClock(start_ms=1000)


@pytest.fixture
def tm(clock):
    return TimeManager(clock=clock)


@pytest.fixture
def no_overhead():
    return TimeOptions(move_overhead=0)


def one_minute(movestogo=0, start_time=1000):
    return SearchLimits.from_clock(wtime=60000, btime=60000, movestogo=movestogo,
                                   start_time=start_time)


class TestInit:
    def test_idle_until_first_init(self, tm, no_overhead):
        assert not tm.armed
        tm.init(one_minute(), chess.WHITE, 0, no_overhead)
        assert tm.armed

    def test_sudden_death(self, tm, no_overhead):
        tm.init(one_minute(), chess.WHITE, 0, no_overhead)
        assert 1092 <= tm.optimum() <= 1093
        assert abs(tm.maximum() - 7246) <= 10

    def test_movestogo_switches_branch(self, tm, no_overhead):
        tm.init(one_minute(movestogo=20), chess.WHITE, 0, no_overhead)
        assert 2639 <= tm.optimum() <= 2640
        assert abs(tm.maximum() - 9758) <= 5

    def test_uses_side_to_move_clock(self, tm, no_overhead):
        limits = SearchLimits.from_clock(wtime=60000, btime=5000)
        tm.init(limits, chess.BLACK, 1, no_overhead)
        assert tm.maximum() <= 0.825 * 5000

    def test_ponder_adds_a_quarter(self, tm):
        tm.init(one_minute(), chess.WHITE, 10, TimeOptions(ponder=False))
        base = tm.optimum()
        tm.init(one_minute(), chess.WHITE, 10, TimeOptions(ponder=True))
        assert tm.optimum() == base + base // 4

    def test_zero_time_keeps_previous_budget(self, tm, no_overhead):
        tm.init(one_minute(), chess.WHITE, 0, no_overhead)
        optimum, maximum = tm.optimum(), tm.maximum()
        limits = SearchLimits.from_clock(wtime=0, btime=60000, start_time=5000)
        returned = tm.init(limits, chess.WHITE, 2, no_overhead)
        assert returned is limits
        assert (tm.optimum(), tm.maximum()) == (optimum, maximum)
        # start time is still recorded for movetime searches
        assert tm.state.start_time == 5000

    def test_eval_score_extends_time_when_behind(self):
        options = TimeOptions(move_overhead=0, tune=TuneParams(use_eval_extra=True))
        plain, behind = TimeManager(), TimeManager()
        plain.init(one_minute(), chess.WHITE, 20, options)
        behind.init(one_minute(), chess.WHITE, 20, options, eval_score=-300)
        assert behind.optimum() > plain.optimum()

    def test_init_from_board(self):
        options = TimeOptions(move_overhead=0, tune=TuneParams(use_eval_extra=True))
        board = chess.Board()
        board.push_san("e4")

        neutral, ahead = TimeManager(), TimeManager()
        neutral.init_from_board(one_minute(), board, options)
        # White-perspective -300 means black, to move, is ahead
        ahead.init_from_board(one_minute(), board, options, evaluator=lambda b: -300)
        assert ahead.optimum() < neutral.optimum()

        direct = TimeManager()
        direct.init(one_minute(), chess.BLACK, 1, options)
        assert direct.optimum() == neutral.optimum()

    def test_init_from_board_defaults_to_material(self):
        options = TimeOptions(move_overhead=0, tune=TuneParams(use_eval_extra=True))
        # White to move and a queen up
        board = chess.Board(NO_BLACK_QUEEN)

        even, material = TimeManager(), TimeManager()
        even.init_from_board(one_minute(), board, options, evaluator=lambda b: 0)
        material.init_from_board(one_minute(), board, options)
        assert material.optimum() < even.optimum()

    def test_horizon_bucket_above_fifty_changes_budget(self):
        limits = SearchLimits.from_clock(wtime=60000, btime=60000, winc=1000, binc=1000)
        budgets = []
        for horizon in (50, 100):
            tune = TuneParams()
            tune.set("mtg_1", horizon)
            tm = TimeManager()
            tm.init(limits, chess.WHITE, 2, TimeOptions(tune=tune))
            budgets.append((tm.optimum(), tm.maximum()))
        assert budgets[0] != budgets[1]


class TestElapsed:
    def test_wall_clock(self, tm, clock, no_overhead):
        tm.init(one_minute(start_time=clock.now()), chess.WHITE, 0, no_overhead)
        clock.advance(250)
        assert tm.elapsed() == 250
        assert tm.elapsed(nodes=99999) == 250

    def test_nodes_as_time(self, tm, clock):
        tm.init(one_minute(), chess.WHITE, 0, TimeOptions(nodestime=100))
        clock.advance(250)
        assert tm.elapsed(12345) == 12345


class TestNodesTime:
    def test_budget_seeded_once_and_only_grows(self, tm):
        options = TimeOptions(move_overhead=0, nodestime=100)
        tm.init(one_minute(), chess.WHITE, 0, options)
        assert tm.state.available_nodes == 6000000

        later = SearchLimits.from_clock(wtime=30000, btime=30000)
        returned = tm.init(later, chess.WHITE, 2, options)
        assert tm.state.available_nodes == 6000000
        assert returned.time[chess.WHITE] == 6000000

        tm.advance_nodes_time(5000)
        assert tm.state.available_nodes == 6005000

    def test_mode_is_sticky_within_a_game(self, tm):
        tm.init(one_minute(), chess.WHITE, 0, TimeOptions(nodestime=100))
        tm.init(one_minute(), chess.WHITE, 2, TimeOptions())
        assert tm.state.use_nodes_time
        assert tm.elapsed(42) == 42

    def test_clear_resets_budget(self, tm):
        tm.init(one_minute(), chess.WHITE, 0, TimeOptions(nodestime=100))
        tm.clear()
        assert tm.state.available_nodes == 0
        assert not tm.state.use_nodes_time

        tm.init(SearchLimits.from_clock(wtime=1000, btime=1000), chess.WHITE, 0,
                TimeOptions(nodestime=100))
        assert tm.state.available_nodes == 100000

    def test_caller_limits_not_mutated(self, tm):
        limits = SearchLimits.from_clock(wtime=60000, btime=60000, winc=1000, binc=1000)
        adjusted = tm.init(limits, chess.WHITE, 0, TimeOptions(nodestime=10))
        assert limits.time[chess.WHITE] == 60000
        assert limits.inc[chess.WHITE] == 1000
        assert limits.npmsec == 0
        assert adjusted.time[chess.WHITE] == 600000
        assert adjusted.inc[chess.WHITE] == 10000
        assert adjusted.npmsec == 10
        assert adjusted.time[chess.BLACK] == 60000

    def test_budget_in_nodes(self, tm):
        tm.init(one_minute(), chess.WHITE, 0, TimeOptions(move_overhead=0, nodestime=100))
        assert tm.optimum() > 60000
        assert tm.maximum() <= 0.825 * 6000000

    def test_advance_requires_nodes_time(self, tm, no_overhead):
        tm.init(one_minute(), chess.WHITE, 0, no_overhead)
        with pytest.raises(NodesTimeInactiveError):
            tm.advance_nodes_time(1000)

    def test_advance_virtual_budget_alias(self, tm):
        tm.init(one_minute(), chess.WHITE, 0, TimeOptions(nodestime=100))
        tm.advance_virtual_budget(250)
        assert tm.state.available_nodes == 6000250

        tm.clear()
        with pytest.raises(NodesTimeInactiveError):
            tm.advance_virtual_budget(250)

    def test_advance_rejects_negative(self, tm):
        tm.init(one_minute(), chess.WHITE, 0, TimeOptions(nodestime=100))
        with pytest.raises(ValueError):
            tm.advance_nodes_time(-1)


class TestSnapshot:
    def test_snapshot_is_frozen(self, tm, no_overhead):
        tm.init(one_minute(), chess.WHITE, 0, no_overhead)
        budget = tm.snapshot()
        assert budget.optimum == tm.optimum()
        assert budget.maximum == tm.maximum()
        with pytest.raises(dataclasses.FrozenInstanceError):
            budget.optimum = 0

    def test_snapshot_survives_next_init(self, tm, no_overhead):
        tm.init(one_minute(), chess.WHITE, 0, no_overhead)
        budget = tm.snapshot()
        tm.init(one_minute(movestogo=20), chess.WHITE, 0, no_overhead)
        assert budget.optimum != tm.optimum()
