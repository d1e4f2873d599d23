"""Unit tests for elimination.py: the rank-sweep-trim loop."""

import pytest

from ipd_playground.algorithms import get_strategy_by_name
from ipd_playground.elimination import (
    STOP_SIZE,
    EliminationHistory,
    play_round,
    run_elimination,
)
from ipd_playground.tournament import Tournament


def _tournament(*names) -> Tournament:
    return Tournament(prototypes=[get_strategy_by_name(n) for n in names])


class TestEliminationHistory:
    """Tests for the history accumulator."""

    def test_first_round_seeds_pairs(self):
        """The first round records each value twice, zero ranks included."""
        h = EliminationHistory()
        h.record({"a": 0.0, "b": 1.0}, {"a": 1.5, "b": 3.0})
        assert h.ranks == {"a": [0.0, 0.0], "b": [1.0, 1.0]}
        assert h.averages == {"a": [1.5, 1.5], "b": [3.0, 3.0]}

    def test_later_rounds_append_survivors_only(self):
        """After the first round only nonzero ranks are appended."""
        h = EliminationHistory()
        h.record({"a": 0.0, "b": 0.4, "c": 1.0}, {"a": 1.0, "b": 2.0, "c": 3.0})
        h.record({"b": 0.0, "c": 1.0}, {"b": 2.5, "c": 2.8})
        assert h.ranks == {"a": [0.0, 0.0], "b": [0.4, 0.4], "c": [1.0, 1.0, 1.0]}
        assert h.averages == {"a": [1.0, 1.0], "b": [2.0, 2.0], "c": [3.0, 3.0, 2.8]}


class TestPlayRound:
    """Tests for play_round."""

    def test_collects_everything(self):
        """A round holds standings, grid winners and both tables."""
        rnd = play_round(_tournament("00000", "11111", "00011"), rounds=10)
        assert rnd.population == 3
        assert rnd.standings[0].name == "11111"
        assert len(rnd.weight_winners) == 190
        assert set(rnd.rank_table) == {"00000", "11111", "00011"}
        assert rnd.average_score["00000"] == pytest.approx(2.0)

    def test_to_dict(self):
        """to_dict is JSON-friendly."""
        data = play_round(_tournament("00000", "11111"), rounds=5, weight_step=0.5).to_dict()
        assert data["population"] == 2
        assert data["weight_winners"] == [{"defect": 0.0, "cooperate": 0.5, "name": "11111"}]
        assert data["standings"][0]["name"] == "11111"


class TestRunElimination:
    """Tests for run_elimination."""

    def test_small_population(self):
        """Three strategies shrink to tit-for-tat in two rounds.

        Round 1 (10 rounds per pairing): 00000 = 60, 11111 = 74, 00011 = 69.
        Round 2: 11111 = 10 + 14 = 24, 00011 = 9 + 30 = 39.
        """
        result = run_elimination(
            _tournament("00000", "11111", "00011"), stop_size=1, rounds=10, weight_step=0.5
        )
        assert [r.population for r in result.rounds] == [3, 2]
        assert result.survivors == ["00011"]
        assert result.rank_history["00000"] == [0.0, 0.0]
        assert result.rank_history["11111"] == [1.0, 1.0]
        assert result.rank_history["00011"] == pytest.approx([9 / 14, 9 / 14, 1.0])
        assert result.average_history["00011"] == pytest.approx([2.3, 2.3, 1.95])
        assert result.average_history["11111"] == pytest.approx([74 / 30, 74 / 30])

    def test_stops_at_stop_size(self):
        """Nothing is played when the population is already small enough."""
        result = run_elimination(_tournament("00000", "11111"), stop_size=2, rounds=5)
        assert result.rounds == []
        assert result.survivors == ["00000", "11111"]
        assert result.rank_history == {}

    def test_stalled_population_stops(self):
        """A fully tied population is ranked once and the loop ends."""
        result = run_elimination(_tournament("00000", "00100"), stop_size=1, rounds=5)
        assert len(result.rounds) == 1
        assert result.survivors == ["00000", "00100"]
        assert result.rank_history == {"00000": [0.5, 0.5], "00100": [0.5, 0.5]}

    def test_on_round_callback(self):
        """on_round sees each population before it is trimmed."""
        seen = []
        run_elimination(
            _tournament("00000", "11111", "00011"),
            stop_size=1,
            rounds=10,
            weight_step=0.5,
            on_round=lambda r: seen.append(r.population),
        )
        assert seen == [3, 2]

    def test_to_dict(self):
        data = run_elimination(
            _tournament("00000", "11111", "00011"), stop_size=2, rounds=10, weight_step=0.5
        ).to_dict()
        assert data["survivors"] == ["11111", "00011"]
        assert len(data["rounds"]) == 1

    @pytest.mark.slow
    def test_default_run(self):
        """The default run starts from 26 strategies and ends at or below STOP_SIZE.

        A population of mutually cooperating strategies ties and stops early.
        """
        result = run_elimination(weight_step=0.25)
        assert result.rounds[0].population == 26
        last = result.rounds[-1]
        stalled = all(v == 0.5 for v in last.rank_table.values())
        assert len(result.survivors) <= STOP_SIZE or stalled
        assert set(result.rank_history) == set(result.rounds[0].rank_table)
        sizes = [r.population for r in result.rounds]
        assert sizes == sorted(sizes, reverse=True)
        for r in result.rounds:
            assert all(0.0 <= v <= 1.0 for v in r.rank_table.values())
