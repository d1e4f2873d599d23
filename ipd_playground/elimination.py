"""Repeated rank-and-trim elimination with a payoff-weight sweep each round."""

import logging
from dataclasses import dataclass, field
from typing import Optional, Callable

from .population import unique26
from .tournament import Tournament, Standing, ROUNDS_PER_MATCH, WEIGHT_STEP

logger = logging.getLogger(__name__)

STOP_SIZE = 4


@dataclass
class EliminationRound:
    """Everything observed about one population before it was trimmed."""
    population: int
    standings: list[Standing]
    weight_winners: list[tuple[float, float, str]]
    rank_table: dict[str, float]
    average_score: dict[str, float]

    def to_dict(self) -> dict:
        return {
            "population": self.population,
            "standings": [s.to_dict() for s in self.standings],
            "weight_winners": [
                {"defect": d, "cooperate": c, "name": name} for d, c, name in self.weight_winners
            ],
            "rank_table": self.rank_table,
            "average_score": self.average_score,
        }


@dataclass
class EliminationHistory:
    """Per-strategy rank and average-score values across elimination rounds.

    The first recorded round seeds ``[value, value]`` for every strategy.
    Later rounds append only for strategies that survive them (nonzero rank).
    """
    ranks: dict[str, list[float]] = field(default_factory=dict)
    averages: dict[str, list[float]] = field(default_factory=dict)

    def record(self, rank_table: dict[str, float], average_score: dict[str, float]):
        if not self.ranks:
            for name, rank in rank_table.items():
                self.ranks[name] = [rank, rank]
            for name, ave in average_score.items():
                self.averages[name] = [ave, ave]
            return
        for name, rank in rank_table.items():
            if rank != 0.0:
                self.ranks[name].append(rank)
                self.averages[name].append(average_score[name])


@dataclass
class EliminationResult:
    rounds: list[EliminationRound]
    history: EliminationHistory
    survivors: list[str]

    @property
    def rank_history(self) -> dict[str, list[float]]:
        return self.history.ranks

    @property
    def average_history(self) -> dict[str, list[float]]:
        return self.history.averages

    def to_dict(self) -> dict:
        return {
            "rounds": [r.to_dict() for r in self.rounds],
            "rank_history": self.rank_history,
            "average_history": self.average_history,
            "survivors": self.survivors,
        }


def play_round(
    tournament: Tournament,
    rounds: int = ROUNDS_PER_MATCH,
    weight_step: float = WEIGHT_STEP,
    parallel: bool = False,
) -> EliminationRound:
    """Rank one population and collect its standings and weight-grid winners."""
    tournament.compute_ranking(rounds=rounds, parallel=parallel)
    return EliminationRound(
        population=len(tournament),
        standings=tournament.standings(),
        weight_winners=tournament.normal_result_table(weight_step),
        rank_table=tournament.rank_table(),
        average_score=tournament.average_score(),
    )


def run_elimination(
    tournament: Optional[Tournament] = None,
    stop_size: int = STOP_SIZE,
    rounds: int = ROUNDS_PER_MATCH,
    weight_step: float = WEIGHT_STEP,
    parallel: bool = False,
    on_round: Optional[Callable[[EliminationRound], None]] = None,
) -> EliminationResult:
    """Rank, sweep and trim until the population is no larger than `stop_size`.

    Args:
        tournament: Starting population. Defaults to unique26().
        on_round: Optional callback(round) called after each population is
                  ranked, before it is trimmed.
    """
    if tournament is None:
        tournament = unique26()
    history = EliminationHistory()
    played: list[EliminationRound] = []

    while len(tournament) > stop_size:
        logger.info(f"Elimination round {len(played) + 1}: {len(tournament)} strategies")
        result = play_round(tournament, rounds=rounds, weight_step=weight_step, parallel=parallel)
        history.record(result.rank_table, result.average_score)
        played.append(result)
        if on_round:
            on_round(result)

        next_tournament = tournament.trimmed()
        if len(next_tournament) == len(tournament):
            logger.warning(
                f"No strategy eliminated from population of {len(tournament)}; stopping"
            )
            break
        tournament = next_tournament

    return EliminationResult(rounds=played, history=history, survivors=tournament.names)
