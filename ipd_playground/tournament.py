"""Round-robin tournament: scoring, min-max ranking, trimming and weighted-best lookup.

Supports parallel execution via ProcessPoolExecutor for multi-core speedup.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Optional, Callable
from concurrent.futures import ProcessPoolExecutor, as_completed

import numpy as np

from .algorithms import MemoryOneStrategy, get_strategy_by_name
from .engine import multiple_rounds
from .signature import compute_signature
from .stats import Stats

logger = logging.getLogger(__name__)

ROUNDS_PER_MATCH = 200
WEIGHT_STEP = 0.05
DEGENERATE_RANK = 0.5


class TournamentNotRankedError(RuntimeError):
    """Raised when a ranking query is made before compute_ranking()."""


def argmax(values) -> int:
    """Index of the first occurrence of the maximum, or -1 for an empty sequence."""
    if len(values) == 0:
        return -1
    return int(np.argmax(np.asarray(values, dtype=float)))


def weight_grid(step: float = WEIGHT_STEP) -> list[tuple[float, float]]:
    """All (defect, cooperate) weight pairs with 0 <= defect < cooperate < 1.

    Values are computed as ``i * step`` so that equal grid indices give equal
    floats and ``defect < cooperate`` holds exactly for lower indices.
    """
    if step <= 0:
        raise ValueError(f"Weight step must be positive, got {step}")
    grid = []
    j = 0
    while j * step < 1.0:
        c = j * step
        i = 0
        while i * step < c:
            grid.append((i * step, c))
            i += 1
        j += 1
    return grid


# ---------------------------------------------------------------------------
# Worker function for parallel execution (must be top-level for pickling)
# ---------------------------------------------------------------------------

def _run_pairing_worker(name_a: str, name_b: str, rounds: int) -> Stats:
    """Play one pairing in a worker process and return player A's stats.

    Strategies are rebuilt from their genome names inside the worker.
    """
    games = multiple_rounds(get_strategy_by_name(name_a), get_strategy_by_name(name_b), rounds)
    return Stats.from_games(games)


@dataclass
class Standing:
    """One row of a ranked tournament."""
    name: str
    signature: str
    rank: float
    score: int
    summary: str

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "signature": self.signature,
            "rank": round(self.rank, 4),
            "score": self.score,
            "summary": self.summary,
        }


@dataclass
class Tournament:
    """A population of strategy prototypes and, once ranked, their results.

    ``stats`` and ``rank`` are parallel to ``prototypes`` after
    compute_ranking() and empty before.
    """
    prototypes: list[MemoryOneStrategy]
    stats: list[Stats] = field(default_factory=list)
    rank: list[float] = field(default_factory=list)

    def __len__(self):
        return len(self.prototypes)

    @property
    def names(self) -> list[str]:
        return [p.name for p in self.prototypes]

    @property
    def is_ranked(self) -> bool:
        return len(self.rank) == len(self.prototypes) and len(self.stats) == len(self.prototypes)

    def _require_ranked(self):
        if not self.is_ranked:
            raise TournamentNotRankedError(
                f"Tournament of {len(self.prototypes)} has not been ranked"
            )

    def compute_ranking(
        self,
        rounds: int = ROUNDS_PER_MATCH,
        parallel: bool = False,
        on_pairing_done: Optional[Callable[[int, int], None]] = None,
    ):
        """Play every ordered pairing (self-pairs included) and rank by total score.

        Each prototype accumulates its stats as the first player, so its
        total covers N pairings. Ranks are min-max normalised into [0, 1];
        if every score is equal, every rank is 0.5.

        Args:
            parallel: If True, play pairings across multiple CPU cores.
            on_pairing_done: Optional callback(completed, total) called
                             after each pairing finishes.
        """
        count = len(self.prototypes)
        jobs = [(i1, i2) for i1 in range(count) for i2 in range(count)]
        logger.debug(f"Ranking {count} prototypes: {len(jobs)} pairings x {rounds} rounds")

        if parallel and len(jobs) > 1:
            stats = self._run_parallel(jobs, rounds, on_pairing_done)
        else:
            stats = [Stats() for _ in range(count)]
            for done, (i1, i2) in enumerate(jobs, 1):
                games = multiple_rounds(self.prototypes[i1], self.prototypes[i2], rounds)
                stats[i1] = stats[i1] + Stats.from_games(games)
                if on_pairing_done:
                    on_pairing_done(done, len(jobs))

        self.stats = stats
        self.rank = _min_max_rank([s.score for s in stats])

    def _run_parallel(
        self,
        jobs: list[tuple[int, int]],
        rounds: int,
        on_pairing_done: Optional[Callable[[int, int], None]] = None,
    ) -> list[Stats]:
        """Run pairings in a ProcessPoolExecutor and fold them by player index.

        Completion order does not matter since Stats addition is commutative.
        """
        names = self.names
        stats = [Stats() for _ in names]
        max_workers = min(os.cpu_count() or 4, len(jobs))
        total = len(jobs)
        completed = 0

        with ProcessPoolExecutor(max_workers=max_workers) as executor:
            future_to_idx = {}
            for i1, i2 in jobs:
                future = executor.submit(_run_pairing_worker, names[i1], names[i2], rounds)
                future_to_idx[future] = i1

            for future in as_completed(future_to_idx):
                i1 = future_to_idx[future]
                stats[i1] = stats[i1] + future.result()
                completed += 1
                if on_pairing_done:
                    on_pairing_done(completed, total)

        return stats

    def standings(self) -> list[Standing]:
        """Ranked rows sorted by score, highest first; ties keep prototype order."""
        self._require_ranked()
        scores = [s.score for s in self.stats]
        order = sorted(range(len(scores)), key=lambda i: -scores[i])
        return [
            Standing(
                name=self.prototypes[i].name,
                signature=compute_signature(self.prototypes[i]),
                rank=self.rank[i],
                score=scores[i],
                summary=self.stats[i].summary,
            )
            for i in order
        ]

    def top_normalized(self, defecting: float, cooperating: float) -> str:
        """Name of the prototype with the highest normalized score for these weights."""
        self._require_ranked()
        scores = [s.normalized_score(defecting, cooperating) for s in self.stats]
        index = argmax(scores)
        if index < 0:
            raise ValueError("Empty tournament has no top strategy")
        return self.prototypes[index].name

    def normal_result_table(self, step: float = WEIGHT_STEP) -> list[tuple[float, float, str]]:
        """Weighted-best strategy for every point of the (defect, cooperate) grid."""
        self._require_ranked()
        return [(d, c, self.top_normalized(d, c)) for d, c in weight_grid(step)]

    def rank_table(self) -> dict[str, float]:
        self._require_ranked()
        return {p.name: r for p, r in zip(self.prototypes, self.rank)}

    def average_score(self) -> dict[str, float]:
        """Mean payoff per round for each prototype."""
        self._require_ranked()
        return {p.name: s.average for p, s in zip(self.prototypes, self.stats)}

    def trimmed(self) -> "Tournament":
        """A new, unranked tournament without the prototypes ranked 0.0."""
        self._require_ranked()
        survivors = [p for p, r in zip(self.prototypes, self.rank) if r > 0.0]
        logger.debug(f"Trimmed {len(self.prototypes) - len(survivors)} of {len(self.prototypes)}")
        return Tournament(prototypes=survivors)


def _min_max_rank(scores: list[int]) -> list[float]:
    if not scores:
        return []
    values = np.asarray(scores, dtype=float)
    lo, hi = values.min(), values.max()
    if hi == lo:
        logger.warning(f"All {len(scores)} scores tied at {int(lo)}; ranking every entry {DEGENERATE_RANK}")
        return [DEGENERATE_RANK] * len(scores)
    return ((values - lo) / (hi - lo)).tolist()
