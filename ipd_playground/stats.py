"""Outcome statistics and pretty-printing for Prisoner's Dilemma tournaments."""

from collections import Counter
from typing import Iterable, Optional

from .engine import Outcome, PAYOFFS


class EmptyStatsError(ValueError):
    """Raised when an average is requested from Stats with no games."""


class Stats:
    """Histogram of outcomes for one player across any number of rounds.

    Stats form a commutative monoid under ``+``: the empty Stats is the
    identity and addition sums per-outcome counts.
    """

    __slots__ = ("table",)

    def __init__(self, table: Optional[dict] = None):
        self.table: Counter = Counter()
        if table:
            for outcome, n in table.items():
                if n < 0:
                    raise ValueError(f"Negative count for {outcome}: {n}")
                self.table[outcome] += n

    @classmethod
    def from_outcomes(cls, outcomes: Iterable[Outcome]) -> "Stats":
        return cls(Counter(outcomes))

    @classmethod
    def from_games(cls, games) -> "Stats":
        """Stats from the player's side of a sequence of OneGame records."""
        return cls.from_outcomes(g.outcome for g in games)

    def add(self, outcome: Outcome):
        self.table[outcome] += 1

    def __add__(self, other: "Stats") -> "Stats":
        if not isinstance(other, Stats):
            return NotImplemented
        return Stats(self.table + other.table)

    def __eq__(self, other):
        if not isinstance(other, Stats):
            return NotImplemented
        return all(self[o] == other[o] for o in Outcome)

    def __getitem__(self, outcome: Outcome) -> int:
        return self.table.get(outcome, 0)

    @property
    def count(self) -> int:
        return sum(self.table.values())

    @property
    def score(self) -> int:
        return sum(n * PAYOFFS[o] for o, n in self.table.items())

    @property
    def average(self) -> float:
        """Mean payoff per round."""
        count = self.count
        if count == 0:
            raise EmptyStatsError("No games recorded")
        return self.score / count

    def weight(self, outcome: Outcome) -> float:
        return float(self[outcome])

    def normalized_score(self, defecting: float, cooperating: float) -> float:
        """Weighted outcome count: jerk at 1, saint at `cooperating`, thief at `defecting`.

        Sucker rounds never contribute.
        """
        return (
            self.weight(Outcome.JERK)
            + self.weight(Outcome.SAINT) * cooperating
            + self.weight(Outcome.THIEF) * defecting
        )

    @property
    def summary(self) -> str:
        parts = []
        for o in Outcome:
            n = self[o]
            parts.append(f"{n}*{o.payoff}={n * o.payoff} ")
        return "".join(parts)

    def to_dict(self) -> dict:
        return {o.value: self[o] for o in Outcome}

    def __repr__(self):
        return f"Stats({self.to_dict()})"


# ---------------------------------------------------------------------------
# Pretty-printing
# ---------------------------------------------------------------------------

def print_signature_table(signatures: dict[str, str], decode):
    """Print genome name, signature and the bitwise decode of each hex digit."""
    print()
    for name, sig in signatures.items():
        print(f"{name}  {sig}  |  {decode(sig)}")
    print()


def print_standings(standings: list, population: Optional[int] = None):
    """Print one ranked tournament, strongest first."""
    if population is not None:
        print(f" ---- {population}")
    for s in standings:
        print(f"{s.name} <{s.signature}>: {s.rank:.2f} {s.score} : {s.summary}")


def print_normal_result_table(rows: list[tuple[float, float, str]]):
    """Print the weighted-best strategy at every (defect, cooperate) grid point."""
    for d, c, name in rows:
        print(f"{d}, {c}, {name}")


def print_history_table(history: dict[str, list[float]]):
    """Print a per-strategy history as CSV-style rows."""
    rounds = max((len(v) for v in history.values()), default=2)
    header = ["name", "start"] + [f"round{i}" for i in range(1, rounds)]
    print(", ".join(header))
    for name, values in history.items():
        print(f'"{name}", ' + ", ".join(str(v) for v in values))
