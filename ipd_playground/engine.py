"""Core game engine for Iterated Prisoner's Dilemma matches."""

from enum import Enum
from dataclasses import dataclass, field
from collections import Counter
import copy


class Choice(Enum):
    COOPERATE = "cooperate"
    DEFECT = "defect"

    @property
    def bit(self) -> int:
        return 1 if self is Choice.DEFECT else 0

    @classmethod
    def from_bit(cls, is_defect) -> "Choice":
        return cls.DEFECT if is_defect else cls.COOPERATE


class Outcome(Enum):
    """Classification of one round from the player's point of view."""
    SAINT = "saint"
    THIEF = "thief"
    JERK = "jerk"
    SUCKER = "sucker"

    @classmethod
    def of(cls, player: Choice, opponent: Choice) -> "Outcome":
        return _OUTCOME_TABLE[player, opponent]

    @property
    def payoff(self) -> int:
        return PAYOFFS[self]

    @property
    def game(self) -> "OneGame":
        """The move pair that produces this outcome."""
        return _OUTCOME_GAMES[self]


PAYOFFS = {
    Outcome.SAINT: 3,
    Outcome.THIEF: 1,
    Outcome.JERK: 5,
    Outcome.SUCKER: 0,
}

# Pre-computed outcome table: (player, opponent) → outcome
_OUTCOME_TABLE = {
    (Choice.COOPERATE, Choice.COOPERATE): Outcome.SAINT,
    (Choice.DEFECT, Choice.DEFECT): Outcome.THIEF,
    (Choice.DEFECT, Choice.COOPERATE): Outcome.JERK,
    (Choice.COOPERATE, Choice.DEFECT): Outcome.SUCKER,
}


@dataclass(frozen=True)
class OneGame:
    """One round: the player's choice and the opponent's choice."""
    player: Choice
    opponent: Choice

    @property
    def outcome(self) -> Outcome:
        return _OUTCOME_TABLE[self.player, self.opponent]

    @property
    def score(self) -> int:
        return PAYOFFS[self.outcome]

    @property
    def reversed(self) -> "OneGame":
        """The same round seen from the opponent's side."""
        return OneGame(player=self.opponent, opponent=self.player)


_OUTCOME_GAMES = {outcome: OneGame(*moves) for moves, outcome in _OUTCOME_TABLE.items()}


@dataclass
class MatchResult:
    """Result of a match between two strategies."""
    player_name: str
    opponent_name: str
    rounds: int
    games: list = field(default_factory=list)

    @property
    def player_score(self) -> int:
        return sum(g.score for g in self.games)

    @property
    def opponent_score(self) -> int:
        return sum(g.reversed.score for g in self.games)

    @property
    def outcome_distribution(self) -> dict[str, int]:
        return dict(Counter(g.outcome.value for g in self.games))

    @property
    def player_moves(self) -> str:
        """Compact move string, C for cooperate and D for defect."""
        return "".join("D" if g.player is Choice.DEFECT else "C" for g in self.games)

    @property
    def opponent_moves(self) -> str:
        return "".join("D" if g.opponent is Choice.DEFECT else "C" for g in self.games)

    def to_dict(self) -> dict:
        return {
            "player": self.player_name,
            "opponent": self.opponent_name,
            "rounds": self.rounds,
            "player_score": self.player_score,
            "opponent_score": self.opponent_score,
            "outcome_distribution": self.outcome_distribution,
            "player_moves": self.player_moves,
            "opponent_moves": self.opponent_moves,
        }


def multiple_rounds(strategy_a, strategy_b, count: int) -> list[OneGame]:
    """Play `count` simultaneous rounds between copies of two strategies.

    Both strategies must be fresh (first-play state). The instances passed in
    are never advanced, so one prototype can be paired any number of times.
    """
    assert strategy_a.is_first_play, f"{strategy_a.name} has already played"
    assert strategy_b.is_first_play, f"{strategy_b.name} has already played"
    p1 = copy.copy(strategy_a)
    p2 = copy.copy(strategy_b)

    # Local references for the hot loop
    p1_choice = p1.choice
    p2_choice = p2.choice
    p1_other = p1.other_player
    p2_other = p2.other_player

    games: list[OneGame] = []
    for _ in range(count):
        c1 = p1_choice()
        c2 = p2_choice()
        games.append(OneGame(player=c1, opponent=c2))
        p1_other(c2)
        p2_other(c1)
    return games


def run_match(strategy_a, strategy_b, rounds: int) -> MatchResult:
    """Run a match of N rounds and wrap the games in a MatchResult."""
    return MatchResult(
        player_name=strategy_a.name,
        opponent_name=strategy_b.name,
        rounds=rounds,
        games=multiple_rounds(strategy_a, strategy_b, rounds),
    )
