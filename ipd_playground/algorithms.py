"""Memory-1 Prisoner's Dilemma strategies encoded as 5-bit genomes."""

from abc import ABC, abstractmethod
import copy
from typing import Optional

from .engine import Choice


GENOME_LENGTH = 5


class InvalidGenomeError(ValueError):
    """Raised when a genome is not exactly GENOME_LENGTH bits."""


class Strategy(ABC):
    """Base class for Prisoner's Dilemma strategies."""

    @property
    @abstractmethod
    def name(self) -> str:
        ...

    @property
    @abstractmethod
    def is_first_play(self) -> bool:
        ...

    @abstractmethod
    def choice(self) -> Choice:
        """Return the move for the upcoming round."""
        ...

    @abstractmethod
    def other_player(self, choice: Choice):
        """Record the opponent's move for the round just played."""
        ...

    def reset(self):
        """Reset any internal state between matches."""
        pass

    def copy(self) -> "Strategy":
        """Return an independent copy of this strategy in its current state."""
        return copy.copy(self)

    def __str__(self):
        return self.name

    def __repr__(self):
        return f"<{self.name}>"


class MemoryOneStrategy(Strategy):
    """Deterministic automaton driven by a 5-bit genome.

    Bit 0 is the opening move. Bits 1-4 are the response to the previous
    round, indexed by ``own.bit + 2 * opponent.bit``:

        index 0: both cooperated
        index 1: I defected, they cooperated
        index 2: I cooperated, they defected
        index 3: both defected

    A set bit means defect.
    """

    def __init__(self, bits):
        bits = tuple(bool(b) for b in bits)
        if len(bits) != GENOME_LENGTH:
            raise InvalidGenomeError(
                f"Genome must have {GENOME_LENGTH} bits, got {len(bits)}"
            )
        self.bits = bits
        self.reset()

    @classmethod
    def from_name(cls, name: str) -> "MemoryOneStrategy":
        """Build a strategy from its binary description, e.g. ``"01011"``."""
        bad = set(name) - {"0", "1"}
        if bad:
            raise InvalidGenomeError(f"Invalid genome '{name}': unexpected {sorted(bad)}")
        return cls(c == "1" for c in name)

    @property
    def name(self) -> str:
        return "".join("1" if b else "0" for b in self.bits)

    @property
    def is_first_play(self) -> bool:
        return self._first_play

    def reset(self):
        self.my_last: Optional[Choice] = None
        self.their_last: Optional[Choice] = None
        self._first_play = True

    def choice(self) -> Choice:
        if self.my_last is None or self.their_last is None:
            assert self._first_play
            play = Choice.from_bit(self.bits[0])
            self._first_play = False
        else:
            index = self.my_last.bit + 2 * self.their_last.bit
            play = Choice.from_bit(self.bits[index + 1])
        self.my_last = play
        return play

    def other_player(self, choice: Choice):
        self.their_last = choice

    def __eq__(self, other):
        if not isinstance(other, MemoryOneStrategy):
            return NotImplemented
        return self.bits == other.bits

    def __hash__(self):
        return hash(self.bits)


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

def binary_string(value: int, digits: int) -> str:
    """Zero-padded binary representation of `value`, most significant bit first."""
    return format(value & ((1 << digits) - 1), f"0{digits}b")


def all_genome_names() -> list[str]:
    """Every 5-bit genome name, "00000" through "11111"."""
    return [binary_string(x, GENOME_LENGTH) for x in range(2 ** GENOME_LENGTH)]


def get_all_strategies() -> list[MemoryOneStrategy]:
    """Return fresh instances of all 32 genomes."""
    return [MemoryOneStrategy.from_name(n) for n in all_genome_names()]


def get_strategy_by_name(name: str) -> MemoryOneStrategy:
    """Get a single strategy instance by its genome name."""
    return MemoryOneStrategy.from_name(name.strip())
