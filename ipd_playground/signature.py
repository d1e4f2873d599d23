"""Behavioural signatures for detecting duplicate strategies.

A signature records a strategy's moves over every 3-round opponent history.
Each of the 8 histories yields a hex digit packing the 4 observed moves
(opening plus three responses, opening in the high bit). Two genomes with the
same signature cannot be told apart by any opponent.
"""

from itertools import product

from .algorithms import all_genome_names, binary_string, get_strategy_by_name
from .engine import Choice

SEPARATOR = "-"


def compute_signature(strategy) -> str:
    """Return the 9-character signature of a strategy, e.g. ``"0000-0000"``."""
    result = ""
    for a, b, c in product((0, 1), repeat=3):
        player = strategy.copy()
        player.reset()
        moves = [player.choice()]
        # Opponent defects on a 0 bit
        for bit in (a, b, c):
            player.other_player(Choice.from_bit(bit == 0))
            moves.append(player.choice())
        c0, c1, c2, c3 = moves
        code = c3.bit + 2 * c2.bit + 4 * c1.bit + 8 * c0.bit
        result += format(code, "x")
        # Only fires once, after the fourth digit
        if len(result) == 4:
            result += SEPARATOR
    return result


def all_signatures() -> dict[str, str]:
    """Signature of every 5-bit genome, keyed by genome name in ascending order."""
    return {name: compute_signature(get_strategy_by_name(name)) for name in all_genome_names()}


def decode_signature(signature: str) -> str:
    """Expand each hex digit to its 4 move bits, e.g. ``"f"`` → ``"1111 "``."""
    decode = ""
    for digit in signature:
        if digit == SEPARATOR:
            decode += "  "
        else:
            try:
                decode += binary_string(int(digit, 16), 4) + " "
            except ValueError:
                decode += "???? "
    return decode
