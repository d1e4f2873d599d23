"""Starting populations for tournaments."""

from .algorithms import get_strategy_by_name
from .signature import all_signatures
from .tournament import Tournament

ALWAYS_COOPERATE = "00000"
ALWAYS_DEFECT = "11111"


def redundant32() -> Tournament:
    """All 32 genomes, behavioural duplicates included."""
    return Tournament(prototypes=[get_strategy_by_name(name) for name in all_signatures()])


def unique26() -> Tournament:
    """One genome per distinct signature.

    Always-cooperate and always-defect are placed first so they represent
    their duplicate groups; the rest follow in ascending genome order. Of the
    32 genomes, 6 are duplicates, leaving 26.
    """
    signatures = all_signatures()
    names = []
    seen = set()
    for name in [ALWAYS_COOPERATE, ALWAYS_DEFECT, *signatures]:
        sig = signatures[name]
        if sig in seen:
            continue
        names.append(name)
        seen.add(sig)
    return Tournament(prototypes=[get_strategy_by_name(name) for name in names])
