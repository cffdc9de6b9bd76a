"""AP-style ordinal labels for county ranks.

Ranks one through nine are spelled out; larger ranks get a numeric
suffix.  The suffix lookup is table driven: only the decade values ending
in 1, 2 or 3 (21, 22, 23, ... 93) get "st", "nd" or "rd", everything else
falls back to "th".  That keeps 11th, 12th and 13th correct without a
special teen rule.
"""

from typing import Dict, FrozenSet

from .config import MAX_ORDINAL_RANK
from .errors import UnsupportedRangeError

ORDINAL_WORDS: Dict[int, str] = {
    1: "first",
    2: "second",
    3: "third",
    4: "fourth",
    5: "fifth",
    6: "sixth",
    7: "seventh",
    8: "eighth",
    9: "ninth",
}

SUFFIX_SETS: Dict[str, FrozenSet[int]] = {
    "st": frozenset(range(21, MAX_ORDINAL_RANK + 1, 10)),
    "nd": frozenset(range(22, MAX_ORDINAL_RANK + 1, 10)),
    "rd": frozenset(range(23, MAX_ORDINAL_RANK + 1, 10)),
}

DEFAULT_SUFFIX: str = "th"


def _suffix_for(rank: int) -> str:
    for suffix, members in SUFFIX_SETS.items():
        if rank in members:
            return suffix
    return DEFAULT_SUFFIX


def format_ordinal(rank: int) -> str:
    """Return the ordinal label for a 1-based rank.

    Parameters
    ----------
    rank : int
        Rank between 1 and ``MAX_ORDINAL_RANK`` inclusive.

    Returns
    -------
    str
        ``"first"`` .. ``"ninth"`` for ranks below ten, otherwise the number
        with its suffix (``"21st"``, ``"12th"``).

    Raises
    ------
    UnsupportedRangeError
        If ``rank`` is not an integer in the supported range.
    """
    if isinstance(rank, bool) or not isinstance(rank, int):
        raise UnsupportedRangeError(f"Rank must be an integer, got {rank!r}.")
    if rank < 1 or rank > MAX_ORDINAL_RANK:
        raise UnsupportedRangeError(
            f"Rank {rank} outside supported range 1–{MAX_ORDINAL_RANK}."
        )

    word = ORDINAL_WORDS.get(rank)
    if word is not None:
        return word
    return f"{rank}{_suffix_for(rank)}"
