"""Phrase matching over token positions."""

from __future__ import annotations

from collections.abc import Sequence


def contains_phrase(position_lists: Sequence[Sequence[int]]) -> bool:
    """Return True when the terms occur at consecutive positions.

    ``position_lists[i]`` holds the positions of the i-th phrase term within
    one document field. A match needs some start ``p`` with ``p + i`` present
    in every list.
    """
    if not position_lists:
        return False
    if len(position_lists) == 1:
        return bool(position_lists[0])

    following = [frozenset(positions) for positions in position_lists[1:]]
    for start in position_lists[0]:
        if all(start + offset in positions for offset, positions in enumerate(following, start=1)):
            return True
    return False
