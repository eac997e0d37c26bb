# locusfit/tables/expand.py
from __future__ import annotations
import itertools
from typing import Any, Mapping, Sequence


def crossing(
    left: Sequence[Mapping[str, Any]],
    right: Sequence[Mapping[str, Any]],
) -> list[dict[str, Any]]:
    """
    Every (left, right) pair merged into one record, left-major.
    Field names must not overlap so both sides stay recoverable.
    """
    left_fields = set(itertools.chain.from_iterable(a.keys() for a in left))
    right_fields = set(itertools.chain.from_iterable(b.keys() for b in right))
    clash = left_fields & right_fields
    if clash:
        raise ValueError(f"Fields present on both sides: {sorted(clash)}")

    return [{**a, **b} for a, b in itertools.product(left, right)]
