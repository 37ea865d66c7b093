"""Reference enumeration of single-step rewrites, used for verification."""
from __future__ import annotations

from typing import Iterator, Mapping, Sequence


def enumerate_rewrites(
    target: Sequence[str], rules: Mapping[str, Sequence[str]]
) -> Iterator[str]:
    """Yield the full string for every (position, rule) substitution."""

    for position, molecule in enumerate(target):
        outputs = rules.get(molecule, ())
        if not outputs:
            continue
        prefix = "".join(target[:position])
        suffix = "".join(target[position + 1 :])
        for output in outputs:
            yield prefix + output + suffix


def brute_force_count(target: Sequence[str], rules: Mapping[str, Sequence[str]]) -> int:
    return len(set(enumerate_rewrites(target, rules)))
