"""Count distinct single-step rewrites of a molecule sequence.

Applying one rule at one position yields a candidate string; different
(position, rule) choices can yield the same string.  Rather than building
every candidate, each rewrite is credited to the leftmost position that can
produce its string: a rewrite is discounted when some earlier position
already produces the same text.

For a rewrite ``t_j => Z + t_j`` (back residue ``Z``) and an earlier rewrite
``t_i => t_i + Y`` (front residue ``Y``), the two strings agree exactly when
``Y + gap == gap + Z``, where ``gap`` is the text of the molecules strictly
between ``i`` and ``j``.  For neighbours the gap is empty and the test reduces
to ``Z in front[t_{j-1}]``.  Further to the left the gap must be a suffix of
``...ZZZ`` and ``Y`` is ``Z`` rotated by the gap length, so the scan stops at
the first molecule that breaks the period.  Identity rules (empty residue)
all reproduce the original string.  No other pair of rewrites can coincide
because every replacement starts with an uppercase letter.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Mapping, Sequence

from rules.duplicates import DuplicateMaps, analyze_duplicates
from utils.errors import EmptyInputError, UndefinedMoleculeError

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class PositionContribution:
    position: int
    molecule: str
    rule_count: int
    overlap: int
    contribution: int

    def to_dict(self) -> dict[str, object]:
        return self.__dict__.copy()


def _rotate(residue: str, shift: int) -> str:
    """Rotate ``residue`` right by ``shift`` characters."""

    cut = len(residue) - shift % len(residue)
    return residue[cut:] + residue[:cut]


def _collides_left(
    target: Sequence[str],
    position: int,
    residue: str,
    duplicates: DuplicateMaps,
    seen: dict[tuple[str, int, int], bool] | None = None,
) -> bool:
    """Whether ``Z + t_j`` at ``position`` repeats a rewrite further left.

    A scan state is the residue, the molecule index reached and the gap
    length modulo the residue length.  Every state on one walk shares its
    outcome, so with a shared ``seen`` cache each state is walked only once
    and the whole pass stays linear in the target length.
    """

    if seen is None:
        seen = {}
    walked = []
    found = False
    index, phase = position - 1, 0
    while index >= 0:
        state = (residue, index, phase)
        if state in seen:
            found = seen[state]
            break
        walked.append(state)
        molecule = target[index]
        expected = _rotate(residue, phase)
        if expected in duplicates.front_residues(molecule):
            found = True
            break
        repeats = len(molecule) // len(expected) + 1
        if not (expected * repeats).endswith(molecule):
            break
        phase = (phase + len(molecule)) % len(residue)
        index -= 1
    for state in walked:
        seen[state] = found
    return found


def position_contributions(
    target: Sequence[str],
    rules: Mapping[str, Sequence[str]],
    duplicates: DuplicateMaps | None = None,
    *,
    strict: bool = False,
) -> list[PositionContribution]:
    """Return how many new distinct strings each target position adds.

    The first molecule contributes all of its rules.  With ``strict`` a first
    molecule without rules raises :class:`UndefinedMoleculeError`; otherwise
    it contributes zero like any other molecule without rules.
    """

    if not target:
        raise EmptyInputError("target sequence has no molecules")
    if duplicates is None:
        duplicates = analyze_duplicates(rules)

    first = target[0]
    if strict and first not in rules:
        raise UndefinedMoleculeError("first molecule has no replacement rules", fragment=first)
    first_count = len(rules.get(first, ()))
    entries = [PositionContribution(0, first, first_count, 0, first_count)]

    scanned: dict[tuple[str, int, int], bool] = {}
    identity_seen = "" in duplicates.front_residues(first)
    for position in range(1, len(target)):
        molecule = target[position]
        rule_count = len(rules.get(molecule, ()))
        overlap = 0
        for residue in duplicates.back_residues(molecule):
            if not residue:
                if identity_seen:
                    overlap += 1
            elif _collides_left(target, position, residue, duplicates, scanned):
                overlap += 1
        identity_seen = identity_seen or "" in duplicates.front_residues(molecule)
        entries.append(
            PositionContribution(position, molecule, rule_count, overlap, rule_count - overlap)
        )
    return entries


def count_unique_rewrites(
    target: Sequence[str],
    rules: Mapping[str, Sequence[str]],
    duplicates: DuplicateMaps | None = None,
    *,
    strict: bool = False,
) -> int:
    """Return the number of distinct strings reachable by one rewrite."""

    total = 0
    for entry in position_contributions(target, rules, duplicates, strict=strict):
        if entry.overlap:
            LOGGER.debug(
                "Position %d (%s): %d of %d rewrites already produced",
                entry.position,
                entry.molecule,
                entry.overlap,
                entry.rule_count,
            )
        total += entry.contribution
    return total
