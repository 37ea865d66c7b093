"""Detection of rules whose output re-embeds their own input molecule.

Front duplicates are rules where the input is also the first part of the
output, back duplicates are rules where it is the last part::

    H => HCa    (front duplicate, residue "Ca")
    P => CaP    (back duplicate, residue "Ca")
    Ti => TiTi  (front and back duplicate, residue "Ti")

When a molecule with front residue ``Y`` is followed by a molecule with back
residue ``Y`` the two rewrites produce the same string, which is what the
unique counter needs to discount.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Sequence


@dataclass(frozen=True)
class DuplicateMaps:
    front: dict[str, frozenset[str]]
    back: dict[str, frozenset[str]]

    def front_residues(self, molecule: str) -> frozenset[str]:
        return self.front.get(molecule, frozenset())

    def back_residues(self, molecule: str) -> frozenset[str]:
        return self.back.get(molecule, frozenset())


def front_residue(molecule: str, output: str) -> str | None:
    """Return what follows ``molecule`` when ``output`` starts with it."""

    size = len(molecule)
    if len(output) >= size and output[:size] == molecule:
        return output[size:]
    return None


def back_residue(molecule: str, output: str) -> str | None:
    """Return what precedes ``molecule`` when ``output`` ends with it."""

    cut = len(output) - len(molecule)
    if cut >= 0 and output[cut:] == molecule:
        return output[:cut]
    return None


def analyze_duplicates(rules: Mapping[str, Sequence[str]]) -> DuplicateMaps:
    front: dict[str, set[str]] = {}
    back: dict[str, set[str]] = {}
    for molecule, outputs in rules.items():
        for output in outputs:
            residue = front_residue(molecule, output)
            if residue is not None:
                front.setdefault(molecule, set()).add(residue)
            residue = back_residue(molecule, output)
            if residue is not None:
                back.setdefault(molecule, set()).add(residue)
    return DuplicateMaps(
        front={key: frozenset(values) for key, values in front.items()},
        back={key: frozenset(values) for key, values in back.items()},
    )
