"""Stable fingerprints for parsed rewrite machines."""
from __future__ import annotations

import json
from typing import Mapping, Sequence

from blake3 import blake3


def blake3_hexdigest(data: bytes) -> str:
    """Return a BLAKE3 hash hex digest."""

    return blake3(data).hexdigest()


def _canonical_residues(residues: Mapping[str, frozenset[str]]) -> dict[str, list[str]]:
    return {key: sorted(values) for key, values in residues.items()}


def machine_fingerprint(
    rules: Mapping[str, Sequence[str]],
    front: Mapping[str, frozenset[str]],
    back: Mapping[str, frozenset[str]],
    target: Sequence[str] = (),
) -> str:
    """Hash the rule table, duplicate maps and target into one identifier.

    Rule outputs keep their insertion order because the counter treats
    repeated lines literally; residue sets are sorted so set iteration order
    never leaks into the digest.
    """

    payload = {
        "rules": {key: list(values) for key, values in rules.items()},
        "front": _canonical_residues(front),
        "back": _canonical_residues(back),
        "target": list(target),
    }
    serialized = json.dumps(payload, sort_keys=True, separators=(",", ":"))
    return blake3_hexdigest(serialized.encode("utf-8"))
