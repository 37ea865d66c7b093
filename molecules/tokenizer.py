"""Split strings of concatenated molecules into individual tokens.

A molecule is one uppercase ASCII letter followed by any number of lowercase
letters, so every uppercase letter starts a new token.  Keeping the target as a
sequence of whole molecules lets the counter reason about rewrites token by
token instead of character by character.
"""
from __future__ import annotations

import re

from utils.errors import MalformedInputError

_MOLECULE_START = re.compile(r"[A-Z]")
_MOLECULE_STRING = re.compile(r"(?:[A-Z][a-z]*)+")


def tokenize(text: str) -> list[str]:
    """Return the molecules of ``text`` in order.

    The tokens cover ``text`` with no gaps or overlaps.  An empty string has no
    molecules; a string that does not open with an uppercase letter is
    rejected because its first token would not be a molecule.
    """

    if not text:
        return []
    if not _MOLECULE_START.match(text):
        raise MalformedInputError(
            "molecule strings must start with an uppercase letter", fragment=text[:16]
        )
    starts = [match.start() for match in _MOLECULE_START.finditer(text)]
    ends = starts[1:] + [len(text)]
    return [text[start:end] for start, end in zip(starts, ends)]


def is_molecule_string(text: str) -> bool:
    """Whether ``text`` is one or more whole molecules with nothing else."""

    return _MOLECULE_STRING.fullmatch(text) is not None
