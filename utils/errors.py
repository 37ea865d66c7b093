"""Error kinds raised while parsing and counting molecule rewrites."""
from __future__ import annotations


class RewriteError(ValueError):
    """Base class for unrecoverable input errors.

    ``kind`` is the label shown to users; ``fragment`` holds the piece of
    input that triggered the failure when one is available.
    """

    kind = "RewriteError"

    def __init__(self, message: str, fragment: str | None = None) -> None:
        super().__init__(message)
        self.fragment = fragment

    def describe(self) -> str:
        text = f"{self.kind}: {self.args[0]}"
        if self.fragment is not None:
            text += f" ({self.fragment!r})"
        return text


class MalformedInputError(RewriteError):
    kind = "MalformedInput"


class ParseError(RewriteError):
    kind = "ParseError"


class EmptyInputError(RewriteError):
    kind = "EmptyInput"


class UndefinedMoleculeError(RewriteError):
    kind = "UndefinedMolecule"
