"""Molecule tokenization."""
from .tokenizer import is_molecule_string, tokenize  # noqa: F401

__all__ = ["is_molecule_string", "tokenize"]
