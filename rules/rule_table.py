"""Parsing of ``KEY => VALUE`` replacement rules into a rule table."""
from __future__ import annotations

from typing import Iterable

from molecules.tokenizer import is_molecule_string
from utils.errors import MalformedInputError, ParseError

RULE_SEPARATOR = " => "

RuleTable = dict[str, list[str]]


def parse_rule_line(line: str, line_number: int | None = None) -> tuple[str, str]:
    """Split one rule line into its input molecule and replacement string."""

    where = f"line {line_number}" if line_number is not None else "rule line"
    key, separator, value = line.partition(RULE_SEPARATOR)
    if not separator:
        raise ParseError(f"{where} lacks the '=>' separator", fragment=line)
    if not key or not value:
        raise ParseError(f"{where} has an empty side", fragment=line)
    if any(char.isspace() for char in key + value):
        raise ParseError(f"{where} has embedded whitespace", fragment=line)
    if not is_molecule_string(value):
        raise MalformedInputError(f"{where} replacement is not a molecule string", fragment=line)
    return key, value


def build_rule_table(pairs: Iterable[tuple[str, str]]) -> RuleTable:
    """Group replacement strings by input molecule, keeping arrival order.

    Repeated lines are kept as separate entries so they are counted once per
    occurrence.
    """

    table: RuleTable = {}
    for key, value in pairs:
        table.setdefault(key, []).append(value)
    return table


def parse_rule_lines(lines: Iterable[str]) -> RuleTable:
    # Parse everything before building so a bad line never yields a partial table.
    pairs = [parse_rule_line(line, number) for number, line in enumerate(lines, start=1)]
    return build_rule_table(pairs)
