"""Replacement rule parsing and duplicate analysis."""
from .duplicates import DuplicateMaps, analyze_duplicates  # noqa: F401
from .rule_table import RuleTable, build_rule_table, parse_rule_line, parse_rule_lines  # noqa: F401

__all__ = [
    "DuplicateMaps",
    "RuleTable",
    "analyze_duplicates",
    "build_rule_table",
    "parse_rule_line",
    "parse_rule_lines",
]
