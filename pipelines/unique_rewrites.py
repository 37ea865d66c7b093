"""Count the distinct molecules reachable by one replacement step."""
from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from pathlib import Path
from typing import Any, TextIO

import click
import pandas as pd

from counting.brute_force import brute_force_count
from counting.unique_counter import PositionContribution, position_contributions
from molecules.tokenizer import tokenize
from rules.duplicates import DuplicateMaps, analyze_duplicates
from rules.rule_table import RULE_SEPARATOR, RuleTable, parse_rule_lines
from utils.errors import ParseError, RewriteError
from utils.hashing import machine_fingerprint

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class Machine:
    rules: RuleTable
    duplicates: DuplicateMaps
    target: tuple[str, ...]

    def fingerprint(self) -> str:
        return machine_fingerprint(
            self.rules, self.duplicates.front, self.duplicates.back, self.target
        )


def _configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s - %(message)s")


def parse_machine(text: str) -> Machine:
    """Parse rule lines, a blank separator line and the target line.

    Every line but the last two is a rule.  Blank lines after the target are
    ignored; when only blank lines follow the rules the target is empty, which
    the counter reports.
    """

    lines = text.splitlines()
    trailing = 0
    while lines and not lines[-1].strip():
        lines.pop()
        trailing += 1
    if trailing and (not lines or RULE_SEPARATOR in lines[-1]):
        rule_lines, target_line = lines, ""
    else:
        if len(lines) < 2:
            raise ParseError(
                "expected rule lines, a blank line and a target line", fragment=text[:40]
            )
        separator = lines[-2]
        if separator.strip():
            raise ParseError(
                f"expected a blank line between the rules and the target at line {len(lines) - 1}",
                fragment=separator,
            )
        rule_lines, target_line = lines[:-2], lines[-1].strip()
    if any(char.isspace() for char in target_line):
        raise ParseError("target line has embedded whitespace", fragment=target_line)
    rules = parse_rule_lines(rule_lines)
    duplicates = analyze_duplicates(rules)
    target = tuple(tokenize(target_line))
    return Machine(rules=rules, duplicates=duplicates, target=target)


def _log_counter(name: str, counter: Counter[Any], limit: int = 5) -> None:
    if not counter:
        LOGGER.info("%s: no observations", name)
        return
    top = counter.most_common(limit)
    LOGGER.info("%s (top %s): %s", name, min(limit, len(counter)), top)


def _summarize_machine(machine: Machine) -> None:
    rule_total = sum(len(outputs) for outputs in machine.rules.values())
    LOGGER.info("Parsed %d rules for %d input molecules", rule_total, len(machine.rules))
    front_total = sum(len(values) for values in machine.duplicates.front.values())
    back_total = sum(len(values) for values in machine.duplicates.back.values())
    LOGGER.info("Front duplicates: %d, back duplicates: %d", front_total, back_total)
    LOGGER.info("Target has %d molecules", len(machine.target))
    _log_counter("Most common target molecules", Counter(machine.target))
    missing = Counter(molecule for molecule in machine.target if molecule not in machine.rules)
    if missing:
        _log_counter("Target molecules without rules", missing)
    LOGGER.debug("Machine fingerprint: %s", machine.fingerprint())


def _write_breakdown(entries: list[PositionContribution], output: Path) -> None:
    frame = pd.DataFrame([entry.to_dict() for entry in entries])
    output.parent.mkdir(parents=True, exist_ok=True)
    suffix = output.suffix.lower()
    if suffix == ".csv":
        frame.to_csv(output, index=False)
    elif suffix == ".json":
        frame.to_json(output, orient="records")
    elif suffix in {".parquet", ".pq"}:
        frame.to_parquet(output, index=False)
    else:
        raise click.ClickException(f"Unsupported breakdown format: {suffix}")


@click.command()
@click.option(
    "--input",
    "input_file",
    default="-",
    type=click.File("r"),
    help="Puzzle text; reads standard input by default.",
)
@click.option(
    "--breakdown",
    "breakdown_path",
    default=None,
    type=click.Path(dir_okay=False),
    help="Optional .csv, .json or .parquet file for per-position contributions.",
)
@click.option("--strict", is_flag=True, help="Fail when the first molecule has no rules.")
@click.option("--verify", is_flag=True, help="Cross-check the count by brute-force enumeration.")
@click.option("--verbose/--quiet", default=False, show_default=True)
def main(
    input_file: TextIO,
    breakdown_path: str | None,
    strict: bool,
    verify: bool,
    verbose: bool,
) -> None:
    """Print the number of distinct molecules one replacement can produce."""

    _configure_logging(verbose)
    LOGGER.info("Reading rules and target from %s", input_file.name)
    try:
        machine = parse_machine(input_file.read())
        _summarize_machine(machine)
        entries = position_contributions(
            machine.target, machine.rules, machine.duplicates, strict=strict
        )
    except RewriteError as exc:
        raise click.ClickException(exc.describe()) from exc

    count = sum(entry.contribution for entry in entries)
    discounted = sum(entry.overlap for entry in entries)
    LOGGER.info("Discounted %d coinciding rewrites", discounted)

    if verify:
        expected = brute_force_count(machine.target, machine.rules)
        if expected != count:
            raise click.ClickException(
                f"analytic count {count} disagrees with brute force count {expected}"
            )
        LOGGER.info("Brute force enumeration agrees: %d", expected)

    if breakdown_path:
        _write_breakdown(entries, Path(breakdown_path))
        LOGGER.info("Wrote %d position contributions to %s", len(entries), breakdown_path)

    click.echo(count)


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    main()
