import pandas as pd
import pytest
from click.testing import CliRunner

from pipelines.unique_rewrites import Machine, main, parse_machine
from utils.errors import MalformedInputError, ParseError

HOH_INPUT = "H => HO\nH => OH\nO => HH\n\nHOH\n"


def test_parse_machine_reads_rules_and_target():
    machine = parse_machine(HOH_INPUT)
    assert machine.rules == {"H": ["HO", "OH"], "O": ["HH"]}
    assert machine.target == ("H", "O", "H")
    assert machine.duplicates.front == {"H": frozenset({"O"})}
    assert machine.duplicates.back == {"H": frozenset({"O"})}


def test_parse_machine_accepts_crlf_and_start_rules():
    machine = parse_machine("e => H\r\ne => O\r\nH => HO\r\n\r\nHOH")
    assert machine.rules["e"] == ["H", "O"]
    assert machine.target == ("H", "O", "H")


def test_parse_machine_with_no_rules():
    machine = parse_machine("\nHOH")
    assert machine.rules == {}
    assert machine.target == ("H", "O", "H")


def test_parse_machine_requires_blank_separator():
    with pytest.raises(ParseError) as excinfo:
        parse_machine("H => HO\nO => HH\nHOH")
    assert excinfo.value.fragment == "O => HH"


def test_parse_machine_rejects_single_line():
    with pytest.raises(ParseError):
        parse_machine("HOH")


def test_parse_machine_rejects_lowercase_target():
    with pytest.raises(MalformedInputError):
        parse_machine("H => HO\n\nxHOH\n")


def test_fingerprint_is_stable_across_parses():
    first = parse_machine(HOH_INPUT)
    second = parse_machine(HOH_INPUT)
    assert isinstance(first, Machine)
    assert first == second
    assert first.fingerprint() == second.fingerprint()
    assert len(first.fingerprint()) == 64
    assert parse_machine("H => OH\nH => HO\nO => HH\n\nHOH\n").fingerprint() != first.fingerprint()


def test_cli_prints_only_the_count():
    result = CliRunner().invoke(main, ["--quiet"], input=HOH_INPUT)
    assert result.exit_code == 0, result.output
    assert result.stdout.strip() == "4"


def test_cli_reads_input_file(tmp_path):
    path = tmp_path / "input.txt"
    path.write_text("H => HO\nH => OH\nO => HH\n\nHOHOHO")
    result = CliRunner().invoke(main, ["--input", str(path), "--verify"])
    assert result.exit_code == 0, result.output
    assert result.stdout.strip() == "7"


def test_cli_writes_breakdown(tmp_path):
    output = tmp_path / "reports" / "breakdown.csv"
    result = CliRunner().invoke(main, ["--breakdown", str(output)], input=HOH_INPUT)
    assert result.exit_code == 0, result.output
    frame = pd.read_csv(output)
    assert list(frame["molecule"]) == ["H", "O", "H"]
    assert list(frame["contribution"]) == [2, 1, 1]
    assert frame["overlap"].sum() == 1


def test_cli_rejects_unknown_breakdown_format(tmp_path):
    output = tmp_path / "breakdown.txt"
    result = CliRunner().invoke(main, ["--breakdown", str(output)], input=HOH_INPUT)
    assert result.exit_code != 0
    assert "Unsupported breakdown format" in result.output


def test_cli_reports_parse_error_without_count():
    result = CliRunner().invoke(main, [], input="H -> HO\n\nHOH\n")
    assert result.exit_code != 0
    assert "ParseError" in result.output
    assert "H -> HO" in result.output
    assert result.stdout == ""


def test_cli_reports_empty_target():
    result = CliRunner().invoke(main, [], input="H => HO\n\n\n")
    assert result.exit_code != 0
    assert "EmptyInput" in result.output


def test_cli_strict_policy():
    text = "O => HH\n\nMgO\n"
    lenient = CliRunner().invoke(main, [], input=text)
    assert lenient.exit_code == 0, lenient.output
    assert lenient.stdout.strip() == "1"
    strict = CliRunner().invoke(main, ["--strict"], input=text)
    assert strict.exit_code != 0
    assert "UndefinedMolecule" in strict.output


def test_parse_machine_rejects_whitespace_inside_target():
    with pytest.raises(ParseError) as excinfo:
        parse_machine("O => HH\nH => HO\n\nHO H\n")
    assert excinfo.value.fragment == "HO H"


def test_parse_machine_ignores_blank_lines_after_target():
    machine = parse_machine("H => HO\nH => OH\nO => HH\n\nHOH\n\n\n")
    assert machine.target == ("H", "O", "H")
    assert machine == parse_machine(HOH_INPUT)


def test_parse_machine_blank_after_rules_means_empty_target():
    machine = parse_machine("H => HO\n\n\n")
    assert machine.rules == {"H": ["HO"]}
    assert machine.target == ()


def test_cli_rejects_whitespace_inside_target():
    result = CliRunner().invoke(main, ["--quiet"], input="O => HH\nH => HO\n\nHO H\n")
    assert result.exit_code != 0
    assert "ParseError" in result.output
    assert result.stdout == ""


def test_cli_verify_mismatch_exits_without_count():
    result = CliRunner().invoke(main, ["--verify"], input="H => HO\nH => HO\n\nH\n")
    assert result.exit_code != 0
    assert "disagrees" in result.output
    assert result.stdout == ""


def test_cli_writes_json_breakdown(tmp_path):
    output = tmp_path / "breakdown.json"
    result = CliRunner().invoke(main, ["--breakdown", str(output)], input=HOH_INPUT)
    assert result.exit_code == 0, result.output
    frame = pd.read_json(output)
    assert list(frame["position"]) == [0, 1, 2]
    assert list(frame["contribution"]) == [2, 1, 1]
    assert list(frame["overlap"]) == [0, 0, 1]


def test_cli_writes_parquet_breakdown(tmp_path):
    pytest.importorskip("pyarrow")
    output = tmp_path / "breakdown.parquet"
    result = CliRunner().invoke(main, ["--breakdown", str(output)], input=HOH_INPUT)
    assert result.exit_code == 0, result.output
    frame = pd.read_parquet(output)
    assert list(frame["molecule"]) == ["H", "O", "H"]
    assert list(frame["rule_count"]) == [2, 1, 2]
    assert frame["contribution"].sum() == 4
