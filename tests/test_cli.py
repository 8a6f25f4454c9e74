import json

import pytest
from click.testing import CliRunner

from decklab.analyzers.generator import generate_sliding_window_mapping
from decklab.cli import cli


@pytest.fixture
def runner():
    return CliRunner()


def _json(result):
    assert result.exit_code == 0, result.output
    return json.loads(result.stdout)


def test_mapping_json(runner):
    data = _json(runner.invoke(cli, ["-q", "-o", "json", "mapping", "--seed", "42"]))
    assert sorted(data["transformations"]) == [chr(c) for c in range(65, 91)]
    assert len(data["transformations"]["A"]["swaps"]) == 4


def test_mapping_sliding_window_json(runner):
    data = _json(runner.invoke(cli, ["-q", "-o", "json", "mapping", "--sliding-window"]))
    expected = generate_sliding_window_mapping().model_dump(mode="json")
    assert data == expected


def test_infeasible_config_is_usage_error(runner):
    result = runner.invoke(cli, ["-q", "mapping", "--swap-count", "1", "--rotation-max", "0"])
    assert result.exit_code == 2


def test_swap_count_range_is_checked(runner):
    result = runner.invoke(cli, ["-q", "mapping", "--swap-count", "14"])
    assert result.exit_code == 2


def test_mapping_html_is_rejected(runner):
    result = runner.invoke(cli, ["-q", "-o", "html", "mapping"])
    assert result.exit_code == 2


def test_encipher_json(runner):
    data = _json(runner.invoke(cli, ["-q", "-o", "json", "encipher", "a", "--sliding-window"]))
    assert data["plaintext"] == "a"
    assert data["ciphertext"] == "C"
    assert "steps" not in data["encipherment"]
    assert "analysis" not in data


def test_encipher_json_with_trace_and_analysis(runner):
    data = _json(runner.invoke(
        cli, ["-q", "-o", "json", "encipher", "attack at dawn", "--trace", "--analyze"]
    ))
    assert len(data["ciphertext"]) == 12
    assert len(data["encipherment"]["steps"]) == 12
    assert data["analysis"]["tool_name"] == "isomorph"


def test_encipher_html_requires_analyze(runner):
    result = runner.invoke(cli, ["-q", "-o", "html", "encipher", "abc"])
    assert result.exit_code == 2


def test_encipher_console_trace(runner):
    result = runner.invoke(cli, ["encipher", "ab", "--sliding-window", "--trace"])
    assert result.exit_code == 0, result.output
    assert "C" in result.stdout


def test_isomorphs_json_normalizes_input(runner):
    data = _json(runner.invoke(cli, ["-q", "-o", "json", "isomorphs", "abab xyz abab"]))
    metadata = data["result"]["metadata"]
    assert metadata["ciphertext"] == "ABABXYZABAB"
    assert metadata["isomorphs"][0] == {"pattern": "abab", "start_a": 0, "start_b": 7}


def test_isomorphs_html_report(runner, tmp_path):
    out = tmp_path / "report.html"
    result = runner.invoke(cli, ["-q", "-o", "html", "-f", str(out), "isomorphs", "ABABXYZABAB"])
    assert result.exit_code == 0, result.output
    assert "Ranked Isomorphs" in out.read_text(encoding="utf-8")


def test_isomorphs_console(runner):
    result = runner.invoke(cli, ["isomorphs", "ABABXYZABAB", "--top", "2"])
    assert result.exit_code == 0, result.output
    assert "abab" in result.stdout


def test_config_file_defaults(runner, tmp_path):
    config = tmp_path / "decklab.toml"
    config.write_text("[generator]\nsliding_window = true\n", encoding="utf-8")
    data = _json(runner.invoke(cli, ["-q", "-c", str(config), "-o", "json", "mapping"]))
    assert data == generate_sliding_window_mapping().model_dump(mode="json")


def test_json_output_file(runner, tmp_path):
    out = tmp_path / "mapping.json"
    result = runner.invoke(cli, ["-q", "-o", "json", "-f", str(out), "mapping"])
    assert result.exit_code == 0, result.output
    assert "A" in json.loads(out.read_text(encoding="utf-8"))["transformations"]


def test_bracketed_ciphertext_is_printed_literally(runner):
    result = runner.invoke(cli, ["isomorphs", "[/]x[/]xyz[/]x[/]"])
    assert result.exit_code == 0, result.output
    assert "Findings" in result.stdout


def test_negative_max_attempts_in_config_is_usage_error(runner, tmp_path):
    config = tmp_path / "bad.toml"
    config.write_text("[generator]\nmax_attempts = -1\n", encoding="utf-8")
    result = runner.invoke(cli, ["-q", "-c", str(config), "mapping"])
    assert result.exit_code == 2
    assert "max_attempts" in result.output


def test_malformed_config_is_usage_error(runner, tmp_path):
    config = tmp_path / "bad.toml"
    config.write_text("[generator\n", encoding="utf-8")
    result = runner.invoke(cli, ["-q", "-c", str(config), "mapping"])
    assert result.exit_code == 2
