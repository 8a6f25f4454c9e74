import json

from shared.logger import DeckLabLogger


def _records(path):
    return [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]


def test_json_file_records_carry_context(tmp_path):
    log_file = tmp_path / "logs" / "decklab.log"
    log = DeckLabLogger("json", log_file=log_file, json_logs=True, console_output=False)

    log.info("outside")
    with log.operation("generate_mapping"):
        log.info("inside", seed=42)

    first, second = _records(log_file)
    assert first["logger"] == "decklab.json"
    assert first["tool_name"] == "json"
    assert "operation" not in first
    assert second["operation"] == "generate_mapping"
    assert second["extra"] == {"seed": 42}


def test_level_filters_records(tmp_path):
    log_file = tmp_path / "decklab.log"
    log = DeckLabLogger("levels", log_level="WARNING", log_file=log_file,
                        json_logs=True, console_output=False)
    log.info("dropped")
    log.warning("kept")
    assert [r["message"] for r in _records(log_file)] == ["kept"]


def test_plain_text_file_format(tmp_path):
    log_file = tmp_path / "decklab.log"
    log = DeckLabLogger("plain", log_file=log_file, console_output=False)
    log.error("boom")
    line = log_file.read_text(encoding="utf-8").strip()
    assert "| ERROR" in line
    assert line.endswith("decklab.plain | boom")


def test_timed_logs_completion(tmp_path):
    log_file = tmp_path / "decklab.log"
    log = DeckLabLogger("timed", log_level="DEBUG", log_file=log_file,
                        json_logs=True, console_output=False)
    with log.timed("search"):
        pass
    messages = [r["message"] for r in _records(log_file)]
    assert messages[0] == "Started: search"
    assert messages[1].startswith("Completed: search (")


def test_reinstantiation_does_not_duplicate_handlers():
    DeckLabLogger("dup", console_output=True)
    log = DeckLabLogger("dup", console_output=True)
    assert len(log.underlying.handlers) == 1
    assert log.tool_name == "dup"
