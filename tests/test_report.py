import json

from shared.models import AnalysisResult

from decklab.output.report import DeckLabReportGenerator


def test_json_report(engine, tmp_path):
    result = engine.analyze_isomorphs("ABABXYZABAB")
    path = DeckLabReportGenerator().generate_json(result, tmp_path / "out" / "report.json")
    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["report_metadata"]["tool"] == "isomorph"
    assert data["summary"]["total_findings"] == result.finding_count
    assert data["summary"]["severity_counts"]["MEDIUM"] == 1
    assert data["result"]["metadata"]["isomorphs"][0]["pattern"] == "abab"


def test_html_report_lists_ranked_isomorphs(engine, tmp_path):
    result = engine.analyze_isomorphs("ABABXYZABAB")
    path = DeckLabReportGenerator(top=2).generate_html(result, tmp_path / "report.html")
    text = path.read_text(encoding="utf-8")
    assert text.startswith("<!DOCTYPE html>")
    assert "Ranked Isomorphs" in text
    assert "<code>abab</code>" in text
    assert "Showing 2 of 5" in text
    assert "Strongest Isomorph" in text


def test_html_report_escapes_target(tmp_path):
    result = AnalysisResult(tool_name="isomorph", target="<script>").finalize("done")
    text = DeckLabReportGenerator().generate_html(result, tmp_path / "r.html").read_text(
        encoding="utf-8"
    )
    assert "<script>" not in text
    assert "&lt;script&gt;" in text
    assert "Ranked Isomorphs" not in text
