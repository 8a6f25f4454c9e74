"""
DeckLab Report Generator
========================

Writes isomorph analysis results as JSON or as a self-contained HTML
page (inline CSS, no external assets).

The JSON report is the :class:`~shared.models.AnalysisResult` dump
wrapped with report metadata; the HTML report adds a ranked isomorph
table with the matching windows highlighted.
"""

from __future__ import annotations

import html
import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

from shared.models import AnalysisResult
from decklab import __version__
from decklab.analyzers.isomorph import SINGLETON, isomorph_interestingness
from decklab.core.models import IsomorphReport

_HTML_TEMPLATE = """\
<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <title>DeckLab Report - {title}</title>
    <style>
        body {{
            font-family: -apple-system, 'Segoe UI', Helvetica, Arial, sans-serif;
            background: #0d1117;
            color: #c9d1d9;
            line-height: 1.6;
            padding: 2rem;
        }}
        .container {{ max-width: 1100px; margin: 0 auto; }}
        .section {{
            background: #161b22;
            border: 1px solid #30363d;
            border-radius: 8px;
            padding: 1.5rem;
            margin-bottom: 1.5rem;
        }}
        h1 {{ color: #58a6ff; }}
        h2 {{ color: #bc8cff; border-bottom: 1px solid #30363d; }}
        table {{ width: 100%; border-collapse: collapse; }}
        th, td {{ padding: 0.4rem 0.8rem; border: 1px solid #30363d; text-align: left; }}
        th {{ background: #21262d; color: #58a6ff; }}
        code {{ font-family: 'SFMono-Regular', Consolas, monospace; letter-spacing: 0.1em; }}
        .rep {{ color: #3fb950; font-weight: 700; }}
        .single {{ color: #8b949e; }}
        .finding {{ border-left: 4px solid #30363d; padding: 0.5rem 1rem; margin: 0.5rem 0; }}
        .severity-medium {{ border-left-color: #d29922; }}
        .severity-low {{ border-left-color: #58a6ff; }}
        .severity-info {{ border-left-color: #3fb950; }}
        .severity-high, .severity-critical {{ border-left-color: #f85149; }}
        .footer {{ text-align: center; color: #8b949e; font-size: 0.8rem; }}
    </style>
</head>
<body>
    <div class="container">
        <h1>DeckLab :: Isomorph Report</h1>
        <div class="section">
            <h2>Summary</h2>
            <p>{summary}</p>
            <p>Ciphertext: <code>{target}</code></p>
            <p>Duration: {duration} | Findings: {finding_count}</p>
        </div>
        <div class="section">
            <h2>Findings</h2>
            {findings_html}
        </div>
        {isomorph_section}
        <div class="footer">DeckLab v{version} | Report generated {timestamp}</div>
    </div>
</body>
</html>
"""


class DeckLabReportGenerator:
    """Generates HTML and JSON reports from isomorph analysis results.

    Usage::

        generator = DeckLabReportGenerator()
        generator.generate_html(result, Path("report.html"))
        generator.generate_json(result, Path("report.json"))
    """

    def __init__(self, top: int = 50) -> None:
        self.top = top

    def generate_html(
        self,
        result: AnalysisResult,
        output_path: Path,
        title: Optional[str] = None,
    ) -> Path:
        """Write an HTML report for *result* to *output_path*."""
        timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")
        duration = result.duration_seconds

        html_content = _HTML_TEMPLATE.format(
            title=html.escape(title or result.tool_name),
            summary=html.escape(result.summary),
            target=html.escape(result.target),
            duration=f"{duration:.3f}s" if duration is not None else "-",
            finding_count=result.finding_count,
            findings_html=self._build_findings_html(result),
            isomorph_section=self._build_isomorph_section(result),
            version=__version__,
            timestamp=timestamp,
        )

        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(html_content, encoding="utf-8")
        return output_path

    def generate_json(self, result: AnalysisResult, output_path: Path) -> Path:
        """Write a JSON report for *result* to *output_path*."""
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(self.to_json(result), encoding="utf-8")
        return output_path

    def to_json(self, result: AnalysisResult) -> str:
        report_data: dict[str, Any] = {
            "report_metadata": {
                "generated_at": datetime.now(timezone.utc).isoformat(),
                "tool": result.tool_name,
                "version": __version__,
            },
            "summary": {
                "description": result.summary,
                "total_findings": result.finding_count,
                "severity_counts": result.severity_counts,
                "duration_seconds": result.duration_seconds,
            },
            "result": result.model_dump(mode="json"),
        }
        return json.dumps(report_data, indent=2, ensure_ascii=False, default=str)

    # ------------------------------------------------------------------ #
    #  Private HTML Builders
    # ------------------------------------------------------------------ #

    @staticmethod
    def _build_findings_html(result: AnalysisResult) -> str:
        if not result.findings:
            return "<p>No findings.</p>"

        parts: list[str] = []
        for finding in result.findings:
            parts.append(
                f'<div class="finding {finding.severity.css_class}">'
                f"<strong>[{finding.severity.value}] {html.escape(finding.title)}</strong>"
                f"<p>{html.escape(finding.description)}</p>"
            )
            if finding.recommendation:
                parts.append(
                    f"<p><em>Recommendation:</em> {html.escape(finding.recommendation)}</p>"
                )
            parts.append("</div>")
        return "\n".join(parts)

    def _build_isomorph_section(self, result: AnalysisResult) -> str:
        if not result.metadata:
            return ""
        report = IsomorphReport.model_validate(result.metadata)
        if not report.isomorphs:
            return ""

        rows: list[str] = []
        ct = report.ciphertext
        for rank, iso in enumerate(report.isomorphs[: self.top], start=1):
            n = iso.length
            rows.append(
                "<tr>"
                f"<td>{rank}</td>"
                f"<td><code>{html.escape(iso.pattern)}</code></td>"
                f"<td>{iso.start_a} / {iso.start_b}</td>"
                f"<td>{_highlight(ct[iso.start_a : iso.start_a + n], iso.pattern)}</td>"
                f"<td>{_highlight(ct[iso.start_b : iso.start_b + n], iso.pattern)}</td>"
                f"<td>{isomorph_interestingness(iso.pattern):.2f}</td>"
                f"<td>{report.pattern_counts.get(iso.pattern, 0)}</td>"
                "</tr>"
            )
        return (
            '<div class="section"><h2>Ranked Isomorphs</h2>'
            "<table><tr><th>#</th><th>Pattern</th><th>Offsets</th>"
            "<th>Window A</th><th>Window B</th><th>Interest</th><th>Count</th></tr>"
            + "".join(rows)
            + f"</table><p>Showing {min(self.top, report.total)} of {report.total}</p></div>"
        )


def _highlight(window: str, pattern: str) -> str:
    spans = (
        f'<span class="{"single" if label == SINGLETON else "rep"}">{html.escape(char)}</span>'
        for char, label in zip(window, pattern)
    )
    return "<code>" + "".join(spans) + "</code>"
