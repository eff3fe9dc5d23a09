"""
Forge Report Generator
=======================

HTML and JSON reports from Forge results. The HTML report uses inline CSS
for portability; the JSON report is the machine-readable form used by
``--output json`` and by scripts.

Generated secrets are masked in reports unless the generator is created
with ``reveal_secrets=True``; a report file is easier to leak than a
terminal.

References:
    - OWASP Logging Cheat Sheet -- data to exclude from logs and reports.
"""

from __future__ import annotations

import copy
import html
import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

from shared.logger import mask_secret
from shared.models import ScanResult

from keyforge import __version__


# ===================================================================== #
#  HTML Template
# ===================================================================== #

_HTML_TEMPLATE = """\
<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1">
<title>KeyForge - {title}</title>
<style>
  body {{
    margin: 0;
    padding: 2.5rem 1rem;
    font: 15px/1.5 system-ui, -apple-system, "Segoe UI", sans-serif;
    color: #1f2328;
    background: #f6f8fa;
  }}
  main {{ max-width: 960px; margin: 0 auto; }}
  header {{ border-bottom: 3px solid #0969da; margin-bottom: 1.5rem; }}
  header h1 {{ margin: 0; font-size: 1.6rem; color: #0969da; }}
  header p {{ margin: 0.25rem 0 0.75rem; color: #656d76; font-size: 0.85rem; }}
  section {{
    background: #fff;
    border: 1px solid #d0d7de;
    border-radius: 6px;
    padding: 1rem 1.25rem;
    margin-bottom: 1.25rem;
  }}
  section h2 {{ margin-top: 0; font-size: 1.1rem; }}
  table {{ width: 100%; border-collapse: collapse; }}
  th, td {{ padding: 0.4rem 0.6rem; border-bottom: 1px solid #d0d7de; text-align: left; }}
  th {{ background: #f6f8fa; font-weight: 600; }}
  code, pre {{ font-family: ui-monospace, SFMono-Regular, Menlo, monospace; }}
  pre {{ background: #f6f8fa; padding: 0.75rem; overflow-x: auto; font-size: 0.8rem; }}
  .finding {{ border-left: 4px solid #d0d7de; padding: 0.25rem 0.75rem; margin: 0.75rem 0; }}
  .finding h3 {{ margin: 0; font-size: 0.95rem; }}
  .finding p {{ margin: 0.25rem 0; color: #424a53; }}
  .sev {{ font-size: 0.75rem; font-weight: 700; padding: 0.1rem 0.45rem; border-radius: 3px; }}
  .severity-info {{ background: #ddf4ff; color: #0969da; }}
  .severity-low {{ background: #dafbe1; color: #1a7f37; }}
  .severity-medium {{ background: #fff8c5; color: #9a6700; }}
  .severity-high {{ background: #ffebe9; color: #cf222e; }}
  .severity-critical {{ background: #cf222e; color: #fff; }}
  footer {{ text-align: center; color: #656d76; font-size: 0.75rem; }}
</style>
</head>
<body>
<main>
  <header>
    <h1>KeyForge {tool} report</h1>
    <p>{target} &middot; generated {timestamp}</p>
  </header>

  <section>
    <h2>Summary</h2>
    <p>{summary}</p>
    <table>
      <tr><th>Duration</th><td>{duration}</td></tr>
      <tr><th>Findings</th><td>{finding_count}</td></tr>
      <tr><th>Risk</th><td>{risk}</td></tr>
    </table>
  </section>

  {candidates_section}

  <section>
    <h2>Findings</h2>
    {findings_html}
  </section>

  {raw_data_section}

  <footer>KeyForge v{version}</footer>
</main>
</body>
</html>
"""


class ForgeReportGenerator:
    """Generates HTML and JSON reports from Forge results.

    Usage::

        generator = ForgeReportGenerator()
        generator.generate_html(scan_result, Path("report.html"))
        generator.generate_json(scan_result, Path("report.json"))

    Args:
        reveal_secrets: Write generated candidate values in clear.
    """

    def __init__(self, reveal_secrets: bool = False) -> None:
        self.reveal_secrets = reveal_secrets

    # ------------------------------------------------------------------ #
    #  Payload
    # ------------------------------------------------------------------ #

    def build_payload(self, result: ScanResult) -> dict[str, Any]:
        """The JSON report as a dictionary."""
        return {
            "report_metadata": {
                "generated_at": datetime.now(timezone.utc).isoformat(),
                "tool": result.tool_name,
                "target": result.target,
                "version": __version__,
            },
            "summary": {
                "total_findings": result.finding_count,
                "severity_counts": result.severity_counts,
                "duration_seconds": result.duration_seconds,
                "description": result.summary,
                "risk": result.risk.model_dump(mode="json") if result.risk else None,
            },
            "findings": [f.model_dump(mode="json") for f in result.findings],
            "metadata": self._metadata(result),
        }

    def _metadata(self, result: ScanResult) -> dict[str, Any]:
        metadata = copy.deepcopy(result.metadata)
        if self.reveal_secrets:
            return metadata
        for entry in metadata.get("candidates", []):
            if entry.get("value"):
                entry["value"] = mask_secret(entry["value"])
        return metadata

    # ------------------------------------------------------------------ #
    #  Writers
    # ------------------------------------------------------------------ #

    def render_json(self, result: ScanResult) -> str:
        return json.dumps(self.build_payload(result), indent=2, ensure_ascii=False, default=str)

    def generate_json(self, result: ScanResult, output_path: Path) -> Path:
        """Write the JSON report to *output_path* and return it."""
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(self.render_json(result) + "\n", encoding="utf-8")
        return output_path

    def render_html(self, result: ScanResult, title: Optional[str] = None) -> str:
        timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")
        duration = result.duration_seconds
        risk = (
            f"{result.risk.level.value} ({result.risk.score:.0f}/100)"
            if result.risk and result.risk.level
            else "n/a"
        )
        metadata = self._metadata(result)
        return _HTML_TEMPLATE.format(
            title=html.escape(title or result.target),
            target=html.escape(result.target),
            timestamp=timestamp,
            summary=html.escape(result.summary),
            tool=html.escape(result.tool_name),
            duration=f"{duration:.3f}s" if duration is not None else "n/a",
            finding_count=result.finding_count,
            risk=html.escape(risk),
            candidates_section=self._candidates_html(metadata),
            findings_html=self._findings_html(result),
            raw_data_section=self._raw_data_html(metadata),
            version=__version__,
        )

    def generate_html(
        self,
        result: ScanResult,
        output_path: Path,
        title: Optional[str] = None,
    ) -> Path:
        """Write the HTML report to *output_path* and return it."""
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(self.render_html(result, title), encoding="utf-8")
        return output_path

    # ------------------------------------------------------------------ #
    #  HTML fragments
    # ------------------------------------------------------------------ #

    @staticmethod
    def _candidates_html(metadata: dict[str, Any]) -> str:
        entries = metadata.get("candidates")
        if not entries:
            return ""
        rows = []
        for entry in entries:
            entropy = entry.get("entropy") or {}
            notes = entry.get("warnings", []) + entry.get("violations", [])
            rows.append(
                f"<tr><td>{entry['index'] + 1}</td>"
                f"<td><code>{html.escape(entry.get('value') or '-')}</code></td>"
                f"<td>{html.escape(entry['status'])}</td>"
                f"<td>{entropy.get('bits', 0.0):.1f}</td>"
                f"<td>{html.escape(entropy.get('crack_time', '-'))}</td>"
                f"<td>{html.escape('; '.join(notes))}</td></tr>"
            )
        header = (
            "<tr><th>#</th><th>Candidate</th><th>Status</th>"
            "<th>Bits</th><th>Crack time</th><th>Notes</th></tr>"
        )
        return f"<section><h2>Candidates</h2><table>{header}{''.join(rows)}</table></section>"

    @staticmethod
    def _findings_html(result: ScanResult) -> str:
        if not result.findings:
            return "<p>No findings.</p>"
        blocks: list[str] = []
        for finding in result.findings:
            body = [
                f'<h3><span class="sev {finding.severity.css_class}">{finding.severity.value}</span> '
                f"{html.escape(finding.title)}</h3>",
                f"<p>{html.escape(finding.description)}</p>",
            ]
            if finding.recommendation:
                body.append(f"<p><em>Fix:</em> {html.escape(finding.recommendation)}</p>")
            if finding.references:
                body.append(f"<p><small>{html.escape('; '.join(finding.references))}</small></p>")
            blocks.append('<div class="finding">' + "".join(body) + "</div>")
        return "\n".join(blocks)

    @staticmethod
    def _raw_data_html(metadata: dict[str, Any]) -> str:
        if not metadata:
            return ""
        dump = json.dumps(metadata, indent=2, ensure_ascii=False, default=str)
        return f"<section><h2>Raw data</h2><pre>{html.escape(dump)}</pre></section>"
