# -*- coding: utf-8 -*-
from __future__ import annotations

import html
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List

from pkgcheck.config import DELTA_EXTENSION
from pkgcheck.core.diff import ADDED, MODIFIED, REMOVED, CompareResult
from pkgcheck.core.manifest import ManifestData, create_package_id
from pkgcheck.models import ERROR, INFO, WARNING, CheckMessage, CheckState, ValidationReport

STATUS_SUCCESS = "Success"
STATUS_WARNINGS = "Warnings"
STATUS_FAILED = "Failed"


# -------------------------
# Delta report (.delta)
# -------------------------
def delta_report_path(output_dir: str, name: str, version: str) -> str:
    return os.path.join(output_dir, create_package_id(name, version) + DELTA_EXTENSION)


def delta_report_exists(output_dir: str, name: str, version: str) -> bool:
    return os.path.isfile(delta_report_path(output_dir, name, version))


def build_delta_text(
    new_manifest: ManifestData,
    previous_manifest: ManifestData,
    result: CompareResult,
) -> str:
    out: List[str] = [
        "Package Update Delta Evaluation",
        "-------------------------------",
        "",
        f"Package Name: {new_manifest.name}",
        f"Package Version: {new_manifest.version}",
        f"Compared to Version: {previous_manifest.version}",
        "",
    ]

    sections = (
        ("New in package:", ADDED, result.added),
        ("Removed from package:", REMOVED, result.removed),
        ("Modified:", MODIFIED, result.modified),
    )
    for title, kind, paths in sections:
        if not paths:
            continue
        out.append(title)
        out.extend("    " + result.relative(p, kind) for p in paths)
        out.append("")

    out.extend(["", "Package Tree", "------------", ""])
    return "\n".join(out) + "\n" + result.tree_text


def write_delta_report(
    output_dir: str,
    new_manifest: ManifestData,
    previous_manifest: ManifestData,
    result: CompareResult,
) -> str:
    """Write <name>@<version>.delta into output_dir, replacing any earlier one."""
    text = build_delta_text(new_manifest, previous_manifest, result)
    path = Path(delta_report_path(output_dir, new_manifest.name, new_manifest.version))
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8", newline="\n") as f:
        f.write(text)
    return str(path)


# -------------------------
# Validation report
# -------------------------
def report_status(report: ValidationReport) -> str:
    if not report.passed:
        return STATUS_FAILED
    if report.warnings:
        return STATUS_WARNINGS
    return STATUS_SUCCESS


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


def _esc(s: Any) -> str:
    return html.escape("" if s is None else str(s))


_STATE_CLASS: Dict[CheckState, str] = {
    CheckState.SUCCEEDED: "ok",
    CheckState.FAILED: "err",
    CheckState.NOT_RUN: "skip",
}

_LEVEL_CLASS = {ERROR: "err", WARNING: "warn", INFO: "info"}


def build_report_html(report: ValidationReport, tool_name: str, tool_version: str) -> str:
    css = """
    body { font-family: -apple-system, Segoe UI, Roboto, Arial, sans-serif; margin: 24px; }
    h1 { margin: 0 0 6px 0; }
    .sub { color: #444; margin: 0 0 18px 0; }
    .card { border: 1px solid #ddd; border-radius: 10px; padding: 14px; margin: 12px 0; }
    table { width: 100%; border-collapse: collapse; margin-top: 8px; }
    th, td { border-bottom: 1px solid #eee; padding: 8px; text-align: left; vertical-align: top; font-size: 13px; }
    .pill { display: inline-block; padding: 2px 8px; border-radius: 999px; font-size: 12px; font-weight: 700; }
    .ok { background: #e6f7e6; color: #135e13; }
    .err { background: #ffe9e9; color: #8a0000; }
    .warn { background: #fff4d6; color: #7a5200; }
    .info { background: #e9f3ff; color: #003a7a; }
    .skip { background: #eeeeee; color: #444; }
    code { background: #f6f6f6; padding: 1px 4px; border-radius: 6px; }
    .small { font-size: 12px; color: #555; }
    """

    def pill(css_class: str, text: str) -> str:
        return f'<span class="pill {css_class}">{_esc(text)}</span>'

    def render_messages(messages: List[CheckMessage]) -> str:
        if not messages:
            return "<p class='small'>No messages.</p>"
        rows = []
        for m in messages:
            rel = f" <code>{_esc(m.relpath)}</code>" if m.relpath else ""
            rows.append(
                f"<tr>"
                f"<td>{pill(_LEVEL_CLASS.get(m.level, 'info'), m.level)}</td>"
                f"<td><code>{_esc(m.code)}</code></td>"
                f"<td>{_esc(m.message)}{rel}</td>"
                f"</tr>"
            )
        return (
            "<table>"
            "<thead><tr><th>Level</th><th>Code</th><th>Message</th></tr></thead>"
            "<tbody>" + "".join(rows) + "</tbody></table>"
        )

    cards = []
    for o in report.outcomes:
        cards.append(
            f"<div class='card'>"
            f"<h3>{_esc(o.name)} {pill(_STATE_CLASS[o.state], o.state.value)}</h3>"
            f"<p class='small'>Category: {_esc(o.category)}</p>"
            f"{render_messages(list(o.messages))}"
            f"</div>"
        )

    status = report_status(report)
    status_class = {STATUS_FAILED: "err", STATUS_WARNINGS: "warn"}.get(status, "ok")

    return f"""<!doctype html>
<html>
<head>
  <meta charset="utf-8">
  <title>{_esc(tool_name)} - {_esc(report.package_id)}</title>
  <style>{css}</style>
</head>
<body>
  <h1>{_esc(tool_name)} - Validation Report</h1>
  <p class="sub">Generated {_esc(_utc_now())} (UTC) - Tool version {_esc(tool_version)}</p>

  <div class="card">
    <p>Package: <code>{_esc(report.package_id)}</code></p>
    <p>Validation type: <code>{_esc(report.validation_type.value)}</code></p>
    <p>Result: {pill(status_class, status)}</p>
    <p class="small">
      {len(report.outcomes)} check(s), {len(report.failures)} failed, {len(report.warnings)} warning(s)
    </p>
  </div>

  {''.join(cards) if cards else "<p class='small'>No checks ran for this validation type.</p>"}
</body>
</html>
"""


def report_html_path(output_dir: str, name: str, version: str) -> str:
    return os.path.join(output_dir, create_package_id(name, version) + ".html")


def write_report_html(html_text: str, report_path: str) -> str:
    p = Path(report_path)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(html_text, encoding="utf-8")
    return str(p)
