from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from pkgcheck.core.manifest import create_package_id
from pkgcheck.models import CheckMessage, CheckOutcome, CheckState, ValidationContext, ValidationReport

LOG = logging.getLogger(__name__)


def report_to_dict(report: ValidationReport) -> Dict[str, Any]:
    return {
        "package_id": report.package_id,
        "name": report.name,
        "version": report.version,
        "validation_type": report.validation_type.value,
        "passed": report.passed,
        "checks": [
            {
                "name": o.name,
                "category": o.category,
                "state": o.state.value,
                "messages": [
                    {
                        "level": m.level,
                        "code": m.code,
                        "message": m.message,
                        "relpath": m.relpath,
                    }
                    for m in o.messages
                ],
            }
            for o in report.outcomes
        ],
    }


def report_from_dict(d: Dict[str, Any]) -> ValidationReport:
    outcomes = tuple(
        CheckOutcome(
            name=str(c["name"]),
            category=str(c.get("category") or ""),
            state=CheckState(c["state"]),
            messages=tuple(
                CheckMessage(
                    level=str(m["level"]),
                    code=str(m.get("code") or ""),
                    message=str(m.get("message") or ""),
                    relpath=m.get("relpath"),
                )
                for m in (c.get("messages") or [])
            ),
        )
        for c in (d.get("checks") or [])
    )
    return ValidationReport(
        package_id=str(d["package_id"]),
        name=str(d["name"]),
        version=str(d["version"]),
        validation_type=ValidationContext(d["validation_type"]),
        outcomes=outcomes,
    )


class ReportStore:
    """
    Completed validation reports keyed by "<name>@<version>".

    Owned by whoever drives validation. With `persist_dir` set, every report
    is also written as <name>@<version>.json and lookups fall back to disk.
    """

    def __init__(self, persist_dir: Optional[str] = None):
        self._reports: Dict[str, ValidationReport] = {}
        self.persist_dir = persist_dir

    def _json_path(self, package_id: str) -> Path:
        assert self.persist_dir is not None
        return Path(self.persist_dir) / f"{package_id}.json"

    def put(self, report: ValidationReport) -> None:
        self._reports[report.package_id] = report
        if self.persist_dir:
            path = self._json_path(report.package_id)
            path.parent.mkdir(parents=True, exist_ok=True)
            with path.open("w", encoding="utf-8") as f:
                json.dump(report_to_dict(report), f, indent=2, ensure_ascii=False)
            LOG.debug("Report persisted: %s", path)

    def get(self, package_id: str) -> Optional[ValidationReport]:
        report = self._reports.get(package_id)
        if report is not None or not self.persist_dir:
            return report

        path = self._json_path(package_id)
        if not path.is_file():
            return None
        report = report_from_dict(json.loads(path.read_text(encoding="utf-8")))
        self._reports[package_id] = report
        return report

    def get_for(self, name: str, version: str) -> Optional[ValidationReport]:
        return self.get(create_package_id(name, version))

    def exists(self, package_id: str) -> bool:
        return self.get(package_id) is not None

    def clear(self) -> None:
        """Forget in-memory reports. Files already persisted are left alone."""
        self._reports.clear()

    def __len__(self) -> int:
        return len(self._reports)
