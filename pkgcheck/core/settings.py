from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, FrozenSet

from pkgcheck.config import DEFAULT_MAX_WORKERS, DEFAULT_RESULTS_DIRNAME

SETTINGS_FILENAME = "suite_settings.json"


@dataclass(frozen=True)
class SuiteSettings:
    results_dir: str = DEFAULT_RESULTS_DIRNAME
    max_workers: int = DEFAULT_MAX_WORKERS
    disabled_checks: FrozenSet[str] = field(default_factory=frozenset)
    persist_reports: bool = False   # also keep <name>@<version>.json next to the delta


def settings_path(base_dir: str) -> Path:
    return Path(base_dir).resolve() / SETTINGS_FILENAME


def to_json_dict(settings: SuiteSettings) -> Dict[str, Any]:
    d = asdict(settings)
    d["disabled_checks"] = sorted(settings.disabled_checks)
    return d


def from_json_dict(d: Dict[str, Any]) -> SuiteSettings:
    try:
        workers = int(d.get("max_workers", DEFAULT_MAX_WORKERS))
    except (TypeError, ValueError):
        workers = DEFAULT_MAX_WORKERS

    disabled = frozenset(str(x).strip() for x in (d.get("disabled_checks") or []) if str(x).strip())

    return SuiteSettings(
        results_dir=str(d.get("results_dir") or DEFAULT_RESULTS_DIRNAME),
        max_workers=max(1, workers),
        disabled_checks=disabled,
        persist_reports=bool(d.get("persist_reports", False)),
    )


def ensure_default_settings_on_disk(base_dir: str) -> Path:
    path = settings_path(base_dir)
    if not path.exists():
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(to_json_dict(SuiteSettings()), indent=2), encoding="utf-8")
    return path


def load_settings(base_dir: str) -> SuiteSettings:
    path = settings_path(base_dir)
    d = json.loads(path.read_text(encoding="utf-8"))
    return from_json_dict(d)


def save_settings(base_dir: str, settings: SuiteSettings) -> Path:
    path = settings_path(base_dir)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(to_json_dict(settings), indent=2), encoding="utf-8")
    return path
