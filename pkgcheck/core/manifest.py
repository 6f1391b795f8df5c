from __future__ import annotations

import json
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

PACKAGE_JSON = "package.json"

_SEMVER_RE = re.compile(
    r"^(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)"
    r"(?:-([0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?"
    r"(?:\+([0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?$"
)

SemVer = Tuple[int, int, int, str, str]


def parse_semver(version: str) -> SemVer:
    """
    Split a semantic version into (major, minor, patch, prerelease, build).
    Prerelease and build are "" when absent.
    """
    m = _SEMVER_RE.match((version or "").strip())
    if not m:
        raise ValueError(f"Not a semantic version: '{version}'")
    major, minor, patch, pre, build = m.groups()
    return int(major), int(minor), int(patch), pre or "", build or ""


def is_preview_version(version: str) -> bool:
    major, _, _, pre, _ = parse_semver(version)
    return major == 0 or bool(pre)


def create_package_id(name: str, version: str) -> str:
    if not (name or "").strip() or not (version or "").strip():
        raise ValueError("Both name and version must be specified.")
    return f"{name.strip()}@{version.strip()}"


@dataclass(frozen=True)
class ManifestData:
    name: str
    version: str
    path: str                                   # absolute package root
    previous: Optional["ManifestData"] = None   # prior release, if any

    def __post_init__(self) -> None:
        if not (self.name or "").strip():
            raise ValueError("Package name is required.")
        parse_semver(self.version)

    @property
    def package_id(self) -> str:
        return create_package_id(self.name, self.version)


def _read_package_json(path: Path) -> Dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid {PACKAGE_JSON}: {path} ({e})") from e
    if not isinstance(data, dict):
        raise ValueError(f"Invalid {PACKAGE_JSON}: {path} (expected an object)")
    return data


def load_manifest(root: str, previous: Optional[ManifestData] = None) -> ManifestData:
    """
    Build the manifest for the package at `root` from its package.json.

    `previous` is attached as the prior release to diff against.
    Raises FileNotFoundError when package.json is absent, ValueError when
    name/version are missing or malformed.
    """
    root_path = Path(root).resolve()
    pj = root_path / PACKAGE_JSON
    if not pj.is_file():
        raise FileNotFoundError(f"{PACKAGE_JSON} not found in package root: {root_path}")

    data = _read_package_json(pj)
    return ManifestData(
        name=str(data.get("name") or "").strip(),
        version=str(data.get("version") or "").strip(),
        path=str(root_path),
        previous=previous,
    )
