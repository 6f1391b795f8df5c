from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterator, List, Tuple

from pkgcheck.core import longpath

FILE = "file"
DIRECTORY = "directory"


@dataclass(frozen=True)
class DirectoryItem:
    path: str           # relative to walk root, native separator
    kind: str           # FILE | DIRECTORY
    depth: int          # root's direct children = 1
    child_count: int    # files directly inside (always 0 for files)


@dataclass(frozen=True)
class ScanFile:
    path: str           # full path
    relpath: str        # relative to package root, "/" separated
    name: str
    ext: str            # normalized (lower, no dot) or ""
    size_bytes: int


@dataclass(frozen=True)
class ScanSummary:
    root: str
    total_files: int
    total_dirs: int                     # not counting the root itself
    total_bytes: int
    extensions: Dict[str, int]          # ext -> count ("" means no extension)


def _normalize_ext(name: str) -> str:
    return Path(name).suffix.lower().lstrip(".")


def iter_directory_items(root: str) -> Iterator[DirectoryItem]:
    """
    Lazily list everything below `root`.

    Per directory: its files first, then the directory itself (the root is
    never reported), then each subdirectory recursively. Subdirectories are
    visited in the order the OS enumerates them, so the sequence is not
    stable across platforms. A missing root yields nothing; read errors
    further down are raised.
    """
    if not longpath.dir_exists(root):
        return
    yield from _walk(root, "", 1)


def _walk(path: str, rel: str, depth: int) -> Iterator[DirectoryItem]:
    files = longpath.list_files(path)
    for name in files:
        yield DirectoryItem(
            path=os.path.join(rel, name) if rel else name,
            kind=FILE,
            depth=depth,
            child_count=0,
        )

    if rel:
        yield DirectoryItem(path=rel, kind=DIRECTORY, depth=depth - 1, child_count=len(files))

    for name in longpath.list_dirs(path):
        child_rel = os.path.join(rel, name) if rel else name
        yield from _walk(os.path.join(path, name), child_rel, depth + 1)


def scan_package(root: str) -> Tuple[List[ScanFile], ScanSummary]:
    """
    Inventory every file of a package:
      - list of files with metadata
      - summary stats
    """
    root_path = Path(root).resolve()
    if not longpath.dir_exists(str(root_path)):
        raise ValueError(f"Package root is not a directory: {root}")

    files: List[ScanFile] = []
    total_dirs = 0
    total_bytes = 0
    ext_counts: Dict[str, int] = {}

    for item in iter_directory_items(str(root_path)):
        if item.kind == DIRECTORY:
            total_dirs += 1
            continue

        full = os.path.join(str(root_path), item.path)
        size = longpath.file_size(full)
        name = os.path.basename(item.path)
        ext = _normalize_ext(name)

        files.append(
            ScanFile(
                path=full,
                relpath=item.path.replace("\\", "/"),
                name=name,
                ext=ext,
                size_bytes=size,
            )
        )
        total_bytes += size
        ext_counts[ext] = ext_counts.get(ext, 0) + 1

    summary = ScanSummary(
        root=str(root_path),
        total_files=len(files),
        total_dirs=total_dirs,
        total_bytes=total_bytes,
        extensions=dict(sorted(ext_counts.items(), key=lambda kv: (-kv[1], kv[0]))),
    )
    return files, summary
