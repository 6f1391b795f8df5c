from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Iterator, List, Optional

from pkgcheck.core import longpath

ADDED = "added"
REMOVED = "removed"
MODIFIED = "modified"

ADDED_TAG = "  ++ADDED++"
REMOVED_TAG = "  --REMOVED--"
MODIFIED_TAG = "  (MODIFIED)"
INDENT = "    "


@dataclass(frozen=True)
class DiffEntry:
    relpath: str    # "/" separated, relative to the side it was found on
    kind: str       # ADDED | REMOVED | MODIFIED


@dataclass
class CompareResult:
    old_root: Optional[str]
    new_root: Optional[str]
    added: List[str] = field(default_factory=list)      # new-side full paths
    removed: List[str] = field(default_factory=list)    # old-side full paths
    modified: List[str] = field(default_factory=list)   # old-side full paths
    tree_lines: List[str] = field(default_factory=list)

    @property
    def has_changes(self) -> bool:
        return bool(self.added or self.removed or self.modified)

    @property
    def tree_text(self) -> str:
        return "".join(line + "\n" for line in self.tree_lines)

    def relative(self, path: str, kind: str) -> str:
        root = self.new_root if kind == ADDED else self.old_root
        return os.path.relpath(path, root)

    def entries(self) -> Iterator[DiffEntry]:
        for kind, paths in ((ADDED, self.added), (REMOVED, self.removed), (MODIFIED, self.modified)):
            for p in paths:
                yield DiffEntry(relpath=self.relative(p, kind).replace("\\", "/"), kind=kind)


def compare_packages(
    path_old: Optional[str],
    path_new: Optional[str],
    root_name: Optional[str] = None,
) -> CompareResult:
    """
    Compare two directory trees level by level.

    A file found on both sides is modified only when its size differs;
    contents are never read. Directories that exist on one side only are
    walked completely, so everything below them counts as added or removed.
    Either path may be None/"" to stand for a side that does not exist.

    The tree rendering starts with a "<root_name>" line; the root's own
    entries sit one indentation level below it.
    """
    old = path_old or None
    new = path_new or None

    if root_name is None:
        root_name = os.path.basename(os.path.normpath(new or old or ""))

    result = CompareResult(old_root=old, new_root=new)
    result.tree_lines.append(f"<{root_name}>")
    _compare(result, old, new, 1)
    return result


def _compare(result: CompareResult, old: Optional[str], new: Optional[str], depth: int) -> None:
    prefix = INDENT * depth
    lines = result.tree_lines

    old_files = sorted(longpath.list_files(old)) if old else []
    new_files = sorted(longpath.list_files(new)) if new else []
    old_file_set = set(old_files)
    new_file_set = set(new_files)

    for name in old_files:
        old_path = os.path.join(old, name)
        if name in new_file_set:
            if longpath.file_size(old_path) == longpath.file_size(os.path.join(new, name)):
                lines.append(prefix + name)
            else:
                lines.append(prefix + name + MODIFIED_TAG)
                result.modified.append(old_path)
        else:
            lines.append(prefix + name + REMOVED_TAG)
            result.removed.append(old_path)

    for name in new_files:
        if name not in old_file_set:
            lines.append(prefix + name + ADDED_TAG)
            result.added.append(os.path.join(new, name))

    old_dirs = sorted(longpath.list_dirs(old)) if old else []
    new_dirs = sorted(longpath.list_dirs(new)) if new else []
    old_dir_set = set(old_dirs)
    new_dir_set = set(new_dirs)

    for name in old_dirs:
        if name in new_dir_set:
            lines.append(f"{prefix}<{name}>")
            _compare(result, os.path.join(old, name), os.path.join(new, name), depth + 1)
        else:
            lines.append(f"{prefix}<{name}>{REMOVED_TAG}")
            _compare(result, os.path.join(old, name), None, depth + 1)

    for name in new_dirs:
        if name not in old_dir_set:
            lines.append(f"{prefix}<{name}>{ADDED_TAG}")
            _compare(result, None, os.path.join(new, name), depth + 1)
