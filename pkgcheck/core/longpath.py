"""
Filesystem queries that keep working past the Windows MAX_PATH limit.

Every traversal in the suite goes through here instead of calling os/pathlib
directly. On Windows paths are rewritten to their extended-length form
(\\\\?\\C:\\... or \\\\?\\UNC\\server\\share\\...); elsewhere they pass through.
"""
from __future__ import annotations

import errno
import os
from typing import List

_EXTENDED_PREFIX = "\\\\?\\"
_UNC_PREFIX = "\\\\?\\UNC\\"


def extended_path(path: str) -> str:
    if os.name != "nt":
        return path
    if path.startswith(_EXTENDED_PREFIX):
        return path
    full = os.path.abspath(path)
    if full.startswith("\\\\"):
        return _UNC_PREFIX + full[2:]
    return _EXTENDED_PREFIX + full


def list_files(path: str) -> List[str]:
    """Names of the regular files directly inside `path`."""
    with os.scandir(extended_path(path)) as it:
        return [e.name for e in it if e.is_file()]


def list_dirs(path: str) -> List[str]:
    """Names of the directories directly inside `path`."""
    with os.scandir(extended_path(path)) as it:
        return [e.name for e in it if e.is_dir()]


def dir_exists(path: str) -> bool:
    return os.path.isdir(extended_path(path))


def file_exists(path: str) -> bool:
    """
    True if `path` is a readable file.

    Only "not found" conditions answer False. Permission problems, paths that
    are too long and similar errors are raised instead of being reported as
    a missing file.
    """
    try:
        with open(extended_path(path), "rb"):
            return True
    except (FileNotFoundError, NotADirectoryError, IsADirectoryError):
        return False
    except OSError as e:
        if e.errno == errno.ENOENT:
            return False
        raise


def file_size(path: str) -> int:
    return int(os.stat(extended_path(path)).st_size)
