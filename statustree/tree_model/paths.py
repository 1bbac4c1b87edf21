"""Path normalization and ordering keys for status-tree rows.

All ordering uses ordinal string comparison on normalized absolute POSIX paths.
Directory keys always end with ``/`` so a directory is a string prefix of its subtree.
"""

from __future__ import annotations

import os
import posixpath
from pathlib import Path

from .types import Entry


def normalize_root(root_dir: str | Path) -> str:
    """Return ``root_dir`` as an absolute POSIX directory key ending with ``/``."""
    text = Path(os.path.abspath(str(root_dir))).as_posix()
    text = posixpath.normpath(text)
    return text if text.endswith("/") else text + "/"


def absolute_path(path: str, root_key: str) -> str:
    """Join ``path`` onto the root key without the trailing directory marker."""
    stripped = path.rstrip("/") or "."
    return posixpath.normpath(posixpath.join(root_key, stripped))


def directory_of(path: str, root_key: str) -> str:
    """Directory key of the folder containing ``path``.

    A trailing ``/`` on ``path`` (an unregistered directory row) is ignored, so
    ``"build/"`` belongs to the root directory like any file.
    """
    parent = posixpath.dirname(absolute_path(path, root_key))
    return parent if parent.endswith("/") else parent + "/"


def relative_path(path: str, root_key: str) -> str:
    """Return ``path`` relative to the root, keeping a trailing ``/`` marker."""
    trailing = "/" if path.endswith("/") and path.rstrip("/") else ""
    absolute = absolute_path(path, root_key)
    relative = posixpath.relpath(absolute, root_key.rstrip("/") or "/")
    if relative == ".":
        return relative
    return relative + trailing


def header_path(directory_key: str, root_key: str) -> str:
    """Relative display path of a header row (``"."`` for the root)."""
    return posixpath.relpath(directory_key.rstrip("/") or "/", root_key.rstrip("/") or "/")


def entry_directory(entry: Entry, root_key: str) -> str:
    """Directory key used to group ``entry`` in the store."""
    if entry.is_header and entry.directory is not None:
        return entry.directory
    return directory_of(entry.path, root_key)


def sort_key(entry: Entry, root_key: str) -> tuple[str, int, str]:
    """Total order of rows: directory key, header first, then path."""
    if entry.is_header:
        return (entry_directory(entry, root_key), 0, "")
    return (entry_directory(entry, root_key), 1, entry.path)


def is_within(directory_key: str, ancestor_key: str) -> bool:
    """True when ``directory_key`` equals or lies below ``ancestor_key``."""
    return directory_key.startswith(ancestor_key)
