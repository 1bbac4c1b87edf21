"""Watch signature for poll-based refreshes.

One digest covers the git control files that change when the index, HEAD, or an
in-progress merge changes, plus stat data for the listed rows and the
directories holding them. The CLI watch loop reruns a full refresh whenever the
digest differs from the previous poll.
"""

from __future__ import annotations

import hashlib
from collections.abc import Iterable, Iterator
from pathlib import Path

GIT_CONTROL_FILES = ("index", "HEAD", "MERGE_HEAD", "CHERRY_PICK_HEAD", "REBASE_HEAD")


def _stat_token(path: Path) -> str:
    try:
        st = path.stat()
    except FileNotFoundError:
        return "missing"
    except OSError:
        return "error"
    return f"{st.st_mtime_ns}:{st.st_size}:{st.st_mode}"


def _head_ref(git_dir: Path) -> str:
    """Branch ref named by ``HEAD``, or ``""`` when detached or unreadable."""
    try:
        head = (git_dir / "HEAD").read_text(encoding="utf-8", errors="replace").strip()
    except OSError:
        return ""
    return head[5:].strip() if head.startswith("ref: ") else ""


def _git_tokens(git_dir: Path | None) -> Iterator[str]:
    if git_dir is None:
        yield "git:none"
        return
    git_dir = git_dir.resolve()
    yield f"git:{git_dir}"
    for name in GIT_CONTROL_FILES:
        yield f"git:{name}:{_stat_token(git_dir / name)}"
    ref = _head_ref(git_dir)
    if ref:
        yield f"ref:{ref}:{_stat_token(git_dir / ref)}"


def _worktree_tokens(root: Path, watched_paths: Iterable[Path]) -> Iterator[str]:
    # Directory mtimes move when entries are created or deleted inside them.
    targets: set[Path] = {root}
    for path in watched_paths:
        absolute = path if path.is_absolute() else root / path
        targets.update((absolute, absolute.parent))
    for target in sorted(targets, key=str):
        yield f"path:{target}:{_stat_token(target)}"


def build_watch_signature(root: Path, git_dir: Path | None, watched_paths: Iterable[Path] = ()) -> str:
    """Digest git metadata under ``git_dir`` and stat data of ``watched_paths`` below ``root``."""
    root = root.resolve()
    digest = hashlib.blake2b(digest_size=20)
    for token in (f"root:{root}", *_git_tokens(git_dir), *_worktree_tokens(root, watched_paths)):
        digest.update(token.encode("utf-8", errors="surrogateescape"))
        digest.update(b"\0")
    return digest.hexdigest()
