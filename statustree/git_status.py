"""Git-backed status provider.

Runs ``git status --porcelain=v1 -z`` in a background thread, maps records to
status tuples, and queues them in batches. ``pump`` delivers queued batches to
their callbacks on the calling thread, which must be the thread owning the store.
"""

from __future__ import annotations

import os
import subprocess
import threading
from collections.abc import Sequence
from pathlib import Path
from queue import Empty, Queue

from .errors import ProviderError
from .logging import get_logger, log_event
from .runtime.provider import BatchCallback, ErrorCallback
from .tree_model.types import State, StatusTuple

DEFAULT_BATCH_SIZE = 200
DEFAULT_TIMEOUT_SECONDS = 5.0

logger = get_logger("statustree.git")


def resolve_git_paths(tree_root: Path, timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS) -> tuple[Path | None, Path | None]:
    """Resolve repository root and git-dir for ``tree_root``.

    Uses ``git rev-parse --show-toplevel --git-dir`` and returns ``(None, None)``
    when git is unavailable or the directory is not inside a repository.
    """
    try:
        proc = subprocess.run(
            ["git", "-C", str(tree_root), "rev-parse", "--show-toplevel", "--git-dir"],
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            text=True,
            encoding="utf-8",
            errors="replace",
            check=False,
            timeout=timeout_seconds,
        )
    except (OSError, subprocess.SubprocessError):
        return None, None
    if proc.returncode != 0:
        return None, None

    lines = [line.strip() for line in proc.stdout.splitlines() if line.strip()]
    if len(lines) < 2:
        return None, None

    repo_root = Path(lines[0]).resolve()
    git_dir_raw = Path(lines[1])
    git_dir = git_dir_raw if git_dir_raw.is_absolute() else (repo_root / git_dir_raw)
    return repo_root, git_dir.resolve()


def iter_porcelain_records(output: str) -> list[tuple[str, str]]:
    """Split ``git status --porcelain=v1 -z`` output into ``(XY, path)`` records."""
    records: list[tuple[str, str]] = []
    tokens = output.split("\0")
    index = 0
    while index < len(tokens):
        token = tokens[index]
        index += 1
        if not token:
            continue
        if len(token) < 4 or token[2] != " ":
            continue

        status = token[:2]
        path_text = token[3:]
        records.append((status, path_text))

        # For renamed/copied entries, porcelain -z appends an extra token
        # containing the source path; the first path token is the destination.
        if "R" in status or "C" in status:
            index += 1

    return records


def state_for_porcelain(status: str) -> State:
    """Map a porcelain ``XY`` code to a ``State``."""
    if status == "??":
        return State.UNREGISTERED
    if status == "!!":
        return State.IGNORED
    index_code, worktree_code = status[0], status[1]
    if "U" in status or status in {"AA", "DD"}:
        return State.CONFLICT
    if index_code in {"A", "C", "R"}:
        return State.ADDED
    if index_code == "D":
        return State.REMOVED
    if worktree_code == "D":
        return State.MISSING
    if index_code in {"M", "T"} or worktree_code in {"M", "T"}:
        return State.EDITED
    return State.UNKNOWN


def _run_git(repo_root: Path, args: list[str], timeout_seconds: float) -> subprocess.CompletedProcess[str] | None:
    try:
        return subprocess.run(
            ["git", "-C", str(repo_root), *args],
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            text=True,
            encoding="utf-8",
            errors="replace",
            check=False,
            timeout=timeout_seconds,
        )
    except (OSError, subprocess.SubprocessError):
        return None


def collect_diff_text(tree_root: Path, paths: Sequence[str], timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS) -> str:
    """Unified diff against ``HEAD`` for ``paths`` (relative to ``tree_root``)."""
    tree_root = tree_root.resolve()
    if not paths:
        return ""
    pathspecs = [str(tree_root / path.rstrip("/")) for path in paths]
    proc = _run_git(tree_root, ["diff", "--no-color", "HEAD", "--", *pathspecs], timeout_seconds)
    if proc is not None and proc.returncode == 0 and proc.stdout:
        return proc.stdout

    # Fallback for unborn-HEAD repos.
    staged_proc = _run_git(tree_root, ["diff", "--cached", "--no-color", "--", *pathspecs], timeout_seconds)
    unstaged_proc = _run_git(tree_root, ["diff", "--no-color", "--", *pathspecs], timeout_seconds)
    staged_text = staged_proc.stdout if staged_proc is not None and staged_proc.returncode == 0 else ""
    unstaged_text = unstaged_proc.stdout if unstaged_proc is not None and unstaged_proc.returncode == 0 else ""
    return staged_text + unstaged_text


class GitStatusOperation:
    """One background ``git`` request; ``cancel`` kills the child process."""

    def __init__(self, on_batch: BatchCallback, on_error: ErrorCallback) -> None:
        self.on_batch = on_batch
        self.on_error = on_error
        self._cancelled = threading.Event()
        self._lock = threading.Lock()
        self._process: subprocess.Popen[str] | None = None

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def cancel(self) -> None:
        self._cancelled.set()
        with self._lock:
            process = self._process
        if process is not None and process.poll() is None:
            process.kill()

    def run_git(self, repo_root: Path, args: list[str], timeout_seconds: float) -> str:
        """Run one git command, raising ``ProviderError`` on failure or timeout."""
        command = ["git", "-C", str(repo_root), *args]
        with self._lock:
            if self.cancelled:
                return ""
            process = subprocess.Popen(
                command,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
            self._process = process
        try:
            stdout, stderr = process.communicate(timeout=timeout_seconds)
        except subprocess.TimeoutExpired as exc:
            process.kill()
            process.communicate()
            raise ProviderError("git timed out", detail=" ".join(args[:2])) from exc
        finally:
            with self._lock:
                self._process = None
        if self.cancelled:
            return ""
        if process.returncode != 0:
            raise ProviderError("git failed", detail=(stderr or "").strip() or f"exit {process.returncode}")
        return stdout


class GitStatusProvider:
    """``StatusProvider`` for a git working tree rooted at ``root``."""

    def __init__(
        self,
        root: Path,
        *,
        batch_size: int = DEFAULT_BATCH_SIZE,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self.root = root.resolve()
        self.batch_size = max(1, int(batch_size))
        self.timeout_seconds = timeout_seconds
        self._events: Queue[tuple[GitStatusOperation, list[StatusTuple] | None, bool, BaseException | None]] = Queue()

    def request_full_status(
        self,
        root_dir: Path,
        on_batch: BatchCallback,
        on_error: ErrorCallback,
    ) -> GitStatusOperation:
        operation = GitStatusOperation(on_batch, on_error)
        self._start(operation, self._scan_full, Path(root_dir).resolve())
        return operation

    def request_status_for(
        self,
        paths: Sequence[str],
        default_state: State,
        on_batch: BatchCallback,
        on_error: ErrorCallback,
    ) -> GitStatusOperation:
        operation = GitStatusOperation(on_batch, on_error)
        self._start(operation, self._scan_files, list(paths), default_state)
        return operation

    def _start(self, operation: GitStatusOperation, target, *args) -> None:
        worker = threading.Thread(
            target=self._worker,
            args=(operation, target, args),
            name="statustree-git-status",
            daemon=True,
        )
        worker.start()

    def _worker(self, operation: GitStatusOperation, target, args: tuple) -> None:
        try:
            entries = target(operation, *args)
        except Exception as exc:
            log_event(logger, "git_status_failed", error=str(exc), root=str(self.root))
            self._events.put((operation, None, False, exc))
            return
        if operation.cancelled:
            return
        batches = [entries[start : start + self.batch_size] for start in range(0, len(entries), self.batch_size)]
        if not batches:
            batches = [[]]
        for index, batch in enumerate(batches):
            self._events.put((operation, batch, index < len(batches) - 1, None))

    def _repo_root(self) -> Path:
        repo_root, _git_dir = resolve_git_paths(self.root, self.timeout_seconds)
        if repo_root is None:
            raise ProviderError("Not a git working tree", detail=str(self.root))
        return repo_root

    def _relative_to_root(self, repo_root: Path, rel_path: str) -> str | None:
        """Map a repo-relative git path to a path under ``root``, or ``None`` outside it.

        The path is normalized lexically; a symlink is reported under its own name.
        """
        trailing = "/" if rel_path.endswith("/") else ""
        target = Path(os.path.normpath(repo_root / rel_path))
        if not target.is_relative_to(self.root) or target == self.root:
            return None
        return target.relative_to(self.root).as_posix() + trailing

    def _status_records(self, operation: GitStatusOperation, repo_root: Path, pathspecs: list[str]) -> list[tuple[str, str]]:
        output = operation.run_git(
            repo_root,
            ["status", "--porcelain=v1", "-z", "--untracked-files=normal", "--", *pathspecs],
            self.timeout_seconds,
        )
        return iter_porcelain_records(output)

    def _scan_full(self, operation: GitStatusOperation, root_dir: Path) -> list[StatusTuple]:
        repo_root = self._repo_root()
        entries: list[StatusTuple] = []
        for status, rel_path in self._status_records(operation, repo_root, [str(root_dir)]):
            path = self._relative_to_root(repo_root, rel_path)
            if path is None:
                continue
            entries.append((path, state_for_porcelain(status), status))
        return entries

    def _scan_files(self, operation: GitStatusOperation, paths: list[str], default_state: State) -> list[StatusTuple]:
        """Status for ``paths``; tracked paths git does not report get ``default_state``."""
        if not paths:
            return []
        repo_root = self._repo_root()
        absolute = [str(self.root / path.rstrip("/")) for path in paths]
        reported: dict[str, StatusTuple] = {}
        for status, rel_path in self._status_records(operation, repo_root, absolute):
            path = self._relative_to_root(repo_root, rel_path)
            if path is not None:
                reported[path.rstrip("/")] = (path, state_for_porcelain(status), status)

        tracked_output = operation.run_git(repo_root, ["ls-files", "-z", "--", *absolute], self.timeout_seconds)
        tracked: set[str] = set()
        for rel_path in tracked_output.split("\0"):
            if rel_path:
                path = self._relative_to_root(repo_root, rel_path)
                if path is not None:
                    tracked.add(path)

        entries: list[StatusTuple] = list(reported.values())
        for path in paths:
            key = path.rstrip("/")
            if key in reported:
                continue
            if key in tracked:
                entries.append((path, default_state, None))
            elif os.path.lexists(self.root / key):
                entries.append((path, State.IGNORED, None))
            else:
                entries.append((path, None, None))
        return entries

    def pump(self, timeout: float | None = None) -> int:
        """Deliver queued batches on the calling thread and return how many ran.

        With ``timeout`` the first wait blocks up to that many seconds.
        """
        delivered = 0
        block = timeout is not None
        while True:
            try:
                if block:
                    event = self._events.get(timeout=timeout)
                    block = False
                else:
                    event = self._events.get_nowait()
            except Empty:
                return delivered
            operation, batch, more_to_come, error = event
            if operation.cancelled:
                continue
            if error is not None:
                operation.on_error(error)
            else:
                assert batch is not None
                operation.on_batch(batch, more_to_come)
            delivered += 1


__all__ = [
    "collect_diff_text",
    "GitStatusOperation",
    "GitStatusProvider",
    "iter_porcelain_records",
    "resolve_git_paths",
    "state_for_porcelain",
]
