"""Isolated, gitignore-respecting snapshots of a repository's worktree.

Scanners that do not understand ``.gitignore`` are pointed at a throwaway
directory holding hard links (or copies) of exactly the files git tracks
and does not ignore. The real working tree is never handed to them.

The snapshot owns its scratch directory: use it as a context manager so
the directory is removed on every exit path.
"""

from __future__ import annotations

import os
import shutil
import time
from pathlib import Path
from typing import Callable, List, Optional, Set

from opstools.bootstrap.paths import scratch_root
from opstools.core.errors import CommandError, IoError, first_line
from opstools.core.logging import get_logger
from opstools.core.subprocess_runner import run_bytes

LOGGER = get_logger(__name__)

NO_TRACKED_FILES = "No tracked files found; the worktree snapshot is empty"
ALL_FILES_IGNORED = "Every tracked file is ignored; the worktree snapshot is empty"


def find_git_root(start: Path) -> Optional[Path]:
    """Walk up from ``start`` looking for a ``.git`` directory or file."""
    current: Optional[Path] = start
    while current is not None:
        if (current / ".git").exists():
            return current
        parent = current.parent
        current = parent if parent != current else None
    return None


def split_nul(data: bytes) -> List[str]:
    """Split NUL-delimited git output into file names, dropping empty chunks."""
    return [os.fsdecode(chunk) for chunk in data.split(b"\0") if chunk]


def git_list_tracked(repo_root: Path) -> List[str]:
    """List tracked paths (relative to ``repo_root``) via ``git ls-files -z``.

    Raises:
        CommandError: If git cannot be run or fails.
    """
    try:
        result = run_bytes(["git", "-C", str(repo_root), "ls-files", "-z"])
    except OSError as e:
        raise CommandError("git ls-files", f"unable to execute: {e}") from e

    if result.returncode != 0:
        raise CommandError("git ls-files", first_line(os.fsdecode(result.stderr)))
    return split_nul(result.stdout)


def git_list_ignored(repo_root: Path, paths: List[str]) -> Set[str]:
    """Return the subset of ``paths`` that git ignores.

    Paths are streamed to ``git check-ignore -z --stdin`` so the list is
    not bounded by command-line length. ``--no-index`` makes tracked files
    that match an ignore rule count as ignored too. Exit code 1 means
    nothing is ignored and is not an error.

    Raises:
        CommandError: If git cannot be run or exits with another code.
    """
    if not paths:
        return set()

    payload = b"".join(os.fsencode(path) + b"\0" for path in paths)
    try:
        result = run_bytes(
            ["git", "-C", str(repo_root), "check-ignore", "-z", "--stdin", "--no-index"],
            input_bytes=payload,
        )
    except OSError as e:
        raise CommandError("git check-ignore", f"unable to execute: {e}") from e

    if result.returncode not in (0, 1):
        raise CommandError("git check-ignore", first_line(os.fsdecode(result.stderr)))
    return set(split_nul(result.stdout))


def create_scratch_dir(base: Optional[Path] = None) -> Path:
    """Create a uniquely named scratch directory (pid + timestamp).

    Raises:
        IoError: If the directory cannot be created.
    """
    base = base or scratch_root()
    try:
        base.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise IoError(base, e) from e

    while True:
        candidate = base / f"git-scan-{os.getpid()}-{time.time_ns()}"
        try:
            candidate.mkdir()
            return candidate
        except FileExistsError:
            continue
        except OSError as e:
            raise IoError(candidate, e) from e


def link_or_copy(source: Path, destination: Path) -> None:
    """Hard-link ``source`` to ``destination``, copying when linking fails.

    Raises:
        IoError: If the parent directory cannot be created or the copy fails.
    """
    try:
        destination.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise IoError(destination.parent, e) from e

    try:
        os.link(source, destination)
        return
    except OSError as e:
        LOGGER.debug(f"Hard link failed for {source} ({e}); copying instead")

    try:
        shutil.copy2(source, destination)
    except OSError as e:
        raise IoError(destination, e) from e


class WorktreeSnapshot:
    """A scratch directory holding the repository's tracked, non-ignored files.

    Removing the directory is the owner's responsibility; the context
    manager protocol does it automatically.
    """

    def __init__(self, root: Path, file_count: int = 0):
        self._root = root
        self._file_count = file_count
        self._closed = False

    @property
    def root(self) -> Path:
        return self._root

    @property
    def file_count(self) -> int:
        return self._file_count

    @property
    def closed(self) -> bool:
        return self._closed

    def files(self) -> List[str]:
        """Relative POSIX paths of every file in the snapshot, sorted."""
        return sorted(
            path.relative_to(self._root).as_posix()
            for path in self._root.rglob("*")
            if path.is_file()
        )

    def close(self) -> None:
        """Recursively remove the scratch directory (idempotent)."""
        if self._closed:
            return
        self._closed = True
        shutil.rmtree(self._root, ignore_errors=True)
        LOGGER.debug(f"Removed worktree snapshot {self._root}")

    def __enter__(self) -> "WorktreeSnapshot":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class WorktreeSnapshotBuilder:
    """Builds :class:`WorktreeSnapshot` instances for a repository."""

    def __init__(
        self,
        scratch_base: Optional[Path] = None,
        warn: Optional[Callable[[str], None]] = None,
    ):
        """Initialize WorktreeSnapshotBuilder.

        Args:
            scratch_base: Parent of the scratch directories (default: temp root).
            warn: Callback for user-facing warnings (default: log a warning).
        """
        self._scratch_base = scratch_base
        self._warn = warn or LOGGER.warning

    def build(self, repo_root: Path) -> WorktreeSnapshot:
        """Snapshot the tracked, non-ignored files of ``repo_root``.

        An empty snapshot is still returned (with a warning) when nothing is
        tracked or everything is ignored. On failure the scratch directory is
        removed before the error propagates.

        Raises:
            CommandError: If git cannot list tracked or ignored files.
            IoError: If the snapshot cannot be written.
        """
        snapshot = WorktreeSnapshot(create_scratch_dir(self._scratch_base))
        try:
            if snapshot.root.resolve() == repo_root.resolve():
                raise IoError(snapshot.root, ValueError("snapshot root must not be the repository"))
            snapshot._file_count = self._populate(repo_root, snapshot.root)
        except BaseException:
            snapshot.close()
            raise
        LOGGER.debug(f"Worktree snapshot {snapshot.root} holds {snapshot.file_count} files")
        return snapshot

    def _populate(self, repo_root: Path, snapshot_root: Path) -> int:
        tracked = git_list_tracked(repo_root)
        if not tracked:
            self._warn(NO_TRACKED_FILES)
            return 0

        ignored = git_list_ignored(repo_root, tracked)
        selected = [path for path in tracked if path not in ignored]
        if not selected:
            self._warn(ALL_FILES_IGNORED)
            return 0

        count = 0
        for rel_path in selected:
            source = repo_root / rel_path
            # Deleted-but-tracked files and submodule entries are skipped
            if not source.is_file():
                continue
            link_or_copy(source, snapshot_root / rel_path)
            count += 1
        return count
