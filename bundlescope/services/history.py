# Append-only history of past analyses, kept under <project>/.bundlescope/.
#
# Writes are a whole-file read-modify-write with no locking: two concurrent
# runs against the same project can lose an entry.

from __future__ import annotations

import json
import subprocess
from dataclasses import dataclass
from typing import Any, Callable

from result import Err, Ok, Result

from bundlescope.models.report import AnalysisResult
from bundlescope.services.fs import DEFAULT_FS, FileSystem

HISTORY_DIR = ".bundlescope"
HISTORY_FILE = "history.json"
MAX_ENTRIES = 100


@dataclass(slots=True, frozen=True)
class VcsInfo:
    commit: str | None = None
    branch: str | None = None


VcsProvider = Callable[[str], VcsInfo]


@dataclass(slots=True, frozen=True)
class HistoryEntry:
    timestamp: str
    total_size: int
    total_gzip_size: int
    module_count: int
    chunk_count: int
    total_brotli_size: int | None = None
    git_commit: str | None = None
    git_branch: str | None = None

    def to_dict(self) -> dict[str, Any]:
        metrics: dict[str, Any] = {
            "totalSize": self.total_size,
            "totalGzipSize": self.total_gzip_size,
            "moduleCount": self.module_count,
            "chunkCount": self.chunk_count,
        }
        if self.total_brotli_size is not None:
            metrics["totalBrotliSize"] = self.total_brotli_size
        payload: dict[str, Any] = {"timestamp": self.timestamp, "metrics": metrics}
        if self.git_commit is not None:
            payload["gitCommit"] = self.git_commit
        if self.git_branch is not None:
            payload["gitBranch"] = self.git_branch
        return payload

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> HistoryEntry:
        metrics = payload.get("metrics") or {}
        brotli = metrics.get("totalBrotliSize")
        return cls(
            timestamp=str(payload["timestamp"]),
            total_size=int(metrics.get("totalSize", 0)),
            total_gzip_size=int(metrics.get("totalGzipSize", 0)),
            module_count=int(metrics.get("moduleCount", 0)),
            chunk_count=int(metrics.get("chunkCount", 0)),
            total_brotli_size=int(brotli) if brotli is not None else None,
            git_commit=payload.get("gitCommit"),
            git_branch=payload.get("gitBranch"),
        )

    @classmethod
    def from_result(cls, result: AnalysisResult, vcs: VcsInfo) -> HistoryEntry:
        metrics = result.metrics
        return cls(
            timestamp=result.timestamp,
            total_size=metrics.total_size,
            total_gzip_size=metrics.total_gzip_size,
            module_count=metrics.module_count,
            chunk_count=metrics.chunk_count,
            total_brotli_size=metrics.total_brotli_size,
            git_commit=vcs.commit,
            git_branch=vcs.branch,
        )


def _git(args: list[str], cwd: str) -> str | None:
    try:
        completed = subprocess.run(
            ["git", *args],
            cwd=cwd,
            capture_output=True,
            text=True,
            check=True,
        )
    except (OSError, subprocess.CalledProcessError):
        return None
    return completed.stdout.strip() or None


def git_metadata(project_root: str) -> VcsInfo:
    """Current commit and branch, or empty fields outside a git checkout."""
    return VcsInfo(
        commit=_git(["rev-parse", "HEAD"], project_root),
        branch=_git(["rev-parse", "--abbrev-ref", "HEAD"], project_root),
    )


def history_path(project_root: str, fs: FileSystem = DEFAULT_FS) -> str:
    return fs.join(project_root, HISTORY_DIR, HISTORY_FILE)


def load_history(project_root: str, fs: FileSystem = DEFAULT_FS) -> Result[list[HistoryEntry], str]:
    path = history_path(project_root, fs)
    if not fs.exists(path):
        return Ok([])
    try:
        payload = json.loads(fs.read_text(path))
        entries = payload.get("entries", []) if isinstance(payload, dict) else None
        if not isinstance(entries, list):
            return Err(f"History at {path} must be an object with an entries list.")
        return Ok([HistoryEntry.from_dict(item) for item in entries])
    except Exception as exc:  # noqa: BLE001
        return Err(f"Failed reading history at {path}: {exc}.")


def append_history(
    result: AnalysisResult,
    project_root: str,
    fs: FileSystem = DEFAULT_FS,
    vcs: VcsProvider = git_metadata,
) -> Result[HistoryEntry, str]:
    loaded = load_history(project_root, fs)
    if isinstance(loaded, Err):
        return loaded

    entry = HistoryEntry.from_result(result, vcs(project_root))
    entries = [*loaded.ok_value, entry][-MAX_ENTRIES:]

    path = history_path(project_root, fs)
    try:
        fs.make_dirs(fs.dirname(path))
        fs.write_text(path, json.dumps({"entries": [e.to_dict() for e in entries]}, indent=2))
    except OSError as exc:
        return Err(f"Failed writing history at {path}: {exc}.")
    return Ok(entry)


def get_trends(project_root: str, limit: int = 10, fs: FileSystem = DEFAULT_FS) -> Result[list[HistoryEntry], str]:
    return load_history(project_root, fs).map(lambda entries: entries[-limit:] if limit > 0 else [])
