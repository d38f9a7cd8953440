from __future__ import annotations

import subprocess
import sys
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Callable, Iterable, Iterator

from .analysis_diff import diff_commit
from .analysis_periods import parse_date_window, timestamp_to_utc
from .analysis_walk import walk_commits
from .errors import CommitResolutionError, DiffComputationError, RepoActivityError
from .git import open_repository, run_git
from .models import CommitRecord, RepositoryStats

UNKNOWN = "Unknown"

# NUL-separated so names and multi-line messages can't break the split; message goes last.
COMMIT_FORMAT = "%H%x00%an%x00%ae%x00%at%x00%P%x00%B"

ErrorHandler = Callable[[str, RepoActivityError], None]


def parse_commit_metadata(raw: str) -> tuple[str, str, str, str, list[str], str]:
    """
    Split `git rev-list --format=COMMIT_FORMAT` output for one commit into
    (hash, name, email, author_time, parents, message).
    """
    text = raw
    if text.startswith("commit "):
        text = text.split("\n", 1)[1] if "\n" in text else ""
    # rev-list terminates every formatted entry with one extra newline.
    if text.endswith("\n"):
        text = text[:-1]
    parts = text.split("\x00", 5)
    if len(parts) != 6:
        raise ValueError(f"expected 6 fields, got {len(parts)}")
    sha, name, email, author_time, parents_s, message = parts
    return sha.strip(), name, email, author_time.strip(), parents_s.split(), message


def extract_commit(repo: Path, commit: str) -> CommitRecord:
    args = ["rev-list", "--no-walk", "-n", "1", f"--format={COMMIT_FORMAT}", commit]
    try:
        code, out, err = run_git(args, cwd=repo)
    except (OSError, subprocess.TimeoutExpired) as e:
        raise CommitResolutionError(f"failed to read commit {commit}: {e}") from e
    if code != 0 or not out.strip():
        raise CommitResolutionError(f"cannot find commit {commit}: {err.strip()[:500]}")
    try:
        sha, name, email, author_time, parents, message = parse_commit_metadata(out)
    except ValueError as e:
        raise CommitResolutionError(f"unreadable metadata for commit {commit}: {e}") from e

    parent = parents[0] if parents else None
    stats = diff_commit(repo, sha, parent)

    return CommitRecord(
        hash=sha,
        author=name or UNKNOWN,
        email=email or UNKNOWN,
        date=timestamp_to_utc(author_time),
        message=message,
        lines_added=stats.lines_added,
        lines_removed=stats.lines_removed,
        files_changed=stats.files_changed,
    )


def _try_extract(repo: Path, commit: str) -> tuple[str, CommitRecord | None, RepoActivityError | None]:
    try:
        return commit, extract_commit(repo, commit), None
    except (CommitResolutionError, DiffComputationError) as e:
        return commit, None, e


def extract_commits(
    repo: Path,
    commits: Iterable[str],
    *,
    jobs: int = 1,
) -> Iterator[tuple[str, CommitRecord | None, RepoActivityError | None]]:
    """Extract commits in input order; with jobs > 1 the git work runs on a thread pool."""
    if jobs <= 1:
        for commit in commits:
            yield _try_extract(repo, commit)
        return
    with ThreadPoolExecutor(max_workers=jobs) as ex:
        yield from ex.map(lambda c: _try_extract(repo, c), commits)


def print_commit_error(commit: str, error: RepoActivityError) -> None:
    print(f"Error processing commit {commit}: {error}", file=sys.stderr)


def analyze_repository(
    repo_path: Path | str,
    start_date: str | None = None,
    end_date: str | None = None,
    *,
    jobs: int = 1,
    on_error: ErrorHandler | None = None,
    on_progress: Callable[[int], None] | None = None,
) -> RepositoryStats:
    """
    Walk HEAD's history, extract every commit inside the date window and fold
    it into a fresh RepositoryStats. Date and repository errors are fatal;
    commits that fail to resolve or diff are reported and skipped.
    """
    window = parse_date_window(start_date, end_date)
    repo = open_repository(Path(repo_path))
    stats = RepositoryStats(repo_path=str(repo_path))
    report = on_error or print_commit_error

    for commit, record, error in extract_commits(repo, walk_commits(repo, window), jobs=jobs):
        if error is not None:
            report(commit, error)
            continue
        assert record is not None
        stats.add_commit(record)
        if on_progress is not None:
            on_progress(stats.total_commits)
    return stats
