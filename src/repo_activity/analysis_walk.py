from __future__ import annotations

from pathlib import Path
from typing import Iterator

from .analysis_periods import DateWindow, timestamp_to_utc
from .errors import GitCommandError, TraversalError
from .git import run_git, stream_git


def resolve_head(repo: Path) -> str | None:
    """
    Return the commit id HEAD points at, or None when HEAD is an unborn branch
    (a repository without commits).
    """
    code, out, err = run_git(["rev-parse", "--verify", "--quiet", "HEAD^{commit}"], cwd=repo)
    if code == 0 and out.strip():
        return out.strip()

    code, ref, _ = run_git(["symbolic-ref", "--quiet", "HEAD"], cwd=repo)
    ref = ref.strip()
    if code == 0 and ref:
        code, _, _ = run_git(["rev-parse", "--verify", "--quiet", ref], cwd=repo)
        if code != 0:
            return None
    raise TraversalError(f"cannot resolve HEAD in {repo}" + (f": {err.strip()[:200]}" if err.strip() else ""))


def iter_commit_times(repo: Path, head: str) -> Iterator[tuple[str, str]]:
    # rev-list prints a "commit <sha>" header before each formatted line.
    args = ["rev-list", "--date-order", "--format=%H%x09%at", head]
    try:
        for line in stream_git(args, cwd=repo):
            if not line or line.startswith("commit "):
                continue
            sha, _, at = line.partition("\t")
            sha = sha.strip()
            if not sha:
                raise TraversalError(f"unexpected rev-list output: {line!r}")
            yield sha, at.strip()
    except GitCommandError as e:
        raise TraversalError(f"failed to walk history from {head}: {e}") from e


def walk_commits(repo: Path, window: DateWindow | None = None) -> Iterator[str]:
    """
    Commit ids reachable from HEAD, newest first with no parent before its
    children, restricted to commits whose author time falls inside `window`
    (both bounds inclusive).
    """
    head = resolve_head(repo)
    if head is None:
        return
    for sha, author_time in iter_commit_times(repo, head):
        if window is not None and not window.is_open:
            if not window.contains(timestamp_to_utc(author_time)):
                continue
        yield sha
