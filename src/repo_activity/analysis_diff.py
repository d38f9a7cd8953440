from __future__ import annotations

import dataclasses
from pathlib import Path
from typing import Iterable

from .errors import DiffComputationError, GitCommandError
from .git import stream_git

DIFF_OPTIONS = ["-r", "-p", "-U0", "--patience", "--no-renames", "--no-ext-diff"]


@dataclasses.dataclass(frozen=True)
class DiffStats:
    lines_added: int = 0
    lines_removed: int = 0
    files_changed: int = 0


def diff_tree_args(commit: str, parent: str | None) -> list[str]:
    if parent is None:
        # --root diffs a parentless commit against the empty tree.
        return ["diff-tree", *DIFF_OPTIONS, "--root", "--no-commit-id", commit]
    return ["diff-tree", *DIFF_OPTIONS, parent, commit]


def count_patch_lines(lines: Iterable[str]) -> DiffStats:
    """
    Tally a zero-context patch. Each `diff --git` header is one changed file;
    inside hunks, `+` lines are additions and `-` lines are removals. Headers,
    `\\ No newline` markers and binary notices outside hunks are ignored.
    """
    files_changed = 0
    lines_added = 0
    lines_removed = 0
    in_hunk = False
    for line in lines:
        if line.startswith("diff --git "):
            files_changed += 1
            in_hunk = False
            continue
        if line.startswith("@@"):
            in_hunk = True
            continue
        if not in_hunk:
            continue
        if line.startswith("+"):
            lines_added += 1
        elif line.startswith("-"):
            lines_removed += 1
    return DiffStats(lines_added=lines_added, lines_removed=lines_removed, files_changed=files_changed)


def diff_commit(repo: Path, commit: str, parent: str | None) -> DiffStats:
    try:
        return count_patch_lines(stream_git(diff_tree_args(commit, parent), cwd=repo))
    except GitCommandError as e:
        against = parent if parent is not None else "empty tree"
        raise DiffComputationError(f"failed to diff {commit} against {against}: {e}") from e
