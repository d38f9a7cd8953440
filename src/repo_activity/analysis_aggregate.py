from __future__ import annotations

from typing import Iterable

from .models import CommitRecord, ContributorRollup, RepositoryStats


def fold_commits(stats: RepositoryStats, commits: Iterable[CommitRecord]) -> RepositoryStats:
    for commit in commits:
        stats.add_commit(commit)
    return stats


def contributor_emails(stats: RepositoryStats) -> dict[str, str]:
    """First-seen email (in commit list order) for every contributor name."""
    emails: dict[str, str] = {}
    for c in stats.commits:
        if c.author not in emails:
            emails[c.author] = c.email
    return emails


def top_contributors(stats: RepositoryStats, n: int | None = None) -> list[tuple[str, ContributorRollup]]:
    items = sorted(stats.contributors.items(), key=lambda kv: (-kv[1].commits, -kv[1].changed, kv[0].lower(), kv[0]))
    if n is None:
        return items
    return items[: max(0, n)]
