from __future__ import annotations

import json
from pathlib import Path

from .analysis_aggregate import contributor_emails
from .analysis_periods import format_utc
from .models import RepositoryStats


def ensure_dir(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def write_json(path: Path, data: object) -> None:
    path.write_text(json.dumps(data, indent=2, sort_keys=False), encoding="utf-8")


def stats_to_dict(stats: RepositoryStats) -> dict[str, object]:
    emails = contributor_emails(stats)
    return {
        "repo_path": stats.repo_path,
        "total_commits": stats.total_commits,
        "total_lines_added": stats.total_lines_added,
        "total_lines_removed": stats.total_lines_removed,
        "first_commit_date": format_utc(stats.first_commit_date),
        "last_commit_date": format_utc(stats.last_commit_date),
        "contributors": {
            name: {
                "email": emails.get(name, ""),
                "commits": c.commits,
                "lines_added": c.lines_added,
                "lines_removed": c.lines_removed,
                "first_commit": format_utc(c.first_commit),
                "last_commit": format_utc(c.last_commit),
            }
            for name, c in stats.contributors.items()
        },
        "commits": [
            {
                "hash": c.hash,
                "author": c.author,
                "email": c.email,
                "date": format_utc(c.date),
                "message": c.message,
                "lines_added": c.lines_added,
                "lines_removed": c.lines_removed,
                "files_changed": c.files_changed,
            }
            for c in stats.commits
        ],
    }


def write_stats_json(path: Path, stats: RepositoryStats) -> None:
    ensure_dir(path.parent)
    write_json(path, stats_to_dict(stats))
