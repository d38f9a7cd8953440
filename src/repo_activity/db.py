from __future__ import annotations

import datetime as dt
import sqlite3
from pathlib import Path

from .analysis_aggregate import contributor_emails
from .analysis_periods import format_utc
from .errors import PersistenceError
from .models import CommitRecord, ContributorRollup, RepositoryStats

DEFAULT_DB_PATH = Path("repo_activity.db")

SCHEMA = """
CREATE TABLE IF NOT EXISTS repositories (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    path TEXT NOT NULL,
    total_commits INTEGER NOT NULL,
    total_lines_added INTEGER NOT NULL,
    total_lines_removed INTEGER NOT NULL,
    first_commit_date TEXT,
    last_commit_date TEXT,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);

CREATE TABLE IF NOT EXISTS contributors (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    repository_id INTEGER NOT NULL,
    name TEXT NOT NULL,
    email TEXT,
    commits INTEGER NOT NULL,
    lines_added INTEGER NOT NULL,
    lines_removed INTEGER NOT NULL,
    first_commit_date TEXT NOT NULL,
    last_commit_date TEXT NOT NULL,
    FOREIGN KEY (repository_id) REFERENCES repositories(id)
);

CREATE TABLE IF NOT EXISTS commits (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    repository_id INTEGER NOT NULL,
    hash TEXT NOT NULL,
    author TEXT NOT NULL,
    email TEXT,
    date TEXT NOT NULL,
    message TEXT,
    lines_added INTEGER NOT NULL,
    lines_removed INTEGER NOT NULL,
    files_changed INTEGER NOT NULL,
    FOREIGN KEY (repository_id) REFERENCES repositories(id)
);
"""


def connect(db_path: Path | str) -> sqlite3.Connection:
    conn = sqlite3.connect(str(db_path), timeout=5.0)
    conn.row_factory = sqlite3.Row
    return conn


def init_db(db_path: Path | str = DEFAULT_DB_PATH) -> sqlite3.Connection:
    try:
        if str(db_path) != ":memory:":
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        conn = connect(db_path)
        conn.execute("PRAGMA foreign_keys = ON")
        conn.executescript(SCHEMA)
    except (sqlite3.Error, OSError) as e:
        raise PersistenceError(f"failed to initialize database {db_path}: {e}") from e
    return conn


def save_stats(conn: sqlite3.Connection, stats: RepositoryStats) -> int:
    """Insert the repository, its contributors and its commits in one transaction; returns the repository id."""
    emails = contributor_emails(stats)
    try:
        with conn:
            cur = conn.execute(
                "INSERT INTO repositories "
                "(path, total_commits, total_lines_added, total_lines_removed, first_commit_date, last_commit_date) "
                "VALUES (?, ?, ?, ?, ?, ?)",
                (
                    stats.repo_path,
                    stats.total_commits,
                    stats.total_lines_added,
                    stats.total_lines_removed,
                    format_utc(stats.first_commit_date),
                    format_utc(stats.last_commit_date),
                ),
            )
            repo_id = int(cur.lastrowid)

            conn.executemany(
                "INSERT INTO contributors "
                "(repository_id, name, email, commits, lines_added, lines_removed, first_commit_date, last_commit_date) "
                "VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
                [
                    (
                        repo_id,
                        name,
                        emails.get(name, ""),
                        c.commits,
                        c.lines_added,
                        c.lines_removed,
                        format_utc(c.first_commit),
                        format_utc(c.last_commit),
                    )
                    for name, c in stats.contributors.items()
                ],
            )

            conn.executemany(
                "INSERT INTO commits "
                "(repository_id, hash, author, email, date, message, lines_added, lines_removed, files_changed) "
                "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)",
                [
                    (
                        repo_id,
                        c.hash,
                        c.author,
                        c.email,
                        format_utc(c.date),
                        c.message,
                        c.lines_added,
                        c.lines_removed,
                        c.files_changed,
                    )
                    for c in stats.commits
                ],
            )
    except sqlite3.Error as e:
        raise PersistenceError(f"failed to save stats for {stats.repo_path}: {e}") from e
    return repo_id


def _parse_date(value: str | None, what: str) -> dt.datetime | None:
    if value is None:
        return None
    try:
        d = dt.datetime.fromisoformat(value)
    except ValueError as e:
        raise PersistenceError(f"failed to parse {what}: {value!r}") from e
    if d.tzinfo is None:
        d = d.replace(tzinfo=dt.timezone.utc)
    return d.astimezone(dt.timezone.utc)


def get_repository_stats(conn: sqlite3.Connection, repo_id: int) -> RepositoryStats:
    try:
        row = conn.execute(
            "SELECT id, path, total_commits, total_lines_added, total_lines_removed, first_commit_date, last_commit_date "
            "FROM repositories WHERE id = ?",
            (repo_id,),
        ).fetchone()
        if row is None:
            raise PersistenceError(f"repository {repo_id} not found")

        stats = RepositoryStats(
            repo_path=row["path"],
            total_commits=int(row["total_commits"]),
            total_lines_added=int(row["total_lines_added"]),
            total_lines_removed=int(row["total_lines_removed"]),
            first_commit_date=_parse_date(row["first_commit_date"], "first commit date"),
            last_commit_date=_parse_date(row["last_commit_date"], "last commit date"),
        )

        for r in conn.execute(
            "SELECT name, email, commits, lines_added, lines_removed, first_commit_date, last_commit_date "
            "FROM contributors WHERE repository_id = ? ORDER BY id",
            (repo_id,),
        ):
            first = _parse_date(r["first_commit_date"], "contributor first commit date")
            last = _parse_date(r["last_commit_date"], "contributor last commit date")
            assert first is not None and last is not None
            stats.contributors[r["name"]] = ContributorRollup(
                first_commit=first,
                last_commit=last,
                commits=int(r["commits"]),
                lines_added=int(r["lines_added"]),
                lines_removed=int(r["lines_removed"]),
            )

        for r in conn.execute(
            "SELECT hash, author, email, date, message, lines_added, lines_removed, files_changed "
            "FROM commits WHERE repository_id = ? ORDER BY id",
            (repo_id,),
        ):
            date = _parse_date(r["date"], "commit date")
            assert date is not None
            stats.commits.append(
                CommitRecord(
                    hash=r["hash"],
                    author=r["author"],
                    email=r["email"] or "",
                    date=date,
                    message=r["message"] or "",
                    lines_added=int(r["lines_added"]),
                    lines_removed=int(r["lines_removed"]),
                    files_changed=int(r["files_changed"]),
                )
            )
    except sqlite3.Error as e:
        raise PersistenceError(f"failed to load repository {repo_id}: {e}") from e
    return stats
