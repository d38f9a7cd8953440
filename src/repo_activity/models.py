from __future__ import annotations

import dataclasses
import datetime as dt


@dataclasses.dataclass(frozen=True)
class CommitRecord:
    hash: str
    author: str
    email: str
    date: dt.datetime  # UTC
    message: str = ""
    lines_added: int = 0
    lines_removed: int = 0
    files_changed: int = 0

    @property
    def changed(self) -> int:
        return self.lines_added + self.lines_removed


@dataclasses.dataclass
class ContributorRollup:
    first_commit: dt.datetime
    last_commit: dt.datetime
    commits: int = 0
    lines_added: int = 0
    lines_removed: int = 0

    @property
    def changed(self) -> int:
        return self.lines_added + self.lines_removed


@dataclasses.dataclass
class RepositoryStats:
    repo_path: str
    total_commits: int = 0
    total_lines_added: int = 0
    total_lines_removed: int = 0
    first_commit_date: dt.datetime | None = None  # unset until the first commit is folded
    last_commit_date: dt.datetime | None = None
    contributors: dict[str, ContributorRollup] = dataclasses.field(default_factory=dict)  # author name -> rollup
    commits: list[CommitRecord] = dataclasses.field(default_factory=list)  # walk order

    @property
    def total_changed(self) -> int:
        return self.total_lines_added + self.total_lines_removed

    def add_commit(self, commit: CommitRecord) -> None:
        self.total_commits += 1
        self.total_lines_added += commit.lines_added
        self.total_lines_removed += commit.lines_removed

        if self.first_commit_date is None or commit.date < self.first_commit_date:
            self.first_commit_date = commit.date
        if self.last_commit_date is None or commit.date > self.last_commit_date:
            self.last_commit_date = commit.date

        contributor = self.contributors.get(commit.author)
        if contributor is None:
            contributor = ContributorRollup(first_commit=commit.date, last_commit=commit.date)
            self.contributors[commit.author] = contributor
        contributor.commits += 1
        contributor.lines_added += commit.lines_added
        contributor.lines_removed += commit.lines_removed
        if commit.date < contributor.first_commit:
            contributor.first_commit = commit.date
        if commit.date > contributor.last_commit:
            contributor.last_commit = commit.date

        self.commits.append(commit)
