from __future__ import annotations

import datetime as dt

from repo_activity.analysis_aggregate import contributor_emails, fold_commits, top_contributors
from repo_activity.models import CommitRecord, RepositoryStats


def _d(day: int, hour: int = 0) -> dt.datetime:
    return dt.datetime(2024, 1, day, hour, tzinfo=dt.timezone.utc)


def _rec(sha: str, author: str, day: int, added: int, removed: int, email: str = "") -> CommitRecord:
    return CommitRecord(
        hash=sha,
        author=author,
        email=email or f"{author.lower()}@example.com",
        date=_d(day),
        message=f"commit {sha}\n",
        lines_added=added,
        lines_removed=removed,
        files_changed=1,
    )


def _scenario() -> list[CommitRecord]:
    return [
        _rec("d", "B", 4, 5, 0),
        _rec("c", "A", 3, 4, 0),
        _rec("b", "A", 2, 0, 2),
        _rec("a", "A", 1, 6, 0),
    ]


def test_empty_stats_have_unset_dates() -> None:
    stats = RepositoryStats(repo_path="/tmp/repo")
    assert stats.total_commits == 0
    assert stats.contributors == {}
    assert stats.commits == []
    assert stats.first_commit_date is None
    assert stats.last_commit_date is None


def test_fold_three_commits_by_a_and_one_by_b() -> None:
    stats = fold_commits(RepositoryStats(repo_path="/tmp/repo"), _scenario())

    assert stats.total_commits == 4
    assert stats.total_lines_added == 15
    assert stats.total_lines_removed == 2
    assert stats.total_changed == 17
    assert len(stats.commits) == stats.total_commits
    assert [c.hash for c in stats.commits] == ["d", "c", "b", "a"]

    a = stats.contributors["A"]
    assert (a.commits, a.lines_added, a.lines_removed) == (3, 10, 2)
    assert a.first_commit == _d(1)
    assert a.last_commit == _d(3)
    b = stats.contributors["B"]
    assert (b.commits, b.lines_added, b.lines_removed) == (1, 5, 0)
    assert b.first_commit == b.last_commit == _d(4)

    assert stats.first_commit_date == _d(1)
    assert stats.last_commit_date == _d(4)


def test_first_record_seeds_dates_even_if_later_than_now() -> None:
    future = dt.datetime(2999, 1, 1, tzinfo=dt.timezone.utc)
    stats = RepositoryStats(repo_path="r")
    stats.add_commit(CommitRecord(hash="x", author="A", email="a@e", date=future))
    assert stats.first_commit_date == future
    assert stats.last_commit_date == future


def test_fold_is_order_independent_for_totals_and_dates() -> None:
    forward = fold_commits(RepositoryStats(repo_path="r"), _scenario())
    backward = fold_commits(RepositoryStats(repo_path="r"), list(reversed(_scenario())))

    assert forward.total_commits == backward.total_commits
    assert forward.total_lines_added == backward.total_lines_added
    assert forward.total_lines_removed == backward.total_lines_removed
    assert forward.first_commit_date == backward.first_commit_date
    assert forward.last_commit_date == backward.last_commit_date
    assert forward.contributors == backward.contributors
    assert [c.hash for c in forward.commits] == list(reversed([c.hash for c in backward.commits]))


def test_identical_timestamps_fold_cleanly() -> None:
    same = _d(5)
    recs = [
        CommitRecord(hash="x", author="A", email="a@e", date=same, lines_added=1),
        CommitRecord(hash="y", author="A", email="a@e", date=same, lines_added=2),
    ]
    for order in (recs, list(reversed(recs))):
        stats = fold_commits(RepositoryStats(repo_path="r"), order)
        assert stats.first_commit_date == stats.last_commit_date == same
        assert stats.contributors["A"].commits == 2
        assert stats.total_lines_added == 3


def test_contributor_commit_counts_match_commit_list() -> None:
    stats = fold_commits(RepositoryStats(repo_path="r"), _scenario())
    for name, c in stats.contributors.items():
        assert c.commits == sum(1 for r in stats.commits if r.author == name)
        assert c.first_commit <= c.last_commit


def test_contributors_keyed_by_name_keep_first_seen_email() -> None:
    recs = [
        _rec("b", "Sam", 2, 1, 0, email="sam@work.example"),
        _rec("a", "Sam", 1, 1, 0, email="sam@home.example"),
    ]
    stats = fold_commits(RepositoryStats(repo_path="r"), recs)
    assert list(stats.contributors) == ["Sam"]
    assert stats.contributors["Sam"].commits == 2
    assert contributor_emails(stats) == {"Sam": "sam@work.example"}


def test_top_contributors_orders_by_commits_then_churn() -> None:
    recs = [
        _rec("a", "Zed", 1, 1, 0),
        _rec("b", "Zed", 2, 1, 0),
        _rec("c", "Amy", 3, 50, 0),
        _rec("d", "Bob", 4, 10, 0),
    ]
    stats = fold_commits(RepositoryStats(repo_path="r"), recs)
    assert [name for name, _ in top_contributors(stats)] == ["Zed", "Amy", "Bob"]
    assert [name for name, _ in top_contributors(stats, 2)] == ["Zed", "Amy"]
    assert top_contributors(stats, 0) == []
