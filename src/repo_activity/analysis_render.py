from __future__ import annotations

import datetime as dt

from .analysis_aggregate import top_contributors
from .models import RepositoryStats


def fmt_int(n: int) -> str:
    return f"{int(n):,}"


def fmt_date(d: dt.datetime | None) -> str:
    if d is None:
        return "n/a"
    return d.strftime("%Y-%m-%d %H:%M:%S UTC")


def trunc(s: str, max_len: int) -> str:
    if len(s) <= max_len:
        return s
    if max_len <= 1:
        return s[:max_len]
    return s[: max_len - 1] + "…"


def bar(value: int, max_value: int, width: int = 22) -> str:
    if max_value <= 0:
        filled = 0
    else:
        filled = int(round((value / max_value) * width))
    filled = max(0, min(width, filled))
    return "[" + ("#" * filled) + ("-" * (width - filled)) + "]"


def render_summary(stats: RepositoryStats, top_n: int = 5) -> str:
    lines: list[str] = []
    lines.append("")
    lines.append("Repository Analysis Summary:")
    lines.append("---------------------------")
    lines.append(f"Repository:          {stats.repo_path}")
    lines.append(f"Total commits:       {fmt_int(stats.total_commits)}")
    lines.append(f"Total contributors:  {fmt_int(len(stats.contributors))}")
    lines.append(f"Total lines added:   {fmt_int(stats.total_lines_added)}")
    lines.append(f"Total lines removed: {fmt_int(stats.total_lines_removed)}")
    lines.append(f"First commit:        {fmt_date(stats.first_commit_date)}")
    lines.append(f"Last commit:         {fmt_date(stats.last_commit_date)}")
    lines.append("")
    lines.append("Top contributors:")

    top = top_contributors(stats, top_n)
    max_commits = top[0][1].commits if top else 0
    for i, (name, c) in enumerate(top, start=1):
        lines.append(
            f"{i:>2}. {trunc(name, 28):28} {fmt_int(c.commits):>8} commits  "
            f"+{fmt_int(c.lines_added)} -{fmt_int(c.lines_removed)} lines  {bar(c.commits, max_commits)}"
        )
    if not top:
        lines.append("(no commits analyzed)")

    return "\n".join(lines) + "\n"


def print_summary(stats: RepositoryStats, top_n: int = 5) -> None:
    print(render_summary(stats, top_n=top_n), end="")
