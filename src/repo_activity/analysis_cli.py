from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .analysis_render import print_summary
from .analysis_repo import analyze_repository
from .analysis_write import write_stats_json
from .config import Settings, load_config, settings_from_config
from .db import init_db, save_stats
from .errors import RepoActivityError

PROGRESS_EVERY = 100


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Collect commit, contributor and line churn stats for one git repository.")
    parser.add_argument("-r", "--repo-path", type=Path, required=True, help="Path to the git repository.")
    parser.add_argument("-s", "--start-date", type=str, default=None, help="Start date for analysis (YYYY-MM-DD, inclusive).")
    parser.add_argument("-e", "--end-date", type=str, default=None, help="End date for analysis (YYYY-MM-DD, inclusive).")
    parser.add_argument("--config", type=Path, default=Path("config.json"), help="Path to config.json.")
    parser.add_argument("--db", type=Path, default=None, help="SQLite database file (overrides `database_path`).")
    parser.add_argument("--no-db", action="store_true", help="Do not write results to the database.")
    parser.add_argument("--json", type=Path, default=None, help="Also write the full stats as JSON to this path.")
    parser.add_argument("--top", type=int, default=None, help="Contributors to list in the summary (overrides `top_contributors`).")
    parser.add_argument("--jobs", type=int, default=None, help="Parallel diff jobs (overrides `jobs`; default 1).")
    return parser


def _resolve_settings(args: argparse.Namespace) -> Settings:
    base = settings_from_config(load_config(args.config))
    return Settings(
        database_path=args.db if args.db is not None else base.database_path,
        top_contributors=max(0, args.top) if args.top is not None else base.top_contributors,
        jobs=max(1, args.jobs) if args.jobs is not None else base.jobs,
    )


def _print_progress(count: int) -> None:
    if count % PROGRESS_EVERY == 0:
        print(f"Analyzed {count} commits...")


def main(argv: list[str]) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    try:
        settings = _resolve_settings(args)
    except (ValueError, OSError) as e:
        print(f"error: config: {e}", file=sys.stderr)
        return 2

    try:
        stats = analyze_repository(
            args.repo_path,
            args.start_date,
            args.end_date,
            jobs=settings.jobs,
            on_progress=_print_progress,
        )
        if not args.no_db:
            conn = init_db(settings.database_path)
            try:
                repo_id = save_stats(conn, stats)
            finally:
                conn.close()
            print(f"Saved to {settings.database_path} (repository id {repo_id}).")
    except RepoActivityError as e:
        print(f"error: {e.stage}: {e}", file=sys.stderr)
        return 2

    if args.json is not None:
        try:
            write_stats_json(args.json, stats)
        except OSError as e:
            print(f"error: json: {e}", file=sys.stderr)
            return 2
        print(f"Wrote {args.json}")

    print_summary(stats, top_n=settings.top_contributors)
    return 0
