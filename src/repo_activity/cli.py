from __future__ import annotations

import argparse
import sys
from pathlib import Path

from . import analysis_cli
from .analysis_render import print_summary
from .config import load_config, settings_from_config
from .db import connect, get_repository_stats
from .errors import RepoActivityError


def show_saved(*, db_path: Path, repo_id: int, top_n: int) -> int:
    if not db_path.exists():
        print(f"error: database: no such database: {db_path}", file=sys.stderr)
        return 2
    conn = connect(db_path)
    try:
        stats = get_repository_stats(conn, repo_id)
    except RepoActivityError as e:
        print(f"error: {e.stage}: {e}", file=sys.stderr)
        return 2
    finally:
        conn.close()
    print_summary(stats, top_n=top_n)
    return 0


def main(argv: list[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]

    if not argv or argv[0] in ("-h", "--help"):
        p = analysis_cli._build_parser()
        p.prog = "repo-activity"
        p.print_help()
        print("")
        print("commands:")
        print("  show           Print the summary of a previously saved analysis.")
        print("")
        print("Run `repo-activity <command> --help` for command-specific options.")
        return 0
    if argv[0] == "show":
        p = argparse.ArgumentParser(prog="repo-activity show", description="Print the summary of a previously saved analysis.")
        p.add_argument("--id", type=int, required=True, help="Repository id printed when the analysis was saved.")
        p.add_argument("--config", type=Path, default=Path("config.json"), help="Path to config.json.")
        p.add_argument("--db", type=Path, default=None, help="SQLite database file (overrides `database_path`).")
        p.add_argument("--top", type=int, default=None, help="Contributors to list (overrides `top_contributors`).")
        args = p.parse_args(argv[1:])
        try:
            settings = settings_from_config(load_config(args.config))
        except (ValueError, OSError) as e:
            print(f"error: config: {e}", file=sys.stderr)
            return 2
        return show_saved(
            db_path=args.db if args.db is not None else settings.database_path,
            repo_id=int(args.id),
            top_n=max(0, args.top) if args.top is not None else settings.top_contributors,
        )
    return analysis_cli.main(argv)


if __name__ == "__main__":
    raise SystemExit(main())
