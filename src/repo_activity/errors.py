from __future__ import annotations


class RepoActivityError(RuntimeError):
    stage = "analysis"


class RepositoryOpenError(RepoActivityError):
    stage = "open"


class TraversalError(RepoActivityError):
    stage = "traversal"


class CommitResolutionError(RepoActivityError):
    stage = "commit"


class DiffComputationError(RepoActivityError):
    stage = "diff"


class DateParseError(RepoActivityError, ValueError):
    stage = "date-parse"


class PersistenceError(RepoActivityError):
    stage = "database"


class GitCommandError(RepoActivityError):
    stage = "git"

    def __init__(self, args: list[str], code: int, stderr: str) -> None:
        self.git_args = list(args)
        self.code = code
        self.stderr = stderr
        detail = stderr.strip()[:500]
        super().__init__(f"git {' '.join(args)} exited {code}" + (f": {detail}" if detail else ""))
