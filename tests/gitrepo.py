from __future__ import annotations

import os
import shutil
import subprocess
from pathlib import Path

import pytest

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git executable not available")


class GitRepo:
    def __init__(self, path: Path) -> None:
        self.path = path
        self.path.mkdir(parents=True, exist_ok=True)
        self.git("init", "-q")

    def git(self, *args: str, env: dict[str, str] | None = None) -> str:
        proc = subprocess.run(
            ["git", *args],
            cwd=str(self.path),
            env=env,
            check=True,
            capture_output=True,
            text=True,
        )
        return proc.stdout

    def write(self, name: str, content: str | bytes) -> None:
        p = self.path / name
        p.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            p.write_bytes(content)
        else:
            p.write_text(content, encoding="utf-8")

    def remove(self, name: str) -> None:
        self.git("rm", "-q", name)

    def _env(self, *, author: str, email: str, date: str, committer_date: str | None = None) -> dict[str, str]:
        env = os.environ.copy()
        env["GIT_AUTHOR_NAME"] = author
        env["GIT_AUTHOR_EMAIL"] = email
        env["GIT_AUTHOR_DATE"] = date
        env["GIT_COMMITTER_NAME"] = author
        env["GIT_COMMITTER_EMAIL"] = email
        env["GIT_COMMITTER_DATE"] = committer_date or date
        return env

    def commit(
        self,
        message: str,
        files: dict[str, str | bytes] | None = None,
        *,
        author: str = "Alice",
        email: str = "alice@example.com",
        date: str = "2024-01-01T00:00:00Z",
        committer_date: str | None = None,
    ) -> str:
        for name, content in (files or {}).items():
            self.write(name, content)
        self.git("add", "-A")
        self.git("commit", "-q", "--allow-empty", "-m", message, env=self._env(author=author, email=email, date=date, committer_date=committer_date))
        return self.head()

    def merge(
        self,
        branch: str,
        message: str,
        *,
        author: str = "Alice",
        email: str = "alice@example.com",
        date: str = "2024-01-01T00:00:00Z",
    ) -> str:
        self.git("merge", "-q", "--no-ff", "-m", message, branch, env=self._env(author=author, email=email, date=date))
        return self.head()

    def head(self) -> str:
        return self.git("rev-parse", "HEAD").strip()


def lines(n: int, prefix: str = "line") -> str:
    return "".join(f"{prefix} {i}\n" for i in range(1, n + 1))
