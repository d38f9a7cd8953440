from __future__ import annotations

import subprocess
import threading
from pathlib import Path
from typing import Iterator

from .errors import GitCommandError, RepositoryOpenError


def run_git(args: list[str], cwd: Path, timeout_s: int = 300) -> tuple[int, str, str]:
    proc = subprocess.run(
        ["git", *args],
        cwd=str(cwd),
        capture_output=True,
        text=True,
        encoding="utf-8",
        errors="replace",
        timeout=timeout_s,
    )
    return proc.returncode, proc.stdout, proc.stderr


def stream_git(args: list[str], cwd: Path, max_stderr_bytes: int = 50_000) -> Iterator[str]:
    """
    Yield stdout lines of a git command (without the trailing newline) as they
    are produced. Raises GitCommandError once the output is exhausted if git
    exited non-zero. Closing the generator early kills the process.
    """
    try:
        proc = subprocess.Popen(
            ["git", *args],
            cwd=str(cwd),
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
        )
    except OSError as e:
        raise GitCommandError(args, -1, f"failed to start git: {e}") from e

    stderr_chunks: list[bytes] = []
    stderr_bytes = 0

    def drain_stderr() -> None:
        nonlocal stderr_bytes
        if proc.stderr is None:
            return
        while True:
            chunk = proc.stderr.read(8192)
            if not chunk:
                return
            if stderr_bytes >= max_stderr_bytes:
                continue
            take = chunk[: max_stderr_bytes - stderr_bytes]
            stderr_chunks.append(take)
            stderr_bytes += len(take)

    stderr_thread = threading.Thread(target=drain_stderr, daemon=True)
    stderr_thread.start()

    finished = False
    try:
        assert proc.stdout is not None
        # Split on "\n" only; a lone "\r" inside a line stays part of it.
        for raw_line in proc.stdout:
            yield raw_line.rstrip(b"\n").decode("utf-8", errors="replace")
        finished = True
    finally:
        if not finished and proc.poll() is None:
            proc.kill()
        code = proc.wait()
        stderr_thread.join()
        if proc.stdout is not None:
            proc.stdout.close()
        if proc.stderr is not None:
            proc.stderr.close()

    if code != 0:
        raise GitCommandError(args, code, b"".join(stderr_chunks).decode("utf-8", errors="replace"))


def open_repository(path: Path) -> Path:
    """Resolve `path` to an existing git repository (work tree root or git dir)."""
    try:
        candidate = Path(path).resolve()
    except OSError as e:
        raise RepositoryOpenError(f"cannot resolve repository path {path}: {e}") from e
    if not candidate.is_dir():
        raise RepositoryOpenError(f"repository path does not exist or is not a directory: {path}")

    try:
        code, out, err = run_git(["rev-parse", "--absolute-git-dir"], cwd=candidate)
    except OSError as e:
        raise RepositoryOpenError(f"failed to run git in {candidate}: {e}") from e
    if code != 0:
        raise RepositoryOpenError(f"not a git repository: {candidate} ({err.strip()[:200]})")
    git_dir = Path(out.strip()).resolve()
    if git_dir == candidate:
        return candidate

    code, out, _ = run_git(["rev-parse", "--show-toplevel"], cwd=candidate)
    toplevel = Path(out.strip()).resolve() if code == 0 and out.strip() else None
    if toplevel != candidate:
        raise RepositoryOpenError(f"not a git repository root: {candidate} (enclosing repository: {toplevel or git_dir})")
    return candidate
