from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


class GitError(RuntimeError):
    pass


@dataclass(slots=True)
class GitResult:
    returncode: int
    stdout: str
    stderr: str


def run_git(args: list[str], cwd: Path | None = None) -> str:
    result = run_git_manual(args, cwd=cwd)
    if result.returncode != 0:
        msg = result.stderr.strip() or result.stdout.strip() or "unknown git error"
        raise GitError(f"git {' '.join(args)} failed: {msg}")
    return result.stdout.strip()


def run_git_manual(args: list[str], cwd: Path | None = None) -> GitResult:
    cmd = ["git", *args]
    logger.debug("running %s", " ".join(cmd))
    proc = subprocess.run(
        cmd,
        cwd=cwd,
        check=False,
        text=True,
        capture_output=True,
    )
    return GitResult(returncode=proc.returncode, stdout=proc.stdout, stderr=proc.stderr)


def run_git_passthru(args: list[str], cwd: Path | None = None) -> int:
    cmd = ["git", *args]
    logger.debug("running %s (passthru)", " ".join(cmd))
    proc = subprocess.run(cmd, cwd=cwd, check=False)
    return proc.returncode
