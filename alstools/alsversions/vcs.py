"""
Git access for a project folder.

Commands that change the repository run with git's own output going
straight to the terminal. Queries capture stdout and parse it.
"""

import subprocess
from pathlib import Path
from typing import Mapping, Optional, Protocol, Sequence

from alstools.alsversions.log import logger


class GitCommandError(Exception):
    """A git command exited with a non-zero status."""

    def __init__(self, args: Sequence[str], returncode: int, stderr: str = ""):
        self.command = tuple(args)
        self.returncode = returncode
        self.stderr = stderr
        detail = f": {stderr.strip()}" if stderr and stderr.strip() else ""
        super().__init__(
            f"'{' '.join(self.command)}' exited with status {returncode}{detail}"
        )


class VersionControlClient(Protocol):
    """The git operations a project workflow relies on."""

    def init(self, initial_branch: str) -> None: ...

    def deleted_files(self) -> list[str]: ...

    def short_status(self) -> list[str]: ...

    def has_staged_changes(self) -> bool: ...

    def add_all(self) -> None: ...

    def remove(self, paths: Sequence[str]) -> None: ...

    def commit(self, message: str) -> None: ...

    def current_branch(self) -> str: ...

    def checkout(self, branch: str) -> None: ...

    def merge(self, branch: str) -> None: ...


def parse_current_branch(branch_listing: str) -> str:
    """Pick the starred entry out of `git branch` output."""
    for line in branch_listing.splitlines():
        if line.startswith("*"):
            return line[1:].strip()
    return ""


def porcelain_has_staged(porcelain: str) -> bool:
    """True if any `git status --porcelain` entry has an index change."""
    for line in porcelain.splitlines():
        if len(line) >= 2 and line[0] not in (" ", "?", "!"):
            return True
    return False


class GitClient:
    """
    Runs the git executable inside a project directory.

    Args:
        repo_path: Working directory for every command
        executable: git binary to invoke
        env: Environment for the child processes (None inherits ours)
    """

    def __init__(
        self,
        repo_path: Path,
        executable: str = "git",
        env: Optional[Mapping[str, str]] = None,
    ):
        self.repo_path = Path(repo_path)
        self.executable = executable
        self.env = dict(env) if env is not None else None

    def _run(self, *args: str) -> None:
        command = [self.executable, *args]
        logger.debug(f"Running: {' '.join(command)}")
        completed = subprocess.run(command, cwd=self.repo_path, env=self.env)
        if completed.returncode != 0:
            raise GitCommandError(command, completed.returncode)

    def _query(self, *args: str) -> str:
        command = [self.executable, *args]
        logger.debug(f"Running: {' '.join(command)}")
        completed = subprocess.run(
            command,
            cwd=self.repo_path,
            env=self.env,
            capture_output=True,
            text=True,
        )
        if completed.returncode != 0:
            raise GitCommandError(command, completed.returncode, completed.stderr)
        return completed.stdout

    def init(self, initial_branch: str) -> None:
        self._run("init")
        self._run("symbolic-ref", "HEAD", f"refs/heads/{initial_branch}")

    def deleted_files(self) -> list[str]:
        listing = self._query("ls-files", "-z", "--deleted")
        return [name for name in listing.split("\0") if name]

    def short_status(self) -> list[str]:
        return [line for line in self._query("status", "--short").splitlines() if line]

    def has_staged_changes(self) -> bool:
        return porcelain_has_staged(self._query("status", "--porcelain"))

    def add_all(self) -> None:
        # deletions are staged only through remove()
        self._run("add", "--ignore-removal", ".")

    def remove(self, paths: Sequence[str]) -> None:
        self._run("rm", "--", *paths)

    def commit(self, message: str) -> None:
        self._run("commit", "-m", message)

    def current_branch(self) -> str:
        return parse_current_branch(self._query("branch", "--no-color"))

    def checkout(self, branch: str) -> None:
        self._run("checkout", branch)

    def merge(self, branch: str) -> None:
        self._run("merge", branch)
