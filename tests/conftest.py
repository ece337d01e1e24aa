"""
Shared fixtures for reposync tests.

The reconciler and workflow tests use FakeGitOperator, which records clone,
fetch, status and pull calls and replays scripted results. Discovery tests build
fake repositories on disk (a .git directory holding only a config file) and read
their remotes with `git config`; those tests are marked ``requires_git``.
"""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import Dict, List, Optional, Set, Tuple

import pytest
from loguru import logger

from reposync.core.errors import GitCommandError
from reposync.utils.command_executor import CommandExecutor
from reposync.utils.git_utils import GitOperator

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git executable not available")

UP_TO_DATE_STATUS = (
    "# branch.oid 1111111111111111111111111111111111111111\n"
    "# branch.head master\n"
    "# branch.upstream origin/master\n"
    "# branch.ab +0 -0\n"
)

DIRTY_STATUS = UP_TO_DATE_STATUS + "1 .M N... 100644 100644 100644 aaaa bbbb README.md\n"


def write_git_config(repo_dir: Path, url: Optional[str] = None, remote: str = "origin") -> Path:
    """Create ``repo_dir/.git/config`` with an optional remote section."""
    git_dir = repo_dir / ".git"
    git_dir.mkdir(parents=True, exist_ok=True)
    lines = [
        "[core]",
        "\trepositoryformatversion = 0",
        "\tfilemode = true",
        "\tbare = false",
    ]
    if url is not None:
        lines += [
            f'[remote "{remote}"]',
            f"\turl = {url}",
            f"\tfetch = +refs/heads/*:refs/remotes/{remote}/*",
        ]
    lines += ['[branch "master"]', f"\tremote = {remote}", "\tmerge = refs/heads/master"]
    (git_dir / "config").write_text("\n".join(lines) + "\n")
    return git_dir


class FakeGitOperator:
    """Stands in for GitOperator. Every call is appended to ``calls``."""

    def __init__(
        self,
        existing: Optional[Set[str]] = None,
        statuses: Optional[Dict[str, str]] = None,
        failures: Optional[Dict[Tuple[str, str], str]] = None,
    ):
        self.existing = set(existing or ())
        self.statuses = dict(statuses or {})
        self.failures = dict(failures or {})
        self.calls: List[Tuple[str, str]] = []

    def _maybe_fail(self, op: str, directory: str, command: List[str]) -> None:
        stderr = self.failures.get((op, directory))
        if stderr is not None:
            raise GitCommandError(command, 128, stderr=stderr)

    def get_remote_url(self, git_dir: str, remote_name: str = "origin") -> str:
        # Remote lookup reads real files, so it goes through real git.
        return GitOperator(CommandExecutor()).get_remote_url(git_dir, remote_name)

    def has_metadata(self, directory: str) -> bool:
        return directory in self.existing

    def clone(self, remote: str, directory: str) -> str:
        self.calls.append(("clone", directory))
        self._maybe_fail("clone", directory, ["git", "clone", remote, directory])
        self.existing.add(directory)
        return ""

    def fetch(self, directory: str) -> str:
        self.calls.append(("fetch", directory))
        self._maybe_fail("fetch", directory, ["git", "fetch"])
        return ""

    def status(self, directory: str) -> str:
        self.calls.append(("status", directory))
        self._maybe_fail("status", directory, ["git", "status"])
        return self.statuses.get(directory, UP_TO_DATE_STATUS)

    def pull(self, directory: str) -> str:
        self.calls.append(("pull", directory))
        self._maybe_fail("pull", directory, ["git", "pull", "--ff-only"])
        return ""

    def ops_for(self, directory: str) -> List[str]:
        return [op for op, d in self.calls if d == directory]


@pytest.fixture
def log_records():
    """Collect (level, message) pairs emitted through loguru during the test."""
    records: List[Tuple[str, str]] = []
    handler_id = logger.add(
        lambda message: records.append((message.record["level"].name, message.record["message"])),
        level="DEBUG",
    )
    yield records
    logger.remove(handler_id)


@pytest.fixture
def git_operator():
    return GitOperator(CommandExecutor())


@pytest.fixture
def fake_git():
    return FakeGitOperator()
