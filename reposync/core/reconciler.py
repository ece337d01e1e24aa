import time
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from reposync.config.schemas import Manifest, RepositoryEntry, RuntimeOptions
from reposync.core.errors import GitCommandError
from reposync.core.status_gate import can_fast_forward
from reposync.utils.custom_logger import Logger
from reposync.utils.git_utils import GitOperator

logger = Logger("reconciler")


class CloneOutcome(Enum):
    CLONED = "cloned"
    ALREADY_EXISTS = "already_exists"
    FAILED = "failed"


class FetchOutcome(Enum):
    FETCHED = "fetched"
    FAILED = "failed"


class PullOutcome(Enum):
    PULLED = "pulled"
    SKIPPED_UNSAFE = "skipped_unsafe"
    FAILED = "failed"


class RepoOutcome(Enum):
    SUCCESS = "success"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class StepResult:
    outcome: Enum
    error: Optional[Exception] = None

    @property
    def output(self) -> str:
        if isinstance(self.error, GitCommandError):
            return self.error.stderr.strip()
        return ""


@dataclass
class ReconcileResult:
    entry: RepositoryEntry
    outcome: RepoOutcome
    step: Optional[str] = None
    error: Optional[Exception] = None


@dataclass
class RunSummary:
    results: List[ReconcileResult] = field(default_factory=list)
    elapsed: float = 0.0

    def count(self, outcome: RepoOutcome) -> int:
        return sum(1 for result in self.results if result.outcome is outcome)

    @property
    def succeeded(self) -> int:
        return self.count(RepoOutcome.SUCCESS)

    @property
    def skipped(self) -> int:
        return self.count(RepoOutcome.SKIPPED)

    @property
    def failed(self) -> int:
        return self.count(RepoOutcome.FAILED)


class RepoReconciler:
    """Clone, fetch and fast-forward every repository of a manifest, one at a time.

    A failure only ends processing of the repository it happened in. Repositories
    whose status does not allow a fast-forward are skipped with a warning.
    """

    def __init__(self, git_operator: GitOperator, options: RuntimeOptions):
        self.git_operator = git_operator
        self.options = options

    def clone(self, repo: RepositoryEntry) -> StepResult:
        try:
            if self.git_operator.has_metadata(repo.directory):
                return StepResult(CloneOutcome.ALREADY_EXISTS)
            self.git_operator.clone(repo.remote, repo.directory)
        except (GitCommandError, OSError) as e:
            return StepResult(CloneOutcome.FAILED, e)
        return StepResult(CloneOutcome.CLONED)

    def fetch(self, repo: RepositoryEntry) -> StepResult:
        try:
            self.git_operator.fetch(repo.directory)
        except (GitCommandError, OSError) as e:
            return StepResult(FetchOutcome.FAILED, e)
        return StepResult(FetchOutcome.FETCHED)

    def pull(self, repo: RepositoryEntry) -> StepResult:
        try:
            status_output = self.git_operator.status(repo.directory)
        except (GitCommandError, OSError) as e:
            return StepResult(PullOutcome.FAILED, e)
        if not can_fast_forward(status_output, self.options.default_branch, self.options.remote_name):
            logger.debug(f"Status of {repo.directory} does not allow a fast-forward:\n{status_output}")
            return StepResult(PullOutcome.SKIPPED_UNSAFE)
        try:
            self.git_operator.pull(repo.directory)
        except (GitCommandError, OSError) as e:
            return StepResult(PullOutcome.FAILED, e)
        return StepResult(PullOutcome.PULLED)

    def reconcile_repo(self, repo: RepositoryEntry) -> ReconcileResult:
        cloned = self.clone(repo)
        if cloned.outcome is CloneOutcome.FAILED:
            logger.error(f"Clone to {repo.directory} failed: {cloned.error}\n{cloned.output}")
            return ReconcileResult(repo, RepoOutcome.FAILED, "clone", cloned.error)
        if cloned.outcome is CloneOutcome.CLONED:
            logger.info(f"Clone to {repo.directory} finished")

        fetched = self.fetch(repo)
        if fetched.outcome is FetchOutcome.FAILED:
            logger.error(f"Fetch in {repo.directory} failed: {fetched.error}\n{fetched.output}")
            return ReconcileResult(repo, RepoOutcome.FAILED, "fetch", fetched.error)
        logger.info(f"Fetch in {repo.directory} finished")

        pulled = self.pull(repo)
        if pulled.outcome is PullOutcome.SKIPPED_UNSAFE:
            logger.warning(f"Upgrade in {repo.directory} skipped")
            return ReconcileResult(repo, RepoOutcome.SKIPPED, "pull")
        if pulled.outcome is PullOutcome.FAILED:
            logger.error(f"Upgrade in {repo.directory} failed: {pulled.error}\n{pulled.output}")
            return ReconcileResult(repo, RepoOutcome.FAILED, "pull", pulled.error)
        logger.info(f"Upgrade in {repo.directory} finished")
        return ReconcileResult(repo, RepoOutcome.SUCCESS)

    def reconcile(self, manifest: Manifest) -> RunSummary:
        logger.info("Upgrading")
        start = time.monotonic()
        summary = RunSummary()
        for repo in manifest.repos:
            summary.results.append(self.reconcile_repo(repo))
        summary.elapsed = time.monotonic() - start
        logger.info(f"Upgraded. Takes {summary.elapsed:.2f} seconds.")
        logger.info(
            f"{summary.succeeded} succeeded, {summary.skipped} skipped, {summary.failed} failed "
            f"out of {len(summary.results)} repositories"
        )
        return summary
