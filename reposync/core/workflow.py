from typing import Optional

from reposync.config.schemas import Manifest, RuntimeOptions
from reposync.core.discovery import RepoDiscovery
from reposync.core.manifest_store import load_manifest, save_manifest
from reposync.core.reconciler import RepoReconciler, RunSummary
from reposync.utils.custom_logger import Logger
from reposync.utils.git_utils import GitOperator


class RepoSyncWorkflow:
    """Load the manifest, refresh it from disk, reconcile repositories, write it back.

    ``options.update`` controls the refresh and the write-back, ``options.upgrade``
    the reconciliation. Manifest and discovery errors propagate to the caller;
    per-repository failures are reported in the returned summary.
    """

    def __init__(
        self,
        options: RuntimeOptions,
        git_operator: GitOperator,
        logger: Optional[Logger] = None,
    ) -> None:
        self.options: RuntimeOptions = options
        self.git_operator: GitOperator = git_operator
        self.logger: Logger = logger or Logger("workflow")
        self.discovery = RepoDiscovery(options, git_operator)
        self.reconciler = RepoReconciler(git_operator, options)
        self.manifest: Manifest = Manifest()

    def run(self) -> Optional[RunSummary]:
        manifest_path = self.options.manifest_path
        self.manifest = load_manifest(manifest_path)
        self.logger.debug(f"Manifest {manifest_path} lists {len(self.manifest)} repositories")

        if self.options.update:
            self.manifest = self.discovery.update_manifest(self.manifest)

        summary: Optional[RunSummary] = None
        if self.options.upgrade:
            summary = self.reconciler.reconcile(self.manifest)

        if self.options.update:
            save_manifest(manifest_path, self.manifest)
        return summary
