import os
import time
from typing import Dict, Iterable, Iterator, List

from reposync.config.schemas import GIT_METADATA_DIR, Manifest, RepositoryEntry, RuntimeOptions
from reposync.core.errors import DiscoveryError, GitConfigError, RemoteNotFoundError
from reposync.utils.custom_logger import Logger
from reposync.utils.git_utils import GitOperator

logger = Logger("discovery")


def _raise_walk_error(error: OSError) -> None:
    raise DiscoveryError(f"Cannot walk {error.filename}: {error.strerror or error}") from error


def find_repositories(root_dir: str) -> Iterator[str]:
    """Yield every directory under ``root_dir`` that holds a .git directory.

    The walk never enters a .git directory but keeps going through the rest of
    the repository, so nested repositories are found too.
    """
    root = os.path.normpath(root_dir)
    if os.path.basename(root) == GIT_METADATA_DIR and os.path.isdir(root):
        yield os.path.dirname(root)
        return
    for dirpath, dirnames, _ in os.walk(root, topdown=True, onerror=_raise_walk_error):
        dirnames.sort()
        if GIT_METADATA_DIR in dirnames:
            dirnames.remove(GIT_METADATA_DIR)
            if not os.path.islink(os.path.join(dirpath, GIT_METADATA_DIR)):
                yield dirpath


def merge_entries(*sources: Iterable[RepositoryEntry]) -> List[RepositoryEntry]:
    """Merge entry lists keyed by directory. Later sources win; result is sorted by directory."""
    repo_dict: Dict[str, str] = {}
    for source in sources:
        for repo in source:
            repo_dict[repo.directory] = repo.remote
    return [RepositoryEntry(directory, repo_dict[directory]) for directory in sorted(repo_dict)]


class RepoDiscovery:

    def __init__(self, options: RuntimeOptions, git_operator: GitOperator):
        self.options = options
        self.git_operator = git_operator

    def discover(self) -> List[RepositoryEntry]:
        discovered: List[RepositoryEntry] = []
        for directory in find_repositories(self.options.root_dir):
            git_dir = os.path.join(directory, GIT_METADATA_DIR)
            try:
                remote = self.git_operator.get_remote_url(git_dir, self.options.remote_name)
            except (RemoteNotFoundError, GitConfigError) as e:
                if self.options.strict_discovery:
                    raise
                logger.warning(f"Skipping {directory}: {e}")
                continue
            logger.debug(f"Found repository {directory} -> {remote}")
            discovered.append(RepositoryEntry(directory=directory, remote=remote))
        return discovered

    def update_manifest(self, manifest: Manifest) -> Manifest:
        """Return a new manifest holding ``manifest``'s entries merged with what is on disk."""
        logger.info("Updating...")
        start = time.monotonic()
        discovered = self.discover()
        merged = Manifest(repos=merge_entries(manifest.repos, discovered))
        logger.info(f"Updated {len(merged)} repositories. Takes {time.monotonic() - start:.2f} seconds.")
        return merged
