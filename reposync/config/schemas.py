import os
from dataclasses import dataclass, field
from typing import List

DEFAULT_ROOT_DIR = "/Volumes/Code/src"
MANIFEST_FILENAME = "repositories.txt"
GIT_METADATA_DIR = ".git"


@dataclass(frozen=True)
class RepositoryEntry:
    directory: str
    remote: str

    def to_dict(self):
        return {"directory": self.directory, "remote": self.remote}


@dataclass
class Manifest:
    repos: List[RepositoryEntry] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.repos)


@dataclass(frozen=True)
class RuntimeOptions:
    """Options for a single run. Built once by the CLI and passed down."""

    root_dir: str = DEFAULT_ROOT_DIR
    update: bool = True
    upgrade: bool = True
    default_branch: str = "master"
    remote_name: str = "origin"
    strict_discovery: bool = True
    manifest_name: str = MANIFEST_FILENAME

    @property
    def manifest_path(self) -> str:
        return os.path.join(self.root_dir, self.manifest_name)
