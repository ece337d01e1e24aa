from typing import List, Optional, Union


class ReposyncError(Exception):
    """Base class for errors that abort a reposync run."""


class ConfigError(ReposyncError):
    pass


class ManifestNotFoundError(ReposyncError, FileNotFoundError):
    pass


class ManifestParseError(ReposyncError):
    pass


class ManifestIOError(ReposyncError, OSError):
    pass


class DiscoveryError(ReposyncError):
    """The directory walk itself failed (missing root, unreadable subdirectory)."""


class GitConfigError(ReposyncError):
    """A repository's .git/config could not be read or parsed."""


class RemoteNotFoundError(ReposyncError):
    def __init__(self, git_dir: str, remote_name: str = "origin", key: Optional[str] = None):
        self.git_dir = git_dir
        self.remote_name = remote_name
        self.key = key
        if key:
            message = f"can't find \"{remote_name}.{key}\" in {git_dir}"
        else:
            message = f"can't find \"{remote_name}\" in {git_dir}"
        super().__init__(message)


class GitCommandError(ReposyncError):
    """A git invocation exited non-zero. Carries the captured output."""

    def __init__(
        self,
        cmd: Union[List[str], str],
        returncode: int,
        stdout: Optional[str] = None,
        stderr: Optional[str] = None,
    ):
        self.cmd = cmd
        self.returncode = returncode
        self.stdout = stdout or ""
        self.stderr = stderr or ""
        command = " ".join(cmd) if isinstance(cmd, list) else cmd
        super().__init__(f"'{command}' exited with status {returncode}")
