import os
import subprocess
from typing import List
from reposync.config.schemas import GIT_METADATA_DIR
from reposync.core.errors import GitCommandError, GitConfigError, RemoteNotFoundError
from reposync.utils.command_executor import CommandExecutor
from reposync.utils.custom_logger import Logger

STATUS_ARGS = ["--porcelain=v2", "--branch"]

def has_git_metadata(directory: str) -> bool:
    """True when ``directory/.git`` exists, whatever its type.

    Raises OSError for anything other than a missing path (e.g. permission denied).
    """
    try:
        os.stat(os.path.join(directory, GIT_METADATA_DIR))
    except FileNotFoundError:
        return False
    except NotADirectoryError:
        return False
    return True

class GitOperator:
    def __init__(self, command_executor: CommandExecutor):
        self.logger = Logger(name=self.__class__.__name__)
        if not command_executor:
            raise ValueError("CommandExecutor instance is required")
        self.command_executor = command_executor

    def _execute_git(self, repository_path, command: str, args: List[str]) -> subprocess.CompletedProcess:
        params = {
            "command": command,
            "args": args,
            "cwd": repository_path
        }
        return self.command_executor.execute_git_command(params)

    def has_metadata(self, repository_path: str) -> bool:
        return has_git_metadata(repository_path)

    def get_remote_url(self, git_dir: str, remote_name: str = "origin") -> str:
        """Return the URL of ``remote_name`` from the config inside a .git directory.

        git reads the file itself, so anything git accepts is understood here too.
        Exit status 1 means the key is absent; any other failure means the config
        could not be read.
        """
        config_path = os.path.join(git_dir, "config")
        if not os.path.isfile(config_path):
            raise GitConfigError(f"Cannot read {config_path}: no such file")
        try:
            result = self._execute_git(None, "config", ["--file", config_path, "--get", f"remote.{remote_name}.url"])
        except GitCommandError as e:
            if e.returncode == 1:
                raise RemoteNotFoundError(git_dir, remote_name, key="url") from e
            raise GitConfigError(f"Cannot read {config_path}: {e.stderr.strip() or e}") from e
        url = result.stdout.strip()
        if not url:
            raise RemoteNotFoundError(git_dir, remote_name, key="url")
        return url

    def clone(self, remote: str, repository_path: str) -> str:
        result = self._execute_git(None, "clone", ["--", remote, repository_path])
        return result.stderr or ""

    def fetch(self, repository_path: str) -> str:
        result = self._execute_git(repository_path, "fetch", [])
        return result.stderr or ""

    def status(self, repository_path: str) -> str:
        result = self._execute_git(repository_path, "status", list(STATUS_ARGS))
        return result.stdout or ""

    def pull(self, repository_path: str) -> str:
        result = self._execute_git(repository_path, "pull", ["--ff-only"])
        return result.stderr or ""
