import subprocess
import os
import shlex
import pathlib
from reposync.core.errors import GitCommandError
from reposync.utils.custom_logger import Logger
from typing import Dict, List, Optional, Union

class CommandExecutor:
    def __init__(self, git_binary: str = "git") -> None:
        self.logger: Logger = Logger(name="CommandExecutor")
        self.git_binary = git_binary

    def _run_subprocess(
        self,
        command: List[str],
        cwd: Optional[Union[str, pathlib.Path]] = None,
        check: bool = True,
        env: Optional[Dict[str, str]] = None,
    ) -> subprocess.CompletedProcess:

        effective_env = os.environ.copy()
        if env:
            effective_env.update(env)

        cwd_path: Optional[pathlib.Path] = None
        if cwd:
            cwd_path = pathlib.Path(cwd).expanduser()
            if not cwd_path.is_dir():
                self.logger.error(f"Working directory does not exist: {cwd_path}")
                raise FileNotFoundError(f"Working directory not found: {cwd_path}")

        command_str_for_log = shlex.join(command)
        self.logger.debug(f"Executing: '{command_str_for_log}' in '{cwd_path or pathlib.Path.cwd()}'")

        try:
            # No timeout: a hung git process hangs the run.
            result = subprocess.run(
                command,
                capture_output=True,
                text=True,
                cwd=str(cwd_path) if cwd_path else None,
                env=effective_env,
                check=False,
            )
        except FileNotFoundError:
            self.logger.error(f"Executable not found for command: {command_str_for_log}")
            raise

        if result.returncode != 0:
            stderr_output = result.stderr.strip() if result.stderr else "No stderr"
            self.logger.debug(
                f"Command failed with exit code {result.returncode}: {command_str_for_log}\n"
                f"  Stderr: {stderr_output}"
            )
            if check:
                raise GitCommandError(command, result.returncode, stdout=result.stdout, stderr=result.stderr)
        else:
            stdout_preview = (result.stdout[:100] + '...') if result.stdout and len(result.stdout) > 100 else result.stdout
            self.logger.debug(f"Command successful: {command_str_for_log}. Output preview: {stdout_preview}")

        return result

    def execute_git_command(self, params: Dict, check: bool = True) -> subprocess.CompletedProcess:
        command_parts: List[str] = [self.git_binary, params["command"]] + params.get("args", [])
        cwd: Optional[str] = params.get("cwd")
        return self._run_subprocess(command=command_parts, cwd=cwd, check=check, env=params.get("env"))
