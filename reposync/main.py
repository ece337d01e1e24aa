import os
import sys
from typing import Optional

import click

from reposync.config.config_loader import finalize_logging_config
from reposync.config.logging_config import LOGGING_CONFIG
from reposync.config.schemas import DEFAULT_ROOT_DIR, RuntimeOptions
from reposync.core.errors import ReposyncError
from reposync.core.workflow import RepoSyncWorkflow
from reposync.utils.command_executor import CommandExecutor
from reposync.utils.custom_logger import Logger, setup_logging
from reposync.utils.git_utils import GitOperator

logger = Logger("reposync")


def run(options: RuntimeOptions, git_operator: Optional[GitOperator] = None) -> int:
    logger.info(f"Recursively check code in directory {options.root_dir}")
    try:
        if git_operator is None:
            git_operator = GitOperator(CommandExecutor())
        workflow = RepoSyncWorkflow(options=options, git_operator=git_operator, logger=logger)
        workflow.run()
        return 0
    except ReposyncError as e:
        logger.error(str(e))
        return 1
    except Exception as e:
        logger.exception(f"Unexpected error: {e}")
        return 1


@click.command()
@click.option("--dir", "root_dir", default=DEFAULT_ROOT_DIR, show_default=True, help="Root directory to check")
@click.option("--update/--no-update", default=True, show_default=True, help="Rescan the root directory and rewrite repositories.txt")
@click.option("--upgrade/--no-upgrade", default=True, show_default=True, help="Clone, fetch and fast-forward repositories")
@click.option("--branch", "default_branch", default="master", show_default=True, help="Branch a repository must be on to be fast-forwarded")
@click.option("--strict-discovery/--lenient-discovery", default=True, show_default=True, help="Abort the scan when a repository has no origin URL")
@click.option("--log-config", type=click.Path(dir_okay=False), default=None, help="YAML file with a 'logging' section")
@click.option("--log-level", default=None, help="Override the configured log level")
@click.pass_context
def main(
    ctx: click.Context,
    root_dir: str,
    update: bool,
    upgrade: bool,
    default_branch: str,
    strict_discovery: bool,
    log_config: Optional[str],
    log_level: Optional[str],
) -> None:
    """Keep every git repository under a root directory up to date."""
    setup_logging(LOGGING_CONFIG)
    try:
        setup_logging(finalize_logging_config(log_config, log_level))
    except (ReposyncError, ValueError, OSError) as e:
        setup_logging(LOGGING_CONFIG)
        logger.error(f"Invalid logging configuration: {e}")
        ctx.exit(1)

    options = RuntimeOptions(
        root_dir=os.path.abspath(os.path.expanduser(root_dir)),
        update=update,
        upgrade=upgrade,
        default_branch=default_branch,
        strict_discovery=strict_discovery,
    )
    ctx.exit(run(options))


if __name__ == "__main__":
    sys.exit(main())
