from revpush.shell.conduit_client import ConduitClient
from revpush.shell.config_io import read_config, write_repo_config
from revpush.shell.git_runner import run_git
from revpush.shell.repository import GitRepository, open_repository

__all__ = ["ConduitClient", "GitRepository", "open_repository", "read_config", "run_git", "write_repo_config"]
