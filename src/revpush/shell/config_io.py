from __future__ import annotations

from pathlib import Path

import tomli_w

from revpush.core.config import (
    global_config_to_dict,
    merge_config,
    parse_global_config,
    parse_repo_config,
    repo_config_to_dict,
)
from revpush.core.models import Config, GlobalConfig, RepoConfig


def global_config_path() -> Path:
    return Path.home() / ".revpush" / "config.toml"


def config_path(repo_root: Path | None = None) -> Path:
    root = repo_root or Path.cwd()
    return root / ".revpush" / "config.toml"


def read_global_config() -> GlobalConfig | None:
    path = global_config_path()
    if not path.exists():
        return None
    return parse_global_config(path.read_text(encoding="utf-8"))


def read_repo_config(repo_root: Path | None = None) -> RepoConfig | None:
    path = config_path(repo_root)
    if not path.exists():
        return None
    return parse_repo_config(path.read_text(encoding="utf-8"))


def read_config(repo_root: Path | None = None) -> Config:
    global_cfg = read_global_config()
    repo_cfg = read_repo_config(repo_root)
    if global_cfg is None and repo_cfg is None:
        raise FileNotFoundError(f"config not found: {config_path(repo_root)} or {global_config_path()}")
    return merge_config(global_cfg, repo_cfg)


def write_global_config(cfg: GlobalConfig) -> Path:
    path = global_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(tomli_w.dumps(global_config_to_dict(cfg)), encoding="utf-8")
    return path


def write_repo_config(cfg: RepoConfig, repo_root: Path | None = None) -> Path:
    path = config_path(repo_root)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(tomli_w.dumps(repo_config_to_dict(cfg)), encoding="utf-8")
    return path
