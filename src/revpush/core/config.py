from __future__ import annotations

import tomllib

from revpush.core.models import (
    Config,
    ConduitConfig,
    GlobalConfig,
    PushSettings,
    RepoConfig,
    RepositorySettings,
)

UPDATE_STRATEGIES = ("rebase", "merge")


class ConfigError(ValueError):
    pass


def parse_config(raw_toml: str) -> Config:
    data = _loads(raw_toml, "config")
    conduit = _parse_conduit(data)
    if conduit is None:
        raise ConfigError("missing [conduit] section")
    config = Config(
        conduit=conduit,
        repository=_parse_repository(data),
        push=_parse_push(data) or PushSettings(),
    )
    validate_config(config)
    return config


def parse_global_config(raw_toml: str) -> GlobalConfig:
    data = _loads(raw_toml, "global config")
    conduit = _parse_conduit(data)
    if conduit is None:
        raise ConfigError("missing [conduit] section in global config")
    return GlobalConfig(conduit=conduit, push=_parse_push(data))


def parse_repo_config(raw_toml: str) -> RepoConfig:
    data = _loads(raw_toml, "repo config")
    return RepoConfig(
        conduit=_parse_conduit(data),
        repository=_parse_repository(data),
        push=_parse_push(data),
    )


def merge_config(global_cfg: GlobalConfig | None, repo_cfg: RepoConfig | None) -> Config:
    conduit = repo_cfg.conduit if repo_cfg and repo_cfg.conduit else None
    if conduit is None and global_cfg is not None:
        conduit = global_cfg.conduit
    if conduit is None:
        raise ConfigError("conduit.url and conduit.token are not configured")

    push = repo_cfg.push if repo_cfg and repo_cfg.push is not None else None
    if push is None and global_cfg is not None:
        push = global_cfg.push
    repository = repo_cfg.repository if repo_cfg else RepositorySettings()

    config = Config(conduit=conduit, repository=repository, push=push or PushSettings())
    validate_config(config)
    return config


def validate_config(config: Config) -> None:
    if not config.conduit.url.startswith(("http://", "https://")):
        raise ConfigError("conduit.url must start with http:// or https://")
    if not config.conduit.token:
        raise ConfigError("conduit.token cannot be empty")
    if config.push.update_default not in UPDATE_STRATEGIES:
        raise ConfigError("push.update_default must be 'rebase' or 'merge'")


def global_config_to_dict(cfg: GlobalConfig) -> dict:
    data: dict = {"conduit": {"url": cfg.conduit.url, "token": cfg.conduit.token}}
    if cfg.push is not None:
        data["push"] = _push_to_dict(cfg.push)
    return data


def repo_config_to_dict(cfg: RepoConfig) -> dict:
    data: dict = {}
    if cfg.conduit is not None:
        data["conduit"] = {"url": cfg.conduit.url, "token": cfg.conduit.token}
    if cfg.repository.callsign:
        data["repository"] = {"callsign": cfg.repository.callsign}
    if cfg.push is not None:
        data["push"] = _push_to_dict(cfg.push)
    return data


def _loads(raw_toml: str, label: str) -> dict:
    try:
        return tomllib.loads(raw_toml)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"invalid TOML in {label}: {exc}") from exc


def _parse_conduit(data: dict) -> ConduitConfig | None:
    conduit_data = data.get("conduit")
    if conduit_data is None:
        return None
    if not isinstance(conduit_data, dict):
        raise ConfigError("[conduit] must be a table")
    url = _require_str(conduit_data, "conduit", "url")
    token = _require_str(conduit_data, "conduit", "token")
    return ConduitConfig(url=url.rstrip("/"), token=token)


def _parse_repository(data: dict) -> RepositorySettings:
    repository_data = data.get("repository", {}) or {}
    if not isinstance(repository_data, dict):
        raise ConfigError("[repository] must be a table")
    return RepositorySettings(callsign=_optional_str(repository_data, "repository", "callsign"))


def _parse_push(data: dict) -> PushSettings | None:
    push_data = data.get("push")
    if push_data is None:
        return None
    if not isinstance(push_data, dict):
        raise ConfigError("[push] must be a table")

    update_default = _optional_str(push_data, "push", "update_default") or "rebase"
    if update_default not in UPDATE_STRATEGIES:
        raise ConfigError("push.update_default must be 'rebase' or 'merge'")
    return PushSettings(
        branch_from=_optional_str(push_data, "push", "branch_from"),
        update_default=update_default,
    )


def _push_to_dict(push: PushSettings) -> dict:
    data = {"update_default": push.update_default}
    if push.branch_from:
        data["branch_from"] = push.branch_from
    return data


def _require_str(mapping: dict, section: str, key: str) -> str:
    value = mapping.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"{section}.{key} is required and must be a non-empty string")
    return value.strip()


def _optional_str(mapping: dict, section: str, key: str) -> str | None:
    value = mapping.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigError(f"{section}.{key} must be a string when set")
    stripped = value.strip()
    return stripped or None
