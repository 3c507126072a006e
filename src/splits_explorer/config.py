from dataclasses import dataclass
from typing import TypeVar

from config import ConfigurationSet, config_from_dict, config_from_env, config_from_yaml

from splits_explorer.ingest.splits_api import DEFAULT_BASE_URL
from splits_explorer.services.rate_deriver import DEFAULT_FIP_CONSTANT


class ConfigError(Exception):
    """Raised when a configuration value cannot be interpreted."""

    def __init__(self, key: str, value: object) -> None:
        super().__init__(f"Invalid value for '{key}': {value!r}")
        self.key = key
        self.value = value


_DEFAULTS: dict[str, object] = {
    "api": {
        "base_url": DEFAULT_BASE_URL,
        "timeout": 10.0,
    },
    "explorer": {
        "season": 2025,
        "recent_limit": 10,
    },
    "tiers": {
        "fip_constant": DEFAULT_FIP_CONSTANT,
    },
}


@dataclass(frozen=True)
class ExplorerSettings:
    base_url: str = DEFAULT_BASE_URL
    timeout: float = 10.0
    season: int = 2025
    recent_limit: int = 10
    fip_constant: float = DEFAULT_FIP_CONSTANT


def create_config(
    yaml_path: str = "splits.yaml",
    env_prefix: str = "SPLITS",
    defaults: dict[str, object] | None = None,
    overrides: dict[str, object] | None = None,
) -> ConfigurationSet:
    """Create a layered configuration.

    Priority (highest to lowest): explicit overrides > env vars > YAML file > defaults dict.
    """
    layers = [
        config_from_env(env_prefix, separator="__", lowercase_keys=True),
        config_from_yaml(yaml_path, read_from_file=True, ignore_missing_paths=True),
        config_from_dict(defaults if defaults is not None else _DEFAULTS),
    ]
    if overrides:
        layers.insert(0, config_from_dict(overrides))
    return ConfigurationSet(*layers)


T = TypeVar("T")


def _as(cfg: ConfigurationSet, key: str, convert: type[T]) -> T:
    raw = cfg[key]
    try:
        return convert(raw)  # type: ignore[call-arg]
    except (TypeError, ValueError):
        raise ConfigError(key, raw) from None


def load_settings(cfg: ConfigurationSet | None = None, *, season: int | None = None) -> ExplorerSettings:
    """Read typed settings; env values arrive as strings and are converted here."""
    cfg = cfg if cfg is not None else create_config()
    recent_limit = _as(cfg, "explorer.recent_limit", int)
    if recent_limit < 1:
        raise ConfigError("explorer.recent_limit", recent_limit)
    return ExplorerSettings(
        base_url=str(cfg["api.base_url"]),
        timeout=_as(cfg, "api.timeout", float),
        season=season if season is not None else _as(cfg, "explorer.season", int),
        recent_limit=recent_limit,
        fip_constant=_as(cfg, "tiers.fip_constant", float),
    )
