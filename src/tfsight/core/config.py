"""
Configuration Management for TFSight

Provides configuration loading from multiple sources:
- Default values
- Configuration files (YAML, TOML, JSON)
- Environment variables

Configuration precedence (highest to lowest):
1. Environment variables (TFSIGHT_*)
2. Configuration file
3. Default values
"""

import json
import logging
import logging.handlers
import os
import tomllib
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

import yaml

from tfsight.core.constants import ALLOWED_EXTENSIONS, KD_PRECISION, PAGE_SIZE

logger = logging.getLogger(__name__)


# ============================================================================
# Configuration Dataclasses
# ============================================================================


@dataclass
class ParserConfig:
    """Configuration for the external demo parser."""

    # tf_demo_parser's command line tool, resolved on PATH
    parse_demo_binary: str = "parse_demo"
    allowed_extensions: tuple[str, ...] = ALLOWED_EXTENSIONS


@dataclass
class ViewConfig:
    """Configuration for the derived views."""

    page_size: int = PAGE_SIZE
    kd_precision: int = KD_PRECISION
    default_sort_key: str = "points"
    default_sort_direction: str = "desc"


@dataclass
class StoreConfig:
    """Configuration for the demo record store."""

    # Worker threads for submit_load()
    max_workers: int = 2


@dataclass
class LoggingConfig:
    """Configuration for logging."""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file: str | None = None
    file_max_bytes: int = 10 * 1024 * 1024  # 10MB
    file_backup_count: int = 5


@dataclass
class TFSightConfig:
    """Main configuration container."""

    parser: ParserConfig = field(default_factory=ParserConfig)
    view: ViewConfig = field(default_factory=ViewConfig)
    store: StoreConfig = field(default_factory=StoreConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    config_version: str = "1.0"


# ============================================================================
# Configuration Loading
# ============================================================================


def get_default_config_paths() -> list[Path]:
    """Get the default paths to search for configuration files."""
    home = Path.home()
    xdg_config = os.environ.get("XDG_CONFIG_HOME", str(home / ".config"))
    return [
        Path.cwd() / "tfsight.yaml",
        Path.cwd() / "tfsight.toml",
        Path.cwd() / "tfsight.json",
        Path(xdg_config) / "tfsight" / "config.yaml",
        Path(xdg_config) / "tfsight" / "config.toml",
        home / ".tfsight.yaml",
    ]


def load_yaml_config(path: Path) -> dict[str, Any]:
    """Load configuration from a YAML file."""
    with open(path) as f:
        return yaml.safe_load(f) or {}


def load_toml_config(path: Path) -> dict[str, Any]:
    """Load configuration from a TOML file."""
    with open(path, "rb") as f:
        return tomllib.load(f)


def load_json_config(path: Path) -> dict[str, Any]:
    """Load configuration from a JSON file."""
    with open(path) as f:
        return json.load(f)


def load_config_file(path: Path) -> dict[str, Any]:
    """Load configuration from a file, detecting format from extension."""
    if not path.exists():
        return {}

    suffix = path.suffix.lower()
    if suffix in (".yaml", ".yml"):
        return load_yaml_config(path)
    elif suffix == ".toml":
        return load_toml_config(path)
    elif suffix == ".json":
        return load_json_config(path)
    else:
        logger.warning(f"Unknown config file format: {suffix}")
        return {}


ENV_MAPPINGS = {
    "TFSIGHT_LOG_LEVEL": ("logging", "level"),
    "TFSIGHT_LOG_FILE": ("logging", "file"),
    "TFSIGHT_PARSE_DEMO_BINARY": ("parser", "parse_demo_binary"),
    "TFSIGHT_PAGE_SIZE": ("view", "page_size"),
    "TFSIGHT_SORT_KEY": ("view", "default_sort_key"),
    "TFSIGHT_SORT_DIRECTION": ("view", "default_sort_direction"),
    "TFSIGHT_MAX_WORKERS": ("store", "max_workers"),
}


def load_env_config() -> dict[str, Any]:
    """Load configuration from environment variables."""
    config: dict[str, Any] = {}

    for env_var, (section, key) in ENV_MAPPINGS.items():
        value: Any = os.environ.get(env_var)
        if value is None:
            continue
        if value.lower() in ("true", "false"):
            value = value.lower() == "true"
        elif value.isdigit():
            value = int(value)
        config.setdefault(section, {})[key] = value

    return config


def merge_configs(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge two configuration dictionaries."""
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = merge_configs(result[key], value)
        else:
            result[key] = value

    return result


def dict_to_config(data: dict[str, Any]) -> TFSightConfig:
    """Convert a dictionary to TFSightConfig, ignoring unknown keys."""
    config = TFSightConfig()

    for section in ("parser", "view", "store", "logging"):
        target = getattr(config, section)
        for key, value in (data.get(section) or {}).items():
            if not hasattr(target, key):
                logger.warning(f"Ignoring unknown config key: {section}.{key}")
                continue
            if key == "allowed_extensions":
                value = tuple(value)
            elif isinstance(getattr(target, key), int):
                try:
                    value = int(value)
                except (TypeError, ValueError):
                    raise ValueError(f"{section}.{key} must be an integer, got {value!r}") from None
            setattr(target, key, value)

    if config.view.page_size < 1:
        raise ValueError(f"view.page_size must be at least 1, got {config.view.page_size}")
    if config.store.max_workers < 1:
        raise ValueError(f"store.max_workers must be at least 1, got {config.store.max_workers}")

    return config


def load_config(config_file: Path | None = None, include_env: bool = True) -> TFSightConfig:
    """
    Load configuration from all sources.

    Args:
        config_file: Explicit path to a config file (optional)
        include_env: Whether to include environment variables

    Returns:
        Merged TFSightConfig
    """
    config_data: dict[str, Any] = {}

    if config_file:
        config_data = load_config_file(config_file)
        logger.info(f"Loaded config from: {config_file}")
    else:
        for path in get_default_config_paths():
            if path.exists():
                config_data = load_config_file(path)
                logger.info(f"Loaded config from: {path}")
                break

    if include_env:
        config_data = merge_configs(config_data, load_env_config())

    return dict_to_config(config_data)


def config_to_dict(config: TFSightConfig) -> dict[str, Any]:
    """Convert TFSightConfig to a dictionary."""
    return asdict(config)


# ============================================================================
# Logging Setup
# ============================================================================


def configure_logging(config: LoggingConfig) -> None:
    """Apply a LoggingConfig to the root logger."""
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if config.file:
        handlers.append(
            logging.handlers.RotatingFileHandler(
                config.file,
                maxBytes=config.file_max_bytes,
                backupCount=config.file_backup_count,
            )
        )
    logging.basicConfig(
        level=config.level.upper(),
        format=config.format,
        handlers=handlers,
        force=True,
    )
