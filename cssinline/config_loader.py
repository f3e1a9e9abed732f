"""Configuration loader for the CSS import inliner."""

import os
import re
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from dotenv import load_dotenv

from cssinline.resources import Group, Resource, ResourceType


DEFAULT_LOCATIONS = [
    "cssinline.yaml",
    "cssinline.yml",
    "config.yaml",
    "config.yml",
]


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """Load configuration from YAML file.

    Args:
        config_path: Path to config file. If None, uses default locations.

    Returns:
        Dictionary with configuration values.
    """
    # Load environment variables first
    load_dotenv()

    if config_path is None:
        for loc in DEFAULT_LOCATIONS:
            if Path(loc).exists():
                config_path = loc
                break

    if config_path is None or not Path(config_path).exists():
        raise FileNotFoundError("Configuration file not found. Please provide cssinline.yaml")

    with open(config_path, "r", encoding="utf-8") as f:
        config = yaml.safe_load(f) or {}

    if not isinstance(config, dict):
        raise ValueError(f"Invalid configuration in {config_path}: expected a mapping")

    return _substitute_env_vars(config)


def _substitute_env_vars(obj: Any) -> Any:
    """Recursively substitute environment variables in config.

    Supports syntax: ${VAR_NAME} or ${VAR_NAME:default_value}
    """
    if isinstance(obj, dict):
        return {k: _substitute_env_vars(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [_substitute_env_vars(item) for item in obj]
    elif isinstance(obj, str):
        return _substitute_env_string(obj)
    else:
        return obj


def _substitute_env_string(value: str) -> str:
    """Substitute environment variables in a string."""
    pattern = r'\$\{([^}]+)\}'

    def replace(match):
        var_expr = match.group(1)
        if ':' in var_expr:
            var_name, default = var_expr.split(':', 1)
            return os.getenv(var_name, default)
        else:
            return os.getenv(var_expr, match.group(0))

    return re.sub(pattern, replace, value)


def get_remote_config(config: Dict[str, Any]) -> Dict[str, Any]:
    """Get remote locator configuration."""
    return config.get("remote", {}) or {}


def get_logging_config(config: Dict[str, Any]) -> Dict[str, Any]:
    """Get logging configuration."""
    return config.get("logging", {}) or {}


def get_encoding(config: Dict[str, Any]) -> str:
    return str(config.get("encoding") or "utf-8")


def get_groups(config: Dict[str, Any], names: Optional[List[str]] = None) -> List[Group]:
    """Build the configured groups, optionally restricted to ``names``.

    Each group is a list of URIs; the resource type is inferred from the
    extension.
    """
    groups_cfg = config.get("groups", {}) or {}
    if names:
        missing = [name for name in names if name not in groups_cfg]
        if missing:
            raise ValueError(f"Unknown group(s): {', '.join(missing)}")
        selected = names
    else:
        selected = list(groups_cfg)

    groups = []
    for name in selected:
        uris = groups_cfg.get(name) or []
        if not isinstance(uris, list):
            raise ValueError(f"Group '{name}' must be a list of URIs")
        resources = [Resource.create(str(uri), ResourceType.from_uri(str(uri))) for uri in uris]
        groups.append(Group(name, resources))
    return groups


def ensure_directories(config: Dict[str, Any]):
    """Ensure all required directories exist."""
    output_dir = config.get("output_dir", "dist")
    Path(output_dir).mkdir(parents=True, exist_ok=True)

    # Log directory
    log_path = get_logging_config(config).get("file")
    if log_path:
        Path(log_path).parent.mkdir(parents=True, exist_ok=True)
