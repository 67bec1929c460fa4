"""Configuration loading for buildsweep."""

import os
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, Field

from .models import BuildOverlapPolicy, TransformRule

logger = logging.getLogger(__name__)

ENV_PREFIX = "BUILDSWEEP_"
PROJECT_CONFIG_NAME = ".buildsweep.yaml"


class SanitizerConfig(BaseModel):
    """Rules applied to every sanitized file."""

    rules: List[TransformRule] = Field(
        default_factory=lambda: [
            TransformRule.REMOVE_DIAGNOSTIC_CALL,
            TransformRule.STRIP_COMMENTS,
        ],
        description="Tree rewrites to apply",
    )
    diagnostic_objects: List[str] = Field(
        default_factory=lambda: ["console"],
        description="Identifiers whose method calls are diagnostic calls",
    )
    preserved_severities: List[str] = Field(
        default_factory=lambda: ["error", "warn"],
        description="Diagnostic methods that are never removed",
    )


class BatchConfig(BaseModel):
    """Discovery settings for a batch run."""

    extensions: List[str] = Field(
        default_factory=lambda: [".js", ".jsx", ".ts", ".tsx"],
        description="File suffixes to sanitize",
    )
    ignore_globs: List[str] = Field(
        default_factory=lambda: ["node_modules/", "dist/", "build/"],
        description="Gitwildmatch patterns never discovered",
    )
    excluded_files: List[str] = Field(
        default_factory=lambda: ["main.js"],
        description="Basenames (or path suffixes) that are never rewritten",
    )
    ignore_dotfiles: bool = Field(default=True, description="Skip dotfiles and dot directories")


class WatchConfig(BaseModel):
    """Settings for the watch-and-rebuild loop."""

    watch_paths: List[str] = Field(
        default_factory=lambda: ["lib/**/*.js", "main.js"],
        description="Globs (relative to the root) that trigger rebuilds",
    )
    ignored: List[str] = Field(
        default_factory=lambda: ["node_modules/", "dist/", "build/"],
        description="Globs never reported, on top of dotfiles",
    )
    build_command: List[str] = Field(
        default_factory=lambda: ["node", "build.js"],
        description="Build entry point, spawned with inherited stdio",
    )
    overlap_policy: BuildOverlapPolicy = Field(
        default=BuildOverlapPolicy.PARALLEL,
        description="Handling of build requests while a build is running",
    )
    ignore_dotfiles: bool = Field(default=True, description="Skip dotfiles and dot directories")


class SweepConfig(BaseModel):
    """Top-level buildsweep configuration."""

    sanitizer: SanitizerConfig = Field(default_factory=SanitizerConfig)
    batch: BatchConfig = Field(default_factory=BatchConfig)
    watch: WatchConfig = Field(default_factory=WatchConfig)


def get_config_paths(project_dir: Optional[Path] = None) -> List[Path]:
    """
    Get configuration file paths in priority order.

    Returns:
        List of paths, highest priority last
    """
    project_dir = project_dir or Path.cwd()
    return [
        Path.home() / ".buildsweep" / "config.yaml",
        project_dir / PROJECT_CONFIG_NAME,
    ]


def _merge(base: Dict[str, Any], update: Dict[str, Any]) -> Dict[str, Any]:
    """Merge section dictionaries, later values winning per key."""
    for key, value in update.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            base[key] = _merge(dict(base[key]), value)
        else:
            base[key] = value
    return base


def load_config(
    config_path: Optional[str] = None,
    project_dir: Optional[Path] = None,
) -> SweepConfig:
    """
    Load buildsweep configuration.

    Configuration is merged in this order (later overrides earlier):
    1. Default values
    2. Global config (~/.buildsweep/config.yaml)
    3. Project config (./.buildsweep.yaml)
    4. Explicit config_path if provided
    5. Environment variables (BUILDSWEEP_<SECTION>__<FIELD>)

    Args:
        config_path: Optional explicit config file path
        project_dir: Directory holding the project config (default: cwd)

    Returns:
        Merged SweepConfig instance
    """
    merged: Dict[str, Any] = {}

    config_paths = get_config_paths(project_dir)
    if config_path:
        config_paths.append(Path(config_path))

    for path in config_paths:
        if not path.exists():
            continue
        try:
            with open(path, encoding="utf-8") as f:
                file_config = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Failed to load config from {path}: {e}")
            continue
        if not isinstance(file_config, dict):
            logger.warning(f"Ignoring config {path}: expected a mapping")
            continue
        merged = _merge(merged, file_config)
        logger.debug(f"Loaded config from {path}")

    merged = _merge(merged, _get_env_overrides())
    return SweepConfig(**merged)


def _convert_env_value(value: str, current: Any) -> Any:
    """Convert an environment string to the type of the field's default."""
    if isinstance(current, list):
        return [item.strip() for item in value.split(",") if item.strip()]
    if value.lower() in ("true", "1", "yes"):
        return True
    if value.lower() in ("false", "0", "no"):
        return False
    try:
        return int(value)
    except ValueError:
        try:
            return float(value)
        except ValueError:
            return value


def _get_env_overrides() -> Dict[str, Any]:
    """
    Get configuration overrides from environment variables.

    BUILDSWEEP_WATCH__OVERLAP_POLICY=coalesce -> {"watch": {"overlap_policy": "coalesce"}}
    List fields take comma-separated values.
    """
    defaults = SweepConfig()
    overrides: Dict[str, Any] = {}

    for key, value in os.environ.items():
        if not key.startswith(ENV_PREFIX) or "__" not in key:
            continue
        section, _, field = key[len(ENV_PREFIX):].lower().partition("__")
        section_model = getattr(defaults, section, None)
        if not isinstance(section_model, BaseModel) or field not in type(section_model).model_fields:
            logger.debug(f"Ignoring unknown config variable {key}")
            continue
        current = getattr(section_model, field)
        overrides.setdefault(section, {})[field] = _convert_env_value(value, current)

    return overrides
