"""Configuration loading for spacecompiler (.spacecompiler.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .attention import AttentionParameters

CONFIG_FILENAME = ".spacecompiler.yml"

DEFAULT_CONTENT_TYPES: Dict[str, str] = {
    ".txt": "text",
    ".md": "text",
    ".doc": "text",
    ".docx": "text",
    ".json": "json",
}


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class ProjectConfig:
    """Archive handling for project compilation."""

    descriptor_suffix: str = ".spaceproj"


@dataclass
class CompilerConfig:
    """Represents the settings defined in .spacecompiler.yml."""

    root: Path
    attention: AttentionParameters = field(default_factory=AttentionParameters)
    project: ProjectConfig = field(default_factory=ProjectConfig)
    content_types: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_CONTENT_TYPES))
    timeout_seconds: Optional[float] = None

    def content_type_for(self, file_name: str) -> str:
        suffix = Path(file_name).suffix.lower()
        return self.content_types.get(suffix, "text")


def default_config() -> CompilerConfig:
    return CompilerConfig(root=Path.cwd())


def load_config(config_path: Path) -> CompilerConfig:
    """Load configuration from disk; a missing file yields defaults."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return CompilerConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    defaults = AttentionParameters()
    attention_data = _as_dict(data.get("attention"))
    attention = AttentionParameters(
        adjacent_boost=_as_float(attention_data, "adjacent_boost", defaults.adjacent_boost),
        nearby_boost=_as_float(attention_data, "nearby_boost", defaults.nearby_boost),
        nearby_window=_as_int(attention_data, "nearby_window", defaults.nearby_window),
        min_token_length=_as_int(attention_data, "min_token_length", defaults.min_token_length),
        preview_length=_as_int(attention_data, "preview_length", defaults.preview_length),
    )

    project = ProjectConfig()
    project_data = _as_dict(data.get("project"))
    suffix = project_data.get("descriptor_suffix")
    if isinstance(suffix, str) and suffix.strip():
        project.descriptor_suffix = suffix.strip()

    content_types = dict(DEFAULT_CONTENT_TYPES)
    for extension, content_type in _as_dict(data.get("content_types")).items():
        if not isinstance(content_type, str):
            raise ConfigError(f"content_types.{extension} must be a string")
        key = str(extension).lower()
        content_types[key if key.startswith(".") else f".{key}"] = content_type.lower()

    timeout = data.get("timeout_seconds")
    timeout_seconds = None
    if timeout is not None:
        timeout_seconds = _coerce_float(timeout, "timeout_seconds")

    return CompilerConfig(
        root=root,
        attention=attention,
        project=project,
        content_types=content_types,
        timeout_seconds=timeout_seconds,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _coerce_float(value: Any, key: str) -> float:
    if isinstance(value, bool):
        raise ConfigError(f"{key} must be a number")
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{key} must be a number") from exc


def _as_float(data: Dict[str, Any], key: str, default: float) -> float:
    if data.get(key) is None:
        return default
    return _coerce_float(data[key], f"attention.{key}")


def _as_int(data: Dict[str, Any], key: str, default: int) -> int:
    value = data.get(key)
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, (int, str)):
        raise ConfigError(f"attention.{key} must be an integer")
    try:
        return int(value)
    except ValueError as exc:
        raise ConfigError(f"attention.{key} must be an integer") from exc
