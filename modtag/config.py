"""Configuration loading for modtag (.modtag.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .branches import DEFAULT_REMOTE_PRIORITY
from .errors import ConfigError
from .git.tagger import DEFAULT_MESSAGE

CONFIG_NAME = ".modtag.yml"


@dataclass
class TagConfig:
    """Settings for tags created with ``modtag tag``."""

    message: str = DEFAULT_MESSAGE
    sign: bool = False


@dataclass
class ClassifierConfig:
    """How to invoke the compatibility classifier."""

    command: str = "modver"


@dataclass
class ModtagConfig:
    """Represents the settings defined in .modtag.yml."""

    root: Path
    git: Optional[str] = None
    timeout: Optional[float] = None
    remotes: List[str] = field(default_factory=lambda: list(DEFAULT_REMOTE_PRIORITY))
    workers: int = 1
    exclude_dirs: List[str] = field(default_factory=list)
    tag: TagConfig = field(default_factory=TagConfig)
    classifier: ClassifierConfig = field(default_factory=ClassifierConfig)


def load_config(config_path: Path) -> ModtagConfig:
    """Load configuration from disk, falling back to defaults when absent."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return ModtagConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_NAME} must contain a mapping at the root")

    config = ModtagConfig(root=root)
    config.git = _as_str(data.get("git"))
    config.timeout = _as_float(data.get("timeout"))

    remotes = _as_str_list(data.get("remotes"))
    if remotes:
        config.remotes = remotes

    workers = _as_int(data.get("workers"))
    if workers is not None:
        if workers < 1:
            raise ConfigError("workers must be at least 1")
        config.workers = workers

    config.exclude_dirs = _as_str_list(data.get("exclude_dirs"))

    tag_data = _as_dict(data.get("tag"))
    if tag_data:
        config.tag = TagConfig(
            message=_as_str(tag_data.get("message")) or DEFAULT_MESSAGE,
            sign=_as_bool(tag_data.get("sign")) or False,
        )
        if "{tag}" not in config.tag.message:
            raise ConfigError("tag.message must contain the {tag} placeholder")

    classifier_data = _as_dict(data.get("classifier"))
    command = _as_str(classifier_data.get("command")) if classifier_data else None
    if command:
        config.classifier = ClassifierConfig(command=command)

    return config


def _resolve_config_path(config_path: Path) -> Path:
    config_path = Path(config_path).expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_NAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Failed to read {path.name}: {exc}") from exc
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []
