from __future__ import annotations

import json
import sys
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from .errors import ConfigError
from .render import TemplateService

if sys.version_info >= (3, 11):
    import tomllib as toml
else:
    import tomli as toml

INDEX_SIZE = 5


@dataclass
class SiteContext:
    """Everything one build needs, passed explicitly to each builder."""

    posts_dir: Path
    output_dir: Path
    static_dir: Path
    templates: TemplateService
    project_root: Path = field(default_factory=Path.cwd)
    index_size: int = INDEX_SIZE
    link_static: bool = True
    highlight: bool = True

    @property
    def tag_dir(self) -> Path:
        return self.output_dir / "tag"


def load_config(path: Path) -> dict:
    if not path.exists():
        return {}
    suffix = path.suffix.lower()
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Cannot read config file {path}: {exc}") from exc
    if suffix == ".toml":
        try:
            data = toml.loads(text)
        except toml.TOMLDecodeError as exc:
            raise ConfigError(f"Invalid TOML in config file {path}: {exc}") from exc
    elif suffix in {".yml", ".yaml"}:
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML in config file {path}: {exc}") from exc
        if data is None:
            return {}
    else:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ConfigError(f"Invalid JSON in config file {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Config file must be a mapping: {path}")
    return data
