"""Explorer configuration."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field, fields
from pathlib import Path

from modgraph.exceptions import ConfigError

CONFIG_DIR = Path.home() / ".modgraph"
CONFIG_FILE = CONFIG_DIR / "config.json"

TRANSLATION_UNIT_EXTENSIONS: tuple[str, ...] = (
    ".cpp", ".cppm", ".mpp", ".ipp", ".cxx", ".cxxm", ".mxx", ".ixx", ".cc",
)

VIEW_CHOICES = ("modules", "imports", "importees")


@dataclass
class ExplorerConfig:
    """Settings for the explorer, the CLI and the web UI."""
    default_view: str = "modules"
    extensions: tuple[str, ...] = TRANSLATION_UNIT_EXTENSIONS
    skip_dirs: list[str] = field(default_factory=lambda: [
        ".git", "build", "out", ".cache", "node_modules", "__pycache__",
    ])
    log_level: str = "WARNING"

    def __post_init__(self):
        if self.default_view not in VIEW_CHOICES:
            raise ConfigError(
                f"Unknown default_view {self.default_view!r}",
                details={"default_view": self.default_view, "choices": list(VIEW_CHOICES)},
            )
        if isinstance(self.extensions, str):
            raise ConfigError(
                "extensions must be a list of suffixes, not a string",
                details={"extensions": self.extensions},
            )
        self.extensions = tuple(self.extensions)
        if not isinstance(self.log_level, str) or not isinstance(
            logging.getLevelName(self.log_level.upper()), int
        ):
            raise ConfigError(
                f"Unknown log_level {self.log_level!r}",
                details={"log_level": self.log_level},
            )


def load_config(path: Path | None = None) -> ExplorerConfig:
    """Load config from JSON; a missing file yields the defaults."""
    config_file = path or CONFIG_FILE
    if not config_file.exists():
        return ExplorerConfig()

    try:
        data = json.loads(config_file.read_text())
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Cannot read config {config_file}: {e}", details={"path": str(config_file)}) from e
    if not isinstance(data, dict):
        raise ConfigError(f"Config {config_file} must be a JSON object", details={"path": str(config_file)})

    known = {f.name for f in fields(ExplorerConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(
            f"Unknown config key(s) in {config_file}: {', '.join(unknown)}",
            details={"path": str(config_file), "unknown": unknown},
        )
    return ExplorerConfig(**data)
