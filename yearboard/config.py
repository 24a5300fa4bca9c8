# Year board: configuration
# Override paths and behaviour via config.yaml, environment, or CLI args.

import os
import yaml
from pathlib import Path
from dataclasses import dataclass, field
from typing import Dict, Optional

CONFIG_NAME = "config.yaml"  # looked up in the working directory
CONFIG_ENV = "YEARBOARD_CONFIG"
DATA_DIR_ENV = "YEARBOARD_DATA_DIR"


class ConfigError(Exception):
    """Raised when an explicitly requested config file cannot be used."""
    pass


def default_item_fields() -> Dict[str, str]:
    # "id" stays a placeholder until downstream processing assigns one
    return {
        "status": "notDone",
        "id": "tmp",
        "integrity": "notLate",
        "tags": "wobj",
    }


@dataclass
class Config:
    """Runtime configuration for the board server."""

    # Folder holding the task .json files (top level + one subdir level)
    data_dir: str = "data"

    # "Now" for current-year / current-week highlighting
    timezone: str = "America/New_York"

    # Behavior: scan
    only_this_year: bool = True
    min_year: int = 1970
    max_year: int = 2100

    # Fields written into every new item besides program/deadline/name
    new_item_defaults: Dict[str, str] = field(default_factory=default_item_fields)

    # Server
    host: str = "127.0.0.1"
    port: int = 3000
    log_level: str = "INFO"

    def resolve_paths(self):
        """Expand ~ and apply environment overrides."""
        env_dir = os.environ.get(DATA_DIR_ENV)
        if env_dir:
            self.data_dir = env_dir
        self.data_dir = str(Path(self.data_dir).expanduser())
        self.new_item_defaults = {**default_item_fields(), **(self.new_item_defaults or {})}

    @classmethod
    def load(cls, path: Optional[str] = None) -> "Config":
        """Load config from YAML file, falling back to defaults."""
        explicit = path or os.environ.get(CONFIG_ENV)
        cfg_path = Path(explicit) if explicit else Path.cwd() / CONFIG_NAME
        if cfg_path.exists():
            try:
                with open(cfg_path, "r") as f:
                    data = yaml.safe_load(f) or {}
            except (OSError, yaml.YAMLError) as e:
                if explicit:
                    raise ConfigError(f"Cannot read config {cfg_path}: {e}") from e
                data = {}
            if not isinstance(data, dict):
                if explicit:
                    raise ConfigError(f"Config {cfg_path} must be a mapping")
                data = {}
            cfg = cls(**{k: v for k, v in data.items() if k in cls.__dataclass_fields__})
        elif explicit:
            raise ConfigError(f"Config file not found: {cfg_path}")
        else:
            cfg = cls()
        cfg.resolve_paths()
        return cfg
