#!/usr/bin/env python3

import os
import tempfile
import logging
import yaml
from typing import Dict, List, Any, Optional
from dataclasses import dataclass, asdict, fields

logger = logging.getLogger(__name__)

DEFAULT_LOG_FILE = "./migration.log"
DEFAULT_RETRY_COUNT = 2


def default_temp_root() -> str:
    return os.path.join(tempfile.gettempdir(), "repo-mirror")


@dataclass
class MirrorConfig:
    repo_list: str = None
    target_group: str = None
    temp_root: str = None
    retry_count: int = DEFAULT_RETRY_COUNT
    retry_delay: float = 0.0
    # Seconds per git command, None waits forever
    operation_timeout: float = None
    incremental: bool = False
    verbose: bool = False
    dry_run: bool = False
    log_file: str = DEFAULT_LOG_FILE
    # Warn when the temp root has less free space than this
    min_free_gb: float = 1.0
    # Exit non-zero when any repository failed
    strict: bool = False

    def __post_init__(self):
        if self.temp_root is None:
            self.temp_root = default_temp_root()

        if self.log_file is None:
            self.log_file = DEFAULT_LOG_FILE

        if self.retry_count is None:
            self.retry_count = DEFAULT_RETRY_COUNT

        self.retry_count = int(self.retry_count)
        if self.retry_count < 0:
            raise ValueError(f"retry_count must be >= 0, got {self.retry_count}")

        self.retry_delay = float(self.retry_delay or 0.0)
        if self.retry_delay < 0:
            raise ValueError(f"retry_delay must be >= 0, got {self.retry_delay}")

        if self.operation_timeout is not None:
            self.operation_timeout = float(self.operation_timeout)
            if self.operation_timeout <= 0:
                raise ValueError(
                    f"operation_timeout must be > 0, got {self.operation_timeout}"
                )

    @property
    def max_attempts(self) -> int:
        return self.retry_count + 1


class ConfigManager:
    """Builds a MirrorConfig from an optional YAML file plus CLI overrides"""

    def __init__(self, config_path: Optional[str] = None):
        self.config_path = config_path
        self._config: Optional[MirrorConfig] = None

    def _load_file(self) -> Dict[str, Any]:
        if not self.config_path:
            return {}

        if not os.path.exists(self.config_path):
            raise ValueError(f"Config file not found: {self.config_path}")

        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Error loading config from {self.config_path}: {e}")

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ValueError(f"Config file {self.config_path} must contain a mapping")

        known = {f.name for f in fields(MirrorConfig)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(
                f"Unknown config keys in {self.config_path}: {', '.join(unknown)}"
            )

        return data

    def load_config(self, overrides: Optional[Dict[str, Any]] = None) -> MirrorConfig:
        if self._config is not None and not overrides:
            return self._config

        data = self._load_file()

        # CLI values win, None means the option was not given
        for key, value in (overrides or {}).items():
            if value is not None:
                data[key] = value

        try:
            self._config = MirrorConfig(**data)
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid configuration: {e}")

        logger.debug(f"Loaded configuration: {asdict(self._config)}")
        return self._config

    def get_config(self) -> MirrorConfig:
        if self._config is None:
            return self.load_config()
        return self._config


def parse_repo_list(lines) -> List[str]:
    """Trim entries and drop blank and comment lines, keeping order"""
    sources = []
    for line in lines:
        entry = line.strip()
        if not entry or entry.startswith('#'):
            continue
        sources.append(entry)
    return sources


def read_repo_list(path: str) -> List[str]:
    with open(path, 'r', encoding='utf-8-sig') as f:
        return parse_repo_list(f)
