"""
Interpreter configuration.

Settings come from a YAML mapping, for example::

    prompt: "monkey> "
    max_errors: 5
    log_level: DEBUG
    color: false

The file is named on the command line with ``--config`` or through the
``MONKEYLANG_CONFIG`` environment variable. Missing keys keep their defaults.
"""

import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from .errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "MONKEYLANG_CONFIG"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class InterpreterConfig:
    """Settings shared by the command line tools and the REPL."""
    prompt: str = ">> "
    max_errors: int = 20
    log_level: str = "WARNING"
    color: bool = True

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "InterpreterConfig":
        """Build a config from a mapping, validating keys and value types."""
        known = {f.name: f for f in fields(cls)}
        unknown = sorted(set(data) - set(known))
        if unknown:
            raise ConfigError(f"unknown config key(s): {', '.join(unknown)}")

        for key, value in data.items():
            expected = known[key].type
            # bool is a subclass of int, so compare exact types
            if type(value) is not expected:
                raise ConfigError(
                    f"config key '{key}' must be {expected.__name__}, "
                    f"got {type(value).__name__}"
                )

        config = cls(**data)
        config.log_level = config.log_level.upper()
        if config.log_level not in LOG_LEVELS:
            raise ConfigError(
                f"unknown log level '{data['log_level']}' "
                f"(expected one of {', '.join(LOG_LEVELS)})"
            )
        if config.max_errors < 1:
            raise ConfigError("max_errors must be at least 1")
        return config

    @classmethod
    def load(cls, path: Optional[Union[str, Path]] = None) -> "InterpreterConfig":
        """
        Load configuration from a YAML file.

        Args:
            path: Config file; when omitted, the file named by the
                MONKEYLANG_CONFIG environment variable, if any

        Returns:
            The loaded config, or the defaults when no file is named

        Raises:
            ConfigError: If the file is missing, is not valid YAML, or holds
                invalid settings
        """
        if path is None:
            path = os.environ.get(CONFIG_ENV_VAR)
            if not path:
                return cls()

        config_path = Path(path)
        if not config_path.is_file():
            raise ConfigError(f"config file not found: {config_path}")

        try:
            with config_path.open("r", encoding="utf-8") as fp:
                data = yaml.safe_load(fp)
        except yaml.YAMLError as e:
            raise ConfigError(f"invalid YAML in {config_path}: {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError(f"{config_path}: expected a mapping of settings")

        logger.debug("loaded config from %s", config_path)
        return cls.from_dict(data)


def configure_logging(level: str = "WARNING") -> None:
    """Configure root logging for the command line tools."""
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(levelname)s %(name)s: %(message)s",
        force=True,
    )
