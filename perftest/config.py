"""
Settings for the perf test: the packaged config.yaml, overridden by environment
variables (a .env file is loaded into the environment by the entrypoint).

Trial count and endpoints are fixed in code and have no settings here.
"""

import os
from pathlib import Path
from typing import Any, Dict

import yaml

DEFAULT_CONFIG_PATH = Path(__file__).parent / "config.yaml"

# environment variable -> (section, key)
ENV_OVERRIDES = {
    'FETCHER_USER_AGENT': ('fetcher', 'user_agent'),
    'FETCHER_TIMEOUT': ('fetcher', 'timeout'),
    'FETCHER_MAX_REDIRECTS': ('fetcher', 'max_redirects'),
    'LOG_LEVEL': ('logging', 'level'),
    'LOG_RENDERER': ('logging', 'renderer'),
    'SERVER_HOST': ('server', 'host'),
    'SERVER_PORT': ('server', 'port'),
}


def _parse_env_value(value: str):
    """'true'/'false' become bools, then int and float are tried, else the raw string."""
    if value.lower() in ('true', 'false'):
        return value.lower() == 'true'
    for convert in (int, float):
        try:
            return convert(value)
        except ValueError:
            pass
    return value


class Config:
    """Fetcher, logging and server settings."""

    def __init__(self, config_path: str = None):
        self.config_path = Path(config_path or DEFAULT_CONFIG_PATH)
        self._config = self._load()

    def _load(self) -> Dict[str, Any]:
        try:
            with open(self.config_path, 'r') as f:
                settings = yaml.safe_load(f) or {}
        except FileNotFoundError:
            raise FileNotFoundError(f"Configuration file not found: {self.config_path}")
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in configuration file: {e}")

        for env_var, (section, key) in ENV_OVERRIDES.items():
            value = os.getenv(env_var)
            if value is not None:
                settings.setdefault(section, {})[key] = _parse_env_value(value)
        return settings

    def reload(self):
        """Re-read the file and the environment; called once .env has been loaded."""
        self._config = self._load()

    def get(self, *keys, default=None):
        """Nested lookup, e.g. `config.get('fetcher', 'timeout', default=30.0)`."""
        current = self._config
        for key in keys:
            if not isinstance(current, dict) or key not in current:
                return default
            current = current[key]
        return current

    @property
    def fetcher(self) -> Dict[str, Any]:
        return self.get('fetcher', default={})

    @property
    def logging(self) -> Dict[str, Any]:
        return self.get('logging', default={})

    @property
    def server(self) -> Dict[str, Any]:
        return self.get('server', default={})


config = Config()
