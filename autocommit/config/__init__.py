"""Configuration Management Package"""

import json
import sys
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Optional

from autocommit.config.credentials import (
    API_KEY_ENV, API_KEY_FILENAME, CredentialError, resolve_api_key,
)

DEFAULT_MODEL = "gpt-4o-mini"

# Keys that never come from the rc file
_SECRET_KEYS = {"api_key"}


def _positive_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def _positive_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and value > 0


@dataclass(frozen=True)
class Config:
    """Settings for one run. Immutable once built."""
    api_key: str = field(default="", repr=False)
    model: str = DEFAULT_MODEL
    max_tokens: int = 200
    temperature: float = 0.2
    timeout: float = 60.0
    cost_threshold: float = 0.01
    max_subject_length: int = 72
    include_body: bool = True
    context_lines: Optional[int] = None

    def to_dict(self) -> dict:
        """Public settings only; the API key is left out."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if f.name not in _SECRET_KEYS and getattr(self, f.name) is not None
        }

    def with_overrides(self, **overrides) -> 'Config':
        """Copy with the given non-None values replaced."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes) if changes else self

    @staticmethod
    def validate(data: dict) -> tuple[dict, list[str]]:
        """Drop invalid values from raw settings and return (clean, warnings)."""
        defaults = Config()
        clean = dict(data)
        warnings = []

        def reject(key, fallback):
            warnings.append(f"Invalid {key} '{clean[key]}', using {fallback}")
            del clean[key]

        if 'model' in clean and (not isinstance(clean['model'], str) or not clean['model'].strip()):
            reject('model', f"'{defaults.model}'")

        for key in ('max_tokens', 'max_subject_length'):
            if key in clean and not _positive_int(clean[key]):
                reject(key, getattr(defaults, key))

        for key in ('timeout', 'cost_threshold'):
            if key in clean and not _positive_number(clean[key]):
                reject(key, getattr(defaults, key))

        if 'temperature' in clean:
            value = clean['temperature']
            if not isinstance(value, (int, float)) or isinstance(value, bool) or not 0 <= value <= 2:
                reject('temperature', defaults.temperature)

        if 'include_body' in clean and not isinstance(clean['include_body'], bool):
            reject('include_body', str(defaults.include_body).lower())

        if 'context_lines' in clean and clean['context_lines'] is not None:
            value = clean['context_lines']
            if not isinstance(value, int) or isinstance(value, bool) or value < 0:
                reject('context_lines', 'plain diff')

        return clean, warnings

    @classmethod
    def from_dict(cls, data: dict) -> 'Config':
        valid_keys = {f.name for f in fields(cls)} - _SECRET_KEYS
        filtered = {k: v for k, v in data.items() if k in valid_keys}
        clean, warnings = cls.validate(filtered)
        for warning in warnings:
            print(f"Config warning: {warning}", file=sys.stderr)
        return cls(**clean)


class ConfigManager:
    """Loads settings from .autocommitrc in the working directory or home."""

    CONFIG_FILENAME = ".autocommitrc"

    def __init__(self):
        self._config: Optional[Config] = None
        self._config_path: Optional[Path] = None

    def load(self) -> Config:
        if self._config is not None:
            return self._config

        for path in (Path.cwd() / self.CONFIG_FILENAME, Path.home() / self.CONFIG_FILENAME):
            if path.exists():
                self._config = self._load_from_file(path)
                self._config_path = path
                return self._config

        self._config = Config()
        return self._config

    def _load_from_file(self, path: Path) -> Config:
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise ValueError("expected a JSON object")
            return Config.from_dict(data)
        except (json.JSONDecodeError, ValueError, OSError) as e:
            print(f"Warning: Could not load {path}: {e}", file=sys.stderr)
            return Config()

    def get_config_path(self) -> Optional[Path]:
        return self._config_path


_manager = ConfigManager()


def load_config() -> Config:
    return _manager.load()


def get_config_path() -> Optional[Path]:
    return _manager.get_config_path()


__all__ = [
    "Config",
    "ConfigManager",
    "CredentialError",
    "DEFAULT_MODEL",
    "API_KEY_ENV",
    "API_KEY_FILENAME",
    "load_config",
    "get_config_path",
    "resolve_api_key",
]
