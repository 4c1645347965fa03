# src/lambdalog/config.py: Pydantic models for configuration.
# This module defines the immutable LoggingOptions shared by every logger of a
# provider, and the schema of the 'logging.yaml' file that produces them. It is
# responsible for loading and validating that file and for turning its
# declarative filter rules into the filter predicate.

from __future__ import annotations

from pathlib import Path
from typing import Callable, Dict, Literal, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .levels import LogLevel
from .util.errors import ConfigError
from .util.paths import expand_path, get_default_config_path

FilterPredicate = Callable[[str, LogLevel], bool]


class LoggingOptions(BaseModel):
    """Which fields appear in a record, plus an optional filter predicate."""
    model_config = ConfigDict(frozen=True)

    include_category: bool = True
    include_log_level: bool = True
    include_event_id: bool = False
    include_exception: bool = False
    include_scopes: bool = False
    include_newline: bool = True
    filter: Optional[FilterPredicate] = None


# --- Pydantic Models for Configuration Schema ---

class OptionsConfig(BaseModel):
    include_category: bool = True
    include_log_level: bool = True
    include_event_id: bool = False
    include_exception: bool = False
    include_scopes: bool = False
    include_newline: bool = True

class FilterConfig(BaseModel):
    default: Optional[LogLevel] = None
    categories: Dict[str, LogLevel] = Field(default_factory=dict)

    @field_validator("default", mode="before")
    @classmethod
    def _parse_default(cls, value):
        return None if value is None else LogLevel.parse(value)

    @field_validator("categories", mode="before")
    @classmethod
    def _parse_categories(cls, value):
        if not isinstance(value, dict):
            return value
        return {str(name): LogLevel.parse(level) for name, level in value.items()}

    def minimum_level(self, category: str) -> LogLevel:
        """The minimum level for category: longest matching prefix, then default."""
        best = None
        for prefix in self.categories:
            if category == prefix or category.startswith(prefix + "."):
                if best is None or len(prefix) > len(best):
                    best = prefix
        if best is not None:
            return self.categories[best]
        return self.default if self.default is not None else LogLevel.TRACE

    def build(self) -> Optional[FilterPredicate]:
        """Return the filter predicate, or None when no rule is configured."""
        if self.default is None and not self.categories:
            return None

        def predicate(category: str, level: LogLevel) -> bool:
            if level == LogLevel.NONE:
                return False
            return level >= self.minimum_level(category)

        return predicate

class OutputConfig(BaseModel):
    stream: Literal["stdout", "stderr"] = "stdout"
    indent: Optional[int] = Field(None, ge=0)

class LambdaLogConfig(BaseModel):
    level: str = "INFO"
    options: OptionsConfig = Field(default_factory=OptionsConfig)
    filter: FilterConfig = Field(default_factory=FilterConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)

    @field_validator("level")
    @classmethod
    def _check_level(cls, value: str) -> str:
        LogLevel.parse(value)
        return value.upper()

    def to_options(self) -> LoggingOptions:
        return LoggingOptions(**self.options.model_dump(), filter=self.filter.build())

    def stdlib_level(self) -> int:
        return LogLevel.parse(self.level).to_stdlib()


# --- Configuration Loading ---

def load_config(path: Optional[str | Path] = None) -> LambdaLogConfig:
    """
    Load, validate and return the logging configuration.

    Args:
        path: The YAML file to read. When None, the LAMBDALOG_CONFIG variable and
            then the per-user config file are tried; if neither exists the
            built-in defaults are returned.

    Raises:
        ConfigError: If an expected file is missing, unreadable or invalid.
    """
    config_path = expand_path(path) if path is not None else get_default_config_path()
    if config_path is None:
        return LambdaLogConfig()

    if not config_path.is_file():
        raise ConfigError(f"Configuration file not found at '{config_path}'.")

    try:
        with open(config_path, "r") as f:
            raw_config = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"Failed to read configuration file '{config_path}': {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse configuration file '{config_path}': {e}") from e

    try:
        return LambdaLogConfig.model_validate(raw_config or {})
    except ValidationError as e:
        raise ConfigError(f"Configuration validation failed:\n{e}") from e
