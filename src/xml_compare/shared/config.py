"""Configuration classes for XML comparison.

This module provides configuration objects for the event source and the
comparators, with validation, presets and JSON round-tripping for the CLI.
"""

import codecs
import json
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional

DEFAULT_CHUNK_SIZE = 64 * 1024
DEFAULT_MAX_DIFFERENCES = 1000

_COMPONENTS = ("source", "streaming", "global_")


@dataclass
class SourceConfig:
    """Configuration for reading XML files as event streams."""

    chunk_size: int = DEFAULT_CHUNK_SIZE
    resolve_entities: bool = False
    no_network: bool = True
    huge_tree: bool = False

    def __post_init__(self) -> None:
        """Validate source configuration."""
        if self.chunk_size <= 0:
            raise ValueError("chunk_size must be > 0")


@dataclass
class StreamingConfig:
    """Configuration for the streaming comparator."""

    max_differences: int = DEFAULT_MAX_DIFFERENCES
    report_encoding: str = "utf-8"
    track_memory: bool = True

    def __post_init__(self) -> None:
        """Validate streaming configuration."""
        if self.max_differences <= 0:
            raise ValueError("max_differences must be > 0")
        if not self.report_encoding:
            raise ValueError("report_encoding cannot be empty")
        try:
            codecs.lookup(self.report_encoding)
        except LookupError as e:
            raise ValueError(f"Unknown report_encoding: {self.report_encoding}") from e


@dataclass
class GlobalConfig:
    """Settings that apply across all components."""

    logging_level: str = "INFO"

    def __post_init__(self) -> None:
        """Validate global configuration."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if self.logging_level not in valid_levels:
            raise ValueError(f"logging_level must be one of {valid_levels}")


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


@dataclass(frozen=True)
class ComparatorConfig:
    """Complete configuration for the comparison engine.

    Immutable so a single instance can be shared by every comparator created
    from it.
    """

    source: SourceConfig = field(default_factory=SourceConfig)
    streaming: StreamingConfig = field(default_factory=StreamingConfig)
    global_: GlobalConfig = field(default_factory=GlobalConfig)

    name: Optional[str] = None
    description: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate the complete configuration."""
        try:
            self.source.__post_init__()
            self.streaming.__post_init__()
            self.global_.__post_init__()
        except ValueError as e:
            raise ConfigValidationError(str(e)) from e

    def override(self, **kwargs: Any) -> "ComparatorConfig":
        """Create a new configuration with specific overrides.

        Nested fields use ``component__field`` notation.

        Example:
            >>> config = ComparatorConfig()
            >>> config.override(streaming__max_differences=50).streaming.max_differences
            50
        """
        nested_overrides: Dict[str, Dict[str, Any]] = {}
        top_level: Dict[str, Any] = {}
        for key, value in kwargs.items():
            if "__" in key:
                component, field_name = key.split("__", 1)
                if component not in _COMPONENTS:
                    raise ConfigValidationError(
                        f"Unknown configuration component: {component}",
                        field_name=key,
                        suggestions=list(_COMPONENTS),
                    )
                nested_overrides.setdefault(component, {})[field_name] = value
            else:
                top_level[key] = value

        new_fields: Dict[str, Any] = {}
        try:
            for component, overrides in nested_overrides.items():
                new_fields[component] = replace(getattr(self, component), **overrides)
            new_fields.update(top_level)
            return replace(self, **new_fields)
        except (TypeError, ValueError) as e:
            raise ConfigValidationError(str(e)) from e

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""
        def _dataclass_to_dict(obj: Any) -> Any:
            if hasattr(obj, "__dataclass_fields__"):
                return {
                    name: _dataclass_to_dict(getattr(obj, name))
                    for name in obj.__dataclass_fields__
                }
            return obj

        return _dataclass_to_dict(self)

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ComparatorConfig":
        """Create configuration from dictionary.

        Unknown keys are rejected rather than ignored.
        """
        component_types = {
            "source": SourceConfig,
            "streaming": StreamingConfig,
            "global_": GlobalConfig,
        }
        values: Dict[str, Any] = {}
        try:
            for key, value in data.items():
                if key in component_types:
                    if not isinstance(value, dict):
                        raise ConfigValidationError(
                            f"Section '{key}' must be an object", field_name=key
                        )
                    values[key] = component_types[key](**value)
                elif key in ("name", "description"):
                    values[key] = value
                else:
                    raise ConfigValidationError(
                        f"Unknown configuration key: {key}", field_name=key
                    )
        except (TypeError, ValueError) as e:
            raise ConfigValidationError(str(e)) from e
        return cls(**values)

    @classmethod
    def from_json(cls, json_str: str) -> "ComparatorConfig":
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise ConfigValidationError(f"Invalid configuration JSON: {e}") from e
        if not isinstance(data, dict):
            raise ConfigValidationError("Configuration JSON must be an object")
        return cls.from_dict(data)

    # Preset factory methods
    @classmethod
    def default(cls) -> "ComparatorConfig":
        return cls(name="default")

    @classmethod
    def large_files(cls) -> "ComparatorConfig":
        """Create preset for multi-gigabyte inputs."""
        return cls(
            source=SourceConfig(chunk_size=1024 * 1024, huge_tree=True),
            streaming=StreamingConfig(track_memory=True),
            name="large_files",
            description="Larger read chunks and lxml huge_tree support for very large files",
        )
