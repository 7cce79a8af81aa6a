#!/usr/bin/env python3

"""
Configuration management for the sequence database pipeline.

Centralized, immutable configuration with support for file-based
configuration, environment variable overrides and command line overrides.
"""

import os
import json
from dataclasses import dataclass, asdict, fields, replace
from typing import Optional, Dict, Any

import yaml

from .exceptions import ConfigurationError


def _as_bool(value: str) -> bool:
    return value.lower() in ('true', '1', 'yes')


@dataclass(frozen=True)
class PipelineConfig:
    """Settings for one database build."""

    # Source selection and output location
    database: str = ""
    output_dir: str = ""
    force: bool = False

    # Output format
    line_width: int = 60
    id_separator: str = "~~~"

    # Indexing
    index_program: str = "makeblastdb"

    # Performance settings
    memory_limit_mb: int = 4096
    enable_memory_monitoring: bool = True

    # Reporting
    generate_reports: bool = True
    debug_mode: bool = False

    @classmethod
    def from_file(cls, config_path: str) -> 'PipelineConfig':
        """Load configuration from file (JSON or YAML)."""
        return cls.from_dict(cls.read_file(config_path))

    @classmethod
    def read_file(cls, config_path: str) -> Dict[str, Any]:
        """Read the raw mapping from a configuration file (JSON or YAML)."""
        if not os.path.exists(config_path):
            raise ConfigurationError(f"Configuration file not found: {config_path}")

        try:
            with open(config_path, 'r') as f:
                if config_path.lower().endswith(('.yaml', '.yml')):
                    config_data = yaml.safe_load(f) or {}
                else:
                    config_data = json.load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML configuration file format: {e}")
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid configuration file format: {e}")
        except OSError as e:
            raise ConfigurationError(f"Error loading configuration: {e}")

        if not isinstance(config_data, dict):
            raise ConfigurationError(f"Configuration file must contain a mapping: {config_path}")
        return config_data

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> 'PipelineConfig':
        """Create configuration from dictionary."""
        # Filter out unknown keys
        known_keys = set(cls.__dataclass_fields__.keys())
        filtered_dict = {k: v for k, v in config_dict.items() if k in known_keys}

        try:
            return cls(**filtered_dict)
        except TypeError as e:
            raise ConfigurationError(f"Invalid configuration parameters: {e}")

    @classmethod
    def env_values(cls) -> Dict[str, Any]:
        """Read the SEQDB_* environment variables that are set."""
        env_mappings = {
            'SEQDB_DATABASE': ('database', str),
            'SEQDB_OUTPUT_DIR': ('output_dir', str),
            'SEQDB_FORCE': ('force', _as_bool),
            'SEQDB_LINE_WIDTH': ('line_width', int),
            'SEQDB_INDEX_PROGRAM': ('index_program', str),
            'SEQDB_MEMORY_LIMIT_MB': ('memory_limit_mb', int),
            'SEQDB_DEBUG_MODE': ('debug_mode', _as_bool),
        }

        values = {}
        for env_var, (field_name, converter) in env_mappings.items():
            env_value = os.getenv(env_var)
            if env_value:
                try:
                    values[field_name] = converter(env_value)
                except (ValueError, TypeError) as e:
                    raise ConfigurationError(f"Invalid environment variable {env_var}: {e}")
        return values

    @classmethod
    def from_env(cls) -> 'PipelineConfig':
        """Load configuration from environment variables."""
        return cls.from_dict(cls.env_values())

    def with_overrides(self, **overrides: Any) -> 'PipelineConfig':
        """Return a copy with the given non-None fields replaced."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        unknown = set(changes) - {f.name for f in fields(self)}
        if unknown:
            raise ConfigurationError(f"Unknown configuration parameters: {', '.join(sorted(unknown))}")
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return asdict(self)

    def save_to_file(self, config_path: str) -> None:
        """Save configuration to file."""
        config_dict = self.to_dict()

        try:
            with open(config_path, 'w') as f:
                if config_path.lower().endswith(('.yaml', '.yml')):
                    yaml.safe_dump(config_dict, f, default_flow_style=False)
                else:
                    json.dump(config_dict, f, indent=2)
        except OSError as e:
            raise ConfigurationError(f"Error saving configuration: {e}")

    def validate(self) -> None:
        """Validate configuration parameters."""
        if self.line_width < 1:
            raise ConfigurationError("line_width must be >= 1")

        if not self.id_separator or any(c.isspace() for c in self.id_separator):
            raise ConfigurationError("id_separator must be non-empty and contain no whitespace")

        if self.memory_limit_mb < 100:
            raise ConfigurationError("memory_limit_mb must be >= 100")

        if not self.index_program:
            raise ConfigurationError("index_program must be set")

    def __post_init__(self):
        """Validate configuration after initialization."""
        self.validate()


def load_config(config_path: Optional[str] = None,
                use_env: bool = True,
                **overrides: Any) -> PipelineConfig:
    """
    Load configuration with priority: overrides > file > environment > defaults.

    Args:
        config_path: Path to configuration file (optional)
        use_env: Whether to load environment variables
        overrides: Explicit values (e.g. from the command line); None is ignored

    Returns:
        PipelineConfig: Loaded configuration
    """
    values: Dict[str, Any] = {}

    if use_env:
        values.update(PipelineConfig.env_values())

    if config_path:
        # Every key present in the file wins over the environment, even if it
        # restates a default
        file_values = PipelineConfig.read_file(config_path)
        values.update(file_values)

    config = PipelineConfig.from_dict(values)
    return config.with_overrides(**overrides)
