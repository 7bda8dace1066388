"""
Centralized configuration management for pixel-evolve.
"""

import json
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from evolution.errors import InvalidConfigError
from evolution.interfaces import (
    DEFAULT_MAX_GENERATIONS,
    DEFAULT_MUTATION_RATE,
    DEFAULT_PARENT_POOL_SIZE,
)
from pixel_evolve.schemas import RunParameters, parse_run_parameters


@dataclass
class EvolutionSettings:
    """Evolution algorithm settings."""

    parent_pool_size: int = DEFAULT_PARENT_POOL_SIZE
    mutation_rate: float = DEFAULT_MUTATION_RATE
    max_generations: int = DEFAULT_MAX_GENERATIONS
    acceptance_policy: str = "best"
    max_workers: Optional[int] = None
    seed: Optional[int] = None


@dataclass
class SnapshotSettings:
    """Snapshot output settings."""

    output_dir: str = "results"
    interval: int = 100
    image_format: str = "bmp"


@dataclass
class ReportSettings:
    """Progress reporting settings."""

    interval: int = 100
    history_file: Optional[str] = None


@dataclass
class LoggingSettings:
    """Logging configuration."""

    level: str = "INFO"
    json_output: bool = False
    use_colors: bool = True
    log_file: Optional[str] = None


@dataclass
class Config:
    """Main configuration container."""

    evolution: EvolutionSettings = field(default_factory=EvolutionSettings)
    snapshots: SnapshotSettings = field(default_factory=SnapshotSettings)
    reporting: ReportSettings = field(default_factory=ReportSettings)
    logging: LoggingSettings = field(default_factory=LoggingSettings)

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Config":
        """Create config from dictionary.

        Raises:
            InvalidConfigError: if a section is malformed or has unknown keys
        """
        try:
            return cls(
                evolution=EvolutionSettings(**data.get("evolution", {})),
                snapshots=SnapshotSettings(**data.get("snapshots", {})),
                reporting=ReportSettings(**data.get("reporting", {})),
                logging=LoggingSettings(**data.get("logging", {})),
            )
        except (AttributeError, TypeError) as e:
            raise InvalidConfigError(f"Invalid configuration: {e}") from e

    def save(self, path: Path) -> None:
        """Save config to file."""
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load(cls, path: Path) -> "Config":
        """Load config from file."""
        with open(path) as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise InvalidConfigError(
                    f"Configuration file {path} is not valid JSON: {e}",
                    {"path": str(path)},
                ) from e
        return cls.from_dict(data)

    def to_run_parameters(self, **overrides: Any) -> RunParameters:
        """Validate settings, with CLI overrides, as run parameters.

        Raises:
            InvalidConfigError: if any value is out of range
        """
        values: Dict[str, Any] = {
            "parent_pool_size": self.evolution.parent_pool_size,
            "generations": self.evolution.max_generations,
            "mutation_rate": self.evolution.mutation_rate,
            "acceptance_policy": self.evolution.acceptance_policy,
            "max_workers": self.evolution.max_workers,
            "seed": self.evolution.seed,
            "snapshot_interval": self.snapshots.interval,
            "report_interval": self.reporting.interval,
            "output_dir": self.snapshots.output_dir,
            "image_format": self.snapshots.image_format,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return parse_run_parameters(**values)


def get_config(config_path: Optional[Path] = None) -> Config:
    """Get configuration, loading from file if available.

    Priority:
    1. Explicit config_path
    2. pixel-evolve.json in current directory
    3. Defaults

    Environment variables are applied on top of whichever source is used.
    """
    paths_to_try = []

    if config_path:
        paths_to_try.append(config_path)
    paths_to_try.append(Path("pixel-evolve.json"))

    config = Config()
    for path in paths_to_try:
        if path.exists():
            config = Config.load(path)
            break

    _apply_env_overrides(config)
    return config


def _apply_env_overrides(config: Config) -> None:
    """Apply environment variable overrides to config."""
    env_mappings: Dict[str, tuple] = {
        "PIXEL_EVOLVE_PARENT_POOL_SIZE": ("evolution", "parent_pool_size", int),
        "PIXEL_EVOLVE_MUTATION_RATE": ("evolution", "mutation_rate", float),
        "PIXEL_EVOLVE_MAX_GENERATIONS": ("evolution", "max_generations", int),
        "PIXEL_EVOLVE_ACCEPTANCE_POLICY": ("evolution", "acceptance_policy", str),
        "PIXEL_EVOLVE_MAX_WORKERS": ("evolution", "max_workers", int),
        "PIXEL_EVOLVE_SEED": ("evolution", "seed", int),
        "PIXEL_EVOLVE_OUTPUT_DIR": ("snapshots", "output_dir", str),
        "PIXEL_EVOLVE_LOG_LEVEL": ("logging", "level", str),
        "PIXEL_EVOLVE_LOG_JSON": (
            "logging",
            "json_output",
            lambda x: x.lower() == "true",
        ),
    }

    for env_var, (section, key, converter) in env_mappings.items():
        value = os.environ.get(env_var)
        if value is not None:
            try:
                converted = converter(value)  # type: ignore[operator]
                setattr(getattr(config, section), key, converted)
            except (ValueError, TypeError):
                pass  # Ignore invalid env values
