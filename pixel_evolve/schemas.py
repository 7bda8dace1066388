"""
Pydantic schemas for run parameters.
Validates everything a run needs before any genome is constructed.
"""

from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, ValidationError

from evolution.errors import InvalidConfigError
from evolution.interfaces import (
    DEFAULT_MAX_GENERATIONS,
    DEFAULT_MUTATION_RATE,
    DEFAULT_PARENT_POOL_SIZE,
    AcceptancePolicy,
)


class ImageFormat(str, Enum):
    """Lossless formats supported for snapshots."""

    BMP = "bmp"
    PNG = "png"
    TIFF = "tiff"


class RunParameters(BaseModel):
    """Validated parameters of an evolution run."""

    parent_pool_size: int = Field(
        default=DEFAULT_PARENT_POOL_SIZE,
        gt=0,
        description="Number of fittest genomes selected as parents",
    )
    generations: int = Field(
        default=DEFAULT_MAX_GENERATIONS, ge=0, description="Number of generations to run"
    )
    mutation_rate: float = Field(
        default=DEFAULT_MUTATION_RATE,
        ge=0.0,
        le=1.0,
        description="Per-pixel mutation probability",
    )
    acceptance_policy: AcceptancePolicy = Field(
        default=AcceptancePolicy.BEST,
        description="'best' compares fittest genomes, 'mean_top_k' the parent pools",
    )
    max_workers: Optional[int] = Field(
        default=None, gt=0, description="Worker pool size (default: CPU count)"
    )
    seed: Optional[int] = Field(
        default=None, ge=0, description="Random seed for reproducible runs"
    )
    snapshot_interval: int = Field(
        default=100, ge=0, description="Generations between snapshots (0 disables)"
    )
    report_interval: int = Field(
        default=100, ge=0, description="Generations between progress lines"
    )
    output_dir: Path = Field(
        default=Path("results"), description="Directory for snapshots"
    )
    image_format: ImageFormat = Field(
        default=ImageFormat.BMP, description="Snapshot file format"
    )


def parse_run_parameters(**values) -> RunParameters:
    """Build RunParameters, translating validation failures to InvalidConfigError."""
    try:
        return RunParameters(**values)
    except ValidationError as e:
        errors = [
            {"field": ".".join(str(p) for p in err["loc"]), "message": err["msg"]}
            for err in e.errors()
        ]
        raise InvalidConfigError(
            f"Invalid run parameters: {errors[0]['field']}: {errors[0]['message']}",
            {"errors": errors},
        ) from e
