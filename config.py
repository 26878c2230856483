"""Harness configuration.

One HarnessConfig describes a single harness run.  It is validated on
construction and frozen afterwards, so a run cannot change its own
parameters halfway through.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class HarnessConfig(BaseModel):
    """Sampling parameters for one harness run."""

    model_config = ConfigDict(frozen=True)

    iterations: int = Field(
        default=1000,
        ge=1,
        description="Random draws per law, after the edge-value combinations",
    )
    seed: int | None = Field(
        default=0,
        description="Seed for the run's own generator; None draws fresh entropy",
    )
    include_edge_cases: bool = Field(
        default=True,
        description="Check combinations of the type's edge values first",
    )
    max_edge_combinations: int = Field(
        default=512,
        ge=0,
        description="Cap on edge-value combinations per law",
    )
