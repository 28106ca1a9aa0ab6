"""Shared pydantic configuration for engine inputs and results."""

from __future__ import annotations

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class EngineModel(BaseModel):
    """Base model accepting snake_case names or camelCase aliases, nothing else."""

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "extra": "forbid",
    }
