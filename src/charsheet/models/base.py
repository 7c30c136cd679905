"""Shared pydantic base classes for the character model."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class RulesModel(BaseModel):
    """Base class for mutable character data.

    The engines update these models in place, so assignments are
    validated; unknown keys in imported documents are dropped.
    """

    model_config = ConfigDict(
        validate_assignment=True,
        extra="ignore",
    )


class ReferenceModel(BaseModel):
    """Base class for read-only reference rows and catalog templates."""

    model_config = ConfigDict(frozen=True, extra="ignore")


__all__ = ["RulesModel", "ReferenceModel"]
