"""Result types returned by the rules checks and equipment operations.

Rule checks never raise for bad input: they report problems as
``errors`` (cannot be accepted as-is) and ``warnings`` (accepted, but
worth a second look).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field

from charsheet.models.abilities import Bonus


if TYPE_CHECKING:
    from charsheet.models.character import Character


class ValidationResult(BaseModel):
    """Outcome of a rules check."""

    is_valid: bool = True
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    @property
    def valid(self) -> bool:
        return self.is_valid

    @classmethod
    def from_messages(cls, errors: list[str], warnings: list[str] | None = None) -> ValidationResult:
        """Build a result that is valid exactly when there are no errors."""
        return cls(is_valid=not errors, errors=errors, warnings=warnings or [])

    def merge(self, other: ValidationResult) -> ValidationResult:
        """Combine two results; invalid if either is."""
        return ValidationResult(
            is_valid=self.is_valid and other.is_valid,
            errors=[*self.errors, *other.errors],
            warnings=[*self.warnings, *other.warnings],
        )


@dataclass
class EquipResult:
    """Outcome of an equip attempt.

    ``data`` is the character: updated on success, untouched on failure.
    """

    is_valid: bool
    data: Character
    errors: list[str]
    warnings: list[str]


class EquipmentBonuses(BaseModel):
    """Bonuses granted by currently equipped items, grouped by what they modify."""

    attack_bonuses: list[Bonus] = Field(default_factory=list)
    damage_bonuses: list[Bonus] = Field(default_factory=list)
    ac_bonuses: list[Bonus] = Field(default_factory=list)
    save_bonuses: list[Bonus] = Field(default_factory=list)
    skill_bonuses: list[Bonus] = Field(default_factory=list)


@dataclass(frozen=True)
class CarryingCapacity:
    """Load thresholds in pounds."""

    light: float
    medium: float
    heavy: float
    max: float


@dataclass(frozen=True)
class ArmorClass:
    total: int
    touch: int
    flat_footed: int


@dataclass(frozen=True)
class PointBuyPreset:
    name: str
    points: int
    description: str


__all__ = [
    "ValidationResult",
    "EquipResult",
    "EquipmentBonuses",
    "CarryingCapacity",
    "ArmorClass",
    "PointBuyPreset",
]
