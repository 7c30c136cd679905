"""Equipment models: catalog templates, item kinds and the inventory.

Every item instance carries a ``kind`` tag fixed at creation; the
inventory keeps one list per kind and a slot map from EquipmentSlot to
the id of the occupying item.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import Annotated, Any, Literal

from pydantic import Field, field_serializer, field_validator

from charsheet.models.abilities import Bonus
from charsheet.models.base import ReferenceModel, RulesModel
from charsheet.models.enums import (
    BonusType,
    EncumbranceLevel,
    EncumbranceVariant,
    EquipmentSlot,
    EquipmentType,
    WeaponHandedness,
)


# =============================================================================
# Templates
# =============================================================================


class EquipmentTemplate(ReferenceModel):
    """Immutable catalog entry used to stamp out item instances.

    Attributes:
        id: Stable catalog identifier (e.g., 'longsword').
        name: Display name.
        type: Which item kind instances of this template become.
        category: Catalog section ('Weapons', 'Armor', 'Shields', 'Gear', 'Magic Items').
        subcategory: Finer grouping (e.g., 'Martial Melee', 'Light Armor').
        source: Rulebook the entry comes from.
        base_price: Price in gold pieces.
        base_weight: Weight in pounds.
        description: Short rules text.
        properties: Kind-specific fields copied onto each instance.
    """

    id: str
    name: str
    type: EquipmentType
    category: str
    subcategory: str = ""
    source: str = "Core Rulebook"
    base_price: float = Field(default=0.0, ge=0)
    base_weight: float = Field(default=0.0, ge=0)
    description: str = ""
    properties: dict[str, Any] = Field(default_factory=dict)


# =============================================================================
# Effects
# =============================================================================


class EffectCondition(RulesModel):
    """When a conditional effect applies."""

    type: str = "situational"
    description: str = ""


class EffectActivation(RulesModel):
    """How an effect is switched on."""

    type: str = "continuous"
    uses_per_day: int | None = None
    uses_remaining: int | None = None
    active: bool = True


class Effect(RulesModel):
    """A rules effect granted by an item.

    ``target`` names what the effect modifies, e.g. 'ac', 'saves',
    'skills', 'attack' or 'damage'.
    """

    type: str = "bonus"
    bonus_type: BonusType | None = None
    target: str
    value: int = 0
    source: str = ""
    condition: EffectCondition | None = None
    duration: str | None = None
    activation: EffectActivation | None = None

    @property
    def is_active(self) -> bool:
        return self.activation.active if self.activation is not None else True

    def to_bonus(self) -> Bonus:
        """Surface this effect as a Bonus; untyped when no bonus type is declared."""
        return Bonus(
            type=self.bonus_type or BonusType.UNTYPED,
            value=self.value,
            source=self.source,
            condition=self.condition.description if self.condition else None,
            active=self.is_active,
        )


class ItemAbility(RulesModel):
    """A special ability on a weapon, armor or shield (e.g., 'flaming')."""

    name: str
    description: str = ""
    bonus_equivalent: int = 0
    effects: list[Effect] = Field(default_factory=list)


# =============================================================================
# Items
# =============================================================================


class BaseItem(RulesModel):
    """Fields shared by every item kind."""

    id: str
    name: str
    template_id: str | None = None
    weight: float = Field(default=0.0, ge=0)
    quantity: int = Field(default=1, ge=1)
    cost: float = Field(default=0.0, ge=0, description="Price in gold pieces")
    description: str = ""
    notes: str = ""


class Weapon(BaseItem):
    """A weapon instance."""

    kind: Literal["weapon"] = "weapon"
    weapon_category: str = "simple"
    handedness: WeaponHandedness = WeaponHandedness.ONE_HANDED
    damage_small: str = ""
    damage_medium: str = ""
    critical: str = "20/x2"
    damage_types: list[str] = Field(default_factory=list)
    special: list[str] = Field(default_factory=list)
    is_ranged: bool = False
    is_thrown: bool = False
    range_increment: int = Field(default=0, ge=0, description="Feet")
    ammunition_type: str | None = None

    equipped: bool = False
    masterwork: bool = False
    material: str | None = None
    enhancement: int = Field(default=0, ge=0)
    special_abilities: list[ItemAbility] = Field(default_factory=list)
    attack_bonuses: list[Bonus] = Field(default_factory=list)
    damage_bonuses: list[Bonus] = Field(default_factory=list)


class Armor(BaseItem):
    """A suit of armor."""

    kind: Literal["armor"] = "armor"
    armor_category: str = "light"
    ac_bonus: int = Field(default=0, ge=0)
    max_dex_bonus: int | None = None
    check_penalty: int = Field(default=0, le=0)
    spell_failure: int = Field(default=0, ge=0, le=100)
    speed_30: int = 30
    speed_20: int = 20

    equipped: bool = False
    masterwork: bool = False
    material: str | None = None
    enhancement: int = Field(default=0, ge=0)
    special_abilities: list[ItemAbility] = Field(default_factory=list)


class Shield(BaseItem):
    """A shield."""

    kind: Literal["shield"] = "shield"
    shield_category: str = "light"
    ac_bonus: int = Field(default=0, ge=0)
    check_penalty: int = Field(default=0, le=0)
    spell_failure: int = Field(default=0, ge=0, le=100)

    equipped: bool = False
    masterwork: bool = False
    material: str | None = None
    enhancement: int = Field(default=0, ge=0)
    special_abilities: list[ItemAbility] = Field(default_factory=list)


class MagicItem(BaseItem):
    """A wondrous item, ring or other slotted magic item."""

    kind: Literal["magic_item"] = "magic_item"
    slot: EquipmentSlot | None = None
    aura: str = ""
    caster_level: int = Field(default=0, ge=0)
    charges: int | None = None
    continuous_effects: list[Effect] = Field(default_factory=list)
    activated_effects: list[Effect] = Field(default_factory=list)

    equipped: bool = False


class Gear(BaseItem):
    """Adventuring gear. Carried, never equipped."""

    kind: Literal["gear"] = "gear"
    gear_category: str = ""
    is_consumable: bool = False
    uses_remaining: int | None = None


EquippableItem = Weapon | Armor | Shield | MagicItem
Item = Annotated[Weapon | Armor | Shield | MagicItem | Gear, Field(discriminator="kind")]


# =============================================================================
# Inventory
# =============================================================================


class EncumbranceSettings(RulesModel):
    """Per-character encumbrance options."""

    enabled: bool = False
    variant: EncumbranceVariant = EncumbranceVariant.CORE_RULES
    custom_carrying_capacity: float | None = Field(default=None, gt=0)


class Equipment(RulesModel):
    """A character's inventory, slot assignments and equipment aggregates.

    The aggregates (weights, loads, penalties) are rebuilt by the
    equipment engine after every change and are not edited directly.
    """

    weapons: list[Weapon] = Field(default_factory=list)
    armor: list[Armor] = Field(default_factory=list)
    shields: list[Shield] = Field(default_factory=list)
    magic_items: list[MagicItem] = Field(default_factory=list)
    gear: list[Gear] = Field(default_factory=list)

    equipped_slots: dict[EquipmentSlot, str] = Field(default_factory=dict)
    encumbrance_settings: EncumbranceSettings = Field(default_factory=EncumbranceSettings)

    total_weight: float = 0.0
    light_load: float = 0.0
    medium_load: float = 0.0
    heavy_load: float = 0.0
    encumbrance_level: EncumbranceLevel | None = None
    ac_penalty: int = 0
    max_dex_bonus: int | None = None
    spell_failure: int = 0

    @field_serializer("equipped_slots")
    def serialize_equipped_slots(self, slots: dict[EquipmentSlot, str]) -> dict[str, str]:
        """Write the slot map as a plain ``{slot value: item id}`` object."""
        return {slot.value: slots[slot] for slot in EquipmentSlot if slot in slots}

    @field_validator("equipped_slots", mode="before")
    @classmethod
    def parse_equipped_slots(cls, value: Any) -> dict[EquipmentSlot, str]:
        """Read the slot map from an object or a list of ``[slot, id]`` pairs."""
        if value is None:
            return {}
        if isinstance(value, Mapping):
            pairs = value.items()
        else:
            pairs = value
        return {EquipmentSlot(slot): str(item_id) for slot, item_id in pairs}

    def all_items(self) -> Iterator[Weapon | Armor | Shield | MagicItem | Gear]:
        """Every carried item across all kinds."""
        yield from self.weapons
        yield from self.armor
        yield from self.shields
        yield from self.magic_items
        yield from self.gear

    def find_item(self, item_id: str) -> Weapon | Armor | Shield | MagicItem | Gear | None:
        for item in self.all_items():
            if item.id == item_id:
                return item
        return None

    def items_of(self, kind: EquipmentType) -> list[Any]:
        """The list holding items of one kind."""
        return {
            EquipmentType.WEAPON: self.weapons,
            EquipmentType.ARMOR: self.armor,
            EquipmentType.SHIELD: self.shields,
            EquipmentType.MAGIC_ITEM: self.magic_items,
            EquipmentType.GEAR: self.gear,
        }[kind]

    def equipped_items(self) -> Iterator[EquippableItem]:
        """Items currently occupying a slot, in slot order, each once."""
        seen: set[str] = set()
        for slot in EquipmentSlot:
            item_id = self.equipped_slots.get(slot)
            if item_id is None or item_id in seen:
                continue
            item = self.find_item(item_id)
            if item is not None and not isinstance(item, Gear):
                seen.add(item_id)
                yield item


__all__ = [
    "EquipmentTemplate",
    "EffectCondition",
    "EffectActivation",
    "Effect",
    "ItemAbility",
    "BaseItem",
    "Weapon",
    "Armor",
    "Shield",
    "MagicItem",
    "Gear",
    "EquippableItem",
    "Item",
    "EncumbranceSettings",
    "Equipment",
]
