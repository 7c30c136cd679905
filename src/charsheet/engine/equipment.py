"""Inventory, slot assignment, equipment bonuses and encumbrance.

Every mutating operation ends with ``recalculate_equipment``, which
rebuilds the inventory aggregates (weight, loads, armor check penalty,
max Dex cap, spell failure) from scratch. Equip attempts are checked
before anything is touched, so a failed attempt leaves the character
exactly as it was.
"""

from __future__ import annotations

import math
from collections.abc import Iterable

from charsheet.core.config import get_settings
from charsheet.core.constants import BASE_ARMOR_CLASS, MAX_RANGE_INCREMENTS, RANGE_INCREMENT_PENALTY
from charsheet.core.logging import get_logger
from charsheet.engine.catalog import EquipmentCatalog, ItemOptions, get_catalog
from charsheet.engine.character import calculate_skill_totals
from charsheet.models.abilities import Bonus, stack_bonuses
from charsheet.models.character import Character
from charsheet.models.enums import (
    BonusType,
    EncumbranceLevel,
    EncumbranceVariant,
    EquipmentSlot,
    EquipmentType,
    WeaponHandedness,
)
from charsheet.models.equipment import (
    Armor,
    Effect,
    Equipment,
    EquipmentTemplate,
    Gear,
    Item,
    MagicItem,
    Shield,
    Weapon,
)
from charsheet.models.results import ArmorClass, CarryingCapacity, EquipmentBonuses, EquipResult


logger = get_logger(__name__)

LOAD_MULTIPLIERS = (1, 2, 3, 5)
"""Light, medium, heavy and maximum load as multiples of the base capacity."""

TOUCH_EXCLUDED_TYPES = frozenset({BonusType.ARMOR, BonusType.SHIELD, BonusType.NATURAL})


# =============================================================================
# Pure Calculations
# =============================================================================


def base_carrying_capacity(strength: int) -> float:
    """Light load in pounds for a Strength score."""
    if strength <= 10:
        return float(max(0, strength) * 10)
    if strength <= 20:
        return float((strength - 10) * 15 + 100)
    doublings, remainder = divmod(strength - 20, 10)
    factor = 2**doublings
    return float(250 * factor + remainder * 15 * factor)


def check_slot_compatibility(item: Item, slot: EquipmentSlot) -> str | None:
    """Error message if ``item`` may not go in ``slot``, else None."""
    if isinstance(item, Gear):
        return "Gear cannot be equipped"
    if isinstance(item, Weapon) and not slot.is_hand:
        return "Weapons can only be equipped to hand slots"
    if isinstance(item, Armor) and slot != EquipmentSlot.BODY:
        return "Armor can only be equipped to the body slot"
    if isinstance(item, Shield) and slot != EquipmentSlot.OFF_HAND:
        return "Shields can only be equipped to the off hand slot"
    if isinstance(item, MagicItem) and item.slot is not None and not slot.accepts(item.slot):
        if item.slot.is_ring:
            return f"{item.name} can only be equipped to a ring slot"
        return f"{item.name} can only be equipped to the {item.slot} slot"
    return None


def calculate_range_penalty(weapon: Weapon, distance: float) -> int:
    """Attack penalty for firing or throwing at ``distance`` feet.

    -2 for every full range increment beyond the first.
    """
    if not (weapon.is_ranged or weapon.is_thrown) or weapon.range_increment <= 0:
        return 0
    if distance <= weapon.range_increment:
        return 0
    increments = math.ceil(distance / weapon.range_increment)
    return RANGE_INCREMENT_PENALTY * (increments - 1)


def get_effective_range(weapon: Weapon) -> int:
    """Maximum range in feet: ten range increments."""
    return weapon.range_increment * MAX_RANGE_INCREMENTS


def _target_root(effect: Effect) -> str:
    # 'skills.stealth' -> 'skills'
    return effect.target.lower().split(".", 1)[0]


def _equipped_protection(equipment: Equipment) -> list[Armor | Shield]:
    return [item for item in equipment.equipped_items() if isinstance(item, Armor | Shield)]


def _total_weight(items: Iterable[Item]) -> float:
    return sum(item.weight * item.quantity for item in items)


# =============================================================================
# Equipment Engine
# =============================================================================


class EquipmentEngine:
    """Adds, removes, equips and evaluates a character's items.

    Example:
        >>> engine = EquipmentEngine()
        >>> engine.add_item_to_character(hero, catalog.get_by_id("longsword"))
        >>> sword = hero.equipment.weapons[-1]
        >>> engine.equip_item(hero, sword.id, EquipmentSlot.MAIN_HAND).is_valid
        True
    """

    def __init__(
        self,
        catalog: EquipmentCatalog | None = None,
        *,
        enforce_slot_compatibility: bool | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            catalog: Catalog used to stamp out items. Defaults to the Core Rulebook catalog.
            enforce_slot_compatibility: Check item kinds against slots when equipping.
                Gear is never equippable either way. Defaults to the rules settings.
        """
        self._catalog = catalog or get_catalog()
        if enforce_slot_compatibility is None:
            enforce_slot_compatibility = get_settings().rules.enforce_slot_compatibility
        self._enforce_slots = enforce_slot_compatibility

    @property
    def catalog(self) -> EquipmentCatalog:
        return self._catalog

    # =========================================================================
    # Inventory
    # =========================================================================

    def add_item_to_character(
        self,
        character: Character,
        template: EquipmentTemplate,
        options: ItemOptions | None = None,
    ) -> Character:
        """Create a new item from ``template`` and add it to the inventory."""
        item = self._catalog.create_item(template, options)
        character.equipment.items_of(EquipmentType(item.kind)).append(item)
        self.recalculate_equipment(character)
        character.touch()
        logger.info(
            "Item added",
            character_id=character.id,
            item_id=item.id,
            template_id=template.id,
        )
        return character

    def remove_item_from_character(self, character: Character, item_id: str) -> Character:
        """Remove an item, clearing any slot it occupies. Unknown ids are ignored."""
        equipment = character.equipment
        item = equipment.find_item(item_id)
        if item is None:
            logger.debug("Item to remove not found", character_id=character.id, item_id=item_id)
            return character

        holder = equipment.items_of(EquipmentType(item.kind))
        holder[:] = [entry for entry in holder if entry.id != item_id]
        for slot in [slot for slot, occupant in equipment.equipped_slots.items() if occupant == item_id]:
            del equipment.equipped_slots[slot]

        self.recalculate_equipment(character)
        character.touch()
        logger.info("Item removed", character_id=character.id, item_id=item_id)
        return character

    # =========================================================================
    # Slots
    # =========================================================================

    def equip_item(self, character: Character, item_id: str, slot: EquipmentSlot) -> EquipResult:
        """Put an item in a slot.

        Equipping to the two-handed slot clears both hands; equipping to
        either hand clears the two-handed slot. An item already in another
        slot moves to the new one. Items pushed out of a slot are reported
        as warnings.
        """
        slot = EquipmentSlot(slot)
        equipment = character.equipment
        errors: list[str] = []
        warnings: list[str] = []

        item = equipment.find_item(item_id)
        if item is None:
            errors.append("Item not found")
        else:
            if isinstance(item, Gear):
                errors.append("Gear cannot be equipped")
            elif self._enforce_slots:
                problem = check_slot_compatibility(item, slot)
                if problem:
                    errors.append(problem)
            occupant = equipment.equipped_slots.get(slot)
            if occupant is not None and occupant != item_id:
                errors.append(f"Slot {slot} is already occupied. Unequip the current item first.")

        if errors:
            logger.debug("Equip rejected", character_id=character.id, item_id=item_id, errors=errors)
            return EquipResult(is_valid=False, data=character, errors=errors, warnings=warnings)

        if slot == EquipmentSlot.TWO_HANDED:
            cleared = (EquipmentSlot.MAIN_HAND, EquipmentSlot.OFF_HAND)
        elif slot in (EquipmentSlot.MAIN_HAND, EquipmentSlot.OFF_HAND):
            cleared = (EquipmentSlot.TWO_HANDED,)
        else:
            cleared = ()
        moved_from = [s for s, occupant in equipment.equipped_slots.items() if occupant == item_id and s != slot]

        for other in (*cleared, *moved_from):
            displaced = self._release_slot(equipment, other)
            if displaced is not None and displaced.id != item_id:
                warnings.append(f"{displaced.name} was unequipped from {other}")

        equipment.equipped_slots[slot] = item_id
        item.equipped = True
        if isinstance(item, Weapon) and item.handedness == WeaponHandedness.TWO_HANDED and slot != EquipmentSlot.TWO_HANDED:
            warnings.append(f"{item.name} is a two-handed weapon")

        self.recalculate_equipment(character)
        character.touch()
        logger.info("Item equipped", character_id=character.id, item_id=item_id, slot=str(slot))
        return EquipResult(is_valid=True, data=character, errors=errors, warnings=warnings)

    def unequip_item(self, character: Character, slot: EquipmentSlot) -> Character:
        """Empty a slot. An already empty slot is left alone."""
        slot = EquipmentSlot(slot)
        released = self._release_slot(character.equipment, slot)
        if released is None:
            return character

        self.recalculate_equipment(character)
        character.touch()
        logger.info("Item unequipped", character_id=character.id, item_id=released.id, slot=str(slot))
        return character

    @staticmethod
    def _release_slot(equipment: Equipment, slot: EquipmentSlot) -> Item | None:
        item_id = equipment.equipped_slots.pop(slot, None)
        if item_id is None:
            return None
        item = equipment.find_item(item_id)
        still_slotted = item_id in equipment.equipped_slots.values()
        if item is not None and not isinstance(item, Gear) and not still_slotted:
            item.equipped = False
        return item

    # =========================================================================
    # Bonuses
    # =========================================================================

    def calculate_equipment_bonuses(self, character: Character) -> EquipmentBonuses:
        """Bonuses from equipped items, grouped by what they modify.

        Bonuses are listed, not stacked; apply ``stack_bonuses`` when
        totalling a list.
        """
        bonuses = EquipmentBonuses()
        for item in character.equipment.equipped_items():
            if isinstance(item, Weapon):
                self._add_weapon_bonuses(item, bonuses)
            elif isinstance(item, Armor | Shield):
                self._add_protection_bonuses(item, bonuses)
            elif isinstance(item, MagicItem):
                self._add_magic_item_bonuses(item, bonuses)
        return bonuses

    @staticmethod
    def _add_weapon_bonuses(weapon: Weapon, bonuses: EquipmentBonuses) -> None:
        if weapon.enhancement > 0:
            bonuses.attack_bonuses.append(
                Bonus(
                    type=BonusType.ENHANCEMENT,
                    value=weapon.enhancement,
                    source=weapon.name,
                    condition="attack rolls",
                )
            )
            bonuses.damage_bonuses.append(
                Bonus(
                    type=BonusType.ENHANCEMENT,
                    value=weapon.enhancement,
                    source=weapon.name,
                    condition="damage rolls",
                )
            )
        elif weapon.masterwork:
            bonuses.attack_bonuses.append(
                Bonus(
                    type=BonusType.ENHANCEMENT,
                    value=1,
                    source=f"{weapon.name} (masterwork)",
                    condition="attack rolls",
                )
            )

        for ability in weapon.special_abilities:
            for effect in ability.effects:
                root = _target_root(effect)
                if root == "attack":
                    bonuses.attack_bonuses.append(effect.to_bonus())
                elif root == "damage":
                    bonuses.damage_bonuses.append(effect.to_bonus())

        bonuses.attack_bonuses.extend(weapon.attack_bonuses)
        bonuses.damage_bonuses.extend(weapon.damage_bonuses)

    @staticmethod
    def _add_protection_bonuses(item: Armor | Shield, bonuses: EquipmentBonuses) -> None:
        bonus_type = BonusType.ARMOR if isinstance(item, Armor) else BonusType.SHIELD
        bonuses.ac_bonuses.append(
            Bonus(type=bonus_type, value=item.ac_bonus + item.enhancement, source=item.name)
        )
        for ability in item.special_abilities:
            for effect in ability.effects:
                if _target_root(effect) == "ac":
                    bonuses.ac_bonuses.append(effect.to_bonus())

    @staticmethod
    def _add_magic_item_bonuses(item: MagicItem, bonuses: EquipmentBonuses) -> None:
        for effect in item.continuous_effects:
            root = _target_root(effect)
            bonus = effect.to_bonus()
            if not bonus.source:
                bonus.source = item.name
            if root == "ac":
                bonuses.ac_bonuses.append(bonus)
            elif root in ("save", "saves"):
                bonuses.save_bonuses.append(bonus)
            elif root in ("skill", "skills"):
                bonuses.skill_bonuses.append(bonus)

    def calculate_armor_class(self, character: Character) -> ArmorClass:
        """Total, touch and flat-footed armor class.

        Dexterity is capped by the max Dex bonus of equipped armor. Touch
        AC ignores armor, shield and natural armor bonuses; flat-footed AC
        loses a positive Dex modifier and dodge bonuses.
        """
        ac_bonuses = self.calculate_equipment_bonuses(character).ac_bonuses
        dex = character.ability_scores.dexterity.modifier
        cap = self._max_dex_cap(character.equipment)
        if cap is not None:
            dex = min(dex, cap)

        total = BASE_ARMOR_CLASS + stack_bonuses(ac_bonuses) + dex
        touch = (
            BASE_ARMOR_CLASS
            + stack_bonuses(b for b in ac_bonuses if b.type not in TOUCH_EXCLUDED_TYPES)
            + dex
        )
        flat_footed = (
            BASE_ARMOR_CLASS
            + stack_bonuses(b for b in ac_bonuses if b.type != BonusType.DODGE)
            + min(dex, 0)
        )
        return ArmorClass(total=total, touch=touch, flat_footed=flat_footed)

    # =========================================================================
    # Aggregates
    # =========================================================================

    def recalculate_equipment(self, character: Character) -> Character:
        """Rebuild weight, loads, encumbrance and armor aggregates, then skill totals."""
        equipment = character.equipment
        protection = _equipped_protection(equipment)

        equipment.total_weight = _total_weight(equipment.all_items())
        equipment.ac_penalty = sum(
            max(0, abs(item.check_penalty) - (1 if item.masterwork else 0)) for item in protection
        )
        equipment.max_dex_bonus = self._max_dex_cap(equipment)
        equipment.spell_failure = sum(item.spell_failure for item in protection)

        capacity = self.get_carrying_capacity(character)
        equipment.light_load = capacity.light
        equipment.medium_load = capacity.medium
        equipment.heavy_load = capacity.heavy
        equipment.encumbrance_level = self.calculate_encumbrance(character)

        calculate_skill_totals(character)
        logger.debug(
            "Equipment recalculated",
            character_id=character.id,
            total_weight=equipment.total_weight,
            ac_penalty=equipment.ac_penalty,
            encumbrance=equipment.encumbrance_level,
        )
        return character

    @staticmethod
    def _max_dex_cap(equipment: Equipment) -> int | None:
        caps = [
            item.max_dex_bonus
            for item in equipment.equipped_items()
            if isinstance(item, Armor) and item.max_dex_bonus is not None
        ]
        return min(caps) if caps else None

    def get_carrying_capacity(self, character: Character) -> CarryingCapacity:
        """Load thresholds from total Strength, or the character's custom capacity."""
        custom = character.equipment.encumbrance_settings.custom_carrying_capacity
        if custom is not None:
            base = custom
        else:
            base = base_carrying_capacity(character.ability_scores.strength.total)
        light, medium, heavy, maximum = (base * multiple for multiple in LOAD_MULTIPLIERS)
        return CarryingCapacity(light=light, medium=medium, heavy=heavy, max=maximum)

    def calculate_encumbrance(self, character: Character) -> EncumbranceLevel | None:
        """Load tier for the weight carried; None when encumbrance is not tracked."""
        settings = character.equipment.encumbrance_settings
        if not settings.enabled or settings.variant == EncumbranceVariant.NONE:
            return None

        weight = _total_weight(character.equipment.all_items())
        capacity = self.get_carrying_capacity(character)

        if settings.variant == EncumbranceVariant.SIMPLIFIED:
            return EncumbranceLevel.LIGHT if weight <= capacity.light else EncumbranceLevel.HEAVY

        if weight <= capacity.light:
            return EncumbranceLevel.LIGHT
        if weight <= capacity.medium:
            return EncumbranceLevel.MEDIUM
        if weight <= capacity.heavy:
            return EncumbranceLevel.HEAVY
        return EncumbranceLevel.OVERLOADED

    def calculate_range_penalty(self, weapon: Weapon, distance: float) -> int:
        return calculate_range_penalty(weapon, distance)

    def get_effective_range(self, weapon: Weapon) -> int:
        return get_effective_range(weapon)


__all__ = [
    "LOAD_MULTIPLIERS",
    "base_carrying_capacity",
    "check_slot_compatibility",
    "calculate_range_penalty",
    "get_effective_range",
    "EquipmentEngine",
]
