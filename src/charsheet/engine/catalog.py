"""Equipment catalog: Core Rulebook templates, lookup, search and item factories.

Templates never change. Every call to ``create_item`` stamps out a new
item instance with a fresh id of the form
``{template_id}_{epoch_ms}_{9 base-36 characters}``.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from charsheet.core.exceptions import EquipmentError
from charsheet.core.logging import get_logger
from charsheet.engine.dice import DiceRoller, generate_id, get_default_roller
from charsheet.models.enums import BonusType, EquipmentSlot, EquipmentType, WeaponHandedness
from charsheet.models.equipment import (
    Armor,
    Effect,
    EquipmentTemplate,
    Gear,
    Item,
    MagicItem,
    Shield,
    Weapon,
)


logger = get_logger(__name__)


# =============================================================================
# Templates (Core Rulebook chapter 6)
# =============================================================================

WEAPON_TEMPLATES: tuple[EquipmentTemplate, ...] = (
    EquipmentTemplate(
        id="club",
        name="Club",
        type=EquipmentType.WEAPON,
        category="Weapons",
        subcategory="Simple Melee",
        base_price=0,
        base_weight=3,
        description="A simple wooden club",
        properties={
            "weapon_category": "simple",
            "handedness": WeaponHandedness.ONE_HANDED,
            "damage_small": "1d4",
            "damage_medium": "1d6",
            "critical": "20/x2",
            "damage_types": ["bludgeoning"],
            "is_thrown": True,
            "range_increment": 10,
        },
    ),
    EquipmentTemplate(
        id="dagger",
        name="Dagger",
        type=EquipmentType.WEAPON,
        category="Weapons",
        subcategory="Simple Light",
        base_price=2,
        base_weight=1,
        description="A short blade that can be thrown",
        properties={
            "weapon_category": "simple",
            "handedness": WeaponHandedness.LIGHT,
            "damage_small": "1d3",
            "damage_medium": "1d4",
            "critical": "19-20/x2",
            "damage_types": ["piercing", "slashing"],
            "is_thrown": True,
            "range_increment": 10,
        },
    ),
    EquipmentTemplate(
        id="spear",
        name="Spear",
        type=EquipmentType.WEAPON,
        category="Weapons",
        subcategory="Simple Two-Handed",
        base_price=2,
        base_weight=6,
        description="A long shaft with a pointed head",
        properties={
            "weapon_category": "simple",
            "handedness": WeaponHandedness.TWO_HANDED,
            "damage_small": "1d6",
            "damage_medium": "1d8",
            "critical": "20/x3",
            "damage_types": ["piercing"],
            "special": ["brace"],
            "is_thrown": True,
            "range_increment": 20,
        },
    ),
    EquipmentTemplate(
        id="longsword",
        name="Longsword",
        type=EquipmentType.WEAPON,
        category="Weapons",
        subcategory="Martial One-Handed",
        base_price=15,
        base_weight=4,
        description="A straight, double-edged blade",
        properties={
            "weapon_category": "martial",
            "handedness": WeaponHandedness.ONE_HANDED,
            "damage_small": "1d6",
            "damage_medium": "1d8",
            "critical": "19-20/x2",
            "damage_types": ["slashing"],
        },
    ),
    EquipmentTemplate(
        id="greatsword",
        name="Greatsword",
        type=EquipmentType.WEAPON,
        category="Weapons",
        subcategory="Martial Two-Handed",
        base_price=50,
        base_weight=8,
        description="A massive two-handed blade",
        properties={
            "weapon_category": "martial",
            "handedness": WeaponHandedness.TWO_HANDED,
            "damage_small": "1d10",
            "damage_medium": "2d6",
            "critical": "19-20/x2",
            "damage_types": ["slashing"],
        },
    ),
    EquipmentTemplate(
        id="shortbow",
        name="Shortbow",
        type=EquipmentType.WEAPON,
        category="Weapons",
        subcategory="Martial Ranged",
        base_price=30,
        base_weight=2,
        description="A short bow for hunting and skirmishing",
        properties={
            "weapon_category": "martial",
            "handedness": WeaponHandedness.TWO_HANDED,
            "damage_small": "1d4",
            "damage_medium": "1d6",
            "critical": "20/x3",
            "damage_types": ["piercing"],
            "is_ranged": True,
            "range_increment": 60,
            "ammunition_type": "arrows",
        },
    ),
    EquipmentTemplate(
        id="longbow",
        name="Longbow",
        type=EquipmentType.WEAPON,
        category="Weapons",
        subcategory="Martial Ranged",
        base_price=100,
        base_weight=3,
        description="A tall bow with a long reach",
        properties={
            "weapon_category": "martial",
            "handedness": WeaponHandedness.TWO_HANDED,
            "damage_small": "1d6",
            "damage_medium": "1d8",
            "critical": "20/x3",
            "damage_types": ["piercing"],
            "is_ranged": True,
            "range_increment": 100,
            "ammunition_type": "arrows",
        },
    ),
)


def _armor(
    id: str,
    name: str,
    subcategory: str,
    price: float,
    weight: float,
    ac_bonus: int,
    max_dex_bonus: int,
    check_penalty: int,
    spell_failure: int,
    speed: tuple[int, int] = (30, 20),
    description: str = "",
) -> EquipmentTemplate:
    return EquipmentTemplate(
        id=id,
        name=name,
        type=EquipmentType.ARMOR,
        category="Armor",
        subcategory=subcategory,
        base_price=price,
        base_weight=weight,
        description=description,
        properties={
            "armor_category": subcategory.split()[0].lower(),
            "ac_bonus": ac_bonus,
            "max_dex_bonus": max_dex_bonus,
            "check_penalty": check_penalty,
            "spell_failure": spell_failure,
            "speed_30": speed[0],
            "speed_20": speed[1],
        },
    )


ARMOR_TEMPLATES: tuple[EquipmentTemplate, ...] = (
    _armor("padded", "Padded", "Light Armor", 5, 10, 1, 8, 0, 5,
           description="Quilted layers of cloth and batting"),
    _armor("leather", "Leather", "Light Armor", 10, 15, 2, 6, 0, 10,
           description="Boiled and hardened leather"),
    _armor("studded_leather", "Studded Leather", "Light Armor", 25, 20, 3, 5, -1, 15,
           description="Leather reinforced with metal rivets"),
    _armor("chain_shirt", "Chain Shirt", "Light Armor", 100, 25, 4, 4, -2, 20,
           description="A shirt of interlocking metal rings"),
    _armor("scale_mail", "Scale Mail", "Medium Armor", 50, 30, 5, 3, -4, 25, (20, 15),
           description="Overlapping metal scales on a leather backing"),
    _armor("splint_mail", "Splint Mail", "Heavy Armor", 200, 45, 7, 0, -7, 40, (20, 15),
           description="Vertical metal strips riveted to a backing"),
    _armor("full_plate", "Full Plate", "Heavy Armor", 1500, 50, 9, 1, -6, 35, (20, 15),
           description="Fitted, interlocking metal plates covering the whole body"),
)


def _shield(
    id: str,
    name: str,
    price: float,
    weight: float,
    ac_bonus: int,
    check_penalty: int,
    spell_failure: int,
    description: str,
) -> EquipmentTemplate:
    return EquipmentTemplate(
        id=id,
        name=name,
        type=EquipmentType.SHIELD,
        category="Shields",
        subcategory="Shields",
        base_price=price,
        base_weight=weight,
        description=description,
        properties={
            "shield_category": "heavy" if "heavy" in id else "light",
            "ac_bonus": ac_bonus,
            "check_penalty": check_penalty,
            "spell_failure": spell_failure,
        },
    )


SHIELD_TEMPLATES: tuple[EquipmentTemplate, ...] = (
    _shield("buckler", "Buckler", 5, 5, 1, -1, 5, "A small shield strapped to the forearm"),
    _shield("light_shield", "Light Wooden Shield", 3, 5, 1, -1, 5, "A light shield held in one hand"),
    _shield("heavy_shield", "Heavy Wooden Shield", 7, 10, 2, -2, 15, "A large shield that needs a firm grip"),
)

GEAR_TEMPLATES: tuple[EquipmentTemplate, ...] = (
    EquipmentTemplate(
        id="backpack",
        name="Backpack",
        type=EquipmentType.GEAR,
        category="Gear",
        subcategory="Adventuring Gear",
        base_price=2,
        base_weight=2,
        description="A leather pack carried on the back",
        properties={"gear_category": "container"},
    ),
    EquipmentTemplate(
        id="rope_silk",
        name="Silk Rope (50 ft.)",
        type=EquipmentType.GEAR,
        category="Gear",
        subcategory="Adventuring Gear",
        base_price=10,
        base_weight=5,
        description="Fifty feet of strong silk rope",
        properties={"gear_category": "adventuring"},
    ),
    EquipmentTemplate(
        id="torch",
        name="Torch",
        type=EquipmentType.GEAR,
        category="Gear",
        subcategory="Light Sources",
        base_price=0.01,
        base_weight=1,
        description="Burns for one hour",
        properties={"gear_category": "light", "is_consumable": True, "uses_remaining": 1},
    ),
    EquipmentTemplate(
        id="rations_trail",
        name="Trail Rations (1 day)",
        type=EquipmentType.GEAR,
        category="Gear",
        subcategory="Food & Drink",
        base_price=0.5,
        base_weight=1,
        description="Dried food for one day",
        properties={"gear_category": "food", "is_consumable": True, "uses_remaining": 1},
    ),
)


def _continuous(bonus_type: BonusType, target: str, value: int, source: str) -> dict[str, Any]:
    return {"bonus_type": bonus_type, "target": target, "value": value, "source": source}


MAGIC_ITEM_TEMPLATES: tuple[EquipmentTemplate, ...] = (
    EquipmentTemplate(
        id="ring_of_protection_1",
        name="Ring of Protection +1",
        type=EquipmentType.MAGIC_ITEM,
        category="Magic Items",
        subcategory="Rings",
        base_price=2000,
        base_weight=0,
        description="Wards the wearer with a deflection bonus to AC",
        properties={
            "slot": EquipmentSlot.RING_LEFT,
            "aura": "faint abjuration",
            "caster_level": 5,
            "continuous_effects": [
                _continuous(BonusType.DEFLECTION, "ac", 1, "Ring of Protection +1"),
            ],
        },
    ),
    EquipmentTemplate(
        id="cloak_of_resistance_1",
        name="Cloak of Resistance +1",
        type=EquipmentType.MAGIC_ITEM,
        category="Magic Items",
        subcategory="Wondrous Items",
        base_price=1000,
        base_weight=1,
        description="Grants a resistance bonus on all saving throws",
        properties={
            "slot": EquipmentSlot.NECK,
            "aura": "faint abjuration",
            "caster_level": 5,
            "continuous_effects": [
                _continuous(BonusType.RESISTANCE, "saves", 1, "Cloak of Resistance +1"),
            ],
        },
    ),
    EquipmentTemplate(
        id="amulet_of_natural_armor_1",
        name="Amulet of Natural Armor +1",
        type=EquipmentType.MAGIC_ITEM,
        category="Magic Items",
        subcategory="Wondrous Items",
        base_price=2000,
        base_weight=0,
        description="Toughens the wearer's skin",
        properties={
            "slot": EquipmentSlot.NECK,
            "aura": "faint transmutation",
            "caster_level": 5,
            "continuous_effects": [
                _continuous(BonusType.NATURAL, "ac", 1, "Amulet of Natural Armor +1"),
            ],
        },
    ),
)

CATEGORY_TEMPLATES: dict[str, tuple[EquipmentTemplate, ...]] = {
    "weapons": WEAPON_TEMPLATES,
    "armor": ARMOR_TEMPLATES,
    "shields": SHIELD_TEMPLATES,
    "gear": GEAR_TEMPLATES,
    "magic items": MAGIC_ITEM_TEMPLATES,
}


# =============================================================================
# Catalog
# =============================================================================


@dataclass(frozen=True)
class ItemOptions:
    """Per-instance choices when creating an item from a template."""

    enhancement: int = 0
    masterwork: bool = False
    material: str | None = None
    quantity: int = 1


@dataclass(frozen=True)
class CatalogFilters:
    """Optional search filters; None means no restriction."""

    category: str | None = None
    subcategory: str | None = None
    source: str | None = None
    max_price: float | None = None
    max_weight: float | None = None

    def matches(self, template: EquipmentTemplate) -> bool:
        if self.category and template.category.lower() != self.category.lower():
            return False
        if self.subcategory and template.subcategory.lower() != self.subcategory.lower():
            return False
        if self.source and template.source != self.source:
            return False
        if self.max_price is not None and template.base_price > self.max_price:
            return False
        if self.max_weight is not None and template.base_weight > self.max_weight:
            return False
        return True


class EquipmentCatalog:
    """Template registry with lookup, search and item factories.

    Example:
        >>> catalog = EquipmentCatalog()
        >>> sword = catalog.create_item(catalog.get_by_id("longsword"))
        >>> sword.kind
        'weapon'
    """

    def __init__(
        self,
        templates: dict[str, Iterable[EquipmentTemplate]] | None = None,
        *,
        roller: DiceRoller | None = None,
    ) -> None:
        """Initialize the catalog.

        Args:
            templates: Templates per lowercase category name. Defaults to the Core Rulebook set.
            roller: Random source for item ids.
        """
        source = templates if templates is not None else CATEGORY_TEMPLATES
        self._by_category = {name.lower(): tuple(rows) for name, rows in source.items()}
        self._by_id = {
            template.id: template for rows in self._by_category.values() for template in rows
        }
        self._roller = roller or get_default_roller()

    def categories(self) -> list[str]:
        return list(self._by_category)

    def get_all(self) -> list[EquipmentTemplate]:
        return [template for rows in self._by_category.values() for template in rows]

    def get_by_category(self, category: str) -> list[EquipmentTemplate]:
        """Templates in a category; empty for an unknown category."""
        return list(self._by_category.get(category.lower(), ()))

    def get_by_id(self, template_id: str) -> EquipmentTemplate | None:
        return self._by_id.get(template_id)

    def search(self, query: str = "", filters: CatalogFilters | None = None) -> list[EquipmentTemplate]:
        """Find templates by text and filters.

        The query matches name, description or subcategory, ignoring
        case. Results are sorted by name.
        """
        needle = query.strip().lower()
        filters = filters or CatalogFilters()
        results = [
            template
            for template in self.get_all()
            if filters.matches(template)
            and (
                not needle
                or needle in template.name.lower()
                or needle in template.description.lower()
                or needle in template.subcategory.lower()
            )
        ]
        return sorted(results, key=lambda template: template.name)

    # =========================================================================
    # Factories
    # =========================================================================

    def create_item(self, template: EquipmentTemplate, options: ItemOptions | None = None) -> Item:
        """Instantiate a template according to its type."""
        options = options or ItemOptions()
        factory = {
            EquipmentType.WEAPON: self.create_weapon,
            EquipmentType.ARMOR: self.create_armor,
            EquipmentType.SHIELD: self.create_shield,
            EquipmentType.MAGIC_ITEM: self.create_magic_item,
            EquipmentType.GEAR: self.create_gear,
        }[template.type]
        item = factory(template, options)
        logger.debug("Item created", template_id=template.id, item_id=item.id, kind=item.kind)
        return item

    def create_by_id(self, template_id: str, options: ItemOptions | None = None) -> Item:
        """Instantiate a template by id.

        Raises:
            EquipmentError: If no template has that id.
        """
        template = self.get_by_id(template_id)
        if template is None:
            raise EquipmentError(f"Unknown equipment template: {template_id}", item_id=template_id)
        return self.create_item(template, options)

    def _base_fields(self, template: EquipmentTemplate, options: ItemOptions) -> dict[str, Any]:
        return {
            "id": generate_id(template.id, self._roller),
            "name": template.name,
            "template_id": template.id,
            "weight": template.base_weight,
            "quantity": options.quantity,
            "cost": template.base_price,
            "description": template.description,
        }

    def _check_kind(self, template: EquipmentTemplate, expected: EquipmentType) -> None:
        if template.type != expected:
            raise EquipmentError(
                f"Template {template.id} is {template.type}, not {expected}",
                item_id=template.id,
            )

    def create_weapon(self, template: EquipmentTemplate, options: ItemOptions | None = None) -> Weapon:
        options = options or ItemOptions()
        self._check_kind(template, EquipmentType.WEAPON)
        return Weapon(
            **self._base_fields(template, options),
            **template.properties,
            masterwork=options.masterwork,
            material=options.material,
            enhancement=options.enhancement,
        )

    def create_armor(self, template: EquipmentTemplate, options: ItemOptions | None = None) -> Armor:
        options = options or ItemOptions()
        self._check_kind(template, EquipmentType.ARMOR)
        return Armor(
            **self._base_fields(template, options),
            **template.properties,
            masterwork=options.masterwork,
            material=options.material,
            enhancement=options.enhancement,
        )

    def create_shield(self, template: EquipmentTemplate, options: ItemOptions | None = None) -> Shield:
        options = options or ItemOptions()
        self._check_kind(template, EquipmentType.SHIELD)
        return Shield(
            **self._base_fields(template, options),
            **template.properties,
            masterwork=options.masterwork,
            material=options.material,
            enhancement=options.enhancement,
        )

    def create_magic_item(
        self, template: EquipmentTemplate, options: ItemOptions | None = None
    ) -> MagicItem:
        options = options or ItemOptions()
        self._check_kind(template, EquipmentType.MAGIC_ITEM)
        properties = dict(template.properties)
        effects = [Effect.model_validate(effect) for effect in properties.pop("continuous_effects", [])]
        return MagicItem(
            **self._base_fields(template, options),
            **properties,
            continuous_effects=effects,
        )

    def create_gear(self, template: EquipmentTemplate, options: ItemOptions | None = None) -> Gear:
        options = options or ItemOptions()
        self._check_kind(template, EquipmentType.GEAR)
        return Gear(**self._base_fields(template, options), **template.properties)


_default_catalog: EquipmentCatalog | None = None


def get_catalog() -> EquipmentCatalog:
    """Shared Core Rulebook catalog."""
    global _default_catalog
    if _default_catalog is None:
        _default_catalog = EquipmentCatalog()
    return _default_catalog


__all__ = [
    "WEAPON_TEMPLATES",
    "ARMOR_TEMPLATES",
    "SHIELD_TEMPLATES",
    "GEAR_TEMPLATES",
    "MAGIC_ITEM_TEMPLATES",
    "CATEGORY_TEMPLATES",
    "ItemOptions",
    "CatalogFilters",
    "EquipmentCatalog",
    "get_catalog",
]
