"""Read-only race and class lookups.

The engines receive a ``ReferenceData`` instead of reading module-level
tables, so tests and alternative rulesets can supply their own rows.
Lookups are case-insensitive.
"""

from __future__ import annotations

from collections.abc import Iterable

from charsheet.core.exceptions import ReferenceDataError
from charsheet.models.classes import CORE_CLASSES, CharacterClassData
from charsheet.models.races import CORE_RACES, Race


class ReferenceData:
    """Race and class tables keyed by name."""

    def __init__(
        self,
        races: Iterable[Race] = CORE_RACES,
        classes: Iterable[CharacterClassData] = CORE_CLASSES,
    ) -> None:
        self._races = {race.name.lower(): race for race in races}
        self._classes = {cls.name.lower(): cls for cls in classes}

    @property
    def races(self) -> list[Race]:
        return list(self._races.values())

    @property
    def classes(self) -> list[CharacterClassData]:
        return list(self._classes.values())

    def find_race(self, name: str) -> Race | None:
        return self._races.get(name.strip().lower())

    def get_race(self, name: str) -> Race:
        """Look up a race by name.

        Raises:
            ReferenceDataError: If no race has that name.
        """
        race = self.find_race(name)
        if race is None:
            raise ReferenceDataError(f"Unknown race: {name}", table="races", name=name)
        return race

    def find_class(self, name: str) -> CharacterClassData | None:
        """Look up a class by name; None when unknown."""
        return self._classes.get(name.strip().lower())


_default_reference = ReferenceData()


def get_reference_data() -> ReferenceData:
    """The Core Rulebook tables."""
    return _default_reference


__all__ = ["ReferenceData", "get_reference_data"]
