# src/sources/item_catalog.py

"""Curated list of popular market items for name lookups.

The market API has no name search, so ``add`` needs a numeric ID. This
short list lets users find the ID of the common materials by name.
"""

from dataclasses import asdict, dataclass
from typing import Any

MIN_QUERY_LENGTH = 2
MAX_RESULTS = 10


@dataclass(frozen=True)
class CatalogEntry:
    """One searchable item."""

    id: int
    name: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


COMMON_ITEMS: tuple[CatalogEntry, ...] = (
    CatalogEntry(10007, "Iron Ore"),
    CatalogEntry(10008, "Copper Ore"),
    CatalogEntry(10009, "Tin Ore"),
    CatalogEntry(10010, "Zinc Ore"),
    CatalogEntry(10017, "Black Stone (Weapon)"),
    CatalogEntry(10018, "Black Stone (Armor)"),
    CatalogEntry(10019, "Concentrated Magical Black Stone"),
    CatalogEntry(10020, "Concentrated Magical Black Stone (Armor)"),
    CatalogEntry(10026, "Fragment of Weapon"),
    CatalogEntry(10027, "Fragment of Armor"),
    CatalogEntry(10032, "Elion's Tear"),
    CatalogEntry(10033, "Memories of Elion"),
    CatalogEntry(10035, "Clear Liquid Reagent"),
    CatalogEntry(10047, "Purified Water"),
    CatalogEntry(10108, "Fine Magical Dust"),
    CatalogEntry(10109, "Coarse Magical Dust"),
    CatalogEntry(10110, "Precision Magical Dust"),
    CatalogEntry(10116, "Hard Black Crystal"),
    CatalogEntry(10117, "Sharp Black Crystal"),
    CatalogEntry(11607, "Ancient Stone"),
    CatalogEntry(11612, "Spirit Stone"),
    CatalogEntry(11615, "Flaming Feather"),
    CatalogEntry(11616, "Windy Wind Stone"),
    CatalogEntry(11617, "Dry Distilled Water"),
    CatalogEntry(11618, "Purified Gem Powder"),
    CatalogEntry(12066, "Godr's Shard"),
    CatalogEntry(12067, "Devilsaur Tooth"),
    CatalogEntry(12068, "Basilisk's Crystal"),
    CatalogEntry(12069, "Centaur's Hoof"),
    CatalogEntry(12070, "Mansha's Claw"),
    CatalogEntry(12205, "Dragon Scale Fossil"),
    CatalogEntry(15001, "Boiled Egg"),
    CatalogEntry(15002, "Balenos Meal"),
    CatalogEntry(15003, "Wheat Bread"),
    CatalogEntry(15004, "Node Manager's Recommendation"),
    CatalogEntry(15005, "Mediah Meal"),
    CatalogEntry(15006, "Calpheon Meal"),
    CatalogEntry(15007, "Valencia Meal"),
    CatalogEntry(16002, "Witch's Earring"),
    CatalogEntry(16003, "Bheg's Ring"),
    CatalogEntry(16004, "Elkarr's Seal"),
    CatalogEntry(16005, "Ogre Ring"),
    CatalogEntry(16006, "Crescent Ring"),
    CatalogEntry(16007, "Red Coral Earring"),
    CatalogEntry(16008, "Blue Coral Ring"),
)


def search_items(query: str, limit: int = MAX_RESULTS) -> list[CatalogEntry]:
    """Case-insensitive substring match over :data:`COMMON_ITEMS`.

    Queries shorter than two characters return nothing.
    """
    needle = query.strip().lower()
    if len(needle) < MIN_QUERY_LENGTH:
        return []
    matches = [e for e in COMMON_ITEMS if needle in e.name.lower()]
    return matches[:limit]
