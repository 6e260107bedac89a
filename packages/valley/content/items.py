"""
Item identifiers.

The host qualifies item ids with a type tag: "(O)390" is the object 390,
"(BC)12" the big craftable 12, "(H)goldenCoconutHat" a hat. Untagged ids are
objects. Ids are parsed once when drop tables are built, so a malformed id
fails at load time rather than in the middle of a prediction.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Dict, Optional

if TYPE_CHECKING:
    from .game_data import GameData


class DataError(ValueError):
    """Game data could not be turned into a prediction table."""


class ItemType(Enum):
    """Qualified item id tags."""
    BIG_CRAFTABLE = "BC"
    BOOTS = "B"
    FLOORING = "FL"
    FURNITURE = "F"
    HAT = "H"
    MANNEQUIN = "M"
    OBJECT = "O"
    PANTS = "P"
    SHIRT = "S"
    TOOL = "T"
    TRINKET = "TR"
    WALLPAPER = "WP"
    WEAPON = "W"


# An identifier ("CalicoEggStone_0") or a bare alphanumeric run ("390").
_ITEM_ID_RE = re.compile(
    r"(?:\((BC|B|FL|F|H|M|O|P|S|T|TR|WP|W)\))?"
    r"([A-Za-z_][A-Za-z0-9_]*|[A-Za-z0-9]+)"
)


@dataclass(frozen=True)
class ItemId:
    """A parsed, qualified item id."""
    item_type: ItemType
    key: str

    @classmethod
    def parse(cls, text: str) -> "ItemId":
        """
        Parse a qualified or untagged item id.

        Raises DataError on an unknown tag or trailing input.
        """
        match = _ITEM_ID_RE.fullmatch(text)
        if match is None:
            raise DataError(f"Can't parse item id {text!r}")
        tag, key = match.groups()
        item_type = ItemType(tag) if tag else ItemType.OBJECT
        return cls(item_type, key)

    @classmethod
    def object(cls, key: str) -> "ItemId":
        return cls(ItemType.OBJECT, key)

    @property
    def qualified(self) -> str:
        return f"({self.item_type.value}){self.key}"

    def __str__(self) -> str:
        return self.qualified


# ============ WELL-KNOWN ITEMS ============

PRISMATIC_SHARD = ItemId.object("74")
FIRE_QUARTZ = ItemId.object("82")
FROZEN_TEAR = ItemId.object("84")
EARTH_CRYSTAL = ItemId.object("86")
ARTIFACT_TROVE = ItemId.object("275")
CLAY = ItemId.object("330")
COPPER_ORE = ItemId.object("378")
IRON_ORE = ItemId.object("380")
COAL = ItemId.object("382")
GOLD_ORE = ItemId.object("384")
IRIDIUM_ORE = ItemId.object("386")
STONE = ItemId.object("390")
GEODE = ItemId.object("535")
FROZEN_GEODE = ItemId.object("536")
MAGMA_GEODE = ItemId.object("537")
OMNI_GEODE = ItemId.object("749")
GOLDEN_COCONUT = ItemId.object("791")
QI_BEANS = ItemId.object("890")

# Resolving this item consumes one extra draw.
RANDOM_BASE_SEASON_ITEM = ItemId.object("RANDOM_BASE_SEASON_ITEM")


class ItemNameCache:
    """
    Caller-owned memo of human readable item names.

    Names are looked up in the object table the first time an id is seen.
    Ids without an object record fall back to their qualified form.
    """

    def __init__(self, game_data: "GameData"):
        self._game_data = game_data
        self._names: Dict[ItemId, str] = {}

    def name(self, item: ItemId) -> str:
        cached = self._names.get(item)
        if cached is not None:
            return cached

        name: Optional[str] = None
        if item.item_type is ItemType.OBJECT:
            record = self._game_data.objects.get(item.key)
            if record is not None:
                name = record.name
        if name is None:
            name = item.qualified

        self._names[item] = name
        return name

    def __len__(self) -> int:
        return len(self._names)

    def clear(self) -> None:
        self._names.clear()
