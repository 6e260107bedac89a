"""
Game data records - typed views of the host's content tables.

Only the tables and fields the predictors read are modelled:
- Objects (geode drop lists)
- GarbageCans (per-can base chance and drop lists)
- LocationContexts (ordered weather conditions)

Records are built from the JSON shape of the unpacked content files
(PascalCase keys, e.g. "ItemId", "MinStack"). Decoding the packed asset
format is left to external tooling.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

from .items import DataError

logger = logging.getLogger("GameData")

# Host default for unset stack bounds and base chances.
UNSET = -1

OBJECTS_FILE = "Objects.json"
GARBAGE_CANS_FILE = "GarbageCans.json"
LOCATION_CONTEXTS_FILE = "LocationContexts.json"


def _require(data: Dict[str, Any], name: str, table: str, key: str) -> Any:
    try:
        return data[name]
    except KeyError:
        raise DataError(f"{table}[{key!r}]: missing field {name!r}") from None


def _optional_str(value: Any) -> Optional[str]:
    # The host serialises empty conditions as either null or "".
    if value is None or value == "":
        return None
    return str(value)


# ============================================================================
# SPAWN DATA
# ============================================================================

@dataclass(frozen=True)
class GenericSpawnItemData:
    """
    Common fields of every item spawn entry.

    Exactly one of item_id / random_item_id is expected to be usable; that
    is checked when the entry is turned into a Drop.
    """
    id: str
    item_id: Optional[str] = None
    random_item_id: Optional[Tuple[str, ...]] = None
    min_stack: int = UNSET
    max_stack: int = UNSET
    condition: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GenericSpawnItemData":
        random_ids = data.get("RandomItemId")
        return cls(
            id=str(data.get("Id", "")),
            item_id=_optional_str(data.get("ItemId")),
            random_item_id=tuple(random_ids) if random_ids else None,
            min_stack=int(data.get("MinStack", UNSET)),
            max_stack=int(data.get("MaxStack", UNSET)),
            condition=_optional_str(data.get("Condition")),
        )


@dataclass(frozen=True)
class ObjectGeodeDropData:
    """One entry of an object's GeodeDrops list."""
    spawn: GenericSpawnItemData
    chance: float = 1.0
    precedence: int = 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ObjectGeodeDropData":
        return cls(
            spawn=GenericSpawnItemData.from_dict(data),
            chance=float(data.get("Chance", 1.0)),
            precedence=int(data.get("Precedence", 0)),
        )


@dataclass(frozen=True)
class ObjectData:
    """The parts of an Objects entry the geode predictor needs."""
    id: str
    name: str
    type: str = ""
    category: int = 0
    geode_drops_default_items: bool = False
    geode_drops: Optional[Tuple[ObjectGeodeDropData, ...]] = None

    @classmethod
    def from_dict(cls, object_id: str, data: Dict[str, Any]) -> "ObjectData":
        drops = data.get("GeodeDrops")
        return cls(
            id=object_id,
            name=_require(data, "Name", "Objects", object_id),
            type=data.get("Type", ""),
            category=int(data.get("Category", 0)),
            geode_drops_default_items=bool(data.get("GeodeDropsDefaultItems", False)),
            geode_drops=(
                tuple(ObjectGeodeDropData.from_dict(d) for d in drops)
                if drops is not None else None
            ),
        )


# ============================================================================
# GARBAGE CANS
# ============================================================================

@dataclass(frozen=True)
class GarbageCanItemData:
    """One entry of a garbage can's item list."""
    spawn: GenericSpawnItemData
    ignore_base_chance: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GarbageCanItemData":
        return cls(
            spawn=GenericSpawnItemData.from_dict(data),
            ignore_base_chance=bool(data.get("IgnoreBaseChance", False)),
        )


@dataclass(frozen=True)
class GarbageCanEntryData:
    """A single can: its own base chance (-1 = use default) and items."""
    base_chance: float = UNSET
    items: Tuple[GarbageCanItemData, ...] = ()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GarbageCanEntryData":
        return cls(
            base_chance=float(data.get("BaseChance", UNSET)),
            items=tuple(GarbageCanItemData.from_dict(i) for i in data.get("Items") or ()),
        )


@dataclass(frozen=True)
class GarbageCanData:
    """The whole GarbageCans table."""
    default_base_chance: float = 0.2
    before_all: Tuple[GarbageCanItemData, ...] = ()
    after_all: Tuple[GarbageCanItemData, ...] = ()
    garbage_cans: Dict[str, GarbageCanEntryData] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GarbageCanData":
        return cls(
            default_base_chance=float(data.get("DefaultBaseChance", 0.2)),
            before_all=tuple(GarbageCanItemData.from_dict(i) for i in data.get("BeforeAll") or ()),
            after_all=tuple(GarbageCanItemData.from_dict(i) for i in data.get("AfterAll") or ()),
            garbage_cans={
                key: GarbageCanEntryData.from_dict(entry)
                for key, entry in (data.get("GarbageCans") or {}).items()
            },
        )


# ============================================================================
# LOCATION CONTEXTS
# ============================================================================

@dataclass(frozen=True)
class WeatherCondition:
    """One ordered weather rule of a location context."""
    id: str
    weather: str
    condition: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any], context: str = "?") -> "WeatherCondition":
        condition_id = str(data.get("Id", ""))
        return cls(
            id=condition_id,
            weather=_require(data, "Weather", "LocationContexts", f"{context}/{condition_id}"),
            condition=_optional_str(data.get("Condition")),
        )


@dataclass(frozen=True)
class LocationContextData:
    """The weather part of a LocationContexts entry."""
    id: str
    weather_conditions: Tuple[WeatherCondition, ...] = ()

    @classmethod
    def from_dict(cls, context_id: str, data: Dict[str, Any]) -> "LocationContextData":
        return cls(
            id=context_id,
            weather_conditions=tuple(
                WeatherCondition.from_dict(c, context_id)
                for c in data.get("WeatherConditions") or ()
            ),
        )


# ============================================================================
# GAME DATA
# ============================================================================

@dataclass
class GameData:
    """
    All content tables the predictors consume.

    Usage:
        data = GameData.from_content_dir("Content/Data")
        geode = Geode.from_object_data("535", data.get_object("535"))
    """
    objects: Dict[str, ObjectData] = field(default_factory=dict)
    garbage_cans: GarbageCanData = field(default_factory=GarbageCanData)
    location_contexts: Dict[str, LocationContextData] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GameData":
        """Build from {"Objects": ..., "GarbageCans": ..., "LocationContexts": ...}."""
        objects = {
            object_id: ObjectData.from_dict(object_id, entry)
            for object_id, entry in (data.get("Objects") or {}).items()
        }
        garbage_cans = GarbageCanData.from_dict(data.get("GarbageCans") or {})
        contexts = {
            context_id: LocationContextData.from_dict(context_id, entry)
            for context_id, entry in (data.get("LocationContexts") or {}).items()
        }
        logger.debug(
            f"Loaded {len(objects)} objects, {len(garbage_cans.garbage_cans)} garbage cans, "
            f"{len(contexts)} location contexts"
        )
        return cls(objects=objects, garbage_cans=garbage_cans, location_contexts=contexts)

    @classmethod
    def from_json(cls, path: Union[str, Path]) -> "GameData":
        """Load a single JSON document holding all three tables."""
        path = Path(path)
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
        logger.debug(f"Reading game data from {path}")
        return cls.from_dict(data)

    @classmethod
    def from_content_dir(cls, path: Union[str, Path]) -> "GameData":
        """
        Load from a directory of unpacked content files.

        Expects Objects.json, GarbageCans.json and LocationContexts.json; a
        missing file is a DataError.
        """
        path = Path(path)
        tables = {}
        for table, filename in (
            ("Objects", OBJECTS_FILE),
            ("GarbageCans", GARBAGE_CANS_FILE),
            ("LocationContexts", LOCATION_CONTEXTS_FILE),
        ):
            file_path = path / filename
            if not file_path.is_file():
                raise DataError(f"{table}: content file not found at {file_path}")
            with open(file_path, encoding="utf-8") as f:
                tables[table] = json.load(f)
        return cls.from_dict(tables)

    def get_object(self, object_id: str) -> ObjectData:
        try:
            return self.objects[object_id]
        except KeyError:
            raise DataError(f"Objects[{object_id!r}]: unknown object") from None

    def get_object_by_name(self, name: str) -> Optional[ObjectData]:
        for record in self.objects.values():
            if record.name == name:
                return record
        return None

    def location_context(self, context_id: str) -> LocationContextData:
        try:
            return self.location_contexts[context_id]
        except KeyError:
            raise DataError(f"LocationContexts[{context_id!r}]: unknown context") from None
