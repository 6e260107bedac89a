"""
Drop resolution - turning a drop table entry into an item and a quantity.

Drop entries are resolved from raw spawn data once, when a predictor's table
is built: item ids are parsed there so a bad id fails at load time. At
prediction time an entry only draws from the RNG.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from ..content.game_data import UNSET, GenericSpawnItemData
from ..content.items import RANDOM_BASE_SEASON_ITEM, DataError, ItemId
from ..state.rng import Random


@dataclass(frozen=True)
class DropReward:
    """A resolved drop: which item, how many."""
    item: ItemId
    quantity: int

    def __str__(self) -> str:
        return f"{self.quantity}x {self.item}"


def resolve_quantity(rng: Random, min_stack: int, max_stack: int) -> int:
    """
    Stack size for a spawned item.

    C# (ItemQueryResolver.ApplyItemFields):
    ```
    if (min == -1 && max == -1) stack = 1;
    else if (max > 1) {
        min = Math.Max(min, 1);
        max = Math.Max(max, min);
        stack = random.Next(min, max + 1);
    }
    else if (min > 1) stack = min;
    else stack = 1;
    ```
    Two branches return 1; both are kept so the draw pattern stays identical.
    """
    if min_stack == UNSET and max_stack == UNSET:
        return 1
    if max_stack > 1:
        low = max(min_stack, 1)
        high = max(max_stack, low)
        return rng.next_range(low, high + 1)
    if min_stack > 1:
        return min_stack
    return 1


@dataclass(frozen=True)
class Drop:
    """
    A pre-resolved drop table entry.

    Exactly one of `item` / `random_items` is set.
    """
    item: Optional[ItemId] = None
    random_items: Optional[Tuple[ItemId, ...]] = None
    min_stack: int = UNSET
    max_stack: int = UNSET
    condition: Optional[str] = None

    def __post_init__(self):
        if (self.item is None) == (not self.random_items):
            raise ValueError("Drop needs exactly one of item or random_items")

    @classmethod
    def from_spawn_data(cls, data: GenericSpawnItemData, table: str = "?",
                        key: str = "?") -> "Drop":
        """
        Build from raw spawn data.

        A non-empty RandomItemId list wins over ItemId. Raises DataError naming
        the table and key when an id fails to parse or neither is present.
        """
        context = f"{table}[{key!r}]/{data.id or '?'}"
        try:
            if data.random_item_id:
                return cls(
                    random_items=tuple(ItemId.parse(i) for i in data.random_item_id),
                    min_stack=data.min_stack,
                    max_stack=data.max_stack,
                    condition=data.condition,
                )
            if data.item_id is None:
                raise DataError("no item id for drop")
            return cls(
                item=ItemId.parse(data.item_id),
                min_stack=data.min_stack,
                max_stack=data.max_stack,
                condition=data.condition,
            )
        except DataError as e:
            raise DataError(f"{context}: {e}") from e

    def resolve(self, rng: Random) -> DropReward:
        """Pick the item, then the quantity, consuming draws in game order."""
        if self.random_items:
            item = rng.choose_from(self.random_items)
        else:
            item = self.item

        quantity = resolve_quantity(rng, self.min_stack, self.max_stack)

        # The host resolves this placeholder with one more roll.
        if item == RANDOM_BASE_SEASON_ITEM:
            rng.next_double()

        return DropReward(item, quantity)
