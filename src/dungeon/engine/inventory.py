"""Bounded item storage."""

from collections import Counter

from .items import Item, ObjectType, Rarity

DEFAULT_CAPACITY = 10


class Inventory:
    """An ordered, capacity-limited list of items.

    Lookups by name return the first match. Capacity failures are reported
    as ``False`` rather than raised.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY):
        self.capacity = max(1, capacity)
        self._items: list[Item] = []

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self):
        return iter(list(self._items))

    @property
    def size(self) -> int:
        return len(self._items)

    def is_full(self) -> bool:
        return len(self._items) >= self.capacity

    def is_empty(self) -> bool:
        return not self._items

    @property
    def available_space(self) -> int:
        return self.capacity - len(self._items)

    def add_item(self, item: Item | None) -> bool:
        if item is None or self.is_full():
            return False
        self._items.append(item)
        return True

    def remove_item(self, item: Item | str) -> bool:
        """Remove ``item`` by reference, or the first item with that name."""
        if isinstance(item, str):
            found = self.find_item(item)
            if found is None:
                return False
            item = found
        for index, held in enumerate(self._items):
            if held is item:
                del self._items[index]
                return True
        return False

    def remove_at(self, index: int) -> Item | None:
        if 0 <= index < len(self._items):
            return self._items.pop(index)
        return None

    def has_item(self, name: str) -> bool:
        return self.find_item(name) is not None

    def find_item(self, name: str) -> Item | None:
        for item in self._items:
            if item.name == name:
                return item
        return None

    def get_item(self, index: int) -> Item | None:
        if 0 <= index < len(self._items):
            return self._items[index]
        return None

    def get_all_items(self) -> tuple[Item, ...]:
        return tuple(self._items)

    # --- filters ---

    def items_of_type(self, object_type: ObjectType) -> list[Item]:
        return [item for item in self._items if item.object_type is object_type]

    def items_of_rarity(self, rarity: Rarity) -> list[Item]:
        return [item for item in self._items if item.rarity is rarity]

    def consumable_items(self) -> list[Item]:
        return [item for item in self._items if item.consumable]

    # --- ordering ---

    def sort_by_name(self) -> None:
        self._items.sort(key=lambda item: item.name)

    def sort_by_type(self) -> None:
        self._items.sort(key=lambda item: item.object_type.value)

    def sort_by_rarity(self) -> None:
        """Rarest first."""
        self._items.sort(key=lambda item: item.rarity.value, reverse=True)

    def sort_by_value(self) -> None:
        """Most valuable first."""
        self._items.sort(key=lambda item: item.value, reverse=True)

    # --- summaries ---

    def clear(self) -> None:
        self._items.clear()

    def statistics(self) -> dict[ObjectType, int]:
        return dict(Counter(item.object_type for item in self._items))

    def total_value(self) -> int:
        return sum(item.value for item in self._items)

    def display_items(self) -> list[str]:
        if not self._items:
            return ["   (inventory empty)"]
        lines = ["Inventory contents:"]
        for number, item in enumerate(self._items, start=1):
            lines.append(
                f"   {number}. {item.rarity.symbol} {item.name} "
                f"[{item.object_type.label}] - {item.description}"
            )
        return lines

    def compact_view(self) -> str:
        if not self._items:
            return "Empty"
        return ", ".join(
            f"{count} {object_type.label}"
            for object_type, count in self.statistics().items()
        )

    def __repr__(self) -> str:
        return f"Inventory[{self.size}/{self.capacity}]: {self.compact_view()}"
