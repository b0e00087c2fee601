"""A set of selected items, compared by identity."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Iterator

_log = logging.getLogger(__name__)


def _require(item: Any) -> None:
    if item is None:
        raise ValueError("item must not be None")


class Selection:
    """Holds selected items by identity, in the order they were selected."""

    def __init__(self) -> None:
        self._items: dict[int, Any] = {}

    def toggle(self, item: Any) -> None:
        """Select the item if unselected, otherwise unselect it."""
        _require(item)
        key = id(item)
        if key in self._items:
            del self._items[key]
        else:
            self._items[key] = item

    def select(self, item: Any) -> None:
        """Add the item to the selection."""
        _require(item)
        self._items[id(item)] = item

    def __contains__(self, item: Any) -> bool:
        _require(item)
        return id(item) in self._items

    def select_all(self, items: Iterable[Any]) -> None:
        """Select every item of ``items``."""
        for item in items:
            if item is None:
                _log.debug("[select_all] item is None")
            self._items[id(item)] = item

    def clear(self) -> None:
        """Unselect everything."""
        self._items.clear()

    def invert(self, items: Iterable[Any]) -> None:
        """Toggle every item of ``items``."""
        for item in items:
            if item is None:
                _log.debug("[invert] item is None")
            key = id(item)
            if key in self._items:
                del self._items[key]
            else:
                self._items[key] = item

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Any]:
        return iter(list(self._items.values()))