"""A pool that hands out reusable items, created in fixed-size blocks."""

from __future__ import annotations

from typing import Callable, Generic, Optional, TypeVar

T = TypeVar("T")


class MemoryPool(Generic[T]):
    """Creates items on demand in blocks and recycles released items.

    Released items are handed out again, most recently released first,
    before any new item is created. Closing the pool passes every item it
    ever created to ``item_free_func``, newest block first.
    """

    def __init__(
        self,
        block_size: int,
        factory: Callable[[], T],
        item_free_func: Optional[Callable[[T], None]] = None,
    ) -> None:
        if block_size < 1:
            raise ValueError("block_size must be at least 1")
        self._block_size = block_size
        self._factory = factory
        self._item_free_func = item_free_func
        self._blocks: list[list[T]] = [[]]
        self._freed: list[T] = []
        self._closed = False

    def allocate(self) -> T:
        """Return a recycled item if one is available, else a new one."""
        if self._closed:
            raise RuntimeError("allocate() on a closed pool")
        if self._freed:
            return self._freed.pop()
        block = self._blocks[-1]
        if len(block) >= self._block_size:
            block = []
            self._blocks.append(block)
        item = self._factory()
        block.append(item)
        return item

    def release(self, item: Optional[T], clear: bool = False) -> None:
        """Give an item back to the pool, optionally clearing it first."""
        if self._closed or item is None:
            return
        if clear and self._item_free_func is not None:
            self._item_free_func(item)
        self._freed.append(item)

    def close(self) -> None:
        """Clear every item the pool created and drop all of them."""
        if self._closed:
            return
        if self._item_free_func is not None:
            for block in reversed(self._blocks):
                for item in block:
                    self._item_free_func(item)
        self._blocks.clear()
        self._freed.clear()
        self._closed = True

    def __enter__(self) -> "MemoryPool[T]":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()