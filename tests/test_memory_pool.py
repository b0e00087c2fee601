import pytest

from filequery.memory_pool import MemoryPool


class Counter:
    def __init__(self):
        self.created = []

    def __call__(self):
        item = {"id": len(self.created)}
        self.created.append(item)
        return item


def test_allocate_returns_factory_items():
    factory = Counter()
    pool = MemoryPool(4, factory)
    items = [pool.allocate() for _ in range(3)]
    assert items == factory.created
    assert len({id(item) for item in items}) == 3


def test_factory_called_once_per_fresh_item_across_blocks():
    factory = Counter()
    pool = MemoryPool(2, factory)
    items = [pool.allocate() for _ in range(5)]
    assert len(factory.created) == 5
    assert [item["id"] for item in items] == [0, 1, 2, 3, 4]


def test_released_item_is_reused_lifo():
    factory = Counter()
    pool = MemoryPool(4, factory)
    first = pool.allocate()
    second = pool.allocate()
    pool.release(first)
    pool.release(second)
    assert pool.allocate() is second
    assert pool.allocate() is first
    assert len(factory.created) == 2


def test_release_none_is_ignored():
    factory = Counter()
    pool = MemoryPool(4, factory)
    pool.release(None)
    item = pool.allocate()
    assert item is factory.created[0]


def test_release_with_clear_calls_free_func():
    cleared = []
    pool = MemoryPool(4, Counter(), cleared.append)
    item = pool.allocate()
    pool.release(item, clear=True)
    assert cleared == [item]


def test_release_without_clear_does_not_call_free_func():
    cleared = []
    pool = MemoryPool(4, Counter(), cleared.append)
    item = pool.allocate()
    pool.release(item)
    assert cleared == []


def test_close_frees_every_created_item():
    cleared = []
    factory = Counter()
    pool = MemoryPool(2, factory, cleared.append)
    for _ in range(5):
        pool.allocate()
    pool.close()
    assert sorted(item["id"] for item in cleared) == [0, 1, 2, 3, 4]
    assert len(cleared) == len(factory.created)


def test_close_frees_newest_block_first():
    cleared = []
    pool = MemoryPool(2, Counter(), cleared.append)
    for _ in range(3):
        pool.allocate()
    pool.close()
    assert cleared[0]["id"] == 2


def test_context_manager_closes_pool():
    cleared = []
    with MemoryPool(3, Counter(), cleared.append) as pool:
        item = pool.allocate()
    assert cleared == [item]
    with pytest.raises(RuntimeError):
        pool.allocate()


def test_close_twice_frees_once():
    cleared = []
    pool = MemoryPool(3, Counter(), cleared.append)
    pool.allocate()
    pool.close()
    pool.close()
    assert len(cleared) == 1


@pytest.mark.parametrize("size", [0, -1])
def test_invalid_block_size(size):
    with pytest.raises(ValueError):
        MemoryPool(size, Counter())