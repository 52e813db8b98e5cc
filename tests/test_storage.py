from dataclasses import dataclass, field

import pytest

from sysyir.storage import GenericArena, GenericPtr, UniqueArena, UniqueArenaPtr


@dataclass(frozen=True)
class Pair:
    a: int
    b: int


@dataclass
class Cell:
    value: int
    me: object = field(default=None)


def test_generic_arena():
    arena = GenericArena()
    ptr1 = arena.alloc(1)
    ptr2 = arena.alloc(2)
    ptr3 = arena.alloc(3)
    assert ptr1.try_deref(arena) == 1
    assert ptr2.try_deref(arena) == 2
    assert ptr3.try_deref(arena) == 3
    assert list(arena) == [1, 2, 3]
    assert arena.try_dealloc(ptr2) == 2
    assert list(arena) == [1, 3]
    ptr4 = arena.alloc(4)
    # not generational, so the freed slot is reused
    assert ptr2 == ptr4
    assert ptr4.try_deref(arena) == 4
    assert list(arena) == [1, 4, 3]


def test_generic_arena_double_free():
    arena = GenericArena()
    ptr1 = arena.alloc(1)
    assert arena.try_dealloc(ptr1) == 1
    assert arena.try_dealloc(ptr1) is None


def test_double_free_does_not_corrupt_free_list():
    arena = GenericArena()
    ptr1 = arena.alloc(1)
    arena.try_dealloc(ptr1)
    arena.try_dealloc(ptr1)
    a = arena.alloc(10)
    b = arena.alloc(20)
    assert a != b
    assert a.try_deref(arena) == 10
    assert b.try_deref(arena) == 20


def test_generic_arena_invalid_index():
    arena = GenericArena()
    arena.alloc(1)
    assert arena.try_dealloc(GenericPtr(1)) is None


def test_generic_arena_deref():
    arena = GenericArena()
    ptr1 = arena.alloc(1)
    ptr2 = arena.alloc(2)
    ptr3 = arena.alloc(3)
    assert arena.try_dealloc(ptr2) == 2
    assert ptr1.try_deref(arena) == 1
    assert ptr2.try_deref(arena) is None
    assert ptr3.try_deref(arena) == 3


def test_generic_arena_invalid_deref():
    arena = GenericArena()
    ptr1 = arena.alloc(1)
    assert arena.try_dealloc(ptr1) == 1
    assert ptr1.try_deref(arena) is None
    with pytest.raises(LookupError):
        ptr1.deref(arena)


def test_mutable_data_is_shared():
    arena = GenericArena()
    ptr = arena.alloc(Cell(2))
    ptr.deref(arena).value = 3
    assert ptr.deref(arena).value == 3


def test_alloc_with_receives_own_pointer():
    arena = GenericArena()
    arena.alloc(0)
    ptr = arena.alloc_with(lambda p: Cell(7, p))
    assert ptr.deref(arena).me == ptr
    assert ptr.index == 1


def test_alloc_with_failure_releases_slot():
    arena = GenericArena()

    def boom(_ptr):
        raise ValueError("no")

    with pytest.raises(ValueError):
        arena.alloc_with(boom)
    ptr = arena.alloc(5)
    assert ptr.index == 0
    assert list(arena) == [5]


def test_free_list_order_last_freed_first():
    arena = GenericArena()
    ptrs = [arena.alloc(i) for i in range(4)]
    arena.try_dealloc(ptrs[1])
    arena.try_dealloc(ptrs[3])
    assert arena.alloc(30) == ptrs[3]
    assert arena.alloc(10) == ptrs[1]
    assert arena.alloc(40).index == 4


def test_with_capacity_and_reserve():
    arena = GenericArena.with_capacity(8)
    assert list(arena) == []
    with pytest.raises(ValueError):
        arena.reserve(-1)


def test_generic_ptr_format_and_order():
    ptr = GenericPtr(26)
    assert repr(ptr) == "*26"
    assert str(ptr) == "*26"
    assert f"{ptr:x}" == "*1a"
    assert f"{ptr:X}" == "*1A"
    assert sorted([GenericPtr(3), GenericPtr(1), GenericPtr(2)]) == [
        GenericPtr(1),
        GenericPtr(2),
        GenericPtr(3),
    ]


def test_unique_arena():
    arena = UniqueArena()
    ptr1 = arena.alloc(Pair(1, 2))
    ptr2 = arena.alloc(Pair(1, 2))
    assert ptr1 == ptr2
    assert ptr1.try_deref(arena) == Pair(1, 2)
    assert arena.try_deref(ptr2) == Pair(1, 2)

    ptr3 = arena.alloc(Pair(1, 3))
    assert ptr1 != ptr3

    assert arena.try_dealloc(ptr1) == Pair(1, 2)
    assert arena.try_deref(ptr1) is None
    assert arena.try_deref(ptr2) is None
    assert arena.try_deref(ptr3) == Pair(1, 3)


def test_unique_arena_realloc_after_dealloc():
    arena = UniqueArena()
    ptr1 = arena.alloc(Pair(5, 5))
    arena.try_dealloc(ptr1)
    assert arena.try_dealloc(ptr1) is None
    ptr2 = arena.alloc(Pair(5, 5))
    assert ptr2.deref(arena) == Pair(5, 5)
    assert arena.alloc(Pair(5, 5)) == ptr2


def test_unique_arena_distinguishes_types():
    arena = UniqueArena()
    one = arena.alloc(1)
    true = arena.alloc(True)
    assert one != true
    assert arena.try_deref(true) is True


def test_unique_arena_rejects_alloc_with():
    arena = UniqueArena()
    with pytest.raises(TypeError):
        arena.alloc_with(lambda p: Pair(0, 0))


def test_unique_arena_ptr_repr_and_index():
    arena = UniqueArena()
    arena.alloc("a")
    ptr = arena.alloc("b")
    assert repr(ptr) == "UniqueArenaPtr(1)"
    assert ptr.index == 1
    assert ptr == UniqueArenaPtr(GenericPtr(1))