"""Arena storage: handles (pointers) into arenas that own their data."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Generic, Iterator, TypeVar

T = TypeVar("T")
P = TypeVar("P", bound="ArenaPtr")

_INVALID_POINTER = "invalid pointer dereferenced"


class ArenaPtr:
    """A lightweight, hashable handle to data stored in an arena."""

    __slots__ = ()

    def try_deref(self, arena: "Arena[Any]") -> Any:
        """Return the data behind this pointer, or None if the pointer is invalid."""
        return arena.try_deref(self)

    def deref(self, arena: "Arena[Any]") -> Any:
        """Return the data behind this pointer; raise LookupError if invalid."""
        return arena.deref(self)


class Arena(ABC, Generic[P]):
    """Storage that hands out pointers to the data it holds."""

    @abstractmethod
    def alloc_with(self, f: Callable[[P], Any]) -> P:
        """Store the data built by ``f`` from the new pointer, and return the pointer."""

    def alloc(self, data: Any) -> P:
        """Store ``data`` and return the pointer to it."""
        return self.alloc_with(lambda _ptr: data)

    @abstractmethod
    def try_dealloc(self, ptr: P) -> Any:
        """Remove the data of ``ptr`` and return it, or None if ``ptr`` is invalid."""

    @abstractmethod
    def try_deref(self, ptr: P) -> Any:
        """Return the data of ``ptr``, or None if ``ptr`` is invalid."""

    def deref(self, ptr: P) -> Any:
        """Return the data of ``ptr``; raise LookupError if ``ptr`` is invalid."""
        if not self._is_valid(ptr):
            raise LookupError(_INVALID_POINTER)
        return self.try_deref(ptr)

    def _is_valid(self, ptr: P) -> bool:
        return self.try_deref(ptr) is not None


@dataclass(frozen=True, order=True)
class GenericPtr(ArenaPtr, Generic[T]):
    """A raw, non-generational index into a :class:`GenericArena`.

    Pointers are ordered by index, i.e. by their position in the arena.
    """

    index: int

    def __repr__(self) -> str:
        return f"*{self.index}"

    __str__ = __repr__

    def __format__(self, spec: str) -> str:
        if spec in ("x", "X"):
            return "*" + format(self.index, spec)
        return format(str(self), spec)


@dataclass
class _Vacant:
    """A free slot; ``next`` links to the next free slot."""

    next: int | None


class GenericArena(Arena[GenericPtr[T]]):
    """An arena of slots that reuses freed slots, most recently freed first."""

    def __init__(self) -> None:
        self._entries: list[Any] = []
        self._free_head: int | None = None

    @classmethod
    def with_capacity(cls, capacity: int) -> "GenericArena[T]":
        """Create an empty arena sized for ``capacity`` items."""
        arena = cls()
        arena.reserve(capacity)
        return arena

    def reserve(self, additional: int) -> None:
        """Declare that ``additional`` more items are expected."""
        if additional < 0:
            raise ValueError("cannot reserve a negative capacity")

    def _take_slot(self) -> int:
        if self._free_head is not None:
            index = self._free_head
            entry = self._entries[index]
            assert isinstance(entry, _Vacant)
            self._free_head = entry.next
            return index
        self._entries.append(_Vacant(None))
        return len(self._entries) - 1

    def alloc_with(self, f: Callable[[GenericPtr[T]], T]) -> GenericPtr[T]:
        index = self._take_slot()
        ptr: GenericPtr[T] = GenericPtr(index)
        try:
            data = f(ptr)
        except BaseException:
            self._entries[index] = _Vacant(self._free_head)
            self._free_head = index
            raise
        self._entries[index] = data
        return ptr

    def _is_valid(self, ptr: GenericPtr[T]) -> bool:
        index = ptr.index
        return 0 <= index < len(self._entries) and not isinstance(
            self._entries[index], _Vacant
        )

    def try_dealloc(self, ptr: GenericPtr[T]) -> T | None:
        if not self._is_valid(ptr):
            return None
        index = ptr.index
        data = self._entries[index]
        self._entries[index] = _Vacant(self._free_head)
        self._free_head = index
        return data

    def try_deref(self, ptr: GenericPtr[T]) -> T | None:
        if not self._is_valid(ptr):
            return None
        return self._entries[ptr.index]

    def __iter__(self) -> Iterator[T]:
        """Iterate over the stored data in slot order."""
        return (entry for entry in self._entries if not isinstance(entry, _Vacant))


@dataclass(frozen=True, order=True)
class UniqueArenaPtr(ArenaPtr, Generic[T]):
    """A pointer into a :class:`UniqueArena`."""

    ptr: GenericPtr[T]

    @property
    def index(self) -> int:
        return self.ptr.index

    def __repr__(self) -> str:
        return f"UniqueArenaPtr({self.ptr.index})"


class UniqueArena(Arena[UniqueArenaPtr[T]]):
    """An arena that stores each distinct value once.

    Allocating a value equal to one already stored returns the existing pointer.
    Values must be hashable.
    """

    def __init__(self) -> None:
        self._arena: GenericArena[T] = GenericArena()
        self._unique: dict[tuple[type, Any], GenericPtr[T]] = {}

    def alloc_with(self, f: Callable[[UniqueArenaPtr[T]], T]) -> UniqueArenaPtr[T]:
        raise TypeError("UniqueArena does not support alloc_with")

    def alloc(self, data: T) -> UniqueArenaPtr[T]:
        key = (type(data), data)
        existing = self._unique.get(key)
        if existing is not None:
            return UniqueArenaPtr(existing)
        ptr = self._arena.alloc(data)
        self._unique[key] = ptr
        return UniqueArenaPtr(ptr)

    def _is_valid(self, ptr: UniqueArenaPtr[T]) -> bool:
        return self._arena._is_valid(ptr.ptr)

    def try_dealloc(self, ptr: UniqueArenaPtr[T]) -> T | None:
        if not self._is_valid(ptr):
            return None
        data = self._arena.try_deref(ptr.ptr)
        removed = self._unique.pop((type(data), data), None)
        if removed != ptr.ptr:
            raise RuntimeError("value present in arena but not in unique map")
        return self._arena.try_dealloc(ptr.ptr)

    def try_deref(self, ptr: UniqueArenaPtr[T]) -> T | None:
        return self._arena.try_deref(ptr.ptr)