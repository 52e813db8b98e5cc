"""Def-use tracking: which instructions use which values and blocks."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Iterable


@dataclass(frozen=True, order=True)
class User:
    """One use of an entity: the instruction and the operand slot in it.

    ``add %1, %1`` gives two users of ``%1``, with indices 0 and 1.
    """

    inst: Any
    idx: int


class Usable(ABC):
    """An entity that instructions can use (values and blocks)."""

    __slots__ = ()

    @abstractmethod
    def users(self, ctx: Any) -> Iterable[User]:
        """All current users of the entity."""

    @abstractmethod
    def insert_user(self, ctx: Any, user: User) -> None:
        """Record a new user."""

    @abstractmethod
    def remove_user(self, ctx: Any, user: User) -> None:
        """Forget a user."""


@dataclass(frozen=True)
class Operand:
    """The instruction side of a use: what is used, by whom, at which slot."""

    used: Any
    inst: Any
    idx: int

    @classmethod
    def create(cls, ctx: Any, used: Usable, inst: Any, idx: int) -> "Operand":
        """Create an operand and register it as a user of ``used``."""
        used.insert_user(ctx, User(inst, idx))
        return cls(used, inst, idx)

    def drop(self, ctx: Any) -> None:
        """Unregister this operand from the entity it uses."""
        self.used.remove_user(ctx, User(self.inst, self.idx))