"""Global variables."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from .storage import GenericPtr
from .ty import Ty
from .value import ConstantValue

if TYPE_CHECKING:
    from .context import Context


@dataclass(eq=False)
class GlobalData:
    """Stored state of a global variable."""

    self_ptr: "Global"
    name: str
    value: ConstantValue


@dataclass(frozen=True, order=True)
class Global:
    """A handle to a global variable stored in the context."""

    handle: GenericPtr

    @staticmethod
    def new(ctx: "Context", name: str, value: ConstantValue) -> "Global":
        """Create a global with the given initial value."""
        ptr = ctx.global_arena.alloc_with(lambda p: GlobalData(Global(p), name, value))
        return Global(ptr)

    def _data(self, ctx: "Context") -> GlobalData:
        return ctx.global_arena.deref(self.handle)

    def name(self, ctx: "Context") -> str:
        return self._data(ctx).name

    def value(self, ctx: "Context") -> ConstantValue:
        return self._data(ctx).value

    def ty(self, ctx: "Context") -> Ty:
        """The type of the initial value."""
        return self.value(ctx).ty

    def display(self, ctx: "Context") -> str:
        return f"@{self.name(ctx)} = global {self.value(ctx).to_string(ctx, True)}"