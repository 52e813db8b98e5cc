"""IR types, stored once each in the context."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Optional

from .storage import UniqueArenaPtr

if TYPE_CHECKING:
    from .context import Context


class TyKind(Enum):
    """The kinds of IR type."""

    VOID = "void"
    INT1 = "i1"
    INT8 = "i8"
    INT32 = "i32"
    FLOAT32 = "f32"
    PTR = "ptr"
    ARRAY = "array"


@dataclass(frozen=True)
class TyData:
    """The contents of a type; ``elem`` and ``length`` apply to arrays only."""

    kind: TyKind
    elem: Optional["Ty"] = None
    length: int = 0


_FIXED_WIDTHS = {
    TyKind.VOID: 0,
    TyKind.INT1: 1,
    TyKind.INT8: 8,
    TyKind.INT32: 32,
    TyKind.FLOAT32: 32,
}


@dataclass(frozen=True, order=True)
class Ty:
    """A handle to a type; equal types share one handle."""

    handle: UniqueArenaPtr

    @staticmethod
    def _fetch(ctx: "Context", data: TyData) -> "Ty":
        return Ty(ctx.ty_arena.alloc(data))

    @staticmethod
    def void(ctx: "Context") -> "Ty":
        """The ``void`` type."""
        return Ty._fetch(ctx, TyData(TyKind.VOID))

    @staticmethod
    def i1(ctx: "Context") -> "Ty":
        """The ``i1`` type."""
        return Ty._fetch(ctx, TyData(TyKind.INT1))

    @staticmethod
    def i8(ctx: "Context") -> "Ty":
        """The ``i8`` type."""
        return Ty._fetch(ctx, TyData(TyKind.INT8))

    @staticmethod
    def i32(ctx: "Context") -> "Ty":
        """The ``i32`` type."""
        return Ty._fetch(ctx, TyData(TyKind.INT32))

    @staticmethod
    def f32(ctx: "Context") -> "Ty":
        """The ``f32`` type."""
        return Ty._fetch(ctx, TyData(TyKind.FLOAT32))

    @staticmethod
    def ptr(ctx: "Context") -> "Ty":
        """The pointer type."""
        return Ty._fetch(ctx, TyData(TyKind.PTR))

    @staticmethod
    def array(ctx: "Context", elem: "Ty", length: int) -> "Ty":
        """An array of ``length`` elements of type ``elem``."""
        if length < 0:
            raise ValueError("array length cannot be negative")
        return Ty._fetch(ctx, TyData(TyKind.ARRAY, elem, length))

    def data(self, ctx: "Context") -> TyData:
        """The contents of this type; raise LookupError if the handle is invalid."""
        return ctx.ty_arena.deref(self.handle)

    def is_void(self, ctx: "Context") -> bool:
        return self.data(ctx).kind is TyKind.VOID

    def bitwidth(self, ctx: "Context") -> int:
        """The size of the type in bits."""
        data = self.data(ctx)
        if data.kind is TyKind.PTR:
            return ctx.target.ptr_size * 8
        if data.kind is TyKind.ARRAY:
            assert data.elem is not None
            return data.elem.bitwidth(ctx) * data.length
        return _FIXED_WIDTHS[data.kind]

    def as_array(self, ctx: "Context") -> Optional[tuple["Ty", int]]:
        """Return ``(elem, length)`` for an array type, otherwise None."""
        data = self.data(ctx)
        if data.kind is TyKind.ARRAY:
            assert data.elem is not None
            return data.elem, data.length
        return None

    def display(self, ctx: "Context") -> str:
        """The textual form of the type."""
        data = self.data(ctx)
        if data.kind is TyKind.ARRAY:
            assert data.elem is not None
            return f"[{data.length} x {data.elem.display(ctx)}]"
        return data.kind.value