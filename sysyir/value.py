"""IR values: constants, instruction results and function parameters."""

from __future__ import annotations

import math
import struct
from dataclasses import dataclass, field
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Union

from .def_use import Usable, User
from .storage import GenericPtr
from .ty import Ty

if TYPE_CHECKING:
    from .context import Context


def _to_f32(x: float) -> float:
    try:
        return struct.unpack("<f", struct.pack("<f", x))[0]
    except OverflowError:
        return math.copysign(math.inf, x)


def _format_f32(x: float) -> str:
    """Shortest round-tripping decimal form, without exponent."""
    if math.isnan(x):
        return "NaN"
    if math.isinf(x):
        return "inf" if x > 0 else "-inf"
    text = repr(x)
    for digits in range(1, 10):
        candidate = f"{x:.{digits}g}"
        if _to_f32(float(candidate)) == x:
            text = candidate
            break
    return format(Decimal(text).normalize(), "f")


def _check_range(value: int, bits: int) -> int:
    low, high = -(1 << (bits - 1)), (1 << (bits - 1)) - 1
    if not low <= value <= high:
        raise ValueError(f"{value} does not fit in i{bits}")
    return value


@dataclass(frozen=True)
class ConstantValue:
    """An invariant constant; subclasses hold the actual payload."""

    ty: Ty

    def _body(self, ctx: "Context") -> str:
        raise NotImplementedError

    def to_string(self, ctx: "Context", typed: bool) -> str:
        """The textual form, prefixed with the type when ``typed``."""
        body = self._body(ctx)
        return f"{self.ty.display(ctx)} {body}" if typed else body

    @staticmethod
    def i1(ctx: "Context", value: bool) -> "Int1Const":
        return Int1Const(Ty.i1(ctx), value)

    @staticmethod
    def i8(ctx: "Context", value: int) -> "Int8Const":
        return Int8Const(Ty.i8(ctx), value)

    @staticmethod
    def i32(ctx: "Context", value: int) -> "Int32Const":
        return Int32Const(Ty.i32(ctx), value)

    @staticmethod
    def f32(ctx: "Context", value: float) -> "Float32Const":
        return Float32Const(Ty.f32(ctx), value)

    @staticmethod
    def global_ref(ctx: "Context", name: str, value_ty: Ty) -> "GlobalRefConst":
        return GlobalRefConst(Ty.ptr(ctx), name, value_ty)


@dataclass(frozen=True)
class UndefConst(ConstantValue):
    """The undefined value."""

    def _body(self, ctx: "Context") -> str:
        return "undef"


@dataclass(frozen=True)
class ZeroConst(ConstantValue):
    """The ``zeroinitializer`` constant."""

    def _body(self, ctx: "Context") -> str:
        return "zeroinitializer"


@dataclass(frozen=True)
class Int1Const(ConstantValue):
    value: bool

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", bool(self.value))

    def _body(self, ctx: "Context") -> str:
        return "true" if self.value else "false"


@dataclass(frozen=True)
class Int8Const(ConstantValue):
    value: int

    def __post_init__(self) -> None:
        _check_range(self.value, 8)

    def _body(self, ctx: "Context") -> str:
        return str(self.value)


@dataclass(frozen=True)
class Int32Const(ConstantValue):
    value: int

    def __post_init__(self) -> None:
        _check_range(self.value, 32)

    def _body(self, ctx: "Context") -> str:
        return str(self.value)


@dataclass(frozen=True)
class Float32Const(ConstantValue):
    """A 32-bit float; the value is rounded to single precision."""

    value: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", _to_f32(float(self.value)))

    def _body(self, ctx: "Context") -> str:
        return _format_f32(self.value)


@dataclass(frozen=True)
class ArrayConst(ConstantValue):
    elems: tuple[ConstantValue, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "elems", tuple(self.elems))

    def _body(self, ctx: "Context") -> str:
        return "[" + ", ".join(elem.to_string(ctx, True) for elem in self.elems) + "]"


@dataclass(frozen=True)
class GlobalRefConst(ConstantValue):
    """The address of a global variable or function; ``ty`` is the pointer type."""

    name: str
    value_ty: Ty

    def _body(self, ctx: "Context") -> str:
        return f"@{self.name}"


@dataclass(frozen=True)
class InstResult:
    """The value produced by an instruction."""

    inst: Any
    ty: Ty


@dataclass(frozen=True)
class Param:
    """A function parameter."""

    func: Any
    ty: Ty
    index: int


@dataclass(frozen=True)
class Constant:
    """A constant value."""

    value: ConstantValue


@dataclass(eq=False)
class ValueData:
    """Stored state of a value; users are tracked for non-constants."""

    self_ptr: "Value"
    kind: Union[InstResult, Param, Constant]
    users: set[User] = field(default_factory=set)


@dataclass(frozen=True, order=True)
class Value(Usable):
    """A handle to a value stored in the context."""

    handle: GenericPtr

    @staticmethod
    def _new(ctx: "Context", kind: Union[InstResult, Param, Constant]) -> "Value":
        ptr = ctx.value_arena.alloc_with(lambda p: ValueData(Value(p), kind))
        return Value(ptr)

    def _data(self, ctx: "Context") -> ValueData:
        return ctx.value_arena.deref(self.handle)

    def ty(self, ctx: "Context") -> Ty:
        kind = self._data(ctx).kind
        if isinstance(kind, Constant):
            return kind.value.ty
        return kind.ty

    @staticmethod
    def new_param(ctx: "Context", func: Any, ty: Ty, index: int) -> "Value":
        return Value._new(ctx, Param(func, ty, index))

    @staticmethod
    def new_inst_result(ctx: "Context", inst: Any, ty: Ty) -> "Value":
        return Value._new(ctx, InstResult(inst, ty))

    def display(self, ctx: "Context", with_type: bool) -> str:
        """The textual form; non-constants are numbered by storage index."""
        kind = self._data(ctx).kind
        if isinstance(kind, Constant):
            return kind.value.to_string(ctx, with_type)
        name = f"%v{self.handle.index}"
        return f"{kind.ty.display(ctx)} {name}" if with_type else name

    def is_param(self, ctx: "Context") -> bool:
        return isinstance(self._data(ctx).kind, Param)

    @staticmethod
    def i1(ctx: "Context", value: bool) -> "Value":
        return Value._new(ctx, Constant(ConstantValue.i1(ctx, value)))

    @staticmethod
    def i8(ctx: "Context", value: int) -> "Value":
        return Value._new(ctx, Constant(ConstantValue.i8(ctx, value)))

    @staticmethod
    def i32(ctx: "Context", value: int) -> "Value":
        return Value._new(ctx, Constant(ConstantValue.i32(ctx, value)))

    @staticmethod
    def f32(ctx: "Context", value: float) -> "Value":
        return Value._new(ctx, Constant(ConstantValue.f32(ctx, value)))

    @staticmethod
    def global_ref(ctx: "Context", name: str, value_ty: Ty) -> "Value":
        return Value._new(ctx, Constant(ConstantValue.global_ref(ctx, name, value_ty)))

    def users(self, ctx: "Context") -> frozenset[User]:
        return frozenset(self._data(ctx).users)

    def insert_user(self, ctx: "Context", user: User) -> None:
        self._data(ctx).users.add(user)

    def remove_user(self, ctx: "Context", user: User) -> None:
        self._data(ctx).users.discard(user)