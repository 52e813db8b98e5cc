# sysyir

`sysyir` holds the lower layers of an intermediate representation for
compiling SysY programs: storage for IR entities, iteration over intrusive
linked lists, and the IR's types, values, constants and global variables.

## Modules

- `sysyir.storage` – arenas that hand out hashable pointer handles.
  `GenericArena` stores data in slots and reuses freed slots, most recently
  freed first (pointers are plain indices, not generational).
  `UniqueArena` interns values: allocating a value equal to one already stored
  returns the existing `UniqueArenaPtr`. `deref` raises `LookupError` for an
  invalid pointer; `try_deref` and `try_dealloc` return `None` instead.
- `sysyir.cursor` – `LinkedListIterator` (double-ended: iterate forwards,
  `next_back()` or `reversed()` backwards) and `LinkedListCursor`, which keeps
  working while the list is changed. `CursorStrategy.PRE` fetches the next node
  before handing out the current one; `CursorStrategy.POST` fetches it on the
  following call. `rev(ctx)` turns the cursor around and restarts it. Nodes
  must provide `next(ctx)` / `prev(ctx)` and containers `head(ctx)` /
  `tail(ctx)`, each returning a node or `None`.
- `sysyir.context` – `Context`, which owns every IR entity, and `TargetInfo`
  with the target pointer size in bytes (default 4).
- `sysyir.ty` – interned types: `Ty.void`, `i1`, `i8`, `i32`, `f32`, `ptr` and
  `Ty.array(ctx, elem, length)`, with `bitwidth`, `as_array`, `is_void` and
  `display`.
- `sysyir.def_use` – `User` (instruction plus operand slot), `Operand`, and
  the abstract `Usable` interface.
- `sysyir.value` – constants (`Int1Const`, `Int8Const`, `Int32Const`,
  `Float32Const`, `ArrayConst`, `GlobalRefConst`, `UndefConst`, `ZeroConst`)
  and `Value` handles for constants, instruction results and parameters, with
  user tracking. Integer constants are range-checked and raise `ValueError`
  when out of range; floats are rounded to single precision.
- `sysyir.global_var` – `Global` variables with a constant initial value.

## Example

```python
from sysyir.context import Context
from sysyir.global_var import Global
from sysyir.ty import Ty
from sysyir.value import ConstantValue, Value

ctx = Context(8)
i32 = Ty.i32(ctx)

print(Ty.array(ctx, i32, 10).display(ctx))        # [10 x i32]
print(Ty.ptr(ctx).bitwidth(ctx))                   # 64
print(Value.i32(ctx, 7).display(ctx, True))        # i32 7

Global.new(ctx, "answer", ConstantValue.i32(ctx, 42))
print(ctx, end="")                                 # @answer = global i32 42
```

`Ty.i32(ctx)` returns the same handle every time it is called on one context.

Walking a list with a cursor:

```python
from sysyir.cursor import CursorDirection, CursorStrategy, LinkedListCursor

class Node:
    def __init__(self, name):
        self.name, self.nxt, self.prv = name, None, None
    def next(self, ctx): return self.nxt
    def prev(self, ctx): return self.prv

class Chain:
    def __init__(self, first, last): self.first, self.last = first, last
    def head(self, ctx): return self.first
    def tail(self, ctx): return self.last

a, b = Node("a"), Node("b")
a.nxt, b.prv = b, a
cursor = LinkedListCursor(Chain(a, b), None, CursorStrategy.PRE, CursorDirection.FORWARD)
cursor.for_each(None, lambda ctx, node: print(node.name))   # a, b
```

## What the package does not do

The package has no basic blocks, functions or instructions, so it cannot
build function bodies or print them, and it has no ready-made linked list
container or node types: `sysyir.cursor` only walks lists whose nodes and
containers the caller provides. `Context` reserves storage for blocks,
instructions and functions, but nothing in the package fills it; printing a
context shows its global variables. There is no front end and no command.

## Running the tests

```
pip install .[test]
pytest
```