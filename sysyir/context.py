"""The IR context: owns every type, value, block, instruction, function and global."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterator

from .storage import GenericArena, UniqueArena


@dataclass
class TargetInfo:
    """Properties of the compilation target."""

    ptr_size: int
    """Pointer size in bytes."""


class Context:
    """Storage for all IR entities; handles are resolved against it."""

    def __init__(self, ptr_size: int = 4) -> None:
        self.ty_arena: UniqueArena[Any] = UniqueArena()
        self.block_arena: GenericArena[Any] = GenericArena()
        self.inst_arena: GenericArena[Any] = GenericArena()
        self.func_arena: GenericArena[Any] = GenericArena()
        self.value_arena: GenericArena[Any] = GenericArena()
        self.global_arena: GenericArena[Any] = GenericArena()
        self.target = TargetInfo(ptr_size)

    def set_target_info(self, target: TargetInfo) -> None:
        """Replace the target information."""
        self.target = target

    def funcs(self) -> Iterator[Any]:
        """Iterate over the handles of all functions, in storage order."""
        return (data.self_ptr for data in self.func_arena)

    def __str__(self) -> str:
        lines = [data.self_ptr.display(self) for data in self.global_arena]
        lines.extend(data.self_ptr.display(self) for data in self.func_arena)
        return "".join(f"{line}\n" for line in lines)