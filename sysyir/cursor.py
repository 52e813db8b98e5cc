"""Iteration over intrusive linked lists: plain iterators and cursors.

Nodes are expected to provide ``next(ctx)`` and ``prev(ctx)``, and containers
``head(ctx)`` and ``tail(ctx)``, each returning a node or None.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Callable, Iterator


class CursorStrategy(Enum):
    """When a cursor fetches the node that follows the one being visited."""

    PRE = "pre"
    """The next node is fetched before the current one is handed out.

    Unlinking or changing the current node does not change what comes next.
    """

    POST = "post"
    """The next node is fetched from the current one on the following call.

    Nodes inserted after the current one are visited; unlinking the current
    node ends the iteration.
    """


class CursorDirection(Enum):
    """The direction a cursor walks a list in."""

    FORWARD = "forward"
    BACKWARD = "backward"


class LinkedListIterator:
    """A double-ended iterator over a linked list.

    Iterating yields nodes from head to tail; :meth:`next_back` walks from the
    tail to the head. The two ends advance independently.
    """

    def __init__(self, ctx: Any, head: Any, tail: Any) -> None:
        self._ctx = ctx
        self._forward = head
        self._backward = tail

    def __iter__(self) -> Iterator[Any]:
        return self

    def __next__(self) -> Any:
        curr = self._forward
        if curr is None:
            raise StopIteration
        self._forward = curr.next(self._ctx)
        return curr

    def next_back(self) -> Any:
        """Return the next node from the back, or None when exhausted."""
        curr = self._backward
        if curr is not None:
            self._backward = curr.prev(self._ctx)
        return curr

    def __reversed__(self) -> Iterator[Any]:
        while (node := self.next_back()) is not None:
            yield node


class LinkedListCursor:
    """A cursor that tolerates changes to the list while it walks it.

    The cursor holds no reference to the context; it is passed to each call.
    """

    def __init__(
        self,
        container: Any,
        ctx: Any,
        strategy: CursorStrategy,
        direction: CursorDirection,
    ) -> None:
        self._container = container
        self._strategy = strategy
        self._direction = direction
        self._done = False
        self._curr: Any = None
        if strategy is CursorStrategy.PRE:
            self._curr = self._first(ctx)

    def _first(self, ctx: Any) -> Any:
        if self._direction is CursorDirection.FORWARD:
            return self._container.head(ctx)
        return self._container.tail(ctx)

    def _step(self, node: Any, ctx: Any) -> Any:
        if self._direction is CursorDirection.FORWARD:
            return node.next(ctx)
        return node.prev(ctx)

    def rev(self, ctx: Any) -> "LinkedListCursor":
        """Reverse the direction, clear the done flag and restart; return self."""
        self._direction = (
            CursorDirection.BACKWARD
            if self._direction is CursorDirection.FORWARD
            else CursorDirection.FORWARD
        )
        self._done = False
        if self._strategy is CursorStrategy.PRE:
            self._curr = self._first(ctx)
        else:
            self._curr = None
        return self

    def is_done(self) -> bool:
        """Whether the cursor has run past the end of the list."""
        return self._done

    def next(self, ctx: Any) -> Any:
        """Move the cursor and return the node to visit, or None at the end."""
        if self._strategy is CursorStrategy.PRE:
            curr = self._curr
            if curr is None:
                self._done = True
            else:
                self._curr = self._step(curr, ctx)
            return curr

        if self._curr is not None:
            self._curr = self._step(self._curr, ctx)
        elif self._done:
            return None
        else:
            self._curr = self._first(ctx)
        self._done = self._curr is None
        return self._curr

    def for_each(self, ctx: Any, f: Callable[[Any, Any], None]) -> None:
        """Call ``f(ctx, node)`` for every remaining node."""
        while (node := self.next(ctx)) is not None:
            f(ctx, node)