#!/usr/bin/env python3
"""
Explicit LIFO stack used by every tree walk.

Traversals push and pop references here instead of recursing, so deep or
badly unbalanced slicing trees never hit the interpreter recursion limit.
"""

from typing import Any, List


class EmptyStackError(IndexError):
    """Raised when popping or peeking an empty stack."""


class Stack:
    """
    Last-in-first-out sequence of references.

    Callers are expected to check is_empty() before pop()/peek().
    """

    def __init__(self):
        self._items: List[Any] = []

    def push(self, item: Any) -> None:
        self._items.append(item)

    def pop(self) -> Any:
        if not self._items:
            raise EmptyStackError("pop from empty stack")
        return self._items.pop()

    def peek(self) -> Any:
        if not self._items:
            raise EmptyStackError("peek at empty stack")
        return self._items[-1]

    def is_empty(self) -> bool:
        return not self._items

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)
