#!/usr/bin/env python3
"""
Slicing tree model for floorplan packing.

A slicing floorplan is a strictly binary tree: leaves are fixed-size blocks,
internal nodes are horizontal (H) or vertical (V) cuts that combine exactly
two sub-rectangles. Widths/heights of cuts and all coordinates are filled in
later by packer.py.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional, Tuple

from tree_stack import Stack


class FloorplanError(ValueError):
    """Base class for bad floorplan input or structure."""


class MalformedLeafError(FloorplanError):
    """A token is neither a cut marker nor a valid id(width,height) leaf."""

    def __init__(self, token: str, reason: str = "Error parsing leaf node"):
        super().__init__(f"{reason}: {token}")
        self.token = token


class InvalidTreeError(FloorplanError):
    """A node has nowhere to attach, or an internal node is missing a child."""


class IncompleteTreeError(FloorplanError):
    """Input ended while internal nodes were still waiting for children."""

    def __init__(self, pending: int):
        super().__init__(
            f"Incomplete tree: {pending} internal node(s) never received both children"
        )
        self.pending = pending


class EmptyFloorplanError(FloorplanError):
    """Input contained no tokens at all."""


class CutType(Enum):
    HORIZONTAL = 'H'
    VERTICAL = 'V'

    def __str__(self) -> str:
        return self.value


class Node:
    """Common geometry shared by leaves and cuts."""

    width: int
    height: int
    x: int
    y: int

    @property
    def is_leaf(self) -> bool:
        return isinstance(self, Leaf)

    @property
    def area(self) -> int:
        return self.width * self.height

    def bounding_box(self) -> Tuple[int, int, int, int]:
        """Return (x0, y0, x1, y1) of the node's rectangle."""
        return (self.x, self.y, self.x + self.width, self.y + self.height)


@dataclass(eq=False)
class Leaf(Node):
    """A fixed-size block. Dimensions come from the input and never change."""

    id: int
    width: int
    height: int
    x: int = 0
    y: int = 0


@dataclass(eq=False, repr=False)
class Internal(Node):
    """A cut combining a left and a right sub-floorplan."""

    cut_type: CutType
    left: Optional[Node] = None
    right: Optional[Node] = None
    width: int = 0
    height: int = 0
    x: int = 0
    y: int = 0

    def children(self) -> Tuple[Optional[Node], Optional[Node]]:
        return self.left, self.right

    def __repr__(self) -> str:
        # children are left out so deep trees don't recurse
        return (f"Internal(cut_type='{self.cut_type}', width={self.width}, "
                f"height={self.height}, x={self.x}, y={self.y})")


def _child_links(node: Node) -> Tuple[Optional[Node], Optional[Node]]:
    if node.is_leaf:
        return None, None
    return node.left, node.right


def iter_preorder(root: Optional[Node]) -> Iterator[Node]:
    """Yield nodes parent first, then left subtree, then right subtree."""
    if root is None:
        return

    stack = Stack()
    stack.push(root)

    while not stack.is_empty():
        node = stack.pop()
        yield node

        left, right = _child_links(node)
        # right goes in first so left comes out first
        if right is not None:
            stack.push(right)
        if left is not None:
            stack.push(left)


def iter_postorder(root: Optional[Node]) -> Iterator[Node]:
    """Yield nodes left subtree first, then right subtree, then parent."""
    if root is None:
        return

    stack = Stack()
    current = root
    last_visited = None

    while current is not None or not stack.is_empty():
        if current is not None:
            stack.push(current)
            current, _ = _child_links(current)
        else:
            peek_node = stack.peek()
            _, right = _child_links(peek_node)

            # Coming back up from the left side: walk the right subtree next
            if right is not None and last_visited is not right:
                current = right
            else:
                yield peek_node
                last_visited = stack.pop()


def count_nodes(root: Optional[Node]) -> Tuple[int, int, int]:
    """
    Count the tree's nodes.

    Returns:
        (leaf_count, internal_count, max_depth) where the root has depth 0
    """
    if root is None:
        return 0, 0, 0

    leaves = 0
    internals = 0
    max_depth = 0

    stack = Stack()
    stack.push((root, 0))
    while not stack.is_empty():
        node, depth = stack.pop()
        max_depth = max(max_depth, depth)

        if node.is_leaf:
            leaves += 1
            continue

        internals += 1
        for child in node.children():
            if child is not None:
                stack.push((child, depth + 1))

    return leaves, internals, max_depth
