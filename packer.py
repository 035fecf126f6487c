#!/usr/bin/env python3
"""
Packer: computes the dimensions and coordinates of every node of a slicing tree.

Two passes, in order:
1. calculate_dimensions - post-order, sizes each cut from its two children
2. calculate_coordinates - pre-order, places each child inside its parent

Child convention (must match in both passes):
    H cut: left child is the top piece, right child is the bottom piece
    V cut: left child is the left piece, right child is the right piece
"""

from typing import Optional, Tuple

from slicing_tree import CutType, Internal, InvalidTreeError, Node, iter_postorder
from tree_stack import Stack


def _require_children(node: Internal) -> Tuple[Node, Node]:
    if node.left is None or node.right is None:
        raise InvalidTreeError(
            f"Invalid tree: {node.cut_type} cut is missing a child"
        )
    return node.left, node.right


def combine_dimensions(cut_type: CutType, left: Node, right: Node) -> Tuple[int, int]:
    """
    Size of the smallest rectangle holding both children across a cut.

    Returns:
        (width, height)
    """
    if cut_type == CutType.HORIZONTAL:
        # Stacked top and bottom
        return max(left.width, right.width), left.height + right.height
    # Side by side
    return left.width + right.width, max(left.height, right.height)


def calculate_dimensions(root: Optional[Node]) -> None:
    """
    Fill in width/height of every cut, children before parents.
    Leaf dimensions are never touched.
    """
    for node in iter_postorder(root):
        if node.is_leaf:
            continue
        left, right = _require_children(node)
        node.width, node.height = combine_dimensions(node.cut_type, left, right)


def calculate_coordinates(root: Optional[Node]) -> None:
    """
    Fill in the lower-left (x, y) of every node, parents before children.
    The root of the packing is always at (0, 0). Requires final dimensions.
    """
    if root is None:
        return

    root.x = 0
    root.y = 0

    stack = Stack()
    stack.push(root)

    while not stack.is_empty():
        curr = stack.pop()

        if curr.is_leaf:
            continue

        top_or_left, bottom_or_right = _require_children(curr)

        if curr.cut_type == CutType.HORIZONTAL:
            # Bottom piece stays at the parent's corner
            bottom_or_right.x = curr.x
            bottom_or_right.y = curr.y
            top_or_left.x = curr.x
            top_or_left.y = curr.y + bottom_or_right.height
        else:
            top_or_left.x = curr.x
            top_or_left.y = curr.y
            bottom_or_right.x = curr.x + top_or_left.width
            bottom_or_right.y = curr.y

        stack.push(bottom_or_right)
        stack.push(top_or_left)


def pack_floorplan(root: Optional[Node]) -> Optional[Node]:
    """Run both passes on a freshly built tree and return its root."""
    calculate_dimensions(root)
    calculate_coordinates(root)
    return root
