#!/usr/bin/env python3
"""
Validator: checks a packed slicing tree for geometric consistency.

- every cut's size follows the H/V sizing rule from its children
- children sit inside their parent and tile it along the cut axis
- no two leaf blocks overlap
- leaf ids are unique and leaf sizes match the input
Prints an area utilization report. Exits with error code 1 on any failure.
"""

import argparse
import sys
from collections import Counter
from typing import Dict, List, Optional, Tuple

import numpy as np

from packer import combine_dimensions, pack_floorplan
from parse_floorplan import load_tree
from slicing_tree import CutType, FloorplanError, Node, count_nodes, iter_preorder


# Rows of the pairwise overlap matrix evaluated at once
OVERLAP_BLOCK_ROWS = 1024


def check_dimensions(root: Optional[Node]) -> List[str]:
    """Check every cut's width/height against its children."""
    errors = []
    for node in iter_preorder(root):
        if node.is_leaf:
            continue
        if node.left is None or node.right is None:
            errors.append(f"{node.cut_type} cut is missing a child")
            continue

        expected = combine_dimensions(node.cut_type, node.left, node.right)
        if (node.width, node.height) != expected:
            errors.append(
                f"{node.cut_type} cut at ({node.x},{node.y}) is {node.width}x{node.height}, "
                f"expected {expected[0]}x{expected[1]}"
            )
    return errors


def check_placement(root: Optional[Node]) -> List[str]:
    """
    Check each cut's children against the cut's box.

    Both children must lie inside the parent. Along the cut axis they must
    abut with no gap or overlap and exactly span the parent; across it, both
    share the parent's edge and the wider/taller one spans the parent.
    """
    errors = []
    if root is not None and (root.x, root.y) != (0, 0):
        errors.append(f"Root is at ({root.x},{root.y}), expected (0,0)")

    for node in iter_preorder(root):
        if node.is_leaf or node.left is None or node.right is None:
            continue

        px0, py0, px1, py1 = node.bounding_box()
        for child in node.children():
            cx0, cy0, cx1, cy1 = child.bounding_box()
            if cx0 < px0 or cy0 < py0 or cx1 > px1 or cy1 > py1:
                errors.append(
                    f"Child [{cx0},{cy0}..{cx1},{cy1}] outside "
                    f"{node.cut_type} cut [{px0},{py0}..{px1},{py1}]"
                )

        if node.cut_type == CutType.HORIZONTAL:
            top, bottom = node.left, node.right
            tiled = (bottom.y == py0 and top.y == bottom.y + bottom.height
                     and top.y + top.height == py1)
            aligned = top.x == px0 and bottom.x == px0
            spans = max(top.width, bottom.width) == node.width
        else:
            left, right = node.left, node.right
            tiled = (left.x == px0 and right.x == left.x + left.width
                     and right.x + right.width == px1)
            aligned = left.y == py0 and right.y == py0
            spans = max(left.height, right.height) == node.height

        if not (tiled and aligned and spans):
            errors.append(
                f"{node.cut_type} cut [{px0},{py0}..{px1},{py1}] is not tiled by its children"
            )

    return errors


def find_overlapping_leaves(root: Optional[Node]) -> List[Tuple[int, int]]:
    """
    Find pairs of leaf blocks whose interiors intersect.

    Returns:
        List of (id_a, id_b) pairs, in pre-order of the first leaf
    """
    leaves = [node for node in iter_preorder(root) if node.is_leaf]
    if len(leaves) < 2:
        return []

    boxes = np.array([leaf.bounding_box() for leaf in leaves], dtype=np.int64)
    x0, y0, x1, y1 = boxes.T
    n = len(leaves)

    pairs = []
    for start in range(0, n, OVERLAP_BLOCK_ROWS):
        stop = min(start + OVERLAP_BLOCK_ROWS, n)
        rows = slice(start, stop)

        overlap = (
            (x0[rows, None] < x1[None, :]) & (x0[None, :] < x1[rows, None]) &
            (y0[rows, None] < y1[None, :]) & (y0[None, :] < y1[rows, None])
        )
        # Only j > i, each pair once
        overlap &= np.arange(start, stop)[:, None] < np.arange(n)[None, :]

        for i, j in np.argwhere(overlap):
            pairs.append((leaves[start + i].id, leaves[j].id))

    return pairs


def check_leaf_sizes(root: Optional[Node],
                     expected_sizes: Dict[int, Tuple[int, int]]) -> List[str]:
    """Compare leaf sizes with the sizes read from the input file."""
    errors = []
    for node in iter_preorder(root):
        if not node.is_leaf or node.id not in expected_sizes:
            continue
        if (node.width, node.height) != expected_sizes[node.id]:
            width, height = expected_sizes[node.id]
            errors.append(
                f"Block {node.id} is {node.width}x{node.height}, input says {width}x{height}"
            )
    return errors


def leaf_sizes(root: Optional[Node]) -> Dict[int, Tuple[int, int]]:
    return {node.id: (node.width, node.height)
            for node in iter_preorder(root) if node.is_leaf}


def validate_floorplan(root: Optional[Node],
                       expected_sizes: Optional[Dict[int, Tuple[int, int]]] = None) -> List[str]:
    """
    Run every check on a packed tree.

    Returns:
        errors: human readable problems, empty if the packing is valid
    """
    errors = []

    ids = Counter(node.id for node in iter_preorder(root) if node.is_leaf)
    for leaf_id, count in sorted(ids.items()):
        if count > 1:
            errors.append(f"Block id {leaf_id} appears {count} times")

    errors.extend(check_dimensions(root))
    errors.extend(check_placement(root))

    for id_a, id_b in find_overlapping_leaves(root):
        errors.append(f"Blocks {id_a} and {id_b} overlap")

    if expected_sizes is not None:
        errors.extend(check_leaf_sizes(root, expected_sizes))

    return errors


def print_report(root: Optional[Node], errors: List[str]) -> None:
    """Print the floorplan area utilization report and any errors."""
    leaves, cuts, depth = count_nodes(root)
    block_area = sum(node.area for node in iter_preorder(root) if node.is_leaf)
    total_area = root.area if root is not None else 0

    print("=" * 60)
    print("Floorplan Utilization Report")
    print("=" * 60)
    print(f"Blocks: {leaves}")
    print(f"Cuts: {cuts} (depth {depth})")
    if root is not None:
        print(f"Floorplan: {root.width} x {root.height}")
    utilization = (block_area / total_area) * 100 if total_area > 0 else 0
    print(f"Block area: {block_area}/{total_area} used ({utilization:.1f}%)")

    for error in errors:
        print(f"ERROR: {error}")

    print("=" * 60)

    if errors:
        print("\nVALIDATION FAILED: Floorplan packing is inconsistent.")
    else:
        print("\nVALIDATION PASSED: Floorplan packing is consistent.")


def validate_floorplan_file(input_path: str) -> bool:
    """
    Load, pack and validate a pre-order floorplan file.

    Returns:
        True if the packing is valid, False otherwise
    """
    root = load_tree(input_path)
    expected_sizes = leaf_sizes(root)
    pack_floorplan(root)

    errors = validate_floorplan(root, expected_sizes)
    print_report(root, errors)
    return not errors


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description='Validate a slicing floorplan packing')
    parser.add_argument('in_file', help='Pre-order floorplan file')
    args = parser.parse_args(argv)

    try:
        is_valid = validate_floorplan_file(args.in_file)
    except OSError as e:
        print(f"ERROR: Can't open input file {args.in_file}: {e.strerror}", file=sys.stderr)
        return 1
    except FloorplanError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    return 0 if is_valid else 1


if __name__ == '__main__':
    sys.exit(main())
