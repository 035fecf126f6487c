#!/usr/bin/env python3
"""
Unit tests for the dimension and coordinate passes.
"""

import random

import pytest

from packer import (
    calculate_coordinates, calculate_dimensions, combine_dimensions, pack_floorplan
)
from parse_floorplan import build_tree
from slicing_tree import CutType, Internal, InvalidTreeError, Leaf, iter_preorder


def random_tokens(rng: random.Random, num_leaves: int):
    """Pre-order tokens of a random strictly binary tree with num_leaves leaves."""
    tokens = []
    cuts_left = num_leaves - 1
    open_slots = 1
    next_id = 1

    while open_slots > 0:
        # The last open slot may only take a leaf once every cut is placed
        if cuts_left > 0 and rng.random() < 0.5:
            tokens.append(rng.choice('HV'))
            cuts_left -= 1
            open_slots += 1
        elif open_slots > 1 or cuts_left == 0:
            tokens.append(f"{next_id}({rng.randint(1, 30)},{rng.randint(1, 30)})")
            next_id += 1
            open_slots -= 1
        else:
            tokens.append(rng.choice('HV'))
            cuts_left -= 1
            open_slots += 1

    return tokens


def nodes_by_id(root):
    return {node.id: node for node in iter_preorder(root) if node.is_leaf}


class TestCombineDimensions:
    """Test the H/V sizing rule."""

    def test_horizontal(self):
        assert combine_dimensions(CutType.HORIZONTAL, Leaf(1, 4, 5), Leaf(2, 6, 7)) == (6, 12)

    def test_vertical(self):
        assert combine_dimensions(CutType.VERTICAL, Leaf(1, 2, 3), Leaf(2, 6, 12)) == (8, 12)


class TestExample:
    """The worked example V 1(2,3) H 2(4,5) 3(6,7)."""

    @pytest.fixture
    def root(self):
        return pack_floorplan(build_tree("V 1(2,3) H 2(4,5) 3(6,7)".split()))

    def test_dimensions(self, root):
        assert (root.right.width, root.right.height) == (6, 12)
        assert (root.width, root.height) == (8, 12)

    def test_coordinates(self, root):
        leaves = nodes_by_id(root)
        assert (root.x, root.y) == (0, 0)
        assert (leaves[1].x, leaves[1].y) == (0, 0)
        assert (root.right.x, root.right.y) == (2, 0)
        assert (leaves[3].x, leaves[3].y) == (2, 0)
        assert (leaves[2].x, leaves[2].y) == (2, 7)


class TestCalculateDimensions:
    """Test the post-order sizing pass."""

    def test_single_leaf_untouched(self):
        leaf = Leaf(1, 3, 4)
        calculate_dimensions(leaf)
        assert (leaf.width, leaf.height) == (3, 4)

    def test_none_is_noop(self):
        calculate_dimensions(None)
        calculate_coordinates(None)

    def test_missing_child_raises(self):
        broken = Internal(CutType.VERTICAL, left=Leaf(1, 1, 1))
        with pytest.raises(InvalidTreeError, match="missing a child"):
            calculate_dimensions(broken)

    def test_missing_child_in_coordinates(self):
        broken = Internal(CutType.HORIZONTAL, right=Leaf(1, 1, 1))
        with pytest.raises(InvalidTreeError):
            calculate_coordinates(broken)

    def test_nested_cuts(self):
        # H(V(1,2), 3): V is 5x4, H is max(5,1) x 4+6
        root = build_tree("H V 1(2,4) 2(3,1) 3(1,6)".split())
        calculate_dimensions(root)
        assert (root.left.width, root.left.height) == (5, 4)
        assert (root.width, root.height) == (5, 10)


class TestPackingProperties:
    """Properties that must hold for every packed tree."""

    @pytest.fixture(params=[1, 2, 7, 50, 300])
    def case(self, request):
        rng = random.Random(request.param)
        tokens = random_tokens(rng, request.param)
        input_sizes = {
            node.id: (node.width, node.height)
            for node in iter_preorder(build_tree(tokens)) if node.is_leaf
        }
        return pack_floorplan(build_tree(tokens)), input_sizes

    def test_dimension_laws(self, case):
        root, _ = case
        for node in iter_preorder(root):
            if node.is_leaf:
                continue
            left, right = node.left, node.right
            if node.cut_type == CutType.HORIZONTAL:
                assert node.width == max(left.width, right.width)
                assert node.height == left.height + right.height
            else:
                assert node.width == left.width + right.width
                assert node.height == max(left.height, right.height)

    def test_children_tile_parent(self, case):
        root, _ = case
        for node in iter_preorder(root):
            if node.is_leaf:
                continue
            left, right = node.left, node.right
            for child in (left, right):
                assert node.x <= child.x and child.x + child.width <= node.x + node.width
                assert node.y <= child.y and child.y + child.height <= node.y + node.height

            if node.cut_type == CutType.HORIZONTAL:
                # right is the bottom piece, left sits directly on top of it
                assert (right.x, right.y) == (node.x, node.y)
                assert (left.x, left.y) == (node.x, node.y + right.height)
            else:
                assert (left.x, left.y) == (node.x, node.y)
                assert (right.x, right.y) == (node.x + left.width, node.y)

    def test_leaves_do_not_overlap(self, case):
        root, _ = case
        boxes = [node.bounding_box() for node in iter_preorder(root) if node.is_leaf]
        for i, (ax0, ay0, ax1, ay1) in enumerate(boxes):
            for bx0, by0, bx1, by1 in boxes[i + 1:]:
                assert ax1 <= bx0 or bx1 <= ax0 or ay1 <= by0 or by1 <= ay0

    def test_leaves_inside_root(self, case):
        root, _ = case
        for node in iter_preorder(root):
            assert 0 <= node.x and node.x + node.width <= root.width
            assert 0 <= node.y and node.y + node.height <= root.height

    def test_leaf_dimensions_unchanged(self, case):
        root, input_sizes = case
        packed = {
            node.id: (node.width, node.height)
            for node in iter_preorder(root) if node.is_leaf
        }
        assert packed == input_sizes


class TestDeepTrees:
    """Deep unbalanced trees must not hit the recursion limit."""

    def test_deep_right_spine(self):
        depth = 10000
        tokens = []
        for i in range(depth):
            tokens.extend(["V", f"{i}(1,2)"])
        tokens.append(f"{depth}(1,2)")

        root = pack_floorplan(build_tree(tokens))
        assert (root.width, root.height) == (depth + 1, 2)

        last = nodes_by_id(root)[depth]
        assert (last.x, last.y) == (depth, 0)

    def test_deep_left_spine(self):
        depth = 10000
        tokens = ["H"] * depth + [f"{i}(3,1)" for i in range(depth + 1)]

        root = pack_floorplan(build_tree(tokens))
        assert (root.width, root.height) == (3, depth + 1)
        # Leaf 0 is the top-most piece
        assert nodes_by_id(root)[0].y == depth


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
