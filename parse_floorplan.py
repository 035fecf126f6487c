#!/usr/bin/env python3
"""
Parsers for slicing floorplan files.

Input files are a pre-order encoding of the slicing tree, one whitespace
separated token per node:
    H | V              internal cut
    id(width,height)   leaf block, e.g. 3(10,20)

Also reads back the post-order tree dumps and the packing file written by
save_floorplan.py.
"""

import argparse
import re
import sys
from typing import Any, Dict, Iterable, Iterator, List, Optional, TextIO

from slicing_tree import (
    CutType, EmptyFloorplanError, FloorplanError, IncompleteTreeError, Internal,
    InvalidTreeError, Leaf, MalformedLeafError, Node, count_nodes
)
from tree_stack import Stack


LEAF_PATTERN = re.compile(r'^(\d+)\((\d+),(\d+)\)$', re.ASCII)
# Internal node as written to the dimensions dump: H(6,12)
SIZED_CUT_PATTERN = re.compile(r'^([HV])\((\d+),(\d+)\)$', re.ASCII)
PACKING_PATTERN = re.compile(r'^(\d+)\(\((\d+),(\d+)\)\((\d+),(\d+)\)\)$', re.ASCII)

CUT_TOKENS = {cut.value: cut for cut in CutType}


def _undecodable(path: str, error: UnicodeDecodeError) -> FloorplanError:
    return FloorplanError(
        f"Error decoding {path}: {error.reason} at byte {error.start}"
    )


def tokenize(stream: TextIO) -> Iterator[str]:
    """Lazily yield whitespace separated tokens from a text stream."""
    for line in stream:
        for token in line.split():
            yield token


def parse_leaf_token(token: str) -> Leaf:
    """
    Parse an id(width,height) token into a Leaf.

    Raises:
        MalformedLeafError: if the token does not match the leaf format
    """
    match = LEAF_PATTERN.match(token)
    if not match:
        raise MalformedLeafError(token)
    leaf_id, width, height = (int(g) for g in match.groups())
    return Leaf(id=leaf_id, width=width, height=height)


def parse_node_token(token: str) -> Node:
    """Create a fresh node for a pre-order input token."""
    cut_type = CUT_TOKENS.get(token)
    if cut_type is not None:
        return Internal(cut_type=cut_type)
    return parse_leaf_token(token)


def build_tree(tokens: Iterable[str]) -> Node:
    """
    Rebuild a strictly binary slicing tree from its pre-order token stream.

    Every internal node is followed by the full encoding of its left subtree
    and then its right subtree. A stack holds the cuts still waiting for
    children.

    Returns:
        root node of the tree (a Leaf if the input is a single block)

    Raises:
        MalformedLeafError: on a token that is neither H/V nor a valid leaf
        InvalidTreeError: when a node arrives but no cut is waiting for it
        IncompleteTreeError: when input ends with cuts still missing children
        EmptyFloorplanError: when there are no tokens
    """
    pending = Stack()
    root = None

    for token in tokens:
        new_node = parse_node_token(token)

        if root is None:
            root = new_node
        else:
            if pending.is_empty():
                raise InvalidTreeError(
                    f"Invalid tree: no internal node is waiting for '{token}'"
                )

            parent = pending.peek()
            if parent.left is None:
                parent.left = new_node
            else:
                parent.right = new_node
                # Both children present, parent is complete
                pending.pop()

        if not new_node.is_leaf:
            pending.push(new_node)

    if root is None:
        raise EmptyFloorplanError("Empty floorplan: no nodes found in input")

    if not pending.is_empty():
        raise IncompleteTreeError(len(pending))

    return root


def load_tree(input_path: str) -> Node:
    """
    Read a pre-order floorplan file and build its slicing tree.

    Raises:
        OSError: if the file can't be opened
        FloorplanError: on malformed or structurally invalid input
    """
    with open(input_path, 'r', encoding='utf-8') as f:
        try:
            return build_tree(tokenize(f))
        except UnicodeDecodeError as e:
            raise _undecodable(input_path, e) from e


def parse_postorder_token(token: str) -> Node:
    """Node for a post-order dump token; dimensions on cuts are dropped."""
    cut_type = CUT_TOKENS.get(token)
    if cut_type is not None:
        return Internal(cut_type=cut_type)

    match = SIZED_CUT_PATTERN.match(token)
    if match:
        return Internal(cut_type=CUT_TOKENS[match.group(1)])

    return parse_leaf_token(token)


def build_postorder_tree(tokens: Iterable[str]) -> Node:
    """
    Rebuild a slicing tree from a post-order dump (save_postorder or
    save_dimensions output).

    Finished subtrees are kept on a stack; a cut takes the top two as its
    right and left children.
    """
    subtrees = Stack()

    for token in tokens:
        node = parse_postorder_token(token)

        if not node.is_leaf:
            if len(subtrees) < 2:
                raise InvalidTreeError(
                    f"Invalid tree: cut '{token}' has fewer than two subtrees before it"
                )
            node.right = subtrees.pop()
            node.left = subtrees.pop()

        subtrees.push(node)

    if subtrees.is_empty():
        raise EmptyFloorplanError("Empty floorplan: no nodes found in input")

    if len(subtrees) > 1:
        # Every leftover subtree beyond the root is missing a parent cut
        raise IncompleteTreeError(len(subtrees) - 1)

    return subtrees.pop()


def load_postorder_tree(dump_path: str) -> Node:
    with open(dump_path, 'r', encoding='utf-8') as f:
        try:
            return build_postorder_tree(tokenize(f))
        except UnicodeDecodeError as e:
            raise _undecodable(dump_path, e) from e


def parse_packing(packing_path: str) -> List[Dict[str, Any]]:
    """
    Parse a packing file (id((width,height)(x,y)) per line).

    Returns:
        placements: List of {id, width, height, x, y} in file order
    """
    placements = []

    with open(packing_path, 'r', encoding='utf-8') as f:
        try:
            lines = f.readlines()
        except UnicodeDecodeError as e:
            raise _undecodable(packing_path, e) from e

    for line in lines:
        line = line.strip()
        if not line or line.startswith('#'):
            continue

        match = PACKING_PATTERN.match(line)
        if not match:
            raise MalformedLeafError(line, reason="Error parsing packing line")

        leaf_id, width, height, x, y = (int(g) for g in match.groups())
        placements.append({
            'id': leaf_id,
            'width': width,
            'height': height,
            'x': x,
            'y': y
        })

    return placements


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description='Parse a slicing floorplan and print a summary')
    parser.add_argument('in_file', help='Pre-order floorplan file')
    parser.add_argument('--postorder', action='store_true',
                        help='Input is a post-order dump instead of pre-order')
    args = parser.parse_args(argv)

    try:
        if args.postorder:
            root = load_postorder_tree(args.in_file)
        else:
            root = load_tree(args.in_file)
    except OSError as e:
        print(f"ERROR: Can't open input file {args.in_file}: {e.strerror}", file=sys.stderr)
        return 1
    except FloorplanError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    leaves, cuts, depth = count_nodes(root)
    print("Floorplan Summary:")
    print(f"  Blocks: {leaves}")
    print(f"  Cuts: {cuts}")
    print(f"  Depth: {depth}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
