#!/usr/bin/env python3
"""
Writers for a packed slicing tree.

Three independent read-only dumps:
    post-order shape        - same tokens as the input, in post-order
    post-order dimensions   - every node with its (width,height)
    packing                 - leaves only, pre-order, with (width,height)(x,y)
"""

import sys
from typing import Iterable, Iterator, List, Optional, Sequence

from slicing_tree import Node, iter_postorder, iter_preorder


class OutputWriteError(OSError):
    """An output file could not be opened or written."""

    def __init__(self, path: str, cause: OSError):
        super().__init__(f"Can't open output file {path}: {cause.strerror or cause}")
        self.path = path
        self.cause = cause


def format_leaf(node: Node) -> str:
    return f"{node.id}({node.width},{node.height})"


def format_postorder(root: Optional[Node]) -> Iterator[str]:
    """Post-order shape: leaves as id(w,h), cuts as bare H / V."""
    for node in iter_postorder(root):
        if node.is_leaf:
            yield format_leaf(node)
        else:
            yield str(node.cut_type)


def format_dimensions(root: Optional[Node]) -> Iterator[str]:
    """Post-order dimensions: leaves as id(w,h), cuts as H(w,h) / V(w,h)."""
    for node in iter_postorder(root):
        if node.is_leaf:
            yield format_leaf(node)
        else:
            yield f"{node.cut_type}({node.width},{node.height})"


def format_packing(root: Optional[Node]) -> Iterator[str]:
    """Packing solution: leaves only, in input (pre-order) order."""
    for node in iter_preorder(root):
        if node.is_leaf:
            yield f"{node.id}(({node.width},{node.height})({node.x},{node.y}))"


def _write_lines(lines: Iterable[str], output_path: str) -> None:
    try:
        with open(output_path, 'w') as f:
            for line in lines:
                f.write(line + '\n')
    except OSError as e:
        raise OutputWriteError(output_path, e) from e


def save_postorder(root: Optional[Node], output_path: str) -> None:
    _write_lines(format_postorder(root), output_path)


def save_dimensions(root: Optional[Node], output_path: str) -> None:
    _write_lines(format_dimensions(root), output_path)


def save_packing(root: Optional[Node], output_path: str) -> None:
    _write_lines(format_packing(root), output_path)


WRITERS = (save_postorder, save_dimensions, save_packing)


def write_outputs(root: Optional[Node],
                  output_paths: Sequence[str],
                  fail_fast: bool = False) -> List[str]:
    """
    Write the three dumps (post-order, dimensions, packing) in that order.

    Args:
        root: packed tree
        output_paths: three paths, matched to the writers by position
        fail_fast: raise on the first unwritable output instead of skipping it

    Returns:
        failed: paths that could not be written (always empty if fail_fast)

    Raises:
        OutputWriteError: only when fail_fast is set
    """
    if len(output_paths) != len(WRITERS):
        raise ValueError(f"Expected {len(WRITERS)} output paths, got {len(output_paths)}")

    failed = []
    for writer, path in zip(WRITERS, output_paths):
        try:
            writer(root, path)
        except OutputWriteError as e:
            if fail_fast:
                raise
            print(f"ERROR: {e}", file=sys.stderr)
            failed.append(path)

    return failed
