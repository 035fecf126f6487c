#!/usr/bin/env python3
"""
Slicing floorplan packer.

Reads a pre-order slicing tree, computes every block's size and position, and
writes three files:
    out_postorder_tree  - tree shape in post-order
    out_dimensions      - every node's (width,height) in post-order
    out_packing         - every block's (width,height)(x,y) in input order

Usage:
    python floorplan.py in_file out_postorder_tree out_dimensions out_packing
"""

import argparse
import sys
from typing import List, Optional

from floorplan_config import is_fail_fast, load_config
from packer import pack_floorplan
from parse_floorplan import load_tree
from save_floorplan import OutputWriteError, write_outputs
from slicing_tree import FloorplanError, count_nodes
from validate_floorplan import leaf_sizes, print_report, validate_floorplan


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description='Pack a slicing floorplan tree')
    parser.add_argument('in_file', help='Pre-order floorplan input file')
    parser.add_argument('out_postorder_tree', help='Output: tree shape in post-order')
    parser.add_argument('out_dimensions', help='Output: node dimensions in post-order')
    parser.add_argument('out_packing', help='Output: block packing in input order')
    parser.add_argument('--config', default=None,
                        help='Path to YAML run configuration')
    parser.add_argument('--fail-fast', action='store_true',
                        help='Stop at the first output file that cannot be written')
    parser.add_argument('--validate', action='store_true',
                        help='Check the packing and print a utilization report')
    parser.add_argument('--plot', default=None,
                        help='Save a PNG plot of the packing to this path')

    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
    except (OSError, ValueError) as e:
        print(f"ERROR: Bad config {args.config}: {e}", file=sys.stderr)
        return 1

    fail_fast = args.fail_fast or is_fail_fast(config)
    run_validation = args.validate or config['validate']
    plot_path = args.plot or config['plot']['path']

    try:
        root = load_tree(args.in_file)
    except OSError as e:
        print(f"ERROR: Can't open input file {args.in_file}: {e.strerror}", file=sys.stderr)
        return 1
    except FloorplanError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    expected_sizes = leaf_sizes(root) if run_validation else None

    try:
        pack_floorplan(root)
    except FloorplanError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    output_paths = (args.out_postorder_tree, args.out_dimensions, args.out_packing)
    try:
        failed = write_outputs(root, output_paths, fail_fast=fail_fast)
    except OutputWriteError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    leaves, cuts, _ = count_nodes(root)
    written = len(output_paths) - len(failed)
    print(f"Packed {leaves} blocks with {cuts} cuts into {root.width} x {root.height} "
          f"({written}/{len(output_paths)} outputs written)")

    if run_validation:
        errors = validate_floorplan(root, expected_sizes)
        print_report(root, errors)
        if errors:
            return 1

    if plot_path:
        # matplotlib is only needed when plotting
        from visualize_floorplan import placements_from_tree, plot_packing
        try:
            plot_packing(placements_from_tree(root), plot_path,
                         dpi=config['plot']['dpi'],
                         show_labels=config['plot']['show_labels'])
        except OSError as e:
            print(f"ERROR: Can't save plot {plot_path}: {e.strerror or e}", file=sys.stderr)
            return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
