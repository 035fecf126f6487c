#!/usr/bin/env python3
"""
Visualization of a floorplan packing.
Draws every block at its packed position inside the floorplan outline.
"""

import argparse
import os
import sys
from typing import Any, Dict, List, Optional

import matplotlib
matplotlib.use('Agg')  # Use non-interactive backend
import matplotlib.patches as patches
import matplotlib.pyplot as plt
import numpy as np

from parse_floorplan import parse_packing
from slicing_tree import FloorplanError, Node, iter_preorder


def placements_from_tree(root: Optional[Node]) -> List[Dict[str, Any]]:
    """Leaf placements of a packed tree, in pre-order, as parse_packing returns them."""
    return [
        {'id': node.id, 'width': node.width, 'height': node.height, 'x': node.x, 'y': node.y}
        for node in iter_preorder(root) if node.is_leaf
    ]


def plot_packing(placements: List[Dict[str, Any]],
                 output_path: str,
                 dpi: int = 150,
                 show_labels: bool = True,
                 title: str = 'Slicing Floorplan Packing') -> None:
    """
    Plot packed blocks as color-coded rectangles and save to a PNG.

    Args:
        placements: List of {id, width, height, x, y}
        output_path: Output PNG path
        dpi: Image resolution
        show_labels: Draw block ids in the middle of each block
    """
    fig, ax = plt.subplots(1, 1, figsize=(10, 10))

    # Floorplan outline is the bounding box of all blocks
    if placements:
        total_width = max(p['x'] + p['width'] for p in placements)
        total_height = max(p['y'] + p['height'] for p in placements)
    else:
        total_width = total_height = 0

    outline = patches.Rectangle(
        (0, 0), total_width, total_height,
        linewidth=2, edgecolor='black', facecolor='lightgray', alpha=0.3
    )
    ax.add_patch(outline)

    colors = matplotlib.colormaps['tab20'](np.linspace(0, 1, max(len(placements), 1)))

    for placement, color in zip(placements, colors):
        block_rect = patches.Rectangle(
            (placement['x'], placement['y']),
            placement['width'], placement['height'],
            linewidth=0.8, edgecolor='black', facecolor=color, alpha=0.7
        )
        ax.add_patch(block_rect)

        if show_labels:
            ax.text(
                placement['x'] + placement['width'] / 2,
                placement['y'] + placement['height'] / 2,
                str(placement['id']),
                fontsize=8, ha='center', va='center'
            )

    margin = max(total_width, total_height, 1) * 0.05
    ax.set_xlim(-margin, total_width + margin)
    ax.set_ylim(-margin, total_height + margin)
    ax.set_aspect('equal')
    ax.set_xlabel('X', fontsize=12)
    ax.set_ylabel('Y', fontsize=12)
    ax.set_title(f'{title} ({total_width} x {total_height}, {len(placements)} blocks)',
                 fontsize=14, fontweight='bold')
    ax.grid(True, alpha=0.3)

    try:
        output_dir = os.path.dirname(output_path)
        if output_dir:
            os.makedirs(output_dir, exist_ok=True)

        plt.tight_layout()
        plt.savefig(output_path, dpi=dpi, bbox_inches='tight')
    finally:
        plt.close(fig)
    print(f"Floorplan plot saved to {output_path}")


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description='Plot a saved floorplan packing')
    parser.add_argument('packing_file', help='Packing file written by floorplan.py')
    parser.add_argument('--output', default=None,
                        help='Output PNG file path (default: <packing_file>.png)')
    parser.add_argument('--dpi', type=int, default=150,
                        help='Image resolution (default: 150)')
    parser.add_argument('--no-labels', action='store_true',
                        help='Do not draw block ids')
    args = parser.parse_args(argv)

    if args.output is None:
        args.output = os.path.splitext(args.packing_file)[0] + '.png'

    try:
        placements = parse_packing(args.packing_file)
    except OSError as e:
        print(f"ERROR: Can't open packing file {args.packing_file}: {e.strerror}", file=sys.stderr)
        return 1
    except FloorplanError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    try:
        plot_packing(placements, args.output, dpi=args.dpi, show_labels=not args.no_labels)
    except OSError as e:
        print(f"ERROR: Can't save plot {args.output}: {e.strerror or e}", file=sys.stderr)
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
