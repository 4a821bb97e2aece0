#!/usr/bin/env python3
"""
Command line entry point.

Usage:
    kmeans-compress input.png output.png 16 10
"""

import argparse
import re
import sys
from typing import List, Optional

from kmeans.exceptions import KMeansError
from .compressor import compress_image
from .errors import ImageError

_LEADING_INT = re.compile(r'\s*([+-]?\d+)')


def parse_count(value: str) -> int:
    """Leading integer of ``value``, or 0 when there is none ("12abc" -> 12, "abc" -> 0)."""
    match = _LEADING_INT.match(value)
    return int(match.group(1)) if match else 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='kmeans-compress',
        description='Compress an image by reducing its palette with K-means clustering'
    )
    parser.add_argument('input_image', help='Image to compress')
    parser.add_argument('output_image', help='Where to write the compressed image')
    parser.add_argument('num_clusters', type=parse_count, help='Number of colors to keep')
    parser.add_argument('num_iterations', type=parse_count, help='Number of K-means rounds')
    parser.add_argument('--seed', type=int, default=None, help='Random seed for centroid initialization')
    parser.add_argument('--verbose', action='store_true', help='Print training progress')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        compress_image(
            args.input_image,
            args.output_image,
            args.num_clusters,
            args.num_iterations,
            random_state=args.seed,
            verbose=args.verbose
        )
    except (KMeansError, ImageError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"Compressed image saved to {args.output_image}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
