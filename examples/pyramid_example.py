#!/usr/bin/env python3
"""Build a HOG pyramid for an image and score random part filters against it.

Usage:
    python examples/pyramid_example.py --image photo.jpg --nscales 10
    python examples/pyramid_example.py --synthetic 256 --filters 4 --filter-size 6
"""

import argparse
import sys
import time

import cv2
import numpy as np

from hogpyramid import FLEN, HOGFeatures


def _load_image(args: argparse.Namespace) -> np.ndarray:
    if args.image is not None:
        image = cv2.imread(args.image, cv2.IMREAD_COLOR)
        if image is None:
            raise FileNotFoundError(f"Could not read image {args.image}")
        return image
    # Bright square on a dark background
    n = args.synthetic
    image = np.zeros((n, n), dtype=np.uint8)
    image[n // 4:3 * n // 4, n // 4:3 * n // 4] = 255
    return image


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--image", type=str, default=None,
                        help="Input image path (default: synthetic square)")
    parser.add_argument("--synthetic", type=int, default=256,
                        help="Side of the synthetic image (default: 256)")
    parser.add_argument("--binsize", type=int, default=8,
                        help="Cell side in pixels (default: 8)")
    parser.add_argument("--nscales", type=int, default=10,
                        help="Pyramid levels (default: 10)")
    parser.add_argument("--filters", type=int, default=3,
                        help="Number of random filters (default: 3)")
    parser.add_argument("--filter-size", type=int, default=5,
                        help="Filter side in cells (default: 5)")
    parser.add_argument("--nthreads", type=int, default=None,
                        help="Worker threads (default: executor default)")
    parser.add_argument("--float32", action="store_true",
                        help="Compute in float32 instead of float64")
    args = parser.parse_args()

    image = _load_image(args)
    hog = HOGFeatures(binsize=args.binsize, nscales=args.nscales,
                      dtype=np.float32 if args.float32 else np.float64,
                      nthreads=args.nthreads)

    t0 = time.perf_counter()
    pyr = hog.pyramid(image)
    t1 = time.perf_counter()
    print(f"{hog!r}: {len(pyr)} levels in {(t1 - t0) * 1e3:.1f} ms")
    for n, level in enumerate(pyr):
        view = level.view
        print(f"  level {n:2d}  scale={level.scale:.4f}  "
              f"cells={view.rows}x{view.cells}")

    rng = np.random.default_rng(0)
    k = args.filter_size
    filters = [rng.standard_normal((k, k * FLEN)).astype(hog.dtype)
               for _ in range(args.filters)]
    t0 = time.perf_counter()
    responses = hog.pdf(pyr, filters)
    t1 = time.perf_counter()
    print(f"{len(responses)} responses in {(t1 - t0) * 1e3:.1f} ms")
    for i, resp in enumerate(responses):
        level, filt = divmod(i, len(filters))
        peak = f"{resp.max():.3f}" if resp.size else "-"
        print(f"  level {level:2d} filter {filt}  shape={resp.shape}  max={peak}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
