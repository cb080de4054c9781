"""
scripts/bench_max_pooling_layer.py

Benchmark script (NOT a unit test) measuring `MaxPoolingLayer` throughput for
a few grid geometries and batch sizes.

It times, per configuration:
- topology construction (`MaxPoolingLayer(...)`)
- forward_propagation
- back_propagation (including the momentum update)

Usage examples
--------------
# Default: benchmark a few geometries
python scripts/bench_max_pooling_layer.py

# Benchmark a single geometry
python scripts/bench_max_pooling_layer.py --rows 32 --cols 32 --pool 2 --featmaps 16 --samples 64

# More repeats (more stable)
python scripts/bench_max_pooling_layer.py --repeats 30 --warmup 5
"""

from __future__ import annotations

import os
import sys

# Ensure repo_root/src is importable when running this file directly:
# repo_root/
#   src/gridpool/...
#   scripts/bench_max_pooling_layer.py
THIS_DIR = os.path.dirname(os.path.abspath(__file__))
ROOT_DIR = os.path.abspath(os.path.join(THIS_DIR, ".."))
SRC_DIR = os.path.join(ROOT_DIR, "src")

if SRC_DIR not in sys.path:
    sys.path.insert(0, SRC_DIR)

import argparse
import statistics
import time
from typing import Callable

import numpy as np

from gridpool import MaxPoolingLayer, Random


def _time_one(fn: Callable[[], None], *, warmup: int, repeats: int) -> list[float]:
    for _ in range(warmup):
        fn()

    times: list[float] = []
    for _ in range(repeats):
        t0 = time.perf_counter()
        fn()
        t1 = time.perf_counter()
        times.append(t1 - t0)
    return times


def _fmt_seconds(x: float) -> str:
    if x < 1e-6:
        return f"{x*1e9:.2f} ns"
    if x < 1e-3:
        return f"{x*1e6:.2f} µs"
    if x < 1:
        return f"{x*1e3:.2f} ms"
    return f"{x:.3f} s"


def bench_one(
    *,
    rows: int,
    cols: int,
    pool: int,
    featmaps: int,
    samples: int,
    warmup: int,
    repeats: int,
) -> None:
    rng = Random(0)

    t0 = time.perf_counter()
    layer = MaxPoolingLayer(rng, (rows, cols), (pool, pool), featmaps)
    t_build = time.perf_counter() - t0

    x = rng.normal(size=(layer.n_input, samples))
    err = rng.normal(size=(layer.n_output, samples))

    def run_fwd() -> None:
        layer.forward_propagation(x)

    def run_fwd_bwd() -> None:
        layer.forward_propagation(x)
        layer.back_propagation(err, eta=0.01, momentum=0.5)

    t_fwd = statistics.median(_time_one(run_fwd, warmup=warmup, repeats=repeats))
    t_both = statistics.median(_time_one(run_fwd_bwd, warmup=warmup, repeats=repeats))
    t_bwd = max(t_both - t_fwd, 0.0)

    name = f"{rows}x{cols}/{pool} C={featmaps} N={samples}"
    print(
        f"{name:<28}  build={_fmt_seconds(t_build):>10}  "
        f"forward={_fmt_seconds(t_fwd):>10}  backward={_fmt_seconds(t_bwd):>10}"
    )


def main() -> None:
    ap = argparse.ArgumentParser()
    ap.add_argument("--rows", type=int, default=None)
    ap.add_argument("--cols", type=int, default=None)
    ap.add_argument("--pool", type=int, default=2)
    ap.add_argument("--featmaps", type=int, default=8)
    ap.add_argument("--samples", type=int, default=32)
    ap.add_argument("--warmup", type=int, default=2)
    ap.add_argument("--repeats", type=int, default=10)
    args = ap.parse_args()

    if args.rows is not None:
        cols = args.cols if args.cols is not None else args.rows
        shapes = [(args.rows, cols, args.pool, args.featmaps, args.samples)]
    else:
        shapes = [
            (8, 8, 2, 4, 16),
            (16, 16, 2, 8, 32),
            (24, 24, 3, 8, 32),
            (32, 32, 2, 16, 64),
        ]

    print(f"numpy={np.__version__}  warmup={args.warmup}  repeats={args.repeats}")
    for rows, cols, pool, featmaps, samples in shapes:
        bench_one(
            rows=rows,
            cols=cols,
            pool=pool,
            featmaps=featmaps,
            samples=samples,
            warmup=args.warmup,
            repeats=args.repeats,
        )


if __name__ == "__main__":
    main()
