"""
ndbuffer Benchmark Suite
========================

Timings for index conversion, bulk fills and elementwise operators.
"""

import time
import numpy as np
from typing import Callable, Tuple

import ndbuffer as nb
from ndbuffer import DArray, NDArray


def benchmark(fn: Callable, warmup: int = 3, runs: int = 10) -> Tuple[float, float]:
    """Run benchmark and return (mean_time_ms, std_time_ms)."""
    # Warmup
    for _ in range(warmup):
        fn()

    # Timed runs
    times = []
    for _ in range(runs):
        start = time.perf_counter()
        fn()
        end = time.perf_counter()
        times.append((end - start) * 1000)  # Convert to ms

    return np.mean(times), np.std(times)


def format_time(mean: float, std: float) -> str:
    """Format time with appropriate units."""
    if mean < 1:
        return f"{mean*1000:.2f} ± {std*1000:.2f} µs"
    elif mean < 1000:
        return f"{mean:.2f} ± {std:.2f} ms"
    else:
        return f"{mean/1000:.2f} ± {std/1000:.2f} s"


def print_header(title: str):
    print(f"\n{'='*60}")
    print(f" {title}")
    print(f"{'='*60}")


def benchmark_index_conversion(shape: Tuple[int, ...], samples: int = 1000):
    """ravel_index / unravel_index round trips over random flat offsets."""
    print_header(f"Index conversion (shape={shape})")
    a = NDArray(shape, dtype=nb.uint8)
    flat = np.random.randint(0, a.len(), size=samples)

    def unravel_fn():
        for x in flat:
            a.unravel_index(int(x))

    indices = [a.unravel_index(int(x)) for x in flat]

    def ravel_fn():
        for idx in indices:
            a.ravel_index(idx)

    def get_fn():
        for idx in indices:
            a.get(idx)

    def get_unchecked_fn():
        for idx in indices:
            a.get_unchecked(idx)

    for name, fn in [
        ("unravel_index", unravel_fn),
        ("ravel_index", ravel_fn),
        ("get", get_fn),
        ("get_unchecked", get_unchecked_fn),
    ]:
        mean, std = benchmark(fn)
        print(f"  {name:<16} x{samples}: {format_time(mean, std)}")


def benchmark_fills(shape: Tuple[int, ...]):
    print_header(f"Bulk fills (shape={shape})")
    a = NDArray(shape, dtype=nb.uint64)

    for name, fn in [("count", a.count), ("zero", a.zero), ("one", a.one)]:
        mean, std = benchmark(fn)
        print(f"  {name:<16}: {format_time(mean, std)}")


def benchmark_elementwise(size: int):
    print_header(f"Elementwise operators (size={size})")
    a = nb.count(size, dtype=nb.int64)
    b = nb.ones(size, dtype=nb.int64)
    v = DArray.from_values(range(size), dtype=nb.int64)
    w = DArray.from_values([3] * size, dtype=nb.int64)

    for name, fn in [
        ("NDArray +", lambda: a + b),
        ("NDArray /", lambda: a / b),
        ("DArray %", lambda: v % w),
        ("DArray <<", lambda: v << w),
    ]:
        mean, std = benchmark(fn)
        print(f"  {name:<16}: {format_time(mean, std)}")


def main():
    benchmark_index_conversion((64, 64))
    benchmark_index_conversion((2, 3, 4, 5, 6, 7, 8, 9, 10))
    benchmark_fills((2, 3, 4, 5, 6, 7, 8, 9, 10))
    benchmark_elementwise(1_000_000)


if __name__ == '__main__':
    main()
