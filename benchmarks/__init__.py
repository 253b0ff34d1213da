"""Benchmark suite for ndbuffer.

Benchmarks include:
- Index conversion (ravel/unravel, checked and unchecked access)
- Bulk fills on a deep-rank array
- Elementwise operators on NDArray and DArray

Usage:
    python -m benchmarks.indexing
"""

__all__ = [
    'run_all_benchmarks',
]


def run_all_benchmarks():
    """Run all benchmark scripts."""
    from .indexing import main as run_indexing

    print("ndbuffer Benchmarks")
    print("=" * 80)
    run_indexing()


if __name__ == '__main__':
    run_all_benchmarks()
