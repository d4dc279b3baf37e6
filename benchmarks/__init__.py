"""
Benchmark suite for jtree.

Compares parsing and serialization against:
- Python standard library json
- orjson (C-optimized)
- ujson (ultra-fast JSON)

Measures speed with pytest-benchmark and peak memory with tracemalloc.
"""
