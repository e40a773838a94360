from __future__ import annotations

import os
import statistics
import time
from dataclasses import dataclass
from typing import Any, Callable, List

import psutil

from .constants import MAX_WARMUP_ITERATIONS
from .errors import InvalidConfigurationError
from .metrics import BenchmarkResult

"""Measurement engine: warm up, time N calls, summarise.

The operation is opaque: any zero-argument callable. Exceptions raised by it
are not caught here, a failing operation aborts the run for that operation.
"""

_NS_PER_US = 1000.0


def _check_iterations(iterations: Any) -> int:
    if isinstance(iterations, bool) or not isinstance(iterations, int):
        raise InvalidConfigurationError(f"iterations must be an integer, got {iterations!r}")
    if iterations <= 0:
        raise InvalidConfigurationError(f"iterations must be positive, got {iterations}")
    return iterations


def warmup_iterations(iterations: int) -> int:
    """Untimed calls made before measuring: min(10, iterations // 10)."""
    return min(MAX_WARMUP_ITERATIONS, iterations // 10)


def summarize(samples_ns: List[int]) -> BenchmarkResult:
    """Aggregate integer-nanosecond samples into a result in microseconds.

    Mean, min and max are taken on the integer samples before conversion so
    that min <= mean <= max holds exactly. The standard deviation is the
    population one (divisor len(samples)).
    """
    n = len(samples_ns)
    if n == 0:
        raise InvalidConfigurationError("cannot summarise an empty sample set")
    mean_ns = sum(samples_ns) / n
    lo = min(samples_ns)
    hi = max(samples_ns)
    mean_ns = min(max(mean_ns, lo), hi)
    std_ns = statistics.pstdev(samples_ns, mu=mean_ns) if n > 1 else 0.0
    return BenchmarkResult(
        mean=mean_ns / _NS_PER_US,
        min=lo / _NS_PER_US,
        max=hi / _NS_PER_US,
        standard_deviation=float(std_ns) / _NS_PER_US,
        iterations=n,
    )


def benchmark_operation(
    operation: Callable[[], Any],
    iterations: int,
    *,
    clock: Callable[[], int] = time.perf_counter_ns,
) -> BenchmarkResult:
    """Run `operation` `iterations` times after a short warm-up.

    `clock` must return monotonic integer nanoseconds; it is only
    replaced in tests.
    """
    iterations = _check_iterations(iterations)

    for _ in range(warmup_iterations(iterations)):
        _ = operation()

    samples: List[int] = [0] * iterations
    for i in range(iterations):
        start = clock()
        _ = operation()
        samples[i] = clock() - start

    return summarize(samples)


def quick_benchmark(operation: Callable[[], Any]) -> float:
    """Single timed call, in microseconds. No warm-up."""
    start = time.perf_counter_ns()
    _ = operation()
    return (time.perf_counter_ns() - start) / _NS_PER_US


@dataclass(frozen=True)
class ResourceUsage:
    duration_us: float
    cpu_percent: float
    memory_delta_bytes: int


def measure_resources(operation: Callable[[], Any]) -> ResourceUsage:
    """Time one call and sample process CPU and RSS around it with psutil.

    Coarse by nature: psutil's CPU percentage is relative to the previous
    `cpu_percent()` call, so this is only meaningful for operations lasting
    at least a few milliseconds. Prefer `benchmark_operation` for latency.
    """
    proc = psutil.Process(os.getpid())
    proc.cpu_percent(None)
    rss_before = proc.memory_info().rss
    start = time.perf_counter_ns()
    _ = operation()
    duration_us = (time.perf_counter_ns() - start) / _NS_PER_US
    cpu = proc.cpu_percent(None)
    rss_after = proc.memory_info().rss
    return ResourceUsage(
        duration_us=duration_us,
        cpu_percent=float(cpu),
        memory_delta_bytes=max(0, rss_after - rss_before),
    )
