"""Benchmark suites, report aggregation and the command line."""

from .report import export_json, format_report, report_to_json, run_benchmarks
from .suites import benchmark_kem, benchmark_signatures

__all__ = [
    "benchmark_kem",
    "benchmark_signatures",
    "export_json",
    "format_report",
    "report_to_json",
    "run_benchmarks",
]
