from __future__ import annotations
"""Report aggregation, formatting and JSON export."""

import json
import pathlib
import time
from typing import Iterable, List, Optional

from cryptobench import BenchConfig, BenchmarkMetric, BenchmarkReport, KeyBundle

from .suites import benchmark_kem, benchmark_signatures

_SIZE_KEYS = ("signature_size", "ciphertext_size")


def run_benchmarks(
    keys: KeyBundle,
    *,
    config: Optional[BenchConfig] = None,
    keygen_time_secs: float = 0.0,
) -> BenchmarkReport:
    """Run both suites against `keys`; errors from either propagate.

    `keygen_time_secs` is reported as given: the CLI passes the bundle's
    generation time, the web app 0.0 since its keys are reused.
    """
    start = time.perf_counter()
    signatures = benchmark_signatures(keys, config=config)
    kem = benchmark_kem(keys, config=config)
    elapsed = time.perf_counter() - start
    return BenchmarkReport(
        signatures=tuple(signatures),
        kem=tuple(kem),
        keygen_time_secs=keygen_time_secs,
        total_time_secs=keygen_time_secs + elapsed,
    )


def _size(metric: BenchmarkMetric) -> str:
    for key in _SIZE_KEYS:
        if key in metric.extra_info:
            return metric.extra_info[key]
    return ""


def _table(metrics: Iterable[BenchmarkMetric]) -> List[str]:
    header = ("Algorithm", "Operation", "Mean (μs)", "Min (μs)", "Max (μs)", "StdDev (μs)", "Iter", "Output")
    rows = [
        (
            m.algorithm_name,
            m.operation_name,
            f"{m.mean:.2f}",
            f"{m.min:.2f}",
            f"{m.max:.2f}",
            f"{m.std_dev:.2f}",
            str(m.iterations),
            _size(m),
        )
        for m in metrics
    ]
    if not rows:
        return ["  (none)"]
    widths = [max(len(r[i]) for r in (header, *rows)) for i in range(len(header))]

    def _line(cells) -> str:
        # text columns left-aligned, numbers right-aligned
        parts = [
            cell.ljust(w) if i in (0, 1, 7) else cell.rjust(w)
            for i, (cell, w) in enumerate(zip(cells, widths))
        ]
        return "  " + "  ".join(parts).rstrip()

    return [_line(header), "  " + "  ".join("-" * w for w in widths), *(_line(r) for r in rows)]


def format_report(report: BenchmarkReport) -> str:
    lines = ["Signatures:"]
    lines += _table(report.signatures)
    lines += ["", "Key Encapsulation Mechanisms:"]
    lines += _table(report.kem)
    lines += [
        "",
        f"Key generation: {report.keygen_time_secs:.3f}s",
        f"Total time:     {report.total_time_secs:.3f}s",
    ]
    return "\n".join(lines)


def report_to_json(report: BenchmarkReport, *, indent: int = 2) -> str:
    return json.dumps(report.to_dict(), indent=indent, ensure_ascii=False)


def export_json(report: BenchmarkReport, export_path: str | None) -> Optional[pathlib.Path]:
    """Write `report` as JSON; parent directories are created as needed."""
    if not export_path:
        return None
    path = pathlib.Path(export_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(report.to_dict(), f, indent=2, ensure_ascii=False)
    return path
