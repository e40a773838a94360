from __future__ import annotations
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterator, Mapping, Tuple

"""Benchmark result containers.

`BenchmarkResult` is what the measurement engine produces for one operation;
suites project it into a `BenchmarkMetric` carrying identity and
algorithm-specific facts, and the aggregator collects metrics into a
`BenchmarkReport`. All three are immutable once built.
"""


def _freeze(info: Mapping[str, str] | None) -> Mapping[str, str]:
    return MappingProxyType({str(k): str(v) for k, v in (info or {}).items()})


@dataclass(frozen=True)
class BenchmarkResult:
    """Aggregate over one operation's samples. Times are in microseconds."""
    mean: float
    min: float
    max: float
    standard_deviation: float
    iterations: int

    @property
    def mean_micros(self) -> int:
        return int(self.mean)

    def to_metric(
        self,
        algorithm_name: str,
        operation_name: str,
        extra_info: Mapping[str, str] | None = None,
    ) -> "BenchmarkMetric":
        return BenchmarkMetric(
            algorithm_name=algorithm_name,
            operation_name=operation_name,
            mean=self.mean,
            min=self.min,
            max=self.max,
            std_dev=self.standard_deviation,
            iterations=self.iterations,
            extra_info=extra_info,
        )

    def describe(self, label: str) -> str:
        return "\n".join(
            [
                f"  {label}",
                f"    Mean:   {self.mean:>10.2f} μs",
                f"    Min:    {self.min:>10.2f} μs",
                f"    Max:    {self.max:>10.2f} μs",
                f"    StdDev: {self.standard_deviation:>10.2f} μs",
                f"    Iterations: {self.iterations}",
            ]
        )


@dataclass(frozen=True)
class BenchmarkMetric:
    algorithm_name: str
    operation_name: str  # e.g. 'Sign', 'Verify', 'Encapsulate', 'Decapsulate'
    mean: float
    min: float
    max: float
    std_dev: float
    iterations: int
    extra_info: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "extra_info", _freeze(self.extra_info))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.algorithm_name,
            "operation": self.operation_name,
            "mean_micros": self.mean,
            "min_micros": self.min,
            "max_micros": self.max,
            "std_dev_micros": self.std_dev,
            "iterations": self.iterations,
            "extra_info": dict(self.extra_info),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "BenchmarkMetric":
        return cls(
            algorithm_name=str(data["name"]),
            operation_name=str(data["operation"]),
            mean=float(data["mean_micros"]),
            min=float(data["min_micros"]),
            max=float(data["max_micros"]),
            std_dev=float(data["std_dev_micros"]),
            iterations=int(data["iterations"]),
            extra_info=data.get("extra_info") or {},
        )


@dataclass(frozen=True)
class BenchmarkReport:
    signatures: Tuple[BenchmarkMetric, ...] = ()
    kem: Tuple[BenchmarkMetric, ...] = ()
    keygen_time_secs: float = 0.0
    total_time_secs: float = 0.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "signatures", tuple(self.signatures))
        object.__setattr__(self, "kem", tuple(self.kem))

    @property
    def metrics(self) -> Iterator[BenchmarkMetric]:
        yield from self.signatures
        yield from self.kem

    def to_dict(self) -> Dict[str, Any]:
        return {
            "signatures": [m.to_dict() for m in self.signatures],
            "kem": [m.to_dict() for m in self.kem],
            "keygen_time_secs": self.keygen_time_secs,
            "total_time_secs": self.total_time_secs,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "BenchmarkReport":
        return cls(
            signatures=tuple(BenchmarkMetric.from_dict(m) for m in data.get("signatures", [])),
            kem=tuple(BenchmarkMetric.from_dict(m) for m in data.get("kem", [])),
            keygen_time_secs=float(data.get("keygen_time_secs", 0.0)),
            total_time_secs=float(data.get("total_time_secs", 0.0)),
        )
