from .interfaces import KEM, Signature, KEMMixin, SignatureMixin
from .registry import registry, load_adapters, get_adapter, reset_adapter_cache
from .metrics import BenchmarkResult, BenchmarkMetric, BenchmarkReport
from .measurement import benchmark_operation, quick_benchmark, measure_resources, warmup_iterations
from .keys import KeyBundle, KeyPair, SecretBytes, adapter_mechanism, generate_keys
from .config import BenchConfig
from .errors import (
    BenchmarkError,
    InvalidConfigurationError,
    KeyGenerationError,
    KeyMaterialError,
    OperationError,
)

__all__ = [
    "KEM",
    "Signature",
    "KEMMixin",
    "SignatureMixin",
    "registry",
    "load_adapters",
    "get_adapter",
    "reset_adapter_cache",
    "BenchmarkResult",
    "BenchmarkMetric",
    "BenchmarkReport",
    "benchmark_operation",
    "quick_benchmark",
    "measure_resources",
    "warmup_iterations",
    "KeyBundle",
    "KeyPair",
    "SecretBytes",
    "adapter_mechanism",
    "generate_keys",
    "BenchConfig",
    "BenchmarkError",
    "InvalidConfigurationError",
    "KeyGenerationError",
    "KeyMaterialError",
    "OperationError",
]
