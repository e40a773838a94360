from .signatures import benchmark_signatures
from .kem import benchmark_kem

__all__ = ["benchmark_signatures", "benchmark_kem"]
