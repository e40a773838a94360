from __future__ import annotations

import hmac
import logging
from typing import Any, List, Optional

from cryptobench import BenchConfig, BenchmarkMetric, KeyBundle, KeyPair, OperationError, benchmark_operation

from .common import adapter_for, fmt_bytes, iterations_for, key_info, label_for, operation_errors

log = logging.getLogger(__name__)


def benchmark_kem(keys: KeyBundle, *, config: Optional[BenchConfig] = None) -> List[BenchmarkMetric]:
    """Encapsulate and Decapsulate metrics for every KEM in the bundle.

    The DH schemes (X25519, ECDH P-256) run through the same interface:
    encapsulation includes the ephemeral keygen, as in a real handshake.
    """
    config = config or BenchConfig()
    metrics: List[BenchmarkMetric] = []
    for pair in keys.kems.values():
        metrics.extend(benchmark_encapsulation(pair, adapter_for(keys, pair), config))
    return metrics


def benchmark_encapsulation(pair: KeyPair, adapter: Any, config: BenchConfig) -> List[BenchmarkMetric]:
    label = label_for(adapter, pair)

    with operation_errors(label, "Encapsulate"), adapter.encapsulator(pair.public_key) as encapsulate:
        encaps_result = benchmark_operation(
            encapsulate,
            iterations_for(pair.algorithm, "Encapsulate", config),
        )
        # Pre-generate the ciphertext for the decapsulation benchmark
        ciphertext, shared_secret = encapsulate()

    with operation_errors(label, "Decapsulate"), pair.secret_key.view() as secret, adapter.decapsulator(secret) as decapsulate:
        if not hmac.compare_digest(decapsulate(ciphertext), shared_secret):
            raise OperationError(label, "Decapsulate", "shared secret mismatch")
        decaps_result = benchmark_operation(
            lambda: decapsulate(ciphertext),
            iterations_for(pair.algorithm, "Decapsulate", config),
        )

    info = key_info(adapter, pair)
    info["ciphertext_size"] = fmt_bytes(len(ciphertext))
    info["shared_secret_size"] = fmt_bytes(len(shared_secret))
    log.debug("%s: encapsulate %.1f us, decapsulate %.1f us", label, encaps_result.mean, decaps_result.mean)

    return [
        encaps_result.to_metric(label, "Encapsulate", info),
        decaps_result.to_metric(label, "Decapsulate", info),
    ]
