from __future__ import annotations

import logging
from typing import Any, List, Optional

from cryptobench import BenchConfig, BenchmarkMetric, KeyBundle, KeyPair, OperationError, benchmark_operation

from .common import adapter_for, fmt_bytes, iterations_for, key_info, label_for, operation_errors

log = logging.getLogger(__name__)


def benchmark_signatures(keys: KeyBundle, *, config: Optional[BenchConfig] = None) -> List[BenchmarkMetric]:
    """Sign and Verify metrics for every signature algorithm in the bundle."""
    config = config or BenchConfig()
    metrics: List[BenchmarkMetric] = []
    for pair in keys.signatures.values():
        metrics.extend(benchmark_signature(pair, adapter_for(keys, pair), config))
    return metrics


def benchmark_signature(pair: KeyPair, adapter: Any, config: BenchConfig) -> List[BenchmarkMetric]:
    label = label_for(adapter, pair)
    message = config.message

    with operation_errors(label, "Sign"), pair.secret_key.view() as secret, adapter.signer(secret) as sign:
        sign_result = benchmark_operation(
            lambda: sign(message),
            iterations_for(pair.algorithm, "Sign", config),
        )
        # Pre-generate the signature for the verification benchmark
        signature = sign(message)

    with operation_errors(label, "Verify"), adapter.verifier(pair.public_key) as verify:
        if not verify(message, signature):
            raise OperationError(label, "Verify", "freshly generated signature was rejected")
        verify_result = benchmark_operation(
            lambda: verify(message, signature),
            iterations_for(pair.algorithm, "Verify", config),
        )

    info = key_info(adapter, pair)
    info["signature_size"] = fmt_bytes(len(signature))
    log.debug("%s: sign %.1f us, verify %.1f us", label, sign_result.mean, verify_result.mean)

    return [
        sign_result.to_metric(label, "Sign", info),
        verify_result.to_metric(label, "Verify", info),
    ]
