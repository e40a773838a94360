"""Helpers shared by the signature and KEM suites."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, Iterator

from cryptobench import (
    BenchConfig,
    BenchmarkError,
    KeyBundle,
    KeyPair,
    OperationError,
    adapter_mechanism,
    get_adapter,
)
from cryptobench.constants import SLOW_OPERATIONS


def iterations_for(algorithm: str, operation: str, config: BenchConfig) -> int:
    """Fewer iterations for the expensive operations (RSA private key, PQC)."""
    if (algorithm, operation) in SLOW_OPERATIONS:
        return config.slow_iterations
    return config.fast_iterations


def fmt_bytes(n: int) -> str:
    return f"{n} bytes"


def adapter_for(keys: KeyBundle, pair: KeyPair) -> Any:
    """Adapter that operates on `pair`.

    Bundles built from explicit adapters hand those back. Otherwise the
    registry adapter is used, checked against the mechanism the keys were
    made with.
    """
    adapter = keys.adapter(pair.algorithm)
    if adapter is not None:
        return adapter
    try:
        adapter = get_adapter(pair.algorithm)
    except Exception as exc:
        raise OperationError(pair.algorithm, "Setup", f"adapter unavailable: {exc}") from exc
    mechanism = adapter_mechanism(adapter, pair.algorithm)
    if mechanism != pair.mechanism:
        raise OperationError(
            pair.algorithm,
            "Setup",
            f"adapter now uses {mechanism} but the bundle holds {pair.mechanism} keys",
        )
    return adapter


@contextmanager
def operation_errors(label: str, operation: str) -> Iterator[None]:
    """Report adapter failures inside the block as `OperationError`."""
    try:
        yield
    except BenchmarkError:
        raise
    except Exception as exc:
        raise OperationError(label, operation, f"{type(exc).__name__}: {exc}") from exc


def key_info(adapter: Any, pair: KeyPair) -> Dict[str, str]:
    info = {
        "mechanism": pair.mechanism,
        "public_key_size": fmt_bytes(len(pair.public_key)),
        "secret_key_size": fmt_bytes(len(pair.secret_key)),
    }
    bits = getattr(adapter, "bits", None)
    if bits:
        info["key_size"] = f"{bits} bits"
    return info


def label_for(adapter: Any, pair: KeyPair) -> str:
    return str(getattr(adapter, "label", None) or pair.algorithm)
