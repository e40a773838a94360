from __future__ import annotations

"""Error hierarchy shared by the engine, the key bundle and the suites.

Nothing in the core retries: these are raised once and propagate to the
caller, which decides whether to abort the session or skip an algorithm.
"""


class BenchmarkError(Exception):
    """Base class for all benchmarking errors."""


class KeyGenerationError(BenchmarkError):
    """Key material for one algorithm could not be produced.

    Fatal to the whole bundle: no partially populated bundle is returned.
    """

    def __init__(self, algorithm: str, reason: str) -> None:
        self.algorithm = algorithm
        self.reason = reason
        super().__init__(f"Key generation failed: {algorithm}: {reason}")


class OperationError(BenchmarkError):
    """A cryptographic operation did not behave during suite setup."""

    def __init__(self, algorithm: str, operation: str, reason: str) -> None:
        self.algorithm = algorithm
        self.operation = operation
        self.reason = reason
        super().__init__(f"{operation} failed for {algorithm}: {reason}")


class InvalidConfigurationError(BenchmarkError, ValueError):
    """Rejected before any timing begins (e.g. a zero iteration count)."""


class KeyMaterialError(BenchmarkError):
    """Key material was used after it had been wiped."""
