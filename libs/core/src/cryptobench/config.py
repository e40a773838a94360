from __future__ import annotations

import os
from dataclasses import dataclass, replace

from .constants import (
    DEFAULT_MEASUREMENT_ITERATIONS,
    DEFAULT_MESSAGE,
    DEFAULT_SLOW_ITERATIONS,
)
from .errors import InvalidConfigurationError

"""Run configuration.

Defaults come from `constants`; each knob can be overridden through a
`CRYPTOBENCH_*` environment variable and again by CLI options.
"""


def env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise InvalidConfigurationError(f"{name} must be an integer") from exc
    if value <= 0:
        raise InvalidConfigurationError(f"{name} must be positive, got {value}")
    return value


@dataclass(frozen=True)
class BenchConfig:
    fast_iterations: int = DEFAULT_MEASUREMENT_ITERATIONS
    slow_iterations: int = DEFAULT_SLOW_ITERATIONS
    message: bytes = DEFAULT_MESSAGE

    def __post_init__(self) -> None:
        for field_name in ("fast_iterations", "slow_iterations"):
            value = getattr(self, field_name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise InvalidConfigurationError(f"{field_name} must be a positive integer, got {value!r}")

    @classmethod
    def from_env(cls) -> "BenchConfig":
        return cls(
            fast_iterations=env_int("CRYPTOBENCH_FAST_ITERATIONS", DEFAULT_MEASUREMENT_ITERATIONS),
            slow_iterations=env_int("CRYPTOBENCH_SLOW_ITERATIONS", DEFAULT_SLOW_ITERATIONS),
        )

    def with_overrides(self, **changes) -> "BenchConfig":
        """Return a copy with the non-None `changes` applied."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})
