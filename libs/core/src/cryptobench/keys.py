from __future__ import annotations

import logging
import time
import weakref
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple

from .constants import DEFAULT_KEM_ALGORITHMS, DEFAULT_SIGNATURE_ALGORITHMS
from .errors import InvalidConfigurationError, KeyGenerationError, KeyMaterialError
from .interfaces import is_kem
from .registry import get_adapter, load_adapters

"""Pre-generated key material shared by every benchmark suite.

Key generation (RSA-2048 and the post-quantum schemes especially) costs
hundreds of milliseconds while the operations being measured take
microseconds, so keys are generated once per process or server and then
only read. Secret keys live in `SecretBytes` buffers that are overwritten
with zeros when the bundle is closed.
"""

log = logging.getLogger(__name__)


class SecretBytes:
    """Mutable buffer for secret key bytes that can be zeroized in place."""

    __slots__ = ("_buf", "_wiped")

    def __init__(self, data: bytes | bytearray | memoryview) -> None:
        self._buf = bytearray(data)
        self._wiped = False

    def _check(self) -> None:
        if self._wiped:
            raise KeyMaterialError("secret key material has been wiped")

    def view(self) -> memoryview:
        """Read-only view over the live buffer (no copy)."""
        self._check()
        return memoryview(self._buf).toreadonly()

    def __bytes__(self) -> bytes:
        self._check()
        return bytes(self._buf)

    def __len__(self) -> int:
        return len(self._buf)

    @property
    def wiped(self) -> bool:
        return self._wiped

    def wipe(self) -> None:
        # Same-length slice assignment writes into the existing allocation.
        self._buf[:] = bytes(len(self._buf))
        self._wiped = True

    def __repr__(self) -> str:
        state = "wiped" if self._wiped else f"{len(self._buf)} bytes"
        return f"SecretBytes(<{state}>)"


@dataclass(frozen=True)
class KeyPair:
    algorithm: str
    kind: str  # 'SIG' or 'KEM'
    mechanism: str
    public_key: bytes
    secret_key: SecretBytes


def _wipe_all(secrets: Sequence[SecretBytes]) -> None:
    for secret in secrets:
        secret.wipe()


class KeyBundle:
    """One keypair per benchmarked algorithm, immutable after construction.

    Safe to share between threads: nothing mutates it except `close()`,
    which zeroizes every secret key. Use it as a context manager or call
    `close()` explicitly; garbage collection only acts as a fallback.
    """

    def __init__(
        self,
        pairs: Iterable[KeyPair],
        *,
        generation_time_secs: float = 0.0,
        adapters: Optional[Mapping[str, Any]] = None,
    ) -> None:
        signatures: dict[str, KeyPair] = {}
        kems: dict[str, KeyPair] = {}
        for pair in pairs:
            target = kems if pair.kind == "KEM" else signatures
            if pair.algorithm in signatures or pair.algorithm in kems:
                raise InvalidConfigurationError(f"duplicate algorithm in bundle: {pair.algorithm}")
            target[pair.algorithm] = pair
        self._signatures = MappingProxyType(signatures)
        self._kems = MappingProxyType(kems)
        self.generation_time_secs = generation_time_secs
        secrets = [p.secret_key for p in (*signatures.values(), *kems.values())]
        self._finalizer = weakref.finalize(self, _wipe_all, secrets)
        self._adapters = MappingProxyType(dict(adapters or {}))

    @classmethod
    def generate(
        cls,
        algorithms: Optional[Sequence[str]] = None,
        *,
        adapters: Optional[Mapping[str, Any]] = None,
    ) -> "KeyBundle":
        return generate_keys(algorithms, adapters=adapters)

    @property
    def closed(self) -> bool:
        return not self._finalizer.alive

    def _check_open(self) -> None:
        if self.closed:
            raise KeyMaterialError("key bundle has been closed")

    @property
    def signatures(self) -> Mapping[str, KeyPair]:
        self._check_open()
        return self._signatures

    @property
    def kems(self) -> Mapping[str, KeyPair]:
        self._check_open()
        return self._kems

    def adapter(self, algorithm: str) -> Optional[Any]:
        """Adapter instance the keys for `algorithm` were generated with, if one
        was passed to `generate_keys`; None for registry-resolved algorithms."""
        return self._adapters.get(algorithm)

    @property
    def algorithms(self) -> Tuple[str, ...]:
        return tuple(self._signatures) + tuple(self._kems)

    def __getitem__(self, algorithm: str) -> KeyPair:
        self._check_open()
        if algorithm in self._signatures:
            return self._signatures[algorithm]
        return self._kems[algorithm]

    def __contains__(self, algorithm: object) -> bool:
        return algorithm in self._signatures or algorithm in self._kems

    def __iter__(self) -> Iterator[KeyPair]:
        self._check_open()
        yield from self._signatures.values()
        yield from self._kems.values()

    def __len__(self) -> int:
        return len(self._signatures) + len(self._kems)

    def close(self) -> None:
        """Zeroize every secret key. Idempotent."""
        if self._finalizer.alive:
            self._finalizer()
            log.info("Benchmark keys wiped")

    def __enter__(self) -> "KeyBundle":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "closed" if self.closed else "open"
        return f"KeyBundle({', '.join(self.algorithms)}; {state})"


def _is_key_material(value: Any) -> bool:
    return isinstance(value, (bytes, bytearray, memoryview)) and len(value) > 0


def adapter_mechanism(adapter: Any, name: str) -> str:
    return str(
        getattr(adapter, "mech", None)
        or getattr(adapter, "alg", None)
        or getattr(adapter, "label", None)
        or name
    )


def _generate_pair(name: str, adapters: Optional[Mapping[str, Any]]) -> KeyPair:
    try:
        adapter = adapters[name] if adapters is not None else get_adapter(name)
    except KeyError as exc:
        raise KeyGenerationError(name, "no adapter registered") from exc
    except Exception as exc:
        raise KeyGenerationError(name, f"adapter unavailable: {exc}") from exc

    t0 = time.perf_counter()
    try:
        result = adapter.keygen()
    except Exception as exc:
        raise KeyGenerationError(name, f"{type(exc).__name__}: {exc}") from exc

    try:
        pk_raw, sk_raw = result
    except (TypeError, ValueError) as exc:
        raise KeyGenerationError(name, "keygen did not return a (public, secret) pair") from exc
    if not (_is_key_material(pk_raw) and _is_key_material(sk_raw)):
        raise KeyGenerationError(name, "keygen returned empty or non-bytes key material")

    pair = KeyPair(
        algorithm=name,
        kind="KEM" if is_kem(adapter) else "SIG",
        mechanism=adapter_mechanism(adapter, name),
        public_key=bytes(pk_raw),
        secret_key=SecretBytes(sk_raw),
    )
    log.debug("%s keypair generated in %.1f ms", name, (time.perf_counter() - t0) * 1000.0)
    return pair


def generate_keys(
    algorithms: Optional[Sequence[str]] = None,
    *,
    adapters: Optional[Mapping[str, Any]] = None,
) -> KeyBundle:
    """Generate one keypair per algorithm, in order, all or nothing.

    Any failure raises `KeyGenerationError` after wiping the secrets already
    produced; no bundle is returned and nothing is retried. `adapters`
    overrides the registry lookup (name -> adapter instance).
    """
    names = tuple(algorithms) if algorithms is not None else DEFAULT_SIGNATURE_ALGORITHMS + DEFAULT_KEM_ALGORITHMS
    if not names:
        raise InvalidConfigurationError("no algorithms selected for key generation")
    if len(set(names)) != len(names):
        raise InvalidConfigurationError(f"duplicate algorithm names: {', '.join(names)}")
    if adapters is None:
        load_adapters()

    log.info("Generating benchmark keys for %d algorithms (this may take a moment)...", len(names))
    start = time.perf_counter()
    pairs: List[KeyPair] = []
    try:
        for name in names:
            pairs.append(_generate_pair(name, adapters))
    except BaseException:
        _wipe_all([p.secret_key for p in pairs])
        raise
    elapsed = time.perf_counter() - start
    log.info("All keys generated in %.3fs", elapsed)
    explicit = {name: adapters[name] for name in names} if adapters is not None else None
    return KeyBundle(pairs, generation_time_secs=elapsed, adapters=explicit)
