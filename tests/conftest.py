from __future__ import annotations

import sys
from pathlib import Path

import pytest
from typer.testing import CliRunner

ROOT = Path(__file__).resolve().parents[1]
SRC_ROOTS = (
    ROOT / "libs" / "core" / "src",
    ROOT / "libs" / "adapters" / "classic" / "src",
    ROOT / "libs" / "adapters" / "liboqs" / "src",
    ROOT / "apps" / "cli" / "src",
    ROOT / "apps" / "web" / "src",
)

for candidate in SRC_ROOTS:
    candidate_str = str(candidate)
    if candidate_str not in sys.path:
        sys.path.insert(0, candidate_str)

from cryptobench import KEMMixin, SignatureMixin, load_adapters, registry, reset_adapter_cache  # noqa: E402
from cryptobench.config import BenchConfig  # noqa: E402

# Register the real adapters before any fixture swaps the registry contents.
load_adapters()


class DummyKEMAdapter(KEMMixin):
    name = "dummy-kem"
    label = "Dummy KEM"

    def __init__(self) -> None:
        self._counter = 0

    def keygen(self) -> tuple[bytes, bytes]:
        tag = self._counter.to_bytes(2, "big", signed=False)
        self._counter += 1
        pk = b"pk" + tag
        sk = b"sk" + tag
        return pk, sk

    def encapsulate(self, pk: bytes) -> tuple[bytes, bytes]:
        suffix = pk[-2:]
        return b"ct" + suffix, b"ss" + suffix

    def decapsulate(self, sk: bytes, ct: bytes) -> bytes:
        return b"ss" + bytes(sk)[-2:]


class DummySignatureAdapter(SignatureMixin):
    name = "dummy-sig"
    label = "Dummy SIG"

    def __init__(self) -> None:
        self._counter = 0

    def keygen(self) -> tuple[bytes, bytes]:
        tag = self._counter.to_bytes(2, "big", signed=False)
        self._counter += 1
        pk = b"sgpk" + tag
        sk = b"sgsk" + tag
        return pk, sk

    def sign(self, sk: bytes, message: bytes) -> bytes:
        return b"sig" + bytes(sk)[-2:] + len(message).to_bytes(2, "big", signed=False)

    def verify(self, pk: bytes, message: bytes, signature: bytes) -> bool:
        return signature[3:5] == pk[-2:] and signature[-2:] == len(message).to_bytes(2, "big", signed=False)


class BrokenKeygenAdapter(SignatureMixin):
    name = "broken"

    def keygen(self) -> tuple[bytes, bytes]:
        raise RuntimeError("entropy source exhausted")

    def sign(self, sk: bytes, message: bytes) -> bytes:
        raise AssertionError("never called")

    def verify(self, pk: bytes, message: bytes, signature: bytes) -> bool:
        raise AssertionError("never called")


class RejectingSignatureAdapter(DummySignatureAdapter):
    name = "rejecting-sig"

    def verify(self, pk: bytes, message: bytes, signature: bytes) -> bool:
        return False


class RaisingSignatureAdapter(DummySignatureAdapter):
    name = "raising-sig"

    def sign(self, sk: bytes, message: bytes) -> bytes:
        raise ValueError("backend rejected key")


class RaisingKEMAdapter(DummyKEMAdapter):
    name = "raising-kem"

    def decapsulate(self, sk: bytes, ct: bytes) -> bytes:
        raise RuntimeError("decapsulation backend crashed")


DUMMY_ADAPTERS = {
    "dummy-sig": DummySignatureAdapter,
    "dummy-kem": DummyKEMAdapter,
    "broken": BrokenKeygenAdapter,
    "rejecting-sig": RejectingSignatureAdapter,
    "raising-sig": RaisingSignatureAdapter,
    "raising-kem": RaisingKEMAdapter,
}


@pytest.fixture
def dummy_registry():
    original_items = dict(registry._items)  # type: ignore[attr-defined]
    registry._items.clear()  # type: ignore[attr-defined]
    registry._items.update(DUMMY_ADAPTERS)  # type: ignore[attr-defined]
    reset_adapter_cache()
    try:
        yield
    finally:
        registry._items.clear()  # type: ignore[attr-defined]
        registry._items.update(original_items)  # type: ignore[attr-defined]
        reset_adapter_cache()


@pytest.fixture
def small_config() -> BenchConfig:
    return BenchConfig(fast_iterations=5, slow_iterations=3)


@pytest.fixture
def cli_runner() -> CliRunner:
    return CliRunner()
