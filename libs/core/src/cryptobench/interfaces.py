from __future__ import annotations
from contextlib import contextmanager
from functools import partial
from typing import Callable, ContextManager, Iterator, Protocol, Tuple

"""Algorithm interfaces used by adapters.

Adapters implement these Protocols and register themselves into the global
registry. Suites interact only with these interfaces, never with vendor
libraries directly.

Besides the one-shot calls, each interface has scoped variants that load a
key once and yield a bound callable, so the timed code only contains the
operation itself. The mixins derive the scoped variants from the one-shot
calls for adapters that have nothing to load.
"""

Bytes = bytes | bytearray | memoryview


class KEM(Protocol):
    """Key Encapsulation Mechanism contract."""
    name: str
    label: str
    def keygen(self) -> Tuple[bytes, bytes]: ...
    def encapsulate(self, public_key: bytes) -> Tuple[bytes, bytes]: ...
    def decapsulate(self, secret_key: Bytes, ciphertext: bytes) -> bytes: ...
    def encapsulator(self, public_key: bytes) -> ContextManager[Callable[[], Tuple[bytes, bytes]]]: ...
    def decapsulator(self, secret_key: Bytes) -> ContextManager[Callable[[bytes], bytes]]: ...


class Signature(Protocol):
    """Digital Signature contract."""
    name: str
    label: str
    def keygen(self) -> Tuple[bytes, bytes]: ...
    def sign(self, secret_key: Bytes, message: bytes) -> bytes: ...
    def verify(self, public_key: bytes, message: bytes, signature: bytes) -> bool: ...
    def signer(self, secret_key: Bytes) -> ContextManager[Callable[[bytes], bytes]]: ...
    def verifier(self, public_key: bytes) -> ContextManager[Callable[[bytes, bytes], bool]]: ...


def is_kem(adapter: object) -> bool:
    return callable(getattr(adapter, "encapsulate", None))


class SignatureMixin:
    @contextmanager
    def signer(self, secret_key: Bytes) -> Iterator[Callable[[bytes], bytes]]:
        yield partial(self.sign, secret_key)

    @contextmanager
    def verifier(self, public_key: bytes) -> Iterator[Callable[[bytes, bytes], bool]]:
        yield partial(self.verify, public_key)


class KEMMixin:
    @contextmanager
    def encapsulator(self, public_key: bytes) -> Iterator[Callable[[], Tuple[bytes, bytes]]]:
        yield partial(self.encapsulate, public_key)

    @contextmanager
    def decapsulator(self, secret_key: Bytes) -> Iterator[Callable[[bytes], bytes]]:
        yield partial(self.decapsulate, secret_key)
