from __future__ import annotations
from typing import Callable, Tuple

from cryptography.exceptions import InvalidSignature

from cryptobench.interfaces import Bytes


def checked(verify: Callable[..., None]) -> Callable[[bytes, bytes], bool]:
    """Turn a raising `verify(signature, message)` into a boolean one."""
    def _verify(message: bytes, signature: bytes) -> bool:
        try:
            verify(signature, message)
        except InvalidSignature:
            return False
        return True
    return _verify


class OneShotSignature:
    """One-shot sign/verify on top of the scoped signer/verifier."""

    def sign(self, secret_key: Bytes, message: bytes) -> bytes:
        with self.signer(secret_key) as sign:
            return sign(message)

    def verify(self, public_key: bytes, message: bytes, signature: bytes) -> bool:
        with self.verifier(public_key) as verify:
            return verify(message, signature)


class OneShotKEM:
    def encapsulate(self, public_key: bytes) -> Tuple[bytes, bytes]:
        with self.encapsulator(public_key) as encapsulate:
            return encapsulate()

    def decapsulate(self, secret_key: Bytes, ciphertext: bytes) -> bytes:
        with self.decapsulator(secret_key) as decapsulate:
            return decapsulate(ciphertext)
