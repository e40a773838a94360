from __future__ import annotations
from contextlib import contextmanager
from typing import Callable, Iterator, Tuple

from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec, ed25519, x25519

from cryptobench import registry
from cryptobench.constants import ECDSA_KEY_SIZE
from cryptobench.interfaces import Bytes

from ._base import OneShotKEM, OneShotSignature, checked

"""Elliptic-curve adapters: Ed25519, ECDSA P-256 and the two DH schemes.

X25519 and ECDH P-256 are exposed through the KEM interface: encapsulate
creates an ephemeral key, derives the shared secret against the recipient's
public key and returns the ephemeral public key as the "ciphertext";
decapsulate runs the same exchange from the recipient's side.
"""

_RAW = (serialization.Encoding.Raw, serialization.PublicFormat.Raw)
_RAW_PRIVATE = (
    serialization.Encoding.Raw,
    serialization.PrivateFormat.Raw,
    serialization.NoEncryption(),
)
_POINT = (serialization.Encoding.X962, serialization.PublicFormat.UncompressedPoint)


@registry.register("ed25519")
class Ed25519(OneShotSignature):
    name = "ed25519"
    label = "Ed25519"
    mech = "Ed25519"

    def keygen(self) -> Tuple[bytes, bytes]:
        sk = ed25519.Ed25519PrivateKey.generate()
        return sk.public_key().public_bytes(*_RAW), sk.private_bytes(*_RAW_PRIVATE)

    @contextmanager
    def signer(self, secret_key: Bytes) -> Iterator[Callable[[bytes], bytes]]:
        yield ed25519.Ed25519PrivateKey.from_private_bytes(secret_key).sign

    @contextmanager
    def verifier(self, public_key: bytes) -> Iterator[Callable[[bytes, bytes], bool]]:
        yield checked(ed25519.Ed25519PublicKey.from_public_bytes(public_key).verify)


@registry.register("ecdsa-p256")
class EcdsaP256(OneShotSignature):
    name = "ecdsa-p256"
    label = "ECDSA P-256"
    mech = "ECDSA-P256-SHA256"
    curve = ec.SECP256R1

    def keygen(self) -> Tuple[bytes, bytes]:
        sk = ec.generate_private_key(self.curve())
        scalar = sk.private_numbers().private_value.to_bytes(ECDSA_KEY_SIZE, "big")
        return sk.public_key().public_bytes(*_POINT), scalar

    def _private_key(self, secret_key: Bytes) -> ec.EllipticCurvePrivateKey:
        return ec.derive_private_key(int.from_bytes(secret_key, "big"), self.curve())

    @contextmanager
    def signer(self, secret_key: Bytes) -> Iterator[Callable[[bytes], bytes]]:
        sk = self._private_key(secret_key)
        algorithm = ec.ECDSA(hashes.SHA256())
        yield lambda message: sk.sign(message, algorithm)

    @contextmanager
    def verifier(self, public_key: bytes) -> Iterator[Callable[[bytes, bytes], bool]]:
        pk = ec.EllipticCurvePublicKey.from_encoded_point(self.curve(), public_key)
        algorithm = ec.ECDSA(hashes.SHA256())
        yield checked(lambda signature, message: pk.verify(signature, message, algorithm))


@registry.register("x25519")
class X25519(OneShotKEM):
    name = "x25519"
    label = "X25519 Diffie-Hellman"
    mech = "X25519"

    def keygen(self) -> Tuple[bytes, bytes]:
        sk = x25519.X25519PrivateKey.generate()
        return sk.public_key().public_bytes(*_RAW), sk.private_bytes(*_RAW_PRIVATE)

    @contextmanager
    def encapsulator(self, public_key: bytes) -> Iterator[Callable[[], Tuple[bytes, bytes]]]:
        peer = x25519.X25519PublicKey.from_public_bytes(public_key)

        def _encapsulate() -> Tuple[bytes, bytes]:
            ephemeral = x25519.X25519PrivateKey.generate()
            return ephemeral.public_key().public_bytes(*_RAW), ephemeral.exchange(peer)

        yield _encapsulate

    @contextmanager
    def decapsulator(self, secret_key: Bytes) -> Iterator[Callable[[bytes], bytes]]:
        sk = x25519.X25519PrivateKey.from_private_bytes(secret_key)
        yield lambda ciphertext: sk.exchange(x25519.X25519PublicKey.from_public_bytes(ciphertext))


@registry.register("ecdh-p256")
class EcdhP256(OneShotKEM):
    name = "ecdh-p256"
    label = "ECDH (P-256)"
    mech = "ECDH-P256"
    curve = ec.SECP256R1

    def keygen(self) -> Tuple[bytes, bytes]:
        sk = ec.generate_private_key(self.curve())
        scalar = sk.private_numbers().private_value.to_bytes(ECDSA_KEY_SIZE, "big")
        return sk.public_key().public_bytes(*_POINT), scalar

    @contextmanager
    def encapsulator(self, public_key: bytes) -> Iterator[Callable[[], Tuple[bytes, bytes]]]:
        peer = ec.EllipticCurvePublicKey.from_encoded_point(self.curve(), public_key)
        ecdh = ec.ECDH()

        def _encapsulate() -> Tuple[bytes, bytes]:
            ephemeral = ec.generate_private_key(self.curve())
            return ephemeral.public_key().public_bytes(*_POINT), ephemeral.exchange(ecdh, peer)

        yield _encapsulate

    @contextmanager
    def decapsulator(self, secret_key: Bytes) -> Iterator[Callable[[bytes], bytes]]:
        sk = ec.derive_private_key(int.from_bytes(secret_key, "big"), self.curve())
        ecdh = ec.ECDH()
        yield lambda ciphertext: sk.exchange(
            ecdh, ec.EllipticCurvePublicKey.from_encoded_point(self.curve(), ciphertext)
        )
