from __future__ import annotations
from contextlib import contextmanager
from typing import Callable, Iterator, Tuple
import os

from cryptography.hazmat.primitives.asymmetric import rsa, padding
from cryptography.hazmat.primitives import hashes, serialization

from cryptobench import registry
from cryptobench.config import env_int
from cryptobench.constants import RSA_KEY_SIZE
from cryptobench.interfaces import Bytes

from ._base import OneShotKEM, OneShotSignature, checked

_DER_PRIVATE = (
    serialization.Encoding.DER,
    serialization.PrivateFormat.PKCS8,
    serialization.NoEncryption(),
)
_DER_PUBLIC = (serialization.Encoding.DER, serialization.PublicFormat.SubjectPublicKeyInfo)


def _rsa_bits() -> int:
    return env_int("CRYPTOBENCH_RSA_BITS", RSA_KEY_SIZE)


class _RSAKeys:
    """DER-encoded RSA keypairs (PKCS#8 secret, SubjectPublicKeyInfo public)."""
    bits: int

    def keygen(self) -> Tuple[bytes, bytes]:
        sk = rsa.generate_private_key(public_exponent=65537, key_size=self.bits)
        return sk.public_key().public_bytes(*_DER_PUBLIC), sk.private_bytes(*_DER_PRIVATE)

    @staticmethod
    def _private_key(secret_key: Bytes) -> rsa.RSAPrivateKey:
        return serialization.load_der_private_key(secret_key, password=None)

    @staticmethod
    def _public_key(public_key: bytes) -> rsa.RSAPublicKey:
        return serialization.load_der_public_key(public_key)


@registry.register("rsa-oaep")
class RSAKEM(_RSAKeys, OneShotKEM):
    """RSA-OAEP used as a classical KEM baseline.

    Encapsulation encrypts a fresh random 32-byte secret under the public
    key; decapsulation decrypts it.
    """
    name = "rsa-oaep"
    shared_secret_size = 32

    def __init__(self) -> None:
        self.bits = _rsa_bits()
        self.mech = f"RSA-{self.bits}-OAEP"
        self.label = self.mech
        self._oaep = padding.OAEP(
            mgf=padding.MGF1(algorithm=hashes.SHA256()),
            algorithm=hashes.SHA256(),
            label=None,
        )

    @contextmanager
    def encapsulator(self, public_key: bytes) -> Iterator[Callable[[], Tuple[bytes, bytes]]]:
        pk = self._public_key(public_key)

        def _encapsulate() -> Tuple[bytes, bytes]:
            ss = os.urandom(self.shared_secret_size)
            return pk.encrypt(ss, self._oaep), ss

        yield _encapsulate

    @contextmanager
    def decapsulator(self, secret_key: Bytes) -> Iterator[Callable[[bytes], bytes]]:
        sk = self._private_key(secret_key)
        yield lambda ciphertext: sk.decrypt(ciphertext, self._oaep)


@registry.register("rsa-pss")
class RSASignature(_RSAKeys, OneShotSignature):
    """RSA-PSS with SHA-256, MGF1-SHA256 and a digest-sized salt."""
    name = "rsa-pss"

    def __init__(self) -> None:
        self.bits = _rsa_bits()
        self.mech = f"RSA-{self.bits}-PSS"
        self.label = f"RSA-{self.bits}"
        self._pss = padding.PSS(mgf=padding.MGF1(hashes.SHA256()), salt_length=hashes.SHA256.digest_size)

    @contextmanager
    def signer(self, secret_key: Bytes) -> Iterator[Callable[[bytes], bytes]]:
        sk = self._private_key(secret_key)
        yield lambda message: sk.sign(message, self._pss, hashes.SHA256())

    @contextmanager
    def verifier(self, public_key: bytes) -> Iterator[Callable[[bytes, bytes], bool]]:
        pk = self._public_key(public_key)
        yield checked(lambda signature, message: pk.verify(signature, message, self._pss, hashes.SHA256()))
