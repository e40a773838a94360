from __future__ import annotations
from contextlib import contextmanager
from typing import Callable, Iterator, Sequence, Tuple

from cryptobench import registry
from cryptobench.interfaces import Bytes
from ._util import require_oqs, pick_sig_algorithm


class _OQSSignature:
    """Shared liboqs signature plumbing; subclasses pick the mechanism."""
    name: str
    env_var: str
    candidates: Sequence[str]
    family: str

    def __init__(self) -> None:
        self._oqs = require_oqs()
        self.alg = pick_sig_algorithm(self._oqs, self.env_var, self.candidates)
        if not self.alg:
            raise RuntimeError(f"No supported {self.family} algorithm enabled in liboqs")

    @property
    def label(self) -> str:
        return self.alg

    def keygen(self) -> Tuple[bytes, bytes]:
        with self._oqs.Signature(self.alg) as s:
            pk = s.generate_keypair()
            sk = s.export_secret_key()
            return pk, sk

    @contextmanager
    def signer(self, secret_key: Bytes) -> Iterator[Callable[[bytes], bytes]]:
        with self._oqs.Signature(self.alg, secret_key=bytes(secret_key)) as s:
            yield s.sign

    @contextmanager
    def verifier(self, public_key: bytes) -> Iterator[Callable[[bytes, bytes], bool]]:
        with self._oqs.Signature(self.alg) as v:
            yield lambda message, signature: v.verify(message, signature, public_key)

    def sign(self, secret_key: Bytes, message: bytes) -> bytes:
        with self.signer(secret_key) as sign:
            return sign(message)

    def verify(self, public_key: bytes, message: bytes, signature: bytes) -> bool:
        with self.verifier(public_key) as verify:
            return verify(message, signature)


@registry.register("ml-dsa")
class MLDSA(_OQSSignature):
    name = "ml-dsa"
    env_var = "CRYPTOBENCH_ML_DSA_ALG"
    candidates = ("ML-DSA-44", "Dilithium2", "ML-DSA-65", "ML-DSA-87")
    family = "Dilithium/ML-DSA"

    @property
    def label(self) -> str:
        return f"Dilithium ({self.alg})"


@registry.register("falcon")
class Falcon(_OQSSignature):
    name = "falcon"
    env_var = "CRYPTOBENCH_FALCON_ALG"
    candidates = ("Falcon-512", "Falcon-1024")
    family = "Falcon"
