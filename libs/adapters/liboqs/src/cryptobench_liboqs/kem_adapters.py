from __future__ import annotations
from contextlib import contextmanager
from typing import Callable, Iterator, Tuple

from cryptobench import registry
from cryptobench.interfaces import Bytes
from ._util import require_oqs, pick_kem_algorithm


@registry.register("ml-kem")
class MLKEM:
    name = "ml-kem"

    def __init__(self) -> None:
        self._oqs = require_oqs()
        # Prefer NIST names, then legacy names; try instantiation to confirm availability
        self.alg = pick_kem_algorithm(
            self._oqs,
            "CRYPTOBENCH_ML_KEM_ALG",
            [
                "ML-KEM-512",
                "Kyber512",
                "ML-KEM-768",
                "ML-KEM-1024",
            ],
        )
        if not self.alg:
            raise RuntimeError("No supported Kyber/ML-KEM algorithm enabled in liboqs")
        self.label = f"Kyber ({self.alg})"

    def keygen(self) -> Tuple[bytes, bytes]:
        with self._oqs.KeyEncapsulation(self.alg) as kem:
            pk = kem.generate_keypair()
            sk = kem.export_secret_key()
            return pk, sk

    @contextmanager
    def encapsulator(self, public_key: bytes) -> Iterator[Callable[[], Tuple[bytes, bytes]]]:
        with self._oqs.KeyEncapsulation(self.alg) as kem:
            yield lambda: kem.encap_secret(public_key)

    @contextmanager
    def decapsulator(self, secret_key: Bytes) -> Iterator[Callable[[bytes], bytes]]:
        # liboqs cleanses its copy of the secret key when the context exits
        with self._oqs.KeyEncapsulation(self.alg, secret_key=bytes(secret_key)) as kem:
            yield kem.decap_secret

    def encapsulate(self, public_key: bytes) -> Tuple[bytes, bytes]:
        with self.encapsulator(public_key) as encapsulate:
            return encapsulate()

    def decapsulate(self, secret_key: Bytes, ciphertext: bytes) -> bytes:
        with self.decapsulator(secret_key) as decapsulate:
            return decapsulate(ciphertext)
