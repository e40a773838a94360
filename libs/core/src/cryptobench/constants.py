from __future__ import annotations

DEFAULT_MESSAGE = b"Hello, world! This is a test message for cryptographic benchmarking."

# Key sizes
ED25519_KEY_SIZE = 32
ECDSA_KEY_SIZE = 32
X25519_KEY_SIZE = 32
RSA_KEY_SIZE = 2048  # bits

# Benchmark configuration
MAX_WARMUP_ITERATIONS = 10
DEFAULT_MEASUREMENT_ITERATIONS = 100
DEFAULT_SLOW_ITERATIONS = 50  # RSA signing and the post-quantum primitives

DEFAULT_SIGNATURE_ALGORITHMS = ("ed25519", "rsa-pss", "ecdsa-p256", "ml-dsa", "falcon")
DEFAULT_KEM_ALGORITHMS = ("x25519", "ecdh-p256", "ml-kem", "rsa-oaep")

# Operations timed with the slow iteration count
SLOW_OPERATIONS = frozenset(
    {
        ("rsa-pss", "Sign"),
        ("ml-dsa", "Sign"),
        ("falcon", "Sign"),
        ("ml-kem", "Encapsulate"),
        ("rsa-oaep", "Decapsulate"),
    }
)
