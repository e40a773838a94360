from __future__ import annotations

import pytest

from cryptobench import (
    InvalidConfigurationError,
    KeyBundle,
    KeyGenerationError,
    KeyMaterialError,
    SecretBytes,
    generate_keys,
)
from cryptobench.constants import ED25519_KEY_SIZE, X25519_KEY_SIZE
from cryptobench_liboqs import try_import_oqs

from conftest import DummyKEMAdapter, DummySignatureAdapter


def test_secret_bytes_wipe_zeroizes_in_place():
    secret = SecretBytes(b"\x01\x02\x03\x04")
    buf = secret._buf  # type: ignore[attr-defined]
    assert bytes(secret) == b"\x01\x02\x03\x04"
    secret.wipe()
    assert secret.wiped
    assert buf is secret._buf  # type: ignore[attr-defined]
    assert bytes(buf) == b"\x00" * 4
    assert len(secret) == 4
    with pytest.raises(KeyMaterialError):
        secret.view()
    with pytest.raises(KeyMaterialError):
        bytes(secret)


def test_secret_bytes_view_is_read_only():
    secret = SecretBytes(b"abc")
    with secret.view() as view:
        assert view.readonly
        assert bytes(view) == b"abc"
        with pytest.raises(TypeError):
            view[0] = 0


def test_secret_bytes_repr_hides_material():
    secret = SecretBytes(b"topsecret")
    assert "topsecret" not in repr(secret)
    assert "9 bytes" in repr(secret)


def test_generate_keys_splits_signatures_and_kems(dummy_registry):
    with generate_keys(["dummy-sig", "dummy-kem"]) as keys:
        assert keys.algorithms == ("dummy-sig", "dummy-kem")
        assert list(keys.signatures) == ["dummy-sig"]
        assert list(keys.kems) == ["dummy-kem"]
        assert keys["dummy-sig"].kind == "SIG"
        assert keys["dummy-kem"].kind == "KEM"
        assert keys["dummy-kem"].mechanism == "Dummy KEM"
        assert "dummy-sig" in keys
        assert len(keys) == 2
        assert keys.generation_time_secs >= 0.0
        assert not keys.closed
    assert keys.closed


def test_bundle_mappings_are_read_only(dummy_registry):
    with generate_keys(["dummy-sig", "dummy-kem"]) as keys:
        with pytest.raises(TypeError):
            keys.signatures["other"] = keys["dummy-sig"]  # type: ignore[index]
        with pytest.raises(TypeError):
            del keys.kems["dummy-kem"]  # type: ignore[attr-defined]
        with pytest.raises(AttributeError):
            keys["dummy-sig"].public_key = b"x"  # type: ignore[misc]


def test_close_zeroizes_every_secret_and_is_idempotent(dummy_registry):
    keys = generate_keys(["dummy-sig", "dummy-kem"])
    secrets = [pair.secret_key for pair in keys]
    buffers = [s._buf for s in secrets]  # type: ignore[attr-defined]
    assert all(any(b) for b in buffers)

    keys.close()
    keys.close()

    assert keys.closed
    assert all(s.wiped for s in secrets)
    assert all(not any(b) for b in buffers)
    with pytest.raises(KeyMaterialError):
        keys.signatures
    with pytest.raises(KeyMaterialError):
        keys["dummy-kem"]


def test_bundle_closed_on_exception_inside_with(dummy_registry):
    with pytest.raises(RuntimeError):
        with generate_keys(["dummy-sig"]) as keys:
            secret = keys["dummy-sig"].secret_key
            raise RuntimeError("boom")
    assert keys.closed
    assert secret.wiped


def test_failed_generation_wipes_partial_secrets(dummy_registry, monkeypatch: pytest.MonkeyPatch):
    produced = []
    original_init = SecretBytes.__init__

    def tracking_init(self, data):
        original_init(self, data)
        produced.append(self)

    monkeypatch.setattr(SecretBytes, "__init__", tracking_init)

    with pytest.raises(KeyGenerationError) as excinfo:
        generate_keys(["dummy-sig", "dummy-kem", "broken"])

    assert excinfo.value.algorithm == "broken"
    assert "entropy source exhausted" in str(excinfo.value)
    assert "Key generation failed" in str(excinfo.value)
    assert len(produced) == 2
    assert all(s.wiped for s in produced)


def test_unknown_algorithm_is_a_generation_error(dummy_registry):
    with pytest.raises(KeyGenerationError, match="no-such-alg"):
        generate_keys(["dummy-sig", "no-such-alg"])


@pytest.mark.parametrize("names", [[], ["dummy-sig", "dummy-sig"]])
def test_invalid_algorithm_selection(dummy_registry, names):
    with pytest.raises(InvalidConfigurationError):
        generate_keys(names)


def test_explicit_adapters_bypass_the_registry():
    adapters = {"a": DummySignatureAdapter(), "b": DummyKEMAdapter()}
    with KeyBundle.generate(["a", "b"], adapters=adapters) as keys:
        assert keys["a"].public_key.startswith(b"sgpk")
        assert keys["b"].public_key.startswith(b"pk")


def test_empty_key_material_is_rejected():
    class Empty(DummySignatureAdapter):
        def keygen(self):
            return b"", b"sk"

    with pytest.raises(KeyGenerationError, match="empty"):
        generate_keys(["empty"], adapters={"empty": Empty()})


def test_classical_keys_have_expected_shapes():
    with generate_keys(["ed25519", "ecdsa-p256", "x25519", "ecdh-p256"]) as keys:
        ed = keys["ed25519"]
        assert len(ed.public_key) == ED25519_KEY_SIZE
        assert len(ed.secret_key) == ED25519_KEY_SIZE
        assert len(keys["x25519"].public_key) == X25519_KEY_SIZE
        assert len(keys["x25519"].secret_key) == X25519_KEY_SIZE
        # uncompressed SEC1 point
        assert len(keys["ecdsa-p256"].public_key) == 65
        assert keys["ecdsa-p256"].public_key[0] == 0x04
        assert len(keys["ecdh-p256"].secret_key) == 32
        assert set(keys.signatures) == {"ed25519", "ecdsa-p256"}
        assert set(keys.kems) == {"x25519", "ecdh-p256"}


def test_rsa_keys_are_der_encoded(monkeypatch: pytest.MonkeyPatch):
    from cryptography.hazmat.primitives import serialization
    from cryptobench import reset_adapter_cache

    monkeypatch.setenv("CRYPTOBENCH_RSA_BITS", "1024")
    reset_adapter_cache()
    try:
        with generate_keys(["rsa-pss", "rsa-oaep"]) as keys:
            assert keys["rsa-pss"].mechanism == "RSA-1024-PSS"
            assert keys["rsa-oaep"].mechanism == "RSA-1024-OAEP"
            pk = serialization.load_der_public_key(keys["rsa-pss"].public_key)
            assert pk.key_size == 1024
    finally:
        monkeypatch.delenv("CRYPTOBENCH_RSA_BITS")
        reset_adapter_cache()


@pytest.mark.skipif(try_import_oqs() is None, reason="liboqs-python not available")
def test_post_quantum_keys():
    with generate_keys(["ml-dsa", "falcon", "ml-kem"]) as keys:
        assert set(keys.signatures) == {"ml-dsa", "falcon"}
        assert set(keys.kems) == {"ml-kem"}
        for pair in keys:
            assert len(pair.public_key) > 0
            assert len(pair.secret_key) > 0


@pytest.mark.skipif(try_import_oqs() is None, reason="liboqs-python not available")
def test_default_bundle_is_fully_populated():
    with generate_keys() as keys:
        assert keys.algorithms == (
            "ed25519", "rsa-pss", "ecdsa-p256", "ml-dsa", "falcon",
            "x25519", "ecdh-p256", "ml-kem", "rsa-oaep",
        )
        assert all(len(pair.public_key) and len(pair.secret_key) for pair in keys)
        assert len(keys["ed25519"].public_key) == ED25519_KEY_SIZE
