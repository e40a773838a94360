from __future__ import annotations

import dataclasses

import pytest

from cryptobench import BenchmarkMetric, BenchmarkReport, BenchmarkResult


def _result() -> BenchmarkResult:
    return BenchmarkResult(mean=12.75, min=10.0, max=20.5, standard_deviation=1.25, iterations=100)


def test_result_projects_into_metric():
    metric = _result().to_metric("Ed25519", "Sign", {"signature_size": "64 bytes"})
    assert metric.algorithm_name == "Ed25519"
    assert metric.operation_name == "Sign"
    assert (metric.mean, metric.min, metric.max, metric.std_dev) == (12.75, 10.0, 20.5, 1.25)
    assert metric.iterations == 100
    assert metric.extra_info["signature_size"] == "64 bytes"


def test_mean_micros_truncates():
    assert _result().mean_micros == 12


def test_describe_lists_every_statistic():
    text = _result().describe("Ed25519 Sign")
    assert text.splitlines()[0].strip() == "Ed25519 Sign"
    for fragment in ("Mean:", "Min:", "Max:", "StdDev:", "Iterations: 100"):
        assert fragment in text


def test_metric_is_immutable():
    metric = _result().to_metric("Ed25519", "Verify", {"k": "v"})
    with pytest.raises(dataclasses.FrozenInstanceError):
        metric.mean = 0.0  # type: ignore[misc]
    with pytest.raises(TypeError):
        metric.extra_info["k"] = "other"  # type: ignore[index]


def test_extra_info_is_copied_not_shared():
    info = {"mechanism": "Ed25519"}
    metric = _result().to_metric("Ed25519", "Sign", info)
    info["mechanism"] = "changed"
    assert metric.extra_info["mechanism"] == "Ed25519"


def test_metric_dict_shape_and_round_trip():
    metric = _result().to_metric("X25519 Diffie-Hellman", "Encapsulate", {"ciphertext_size": "32 bytes"})
    data = metric.to_dict()
    assert data == {
        "name": "X25519 Diffie-Hellman",
        "operation": "Encapsulate",
        "mean_micros": 12.75,
        "min_micros": 10.0,
        "max_micros": 20.5,
        "std_dev_micros": 1.25,
        "iterations": 100,
        "extra_info": {"ciphertext_size": "32 bytes"},
    }
    assert BenchmarkMetric.from_dict(data) == metric


def test_report_groups_metrics():
    sign = _result().to_metric("Ed25519", "Sign")
    encaps = _result().to_metric("ECDH (P-256)", "Encapsulate")
    report = BenchmarkReport(signatures=[sign], kem=[encaps], keygen_time_secs=0.5, total_time_secs=1.5)
    assert report.signatures == (sign,)
    assert list(report.metrics) == [sign, encaps]

    data = report.to_dict()
    assert set(data) == {"signatures", "kem", "keygen_time_secs", "total_time_secs"}
    assert data["kem"][0]["operation"] == "Encapsulate"
    assert BenchmarkReport.from_dict(data) == report


def test_empty_report_defaults():
    report = BenchmarkReport()
    assert report.to_dict() == {"signatures": [], "kem": [], "keygen_time_secs": 0.0, "total_time_secs": 0.0}
