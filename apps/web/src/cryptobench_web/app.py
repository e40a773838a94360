from __future__ import annotations
"""Flask front-end over the benchmark suites.

POST /api/benchmarks runs a fresh pass on a worker thread and caches the
report; GET /api/benchmarks/cached returns the last cached report or null.
The app owns the key bundle for its whole lifetime and only ever reads it.
"""
import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Callable, Optional, Sequence

from flask import Flask, jsonify

from cryptobench import BenchConfig, BenchmarkError, BenchmarkReport, KeyBundle, generate_keys
from cryptobench_cli.report import run_benchmarks

log = logging.getLogger(__name__)

EXTENSION_KEY = "cryptobench"

Runner = Callable[..., BenchmarkReport]


class BenchmarkService:
    """Key bundle, worker pool and the single cached-report slot."""

    def __init__(
        self,
        keys: KeyBundle,
        *,
        config: Optional[BenchConfig] = None,
        max_workers: int = 2,
        runner: Runner = run_benchmarks,
    ) -> None:
        self.keys = keys
        self.config = config or BenchConfig()
        self._runner = runner
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="cryptobench")
        self._lock = threading.Lock()
        self._cached: Optional[BenchmarkReport] = None

    def run(self) -> BenchmarkReport:
        """Run one pass on the pool and cache it. Failures leave the cache as it was."""
        future = self._executor.submit(self._runner, self.keys, config=self.config)
        report = future.result()
        with self._lock:
            self._cached = report
        return report

    def cached(self) -> Optional[BenchmarkReport]:
        with self._lock:
            return self._cached

    def close(self) -> None:
        self._executor.shutdown(wait=True)
        self.keys.close()


def create_app(
    keys: KeyBundle,
    *,
    config: Optional[BenchConfig] = None,
    max_workers: int = 2,
    static_dir: str | Path | None = None,
    runner: Runner = run_benchmarks,
) -> Flask:
    static_folder = None
    if static_dir is not None and Path(static_dir).is_dir():
        static_folder = str(Path(static_dir).resolve())
    app = Flask(__name__, static_folder=static_folder, static_url_path="")
    service = BenchmarkService(keys, config=config, max_workers=max_workers, runner=runner)
    app.extensions[EXTENSION_KEY] = service

    @app.post("/api/benchmarks")
    def run_benchmarks_endpoint():
        try:
            report = service.run()
        except BenchmarkError as exc:
            log.error("Benchmark pass failed: %s", exc)
            return jsonify({"error": str(exc)}), 500
        except Exception as exc:
            log.exception("Benchmark pass crashed: %s", exc)
            return jsonify({"error": "Internal server error"}), 500
        return jsonify(report.to_dict())

    @app.get("/api/benchmarks/cached")
    def cached_benchmarks():
        report = service.cached()
        return jsonify(report.to_dict() if report is not None else None)

    @app.route("/health")
    def health():
        return {"status": "ok"}

    @app.route("/")
    def index():
        if app.static_folder and (Path(app.static_folder) / "index.html").is_file():
            return app.send_static_file("index.html")
        return jsonify({"error": "no front-end installed"}), 404

    return app


def serve(
    host: str = "127.0.0.1",
    port: int = 3000,
    *,
    algorithms: Optional[Sequence[str]] = None,
    config: Optional[BenchConfig] = None,
    max_workers: int = 2,
    static_dir: str | Path | None = "static",
) -> None:
    """Generate keys, serve until interrupted, then wipe the keys."""
    log.info("Generating keys for server...")
    keys = generate_keys(algorithms)
    log.info("Keys generated in %.3fs. Starting server...", keys.generation_time_secs)
    app = create_app(keys, config=config, max_workers=max_workers, static_dir=static_dir)
    try:
        log.info("Server running at http://%s:%d", host, port)
        app.run(host=host, port=port, threaded=True)
    finally:
        app.extensions[EXTENSION_KEY].close()
