from __future__ import annotations
import logging
from typing import List, Optional

import typer

from cryptobench import (
    BenchConfig,
    BenchmarkError,
    generate_keys,
    get_adapter,
    load_adapters,
    registry,
)
from cryptobench.interfaces import is_kem
from .report import export_json, format_report, report_to_json, run_benchmarks

app = typer.Typer(add_completion=False, help="Cryptographic operation latency benchmarks")

_LOGGER_NAMES = ("cryptobench", "cryptobench_cli", "cryptobench_web", "cryptobench_classic", "cryptobench_liboqs")

_ONLY_HELP = "Benchmark only this algorithm (repeatable). Defaults to every algorithm."


@app.callback()
def _main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Log key generation and per-suite timings.")):
    level = logging.DEBUG if verbose else logging.WARNING
    for name in _LOGGER_NAMES:
        logging.getLogger(name).setLevel(level)


@app.command()
def list_algos():
    """List registered algorithms available via adapters."""
    load_adapters()
    for name in registry.list().keys():
        typer.echo(f"- {name}")


@app.command()
def demo(name: str):
    """Run a tiny demo with the selected algorithm (keygen + one round trip)."""
    load_adapters()
    try:
        algo = get_adapter(name)
    except KeyError:
        typer.echo(f"Unknown algorithm: {name}", err=True)
        raise typer.Exit(code=1)
    except RuntimeError as exc:
        typer.echo(f"{name} unavailable: {exc}", err=True)
        raise typer.Exit(code=1)
    pk, sk = algo.keygen()
    if is_kem(algo):
        ct, ss = algo.encapsulate(pk)
        ok = algo.decapsulate(sk, ct) == ss
        typer.echo(f"[KEM] {name}: {'ok' if ok else 'MISMATCH'} (ct={len(ct)} bytes, ss={len(ss)} bytes)")
    else:
        sig = algo.sign(sk, b"hello")
        ok = algo.verify(pk, b"hello", sig)
        typer.echo(f"[SIG] {name}: verify={ok} (sig={len(sig)} bytes)")
    if not ok:
        raise typer.Exit(code=1)


@app.command()
def run(
    only: Optional[List[str]] = typer.Option(None, "--only", help=_ONLY_HELP),
    fast_iterations: Optional[int] = typer.Option(None, min=1, help="Iterations for fast operations [default: 100]."),
    slow_iterations: Optional[int] = typer.Option(None, min=1, help="Iterations for RSA signing and PQC operations [default: 50]."),
    as_json: bool = typer.Option(False, "--json", help="Print the report as JSON instead of a table."),
    export: str = typer.Option("", help="Also write the JSON report to this path."),
):
    """
    Generate keys once, then benchmark every signature and KEM operation.
    """
    load_adapters()
    if not as_json:
        typer.echo("Cryptographic Benchmarking Tool")
        typer.echo("=================================")
        typer.echo("Generating benchmark keys (this may take a moment)...")
    try:
        config = BenchConfig.from_env().with_overrides(
            fast_iterations=fast_iterations,
            slow_iterations=slow_iterations,
        )
        with generate_keys(only or None) as keys:
            report = run_benchmarks(keys, config=config, keygen_time_secs=keys.generation_time_secs)
    except BenchmarkError as exc:
        typer.echo(f"Benchmark aborted: {exc}", err=True)
        raise typer.Exit(code=1)

    if as_json:
        typer.echo(report_to_json(report))
    else:
        typer.echo("")
        typer.echo(format_report(report))
    path = export_json(report, export)
    if path is not None and not as_json:
        typer.echo(f"Wrote {path}")


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", help="Interface to bind."),
    port: int = typer.Option(3000, help="Port to listen on."),
    only: Optional[List[str]] = typer.Option(None, "--only", help=_ONLY_HELP),
    workers: int = typer.Option(2, min=1, help="Concurrent benchmark passes."),
    static_dir: str = typer.Option("static", envvar="CRYPTOBENCH_STATIC_DIR", help="Directory served at /."),
):
    """Serve POST /api/benchmarks and GET /api/benchmarks/cached."""
    from cryptobench_web.app import serve as serve_web

    try:
        serve_web(
            host=host,
            port=port,
            algorithms=only or None,
            config=BenchConfig.from_env(),
            max_workers=workers,
            static_dir=static_dir,
        )
    except BenchmarkError as exc:
        typer.echo(f"Server not started: {exc}", err=True)
        raise typer.Exit(code=1)


def app_main():
    logging.basicConfig(format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    app()


if __name__ == "__main__":
    app_main()
