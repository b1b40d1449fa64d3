from __future__ import annotations
import enum
from pathlib import Path
from typing import List, Optional

import typer

from sigvec import registry
from sigvec.config import configure_logging, get_provider, load_adapters, load_settings
from sigvec.errors import SigvecError
from sigvec.outcome import Verdict
from sigvec.report import summary_dict, write_json, write_junit
from sigvec.resolver import Format
from sigvec.sign import run_signing
from sigvec.suites import SUITES, run_suites, select
from sigvec.vectors import load_document
from sigvec.verify import run_verification

app = typer.Typer(add_completion=False, help="Signature test-vector conformance harness")


class Algorithm(str, enum.Enum):
    ECDSA = "ECDSA"
    DSA = "DSA"
    RSA = "RSA"


def _echo_verdict(v: Verdict) -> None:
    t = v.tally
    if v.missing:
        status = "MISSING"
    else:
        status = "PASS" if v.passed else "FAIL"
    typer.echo(
        f"[{status}] {v.source} ({v.mode}): executed={t.executed} errors={t.errors} "
        f"skipped_keys={t.skipped_keys}"
    )
    for reason in sorted(t.skipped_group_reasons):
        typer.echo(f"    skipped groups where {reason}")
    for failure in v.failures:
        typer.echo(f"    {failure}")
    if v.schema_warning:
        typer.echo(f"    warning: {v.schema_warning}")


def _setup(log_level: Optional[str], provider: Optional[str]):
    try:
        settings = load_settings()
        configure_logging(log_level or settings.log_level)
        return settings, get_provider(provider or settings.provider)
    except SigvecError as exc:
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(code=2)


def _run_file(path: Path, algorithm: Algorithm, fmt: str, allow_skipping: Optional[bool], provider: Optional[str],
              log_level: Optional[str], signing: bool) -> None:
    settings, prov = _setup(log_level, provider)
    if allow_skipping is None:
        allow_skipping = bool(settings.allow_skipping)
    try:
        document = load_document(path)
        runner = run_signing if signing else run_verification
        verdict = runner(document, algorithm.value, Format.parse(fmt), allow_skipping, provider=prov)
    except (SigvecError, ValueError, OSError) as exc:
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(code=2)
    _echo_verdict(verdict)
    raise typer.Exit(code=0 if verdict.passed else 1)


@app.command("list-providers")
def list_providers():
    """List registered signature providers."""
    load_adapters()
    for name in registry.list().keys():
        typer.echo(f"- {name}")


@app.command("list-suites")
def list_suites():
    """List the known vector files and how they are run."""
    for s in SUITES.values():
        skip = "allow-skip" if s.allow_skipping_keys else "strict"
        typer.echo(f"- {s.name}: {s.filename} [{s.algorithm}/{s.format.value}/{s.mode}, {skip}]")


@app.command()
def verify(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="JSON vector file"),
    algorithm: Algorithm = typer.Option(..., "--algorithm", "-a", case_sensitive=False),
    fmt: str = typer.Option("ASN", "--format", "-f", help="RAW, ASN or P1363"),
    allow_skipping: Optional[bool] = typer.Option(None, "--allow-skipping/--strict"),
    provider: Optional[str] = typer.Option(None, help="Provider name (default: $SIGVEC_PROVIDER or pyca)"),
    log_level: Optional[str] = typer.Option(None, help="Logging level name"),
):
    """Run signature verification vectors from one file."""
    _run_file(path, algorithm, fmt, allow_skipping, provider, log_level, signing=False)


@app.command()
def sign(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="JSON vector file"),
    algorithm: Algorithm = typer.Option(Algorithm.RSA, "--algorithm", "-a", case_sensitive=False),
    fmt: str = typer.Option("RAW", "--format", "-f"),
    allow_skipping: Optional[bool] = typer.Option(None, "--allow-skipping/--strict"),
    provider: Optional[str] = typer.Option(None),
    log_level: Optional[str] = typer.Option(None),
):
    """Run deterministic signature generation vectors from one file."""
    _run_file(path, algorithm, fmt, allow_skipping, provider, log_level, signing=True)


@app.command()
def run(
    suites: Optional[List[str]] = typer.Argument(None, metavar="SUITE...", help="Suite names (default: all)"),
    vector_dir: Optional[Path] = typer.Option(None, "--vector-dir", help="Directory with vector files"),
    jobs: int = typer.Option(1, "--jobs", "-j", min=1),
    junit: Optional[Path] = typer.Option(None, "--junit", help="Write JUnit XML here"),
    json_out: Optional[Path] = typer.Option(None, "--json", help="Write a JSON summary here"),
    allow_skipping: Optional[bool] = typer.Option(
        None, "--allow-skipping/--strict", help="Override the per-suite skip policy"
    ),
    provider: Optional[str] = typer.Option(None),
    log_level: Optional[str] = typer.Option(None),
):
    """Run catalogued suites from the vector directory."""
    settings, prov = _setup(log_level, provider)
    try:
        chosen = select(suites)
    except KeyError as exc:
        typer.echo(f"error: {exc.args[0]}", err=True)
        raise typer.Exit(code=2)
    directory = vector_dir or settings.vector_dir
    if allow_skipping is None:
        allow_skipping = settings.allow_skipping
    try:
        verdicts = run_suites(chosen, directory, prov, jobs=jobs, allow_skipping=allow_skipping)
    except SigvecError as exc:
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(code=2)
    for v in verdicts:
        _echo_verdict(v)
    summary = summary_dict(verdicts)
    typer.echo(
        f"\n[RESULT] {summary['documents'] - summary['failed']}/{summary['documents']} documents passed; "
        f"{summary['missing']} missing."
    )
    if junit:
        write_junit(verdicts, junit)
        typer.echo(f"Wrote JUnit: {junit}")
    if json_out:
        write_json(verdicts, json_out)
        typer.echo(f"Wrote JSON: {json_out}")
    if summary["missing"] == summary["documents"]:
        typer.echo(f"error: no vector files found in {directory}", err=True)
        raise typer.Exit(code=1)
    raise typer.Exit(code=1 if summary["failed"] else 0)


def app_main():
    app()


if __name__ == "__main__":
    app_main()
