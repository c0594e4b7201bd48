"""hashwalk CLI application with Typer."""

import logging
from pathlib import Path
from typing import Annotated

import typer

from hashwalk import __version__
from hashwalk.app.fingerprint_service import PipelineStage
from hashwalk.bootstrap import bootstrap_application
from hashwalk.config import LOG_LEVELS, get_settings, set_settings
from hashwalk.errors import ConsistencyError, HashwalkError
from hashwalk.utils.cli_output import json_response
from hashwalk.utils.hashing import compute_hex_digest, validate_algorithm
from hashwalk.utils.paths import SYMLINK_POLICIES

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="hashwalk",
    help="Fingerprint every file under a directory, sequentially and in parallel",
    add_completion=True,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        typer.echo(f"hashwalk version {__version__}")
        raise typer.Exit()


def _configure_logging(level: str) -> None:
    logging.basicConfig(format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logging.getLogger().setLevel(getattr(logging, level))


def _apply_overrides(**overrides: object) -> None:
    """Merge non-empty CLI flags into the global settings."""
    settings = get_settings()
    updates = {key: value for key, value in overrides.items() if value is not None}
    if not updates:
        return
    try:
        merged = settings.model_validate({**settings.model_dump(), **updates})
    except ValueError as exc:
        typer.secho(f"Error: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=2) from exc
    set_settings(merged)


def _fail(exc: Exception) -> typer.Exit:
    typer.secho(f"Error: {exc}", fg=typer.colors.RED, err=True)
    return typer.Exit(code=1)


def _echo_stages(stages: list[PipelineStage]) -> None:
    for stage in stages:
        color = typer.colors.GREEN if stage.status == "completed" else typer.colors.YELLOW
        if stage.status == "failed":
            color = typer.colors.RED
        typer.secho(f"[{stage.status}] {stage.name}: {stage.detail or ''}", fg=color)


def _validate_symlinks(value: str | None) -> str | None:
    if value is not None and value not in SYMLINK_POLICIES:
        raise typer.BadParameter(f"must be one of {', '.join(SYMLINK_POLICIES)}")
    return value


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option("--version", "-v", callback=version_callback, is_eager=True),
    ] = None,
    log_level: Annotated[
        str | None,
        typer.Option("--log-level", help=f"Logging level ({', '.join(LOG_LEVELS)})"),
    ] = None,
) -> None:
    """hashwalk - parallel content fingerprinting for directory trees."""
    _apply_overrides(log_level=log_level)
    _configure_logging(get_settings().log_level)


@app.command("run")
def run(
    root: Annotated[
        Path | None,
        typer.Option("--root", "-r", help="Directory to fingerprint (default: $GOPATH)"),
    ] = None,
    output_dir: Annotated[
        Path | None,
        typer.Option("--output-dir", "-o", help="Directory receiving both artifacts"),
    ] = None,
    workers: Annotated[
        int | None,
        typer.Option("--workers", "-w", min=1, help="Parallel hashing workers"),
    ] = None,
    chunk_size: Annotated[
        int | None,
        typer.Option("--chunk-size", min=1, help="Bytes read per chunk"),
    ] = None,
    symlinks: Annotated[
        str | None,
        typer.Option("--symlinks", callback=_validate_symlinks, help="skip, follow or error"),
    ] = None,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Emit a JSON summary"),
    ] = False,
) -> None:
    """Fingerprint a tree with both strategies and verify they agree."""
    _apply_overrides(
        root=root,
        output_dir=output_dir,
        workers=workers,
        chunk_size=chunk_size,
        symlinks=symlinks,
    )
    container = bootstrap_application()
    settings = container.settings
    target = settings.get_root()

    if not json_output:
        typer.secho(f"Fingerprinting files in {target}...", fg=typer.colors.BLUE)

    stages: list[PipelineStage] = []
    try:
        result = container.fingerprint_service.run(
            target,
            single_artifact=settings.get_single_artifact_path(),
            parallel_artifact=settings.get_parallel_artifact_path(),
            stages=stages,
        )
    except ConsistencyError as exc:
        if json_output:
            typer.echo(
                json_response(
                    "run_summary",
                    1,
                    root=str(target),
                    consistent=False,
                    diff=exc.diff.to_dict(),
                )
            )
        else:
            _echo_stages(stages)
        raise _fail(exc) from exc
    except HashwalkError as exc:
        logger.error("Run over %s failed: %s", target, exc)
        if not json_output:
            _echo_stages(stages)
        raise _fail(exc) from exc

    if json_output:
        typer.echo(
            json_response(
                "run_summary",
                1,
                root=str(result.root),
                consistent=result.consistent,
                workers=settings.get_workers(),
                artifacts={item.strategy: str(item.artifact_path) for item in result.results},
                file_count=result.results[0].file_count,
                stages=[
                    {
                        "name": stage.name,
                        "status": stage.status,
                        "duration_seconds": stage.duration_seconds,
                        "metrics": stage.metrics,
                    }
                    for stage in result.stages
                ],
            )
        )
        return

    _echo_stages(result.stages)
    typer.secho(
        f"✅ {result.results[0].file_count} files fingerprinted; both strategies agree",
        fg=typer.colors.GREEN,
    )


@app.command("scan")
def scan(
    root: Annotated[Path, typer.Argument(help="Directory to fingerprint")],
    output: Annotated[
        Path,
        typer.Option("--output", "-o", help="Artifact destination"),
    ],
    strategy: Annotated[
        str,
        typer.Option("--strategy", "-s", help="sequential or parallel"),
    ] = "parallel",
    workers: Annotated[
        int | None,
        typer.Option("--workers", "-w", min=1, help="Parallel hashing workers"),
    ] = None,
    symlinks: Annotated[
        str | None,
        typer.Option("--symlinks", callback=_validate_symlinks, help="skip, follow or error"),
    ] = None,
) -> None:
    """Fingerprint a tree with a single strategy."""
    _apply_overrides(workers=workers, symlinks=symlinks)
    container = bootstrap_application()
    service = container.fingerprint_service

    if strategy not in service.strategies:
        typer.secho(
            f"Error: --strategy must be one of {', '.join(service.strategies)}",
            fg=typer.colors.RED,
            err=True,
        )
        raise typer.Exit(code=2)

    try:
        result = service.scan(strategy, root, artifact=output)
    except HashwalkError as exc:
        raise _fail(exc) from exc

    typer.secho(
        f"{result.file_count} files fingerprinted ({strategy}); artifact written to "
        f"{result.artifact_path}",
        fg=typer.colors.GREEN,
    )


@app.command("compare")
def compare(
    left: Annotated[Path, typer.Argument(help="Baseline artifact", exists=True, dir_okay=False)],
    right: Annotated[Path, typer.Argument(help="Candidate artifact", exists=True, dir_okay=False)],
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Emit the diff as JSON"),
    ] = False,
) -> None:
    """Compare two artifacts as mappings; exit 1 when they differ."""
    container = bootstrap_application()
    try:
        diff = container.fingerprint_service.compare(left, right)
    except (ValueError, HashwalkError) as exc:
        raise _fail(exc) from exc

    if json_output:
        typer.echo(json_response("compare_result", 1, identical=diff.identical, **diff.to_dict()))
    else:
        for key in diff.missing:
            typer.secho(f"- {key}", fg=typer.colors.RED)
        for key in diff.extra:
            typer.secho(f"+ {key}", fg=typer.colors.GREEN)
        for key in diff.changed:
            typer.secho(f"~ {key}", fg=typer.colors.YELLOW)
        color = typer.colors.GREEN if diff.identical else typer.colors.RED
        typer.secho(diff.summary(), fg=color)

    if not diff.identical:
        raise typer.Exit(code=1)


@app.command("hash")
def hash_command(
    path: Annotated[Path, typer.Argument(help="File to fingerprint")],
    algorithm: Annotated[
        str | None,
        typer.Option("--algorithm", "-a", help="hashlib algorithm name"),
    ] = None,
    chunk_size: Annotated[
        int | None,
        typer.Option("--chunk-size", min=1, help="Bytes read per chunk"),
    ] = None,
) -> None:
    """Print the fingerprint of a single file."""
    settings = get_settings()
    try:
        selected = validate_algorithm(algorithm) if algorithm else settings.algorithm
    except ValueError as exc:
        typer.secho(f"Error: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=2) from exc

    try:
        fingerprint = compute_hex_digest(
            path,
            algorithm=selected,
            chunk_size=chunk_size or settings.chunk_size,
        )
    except HashwalkError as exc:
        raise _fail(exc) from exc

    typer.echo(f"{fingerprint}  {path.as_posix()}")


if __name__ == "__main__":
    app()
