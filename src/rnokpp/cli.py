from __future__ import annotations

import json
import logging
import pathlib
import sys
from datetime import datetime
from typing import Optional

import structlog
import typer
import yaml
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from .codec import checksum_ok, date_to_days, decode_dob, decode_sex, digits_only
from .config import ValidatorConfig, load_config
from .engine.validator import ValidationResult, Validator
from .errors import TinValidationError

console = Console()
log = structlog.get_logger()
app = typer.Typer(add_completion=False, no_args_is_help=True, help="rnokpp — Ukrainian TIN validator")

EXIT_INVALID = 1
EXIT_ERROR = 2

_DATE_FORMATS = ["%Y-%m-%d", "%Y-%m-%dT%H:%M:%S", "%Y-%m-%dT%H:%M:%S%z"]


def version_callback(value: bool):
    if value:
        from . import __version__
        console.print(f"rnokpp {__version__}")
        raise typer.Exit()


@app.callback()
def common(
    ctx: typer.Context,
    config: Optional[pathlib.Path] = typer.Option(None, "--config", help="Path to a YAML validator config"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logs"),
    version: Optional[bool] = typer.Option(None, "--version", callback=version_callback, is_eager=True),
):
    """Global options (config, verbosity)."""
    structlog.configure(
        processors=[structlog.processors.add_log_level, structlog.processors.JSONRenderer()],
        wrapper_class=structlog.make_filtering_bound_logger(logging.INFO if verbose else logging.WARNING),
        logger_factory=structlog.PrintLoggerFactory(sys.stderr),
    )
    try:
        ctx.obj = {"config": load_config(config) if config else ValidatorConfig()}
    except (ValidationError, OSError, yaml.YAMLError, TypeError) as e:
        raise typer.BadParameter(str(e), param_hint="--config")
    if verbose:
        log.info("verbose_enabled")


def _result_table(res: ValidationResult) -> Table:
    table = Table(show_header=False)
    table.add_column("field", style="bold")
    table.add_column("value")
    for key, value in res.to_dict().items():
        table.add_row(key, "-" if value is None else str(value))
    return table


@app.command()
def check(
    ctx: typer.Context,
    tin: str = typer.Argument(..., help="TIN to validate; spaces and dashes are ignored"),
    dob: Optional[datetime] = typer.Option(None, "--dob", formats=_DATE_FORMATS, help="Known birth date"),
    strict: Optional[bool] = typer.Option(None, "--strict/--no-strict", help="Fail on a DOB mismatch"),
    max_age: Optional[int] = typer.Option(None, "--max-age", help="Age cap in years; 0 disables it"),
    tz: Optional[str] = typer.Option(None, "--tz", help="Zone for the reported birth date, e.g. Europe/Kyiv"),
    now: Optional[datetime] = typer.Option(None, "--now", formats=_DATE_FORMATS, help="Reference time"),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON"),
):
    """Validate a TIN. Exit code: 0 valid, 1 invalid, 2 rejected by a check."""
    cfg: ValidatorConfig = ctx.obj["config"]
    try:
        validator = Validator(cfg, max_age=max_age, strict=strict, tz=tz, now=now)
    except ValidationError as e:
        raise typer.BadParameter(str(e))

    res, err = validator.check(tin, dob)

    if err is not None:
        kind = getattr(err.kind, "value", err.kind)
        log.info("tin_rejected", kind=kind, tin=err.tin)
        if as_json:
            typer.echo(json.dumps({"error": {"kind": kind, "message": str(err)}, "result": res.to_dict()}))
        else:
            console.print(f"[red]{kind}[/red]: {err}")
        raise typer.Exit(code=EXIT_ERROR)

    log.info("tin_checked", tin=res.tin, valid=res.valid, checksum_ok=res.checksum_ok)
    if as_json:
        typer.echo(json.dumps({"error": None, "result": res.to_dict()}))
    else:
        console.print(_result_table(res))
        console.print("[green]valid[/green]" if res.valid else "[red]invalid[/red]")
    if not res.valid:
        raise typer.Exit(code=EXIT_INVALID)


@app.command()
def decode(tin: str = typer.Argument(..., help="TIN (or at least its first five digits)")):
    """Show the birth date and sex encoded in a TIN without validating it."""
    digits = digits_only(tin)
    try:
        born = decode_dob(digits)
    except TinValidationError as err:
        console.print(f"[red]{getattr(err.kind, 'value', err.kind)}[/red]: {err}")
        raise typer.Exit(code=EXIT_ERROR)

    console.print(f"days since 1899-12-31: {date_to_days(born)}")
    console.print(f"birth date: {born.date().isoformat()}")
    if len(digits) >= 9:
        console.print(f"sex: {decode_sex(digits).value}")
    if len(digits) == 10:
        console.print(f"checksum ok: {checksum_ok(digits)}")
