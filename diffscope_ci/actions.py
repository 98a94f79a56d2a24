from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import Iterator
import os
import uuid

import typer


def escape_data(value: str) -> str:
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def info(message: str) -> None:
    typer.echo(message)


def warning(message: str) -> None:
    typer.echo(f"::warning::{escape_data(message)}")


def error(message: str) -> None:
    typer.secho(f"::error::{escape_data(message)}", fg=typer.colors.RED)


@contextmanager
def group(title: str) -> Iterator[None]:
    """Fold everything logged inside the block under ``title`` in the run log."""
    typer.echo(f"::group::{escape_data(title)}")
    try:
        yield
    finally:
        typer.echo("::endgroup::")


def set_output(name: str, value: str) -> None:
    output_file = (os.getenv("GITHUB_OUTPUT") or "").strip()
    if not output_file:
        typer.echo(f"{name}={value}")
        return

    delimiter = f"ghadelimiter_{uuid.uuid4()}"
    with Path(output_file).open("a", encoding="utf-8") as handle:
        handle.write(f"{name}<<{delimiter}\n{value}\n{delimiter}\n")


def set_failed(message: str) -> None:
    error(message)
