"""Loads sops-encrypted configuration and shows it with secrets masked."""

import subprocess
from pathlib import Path
from typing import Annotated, NoReturn

import typer
from loguru import logger
from rich.console import Console

from sopsenv import customlogging, presenter
from sopsenv.config import loader
from sopsenv.config.documents import DocumentFormat
from sopsenv.config.environment import OsEnvironment
from sopsenv.decryption import service
from sopsenv.exceptions import SecretConfigError

err_console = Console(stderr=True)
console = Console(stderr=False)
app = typer.Typer(help=__doc__, no_args_is_help=True)

RULE = "=" * 60

PathArg = Annotated[
    Path,
    typer.Argument(help="The encrypted document, e.g. config.sops.env or config.sops.yaml.", dir_okay=False),
]
FormatOpt = Annotated[
    DocumentFormat | None,
    typer.Option("--format", "-f", help="Document syntax. Inferred from the file name when omitted."),
]
RevealOpt = Annotated[
    bool,
    typer.Option("--reveal", help="Print sensitive values unmasked. Never use this where output is captured."),
]


@app.callback()
def main():
    customlogging.setup()


def _fail(err: SecretConfigError) -> NoReturn:
    logger.debug("Aborting after {operation} error", operation=err.operation)
    err_console.print(f"Error: {err}", markup=False, highlight=False, soft_wrap=True)
    raise typer.Exit(1) from err


@app.command()
def show(path: PathArg, fmt: FormatOpt = None, reveal: RevealOpt = False):
    """Load the document into a typed configuration and print it by group."""
    try:
        service.setup()
        record = loader.load_config(path, fmt=fmt)
    except SecretConfigError as err:
        _fail(err)

    console.print("Successfully loaded and decrypted configuration:", highlight=False)
    console.print(RULE)
    presenter.render_record(record, console, reveal=reveal)
    console.print()
    console.print("Example usage:")
    presenter.render_connection_strings(presenter.record_values(record), console, reveal=reveal)


@app.command()
def env(path: PathArg, fmt: FormatOpt = None, reveal: RevealOpt = False):
    """Load the document into this process's environment and print the known variables."""
    environment = OsEnvironment()
    try:
        service.setup()
        loader.load_into_environment(path, environment=environment, fmt=fmt)
    except SecretConfigError as err:
        _fail(err)

    console.print("Environment variables (loaded into the process):", highlight=False)
    console.print(RULE)
    presenter.render_environment(environment, console, reveal=reveal)
    console.print()
    console.print("Example usage:")
    presenter.render_connection_strings(presenter.environment_values(environment), console, reveal=reveal)


@app.command(name="exec", context_settings={"ignore_unknown_options": True})
def exec_(
    path: PathArg,
    command: Annotated[list[str], typer.Argument(help="Command to run with the loaded environment.")],
    fmt: FormatOpt = None,
):
    """Load the document into the environment, then run COMMAND as a child process that inherits it.

    Use "--" to separate the command from sopsenv's own options: sopsenv exec config.sops.env -- ./server --port 80
    """
    try:
        service.setup()
        loader.load_into_environment(path, fmt=fmt)
    except SecretConfigError as err:
        _fail(err)

    logger.info("Running {cmd}", cmd=command[0])
    try:
        completed = subprocess.run(command, check=False)
    except OSError as err:
        err_console.print(
            f"Error: could not run {command[0]}: {err.strerror}", markup=False, highlight=False, soft_wrap=True
        )
        raise typer.Exit(127) from err
    raise typer.Exit(completed.returncode)


if __name__ == "__main__":
    app()
