"""Typer application and CLI entry point for toolspec.

The CLI is a thin shell around the parser: every command loads a document
with :func:`~toolspec.parser.loader.load_spec`, parses it through the
:class:`~toolspec.parser.registry.ParserRegistry`, and prints the result
with :mod:`toolspec.output`.

:func:`main` is the console-script entry point declared in
``pyproject.toml``.

See Also:
    :mod:`toolspec.config`: Parse option resolution.
    :mod:`toolspec.commands.inspect`: The command implementations.
"""

from __future__ import annotations

import logging
import signal
import sys
from typing import Any

import typer

from toolspec import __version__
from toolspec.exit_codes import EXIT_GENERIC_FAILURE


app = typer.Typer(
    name="toolspec",
    help="Compile OpenAPI 2.0/3.x specs into callable tool definitions.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

_LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"toolspec {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    json_output: bool = typer.Option(False, "--json", help="JSON output format."),
    plain_output: bool = typer.Option(False, "--plain", help="Plain text output."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug output."),
) -> None:
    """Root callback executed before every sub-command.

    Installs the global :class:`~toolspec.output.OutputManager` from the
    output flags and configures :mod:`logging` on stderr (DEBUG with
    ``--verbose``, WARNING otherwise, so skipped operations and name
    collisions are always visible).
    """
    from toolspec.output import OutputFormat, OutputManager, set_output

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose))

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=_LOG_FORMAT,
        stream=sys.stderr,
    )


from toolspec.commands.inspect import (  # noqa: E402
    formats_command,
    info_command,
    show_command,
    tools_command,
)

app.command("tools")(tools_command)
app.command("show")(show_command)
app.command("info")(info_command)
app.command("formats")(formats_command)


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def main() -> None:
    """CLI entry point invoked by the ``toolspec`` console script.

    Unhandled :class:`~toolspec.exceptions.ToolspecError` instances cause a
    clean exit with the error's ``exit_code``; anything else is reported
    and exits with :data:`~toolspec.exit_codes.EXIT_GENERIC_FAILURE`.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from toolspec.exceptions import ToolspecError
        from toolspec.output import error

        if isinstance(exc, ToolspecError):
            error(str(exc))
            sys.exit(exc.exit_code)
        logging.getLogger(__name__).debug("Unhandled exception", exc_info=True)
        error(f"Unexpected error: {exc}")
        sys.exit(EXIT_GENERIC_FAILURE)
