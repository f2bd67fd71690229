"""aldanote CLI entry point."""

import logging
import sys
from typing import NoReturn

import click

from aldanote import __version__
from aldanote.errors import AldaNoteError
from aldanote.player import EXECUTABLE_ENV_VAR, AldaClient, ReplSession, stream_command
from aldanote.stringify import render


def _build_client(alda: str, host: str, port: int | None, repl: bool, stream: bool = False) -> AldaClient:
    """
    Return a client, attached to a REPL session when --repl or --port is given.

    With ``stream`` and no session, alda's own output is echoed as it runs.
    REPL replies are JSON for the client to read, so they are never echoed.
    """
    session = None
    if port is not None:
        session = ReplSession(port=port, host=host)
    elif repl:
        session = ReplSession.from_port_file(host=host)
    runner = stream_command if stream and session is None else None
    return AldaClient(executable=alda, session=session, runner=runner)


def _fail(exc: Exception) -> NoReturn:
    click.echo(f"  ERROR: {exc}", err=True)
    sys.exit(1)


# ── CLI group ──────────────────────────────────────────────────────────────────

@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__, prog_name="aldanote")
@click.option(
    "--alda",
    envvar=EXECUTABLE_ENV_VAR,
    default="alda",
    show_default=True,
    metavar="PATH",
    help="Path to the alda executable.",
)
@click.option("--host", default="localhost", show_default=True, help="alda REPL server host.")
@click.option("--port", type=int, default=None, help="alda REPL server port.")
@click.option(
    "--repl",
    is_flag=True,
    help="Use the REPL server whose port is in ./.alda-nrepl-port.",
)
@click.option("--verbose", "-v", is_flag=True, help="Log every alda command that is run.")
@click.pass_context
def main(ctx: click.Context, alda: str, host: str, port: int | None, repl: bool, verbose: bool) -> None:
    """aldanote: build alda scores from Python and send them to alda."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = {"alda": alda, "host": host, "port": port, "repl": repl}


def _client(ctx: click.Context, stream: bool = False) -> AldaClient:
    try:
        return _build_client(**ctx.obj, stream=stream)
    except (AldaNoteError, ValueError) as exc:
        _fail(exc)


# ── subcommands ────────────────────────────────────────────────────────────────

@main.command()
@click.argument("code", nargs=-1, required=True)
@click.pass_context
def play(ctx: click.Context, code: tuple[str, ...]) -> None:
    """
    Play alda CODE. Several arguments are joined with spaces.

    \b
    Examples:
      aldanote play "piano: o4 c8 d e f g2"
      aldanote --repl play "piano: c d e"
    """
    client = _client(ctx, stream=True)
    try:
        sent = client.play(*code)
    except AldaNoteError as exc:
        _fail(exc)
    click.echo(sent)


@main.command()
@click.pass_context
def stop(ctx: click.Context) -> None:
    """Stop playback."""
    client = _client(ctx, stream=True)
    try:
        client.stop()
    except AldaNoteError as exc:
        _fail(exc)


@main.command()
@click.argument("code", nargs=-1, required=True)
@click.pass_context
def parse(ctx: click.Context, code: tuple[str, ...]) -> None:
    """
    Parse alda CODE and print each event it contains, re-rendered.

    \b
    Examples:
      aldanote parse "piano: (tempo 90) c8 d e"
    """
    client = _client(ctx)
    try:
        events = client.parse_events(*code)
        lines = [render(event) for event in events]
    except AldaNoteError as exc:
        _fail(exc)
    for line in lines:
        click.echo(line)


@main.command(name="score-text")
@click.pass_context
def score_text(ctx: click.Context) -> None:
    """Print the score loaded into the REPL server."""
    client = _client(ctx)
    try:
        text = client.score_text()
    except AldaNoteError as exc:
        _fail(exc)
    click.echo(text)


@main.command(name="new-score")
@click.pass_context
def new_score(ctx: click.Context) -> None:
    """Reset the REPL server and start a new score."""
    client = _client(ctx)
    try:
        client.new_score()
    except AldaNoteError as exc:
        _fail(exc)
    click.echo("New score started.")
