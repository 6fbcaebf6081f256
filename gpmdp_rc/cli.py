"""gpmdp-rc CLI - remote control for Google Play Music Desktop Player."""

import logging
import sys
from typing import Optional

import click

from . import __version__
from .client import run_command
from .commands import parse_command
from .config import Config
from .errors import RemoteControlError
from .logging_setup import setup_logging

logger = logging.getLogger(__name__)

# Let "seek -30" and "volume -5" through as arguments
NUMERIC_ARGS = {"ignore_unknown_options": True}


def prompt_code() -> str:
    """Ask for the pairing code shown by the player."""
    return click.prompt("Enter the 4-digit code from GPMDP", prompt_suffix=": ")


def _run(ctx: click.Context, verb: str, *args: Optional[str]) -> None:
    """Parse, connect, run one command and exit 1 on any failure."""
    try:
        config = Config.load(ctx.obj.get("config_file"))
        level = "DEBUG" if ctx.obj.get("verbose") else config.log_level
        setup_logging(level, config.get_log_dir())

        command = parse_command(verb, [a for a in args if a is not None])
        config.require(pairing=command.is_pairing)

        run_command(
            config.url,
            command,
            config.token,
            prompt_code,
            echo=click.echo,
            timeout_ms=config.timeout_ms,
        )
    except RemoteControlError as e:
        logger.error("%s failed: %s", verb, e)
        click.echo(f"ERROR: {e}", err=True)
        sys.exit(1)


@click.group()
@click.version_option(version=__version__, prog_name="gpmdp-rc")
@click.option("--config", "-c", "config_file", envvar="GPMDP_RC_CONFIG",
              help="Path to config file (default: ~/gpmdp_rc.yaml)")
@click.option("--verbose", "-v", is_flag=True, help="Debug logging on stderr")
@click.pass_context
def cli(ctx: click.Context, config_file: Optional[str], verbose: bool) -> None:
    """gpmdp-rc - control a running GPMDP from the shell.

    First-time setup: put the player's websocket url in ~/gpmdp_rc.yaml,
    run 'gpmdp-rc auth' and add the printed token to the same file.
    """
    ctx.ensure_object(dict)
    ctx.obj["config_file"] = config_file
    ctx.obj["verbose"] = verbose


# ============================================================================
# Pairing and status
# ============================================================================

@cli.command()
@click.pass_context
def auth(ctx: click.Context) -> None:
    """Pair with the player and print a new token."""
    _run(ctx, "auth")


@cli.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Show playback state, current track, time, rating and modes."""
    _run(ctx, "status")


@cli.command()
@click.pass_context
def lyrics(ctx: click.Context) -> None:
    """Show lyrics for the current track."""
    _run(ctx, "lyrics")


# ============================================================================
# Playback
# ============================================================================

@cli.command()
@click.argument("track", required=False)
@click.pass_context
def play(ctx: click.Context, track: Optional[str]) -> None:
    """Toggle play/pause, or play queue entry TRACK."""
    _run(ctx, "play", track)


@cli.command()
@click.pass_context
def pause(ctx: click.Context) -> None:
    """Toggle play/pause."""
    _run(ctx, "pause")


@cli.command(name="next")
@click.pass_context
def next_track(ctx: click.Context) -> None:
    """Skip to the next track."""
    _run(ctx, "next")


@cli.command(name="prev")
@click.pass_context
def prev_track(ctx: click.Context) -> None:
    """Go back to the previous track."""
    _run(ctx, "prev")


@cli.command()
@click.pass_context
def replay(ctx: click.Context) -> None:
    """Restart the current track."""
    _run(ctx, "replay")


@cli.command(context_settings=NUMERIC_ARGS)
@click.argument("value", required=False)
@click.pass_context
def seek(ctx: click.Context, value: Optional[str]) -> None:
    """Seek by +SECS / -SECS, or 10s with forward / backward."""
    _run(ctx, "seek", value)


# ============================================================================
# Rating and modes
# ============================================================================

@cli.command()
@click.argument("rating", required=False)
@click.pass_context
def thumbs(ctx: click.Context, rating: Optional[str]) -> None:
    """Toggle thumbs up or down for the current track."""
    _run(ctx, "thumbs", rating)


@cli.command()
@click.argument("mode", required=False)
@click.pass_context
def shuffle(ctx: click.Context, mode: Optional[str]) -> None:
    """Set shuffle on or off."""
    _run(ctx, "shuffle", mode)


@cli.command()
@click.argument("mode", required=False)
@click.pass_context
def repeat(ctx: click.Context, mode: Optional[str]) -> None:
    """Set repeat to all, single or off."""
    _run(ctx, "repeat", mode)


# ============================================================================
# Queue and playlists
# ============================================================================

@cli.command()
@click.pass_context
def queue(ctx: click.Context) -> None:
    """List the tracks in the queue."""
    _run(ctx, "queue")


@cli.command()
@click.pass_context
def clear(ctx: click.Context) -> None:
    """Clear the queue."""
    _run(ctx, "clear")


@cli.command()
@click.pass_context
def playlists(ctx: click.Context) -> None:
    """List playlists."""
    _run(ctx, "playlists")


@cli.command()
@click.argument("number", required=False)
@click.pass_context
def playlist(ctx: click.Context, number: Optional[str]) -> None:
    """Play playlist NUMBER from the playlists listing."""
    _run(ctx, "playlist", number)


# ============================================================================
# Search and volume
# ============================================================================

@cli.command()
@click.argument("text", required=False)
@click.pass_context
def search(ctx: click.Context, text: Optional[str]) -> None:
    """Search the library and list the results."""
    _run(ctx, "search", text)


@cli.command()
@click.argument("number", required=False)
@click.pass_context
def results(ctx: click.Context, number: Optional[str]) -> None:
    """List the last search results, or play result NUMBER."""
    _run(ctx, "results", number)


@cli.command(context_settings=NUMERIC_ARGS)
@click.argument("level", required=False)
@click.pass_context
def volume(ctx: click.Context, level: Optional[str]) -> None:
    """Show volume, set it to 0-100, or nudge it up / down."""
    _run(ctx, "volume", level)


def main():
    """Entry point for gpmdp-rc."""
    cli()


if __name__ == "__main__":
    main()
