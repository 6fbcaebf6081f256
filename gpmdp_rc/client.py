"""Websocket runner: binds a Session to a live connection."""

import asyncio
import logging
from typing import Any, Callable, List, Optional

import click
import websockets
from websockets.exceptions import ConnectionClosed, WebSocketException

from .commands import Command
from .errors import TransportError
from .session import Session

logger = logging.getLogger(__name__)


class QueuedTransport:
    """Collects frames the session wants sent until the runner flushes them."""

    def __init__(self):
        self.outbox: List[str] = []
        self.closed = False

    def send(self, text: str) -> None:
        self.outbox.append(text)

    def close(self) -> None:
        self.closed = True


async def _flush(ws, transport: QueuedTransport) -> None:
    while transport.outbox:
        await ws.send(transport.outbox.pop(0))


async def run_session(
    url: str,
    command: Command,
    token: str,
    prompt_code: Callable[[], str],
    echo: Callable[[str], Any] = click.echo,
    timeout_ms: Optional[int] = None,
    connect: Callable = websockets.connect,
) -> Session:
    """
    Connect, run one command to completion and close.

    Args:
        url: Websocket URL of the player
        command: Parsed command to run
        token: Stored auth token
        prompt_code: Blocking callable returning the pairing code
        echo: Output sink for rendered lines
        timeout_ms: Watchdog override; the session default when None
        connect: Websocket connect factory

    Returns:
        The finished session

    Raises:
        RemoteControlError: Any failure, including TransportError for
            network problems and WatchdogTimeout for a silent server.
    """
    transport = QueuedTransport()
    session = Session(command, token, transport, echo=echo)
    loop = asyncio.get_running_loop()

    try:
        async with connect(url) as ws:
            logger.debug("Connected to %s", url)
            session.on_open()

            watchdog_ms = timeout_ms if timeout_ms is not None else session.watchdog_ms
            deadline = loop.time() + watchdog_ms / 1000.0

            await _flush(ws, transport)

            while not transport.closed:
                if session.needs_code:
                    code = await loop.run_in_executor(None, prompt_code)
                    session.submit_code(code)
                    await _flush(ws, transport)
                    continue

                remaining = max(deadline - loop.time(), 0) if session.watchdog_armed else None
                try:
                    text = await asyncio.wait_for(ws.recv(), remaining)
                except asyncio.TimeoutError:
                    # Fatal; the watchdog is never re-armed
                    session.on_timeout()
                    break

                session.on_message(text)
                await _flush(ws, transport)
    except ConnectionClosed as e:
        raise TransportError(f"connection closed before the command finished: {e}") from e
    except WebSocketException as e:
        raise TransportError(f"websocket error: {e}") from e
    except asyncio.TimeoutError as e:
        raise TransportError(f"timed out connecting to {url}") from e
    except OSError as e:
        raise TransportError(f"cannot connect to {url}: {e}") from e

    logger.debug("Session finished in state %s", session.state.value)
    return session


def run_command(
    url: str,
    command: Command,
    token: str,
    prompt_code: Callable[[], str],
    echo: Callable[[str], Any] = click.echo,
    timeout_ms: Optional[int] = None,
) -> Session:
    """Blocking wrapper around run_session."""
    return asyncio.run(
        run_session(url, command, token, prompt_code, echo=echo, timeout_ms=timeout_ms)
    )
