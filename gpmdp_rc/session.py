"""Session state machine for one remote-control invocation.

The session never touches the network itself. It is driven by the runner
in client.py: on_open() once the websocket is up, on_message() for every
inbound frame, submit_code() after prompting for a pairing code and
on_timeout() when the watchdog fires. Outbound frames and the final close
go through the transport object it was created with.
"""

import json
import logging
from enum import Enum
from typing import Any, Callable, List, Optional

from .channels import CONNECT_CHANNEL, Channel, ChannelStore
from .commands import REQUEST_ID, Command, Resolution, connect_request, encode_request
from .errors import (
    AuthError,
    ProtocolError,
    RemoteControlError,
    WatchdogTimeout,
)
from .render import ResponseKind, render
from .resolver import (
    resolve_playlist_entry,
    resolve_queue_entry,
    resolve_search_entry,
    seek_position,
)

logger = logging.getLogger(__name__)

CODE_REQUIRED = "CODE_REQUIRED"
WATCHDOG_MS = 4000


class State(Enum):
    CONNECTING = "connecting"
    AUTHENTICATING = "authenticating"
    AWAITING_CODE = "awaiting_code"
    AWAITING_CHANNELS = "awaiting_channels"
    DISPATCHING = "dispatching"
    AWAITING_RESPONSE = "awaiting_response"
    DONE = "done"
    ERROR = "error"


class Session:
    """Authenticate, wait for the command's channels, send it, print the answer.

    Args:
        command: Parsed user command
        token: Stored auth token (ignored when pairing)
        transport: Object with send(text) and close()
        echo: Called with each output line
    """

    def __init__(
        self,
        command: Command,
        token: str,
        transport: Any,
        echo: Callable[[str], Any],
    ):
        self.command = command
        self.token = token
        self.transport = transport
        self.echo = echo
        self.store = ChannelStore()
        self.state = State.CONNECTING
        self.required: Channel = command.channels
        self.channels_ready = False
        self.request_sent = False
        self.pairing_phase = 0

    @property
    def done(self) -> bool:
        return self.state in (State.DONE, State.ERROR)

    @property
    def needs_code(self) -> bool:
        """True while the session is suspended waiting for the pairing code."""
        return self.state is State.AWAITING_CODE

    @property
    def watchdog_ms(self) -> int:
        """Liveness timeout armed at open."""
        return WATCHDOG_MS

    @property
    def watchdog_armed(self) -> bool:
        """Whether a silent server should still trip the watchdog.

        Pairing waits on a human once the player asks for the code, so the
        watchdog only covers the first connect call there.
        """
        if self.done:
            return False
        if self.command.is_pairing:
            return self.pairing_phase == 1 and self.state is State.AUTHENTICATING
        return True

    def _transition(self, state: State) -> None:
        logger.debug("Session %s -> %s", self.state.value, state.value)
        self.state = state

    def _finish(self, lines: List[str]) -> None:
        self._transition(State.DONE)
        self.transport.close()
        for line in lines:
            self.echo(line)

    def _fail(self, exc: RemoteControlError) -> None:
        self._transition(State.ERROR)
        self.transport.close()
        raise exc

    def _send(self, frame: str) -> None:
        logger.debug("Sending %s", frame)
        self.transport.send(frame)

    # =========================================================================
    # Events
    # =========================================================================

    def on_open(self) -> None:
        """Send the connect call, then dispatch at once if nothing is required."""
        self._transition(State.AUTHENTICATING)
        if self.command.is_pairing:
            self.pairing_phase = 1
            self._send(connect_request())
            return

        self._send(connect_request(self.token))
        self._transition(State.AWAITING_CHANNELS)
        try:
            self._check_channels()
        except RemoteControlError as e:
            self._fail(e)

    def on_message(self, text: Any) -> None:
        """Handle one inbound frame.

        Channel snapshots are updated before the gating check, so the
        command goes out on the first message that completes its set.

        Raises:
            RemoteControlError: The session failed; the transport is closed.
        """
        if self.done:
            logger.debug("Ignoring message after session end")
            return

        try:
            self._handle(self._decode(text))
        except RemoteControlError as e:
            self._fail(e)

    def submit_code(self, code: str) -> None:
        """Resume pairing with the code the user read off the player."""
        if not self.needs_code:
            raise RuntimeError("No pairing code was requested")
        code = code.rstrip("\r\n")
        self.pairing_phase = 2
        self._transition(State.AUTHENTICATING)
        self._send(connect_request(code))

    def on_timeout(self) -> None:
        """Watchdog fired. Fatal unless the session already ended."""
        if self.done:
            return
        logger.debug("Watchdog fired in state %s", self.state.value)
        self._fail(WatchdogTimeout("command timeout"))

    # =========================================================================
    # Message handling
    # =========================================================================

    @staticmethod
    def _decode(text: Any) -> dict:
        try:
            message = json.loads(text)
        except (TypeError, ValueError) as e:
            raise ProtocolError(f"invalid JSON from server: {e}")
        if not isinstance(message, dict):
            raise ProtocolError("expected a JSON object from server")
        return message

    def _handle(self, message: dict) -> None:
        if "channel" in message:
            label = message["channel"]
            if not isinstance(label, str):
                raise ProtocolError("channel label is not a string")
            if "payload" not in message:
                raise ProtocolError(f"channel {label}: missing payload")
            payload = message["payload"]

            if label == CONNECT_CHANNEL:
                self._on_connect(payload)
            else:
                self.store.observe(label, payload)

            if self.state is State.AWAITING_CHANNELS:
                self._check_channels()
            return

        if "requestID" in message:
            self._on_response(message)
            return

        logger.debug("Ignoring message without channel or requestID")

    def _on_connect(self, payload: Any) -> None:
        if not self.command.is_pairing:
            if payload == CODE_REQUIRED:
                raise AuthError(
                    "token rejected by the player, run 'gpmdp-rc auth' to pair again"
                )
            return

        if self.pairing_phase == 1:
            if payload == CODE_REQUIRED:
                self._transition(State.AWAITING_CODE)
            return

        if self.pairing_phase == 2:
            if payload == CODE_REQUIRED:
                raise AuthError("pairing code was not accepted")
            if not isinstance(payload, str):
                raise ProtocolError("connect: expected a token string")
            self.token = payload
            self._finish([f"Token: {self.token}"])

    def _on_response(self, message: dict) -> None:
        if self.state is not State.AWAITING_RESPONSE or message["requestID"] != REQUEST_ID:
            logger.debug("Ignoring response with requestID %r", message["requestID"])
            return
        lines = render(self.command.response, self.store, message.get("value"))
        self._finish(lines)

    # =========================================================================
    # Dispatch
    # =========================================================================

    def _check_channels(self) -> None:
        if self.channels_ready or not self.store.has_all(self.required):
            return
        self.channels_ready = True
        self._dispatch()

    def _dispatch(self) -> None:
        self._transition(State.DISPATCHING)
        command = self.command

        if command.channel_only:
            value = None
            if command.response is ResponseKind.SEARCH_RESULTS:
                value = self.store.snapshot(Channel.SEARCH_RESULTS)
            self._finish(render(command.response, self.store, value))
            return

        arguments = self._build_arguments()
        self._send(encode_request(command.namespace, command.method, arguments))
        self.request_sent = True
        self._transition(State.AWAITING_RESPONSE)

    def _build_arguments(self) -> Optional[list]:
        command = self.command
        resolution = command.resolution

        if resolution is Resolution.NONE:
            return command.arguments
        if resolution is Resolution.QUEUE_ENTRY:
            return [resolve_queue_entry(command.operand, self.store.snapshot(Channel.QUEUE))]
        if resolution is Resolution.PLAYLIST_ENTRY:
            return [resolve_playlist_entry(command.operand, self.store.snapshot(Channel.PLAYLISTS))]
        if resolution is Resolution.SEARCH_ENTRY:
            return [resolve_search_entry(command.operand, self.store.snapshot(Channel.SEARCH_RESULTS))]
        if resolution is Resolution.SEEK:
            return [seek_position(command.operand, self.store.snapshot(Channel.TIME))]
        raise ValueError(f"Unhandled resolution: {resolution}")
