"""Command table: user verbs to player requests.

Each verb maps to the namespace/method to call, how its argument is
serialized, which channels must have been observed before the request can
be built, and how the result is printed.
"""

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence

from .channels import Channel
from .errors import ArgumentError
from .render import ResponseKind

APP_NAME = "gpmdp_rc"
REQUEST_ID = 13

VOLUME_STEP = 10
SEEK_STEP_MS = 10000

STATUS_CHANNELS = (
    Channel.PLAYSTATE
    | Channel.TRACK
    | Channel.TIME
    | Channel.RATING
    | Channel.SHUFFLE
    | Channel.REPEAT
    | Channel.QUEUE
    | Channel.VOLUME
)

SHUFFLE_MODES = {"on": "ALL_SHUFFLE", "off": "NO_SHUFFLE"}
REPEAT_MODES = {"all": "LIST_REPEAT", "single": "SINGLE_REPEAT", "off": "NO_REPEAT"}
THUMBS_METHODS = {"up": "toggleThumbsUp", "down": "toggleThumbsDown"}


class Resolution(Enum):
    """Snapshot lookup needed to finish building a request."""
    NONE = "none"
    QUEUE_ENTRY = "queue_entry"
    PLAYLIST_ENTRY = "playlist_entry"
    SEARCH_ENTRY = "search_entry"
    SEEK = "seek"


@dataclass(frozen=True)
class Command:
    """A parsed user command.

    A command without a namespace is answered from channel snapshots alone
    and sends no request.
    """
    verb: str
    namespace: Optional[str] = None
    method: Optional[str] = None
    arguments: Optional[List[Any]] = None
    channels: Channel = Channel.NONE
    response: ResponseKind = ResponseKind.NONE
    resolution: Resolution = Resolution.NONE
    # ordinal for *_ENTRY resolutions, signed offset in ms for SEEK
    operand: int = 0

    @property
    def channel_only(self) -> bool:
        return self.namespace is None

    @property
    def is_pairing(self) -> bool:
        return self.verb == "auth"


def encode_request(
    namespace: str,
    method: str,
    arguments: Optional[List[Any]] = None,
    request_id: Optional[int] = REQUEST_ID,
) -> str:
    """Serialize one request frame.

    The arguments key is left out when the method takes none, and the
    requestID key when request_id is None.
    """
    request: Dict[str, Any] = {"namespace": namespace, "method": method}
    if request_id is not None:
        request["requestID"] = request_id
    if arguments is not None:
        request["arguments"] = arguments
    return json.dumps(request)


def connect_request(*credentials: str) -> str:
    """Connect call: app name, optionally followed by a token or pairing code."""
    return encode_request("connect", "connect", [APP_NAME, *credentials], request_id=None)


# =============================================================================
# Argument parsing
# =============================================================================

def _expect(args: Sequence[str], count: int, missing: str) -> None:
    if len(args) < count:
        raise ArgumentError(missing)
    if len(args) > count:
        raise ArgumentError(f"too many arguments: {' '.join(args[count:])}")


def _parse_int(text: str, message: str) -> int:
    try:
        return int(text)
    except ValueError:
        raise ArgumentError(message)


def _choose(choices: Dict[str, str], text: str, message: str) -> str:
    try:
        return choices[text]
    except KeyError:
        raise ArgumentError(f"{message} '{text}' (choose from {', '.join(choices)})")


def parse_volume(text: str) -> int:
    """Volume level clamped to 0-100."""
    level = _parse_int(text, "failed to parse volume level")
    return max(0, min(level, 100))


def parse_seek(text: str) -> int:
    """Signed seek offset in milliseconds."""
    if text == "forward":
        return SEEK_STEP_MS
    if text == "backward":
        return -SEEK_STEP_MS
    return _parse_int(text, "failed to parse seek value") * 1000


# =============================================================================
# Verb builders
# =============================================================================

def _auth(args):
    _expect(args, 0, "")
    return Command("auth", "connect", "connect")


def _status(args):
    _expect(args, 0, "")
    return Command(
        "status", "playback", "getPlaybackState",
        channels=STATUS_CHANNELS, response=ResponseKind.STATUS,
    )


def _play(args):
    if not args:
        return Command("play", "playback", "playPause")
    _expect(args, 1, "")
    return Command(
        "play", "queue", "playTrack",
        channels=Channel.QUEUE,
        resolution=Resolution.QUEUE_ENTRY,
        operand=_parse_int(args[0], "failed to parse track number"),
    )


def _simple(verb: str, namespace: str, method: str, arguments: Optional[list] = None):
    def build(args):
        _expect(args, 0, "")
        return Command(verb, namespace, method, arguments)
    return build


def _seek(args):
    _expect(args, 1, "must provide seek value")
    return Command(
        "seek", "playback", "setCurrentTime",
        channels=Channel.TIME,
        resolution=Resolution.SEEK,
        operand=parse_seek(args[0]),
    )


def _thumbs(args):
    _expect(args, 1, "must provide thumbs rating")
    method = _choose(THUMBS_METHODS, args[0], "invalid thumbs rating")
    return Command("thumbs", "rating", method)


def _shuffle(args):
    _expect(args, 1, "must provide shuffle mode")
    mode = _choose(SHUFFLE_MODES, args[0], "invalid shuffle mode")
    return Command("shuffle", "playback", "setShuffle", [mode])


def _repeat(args):
    _expect(args, 1, "must provide repeat mode")
    mode = _choose(REPEAT_MODES, args[0], "invalid repeat mode")
    return Command("repeat", "playback", "setRepeat", [mode])


def _snapshot_only(verb: str, channel: Channel, response: ResponseKind):
    def build(args):
        _expect(args, 0, "")
        return Command(verb, channels=channel, response=response)
    return build


def _playlist(args):
    _expect(args, 1, "must provide a playlist number")
    return Command(
        "playlist", "playlists", "play",
        channels=Channel.PLAYLISTS,
        resolution=Resolution.PLAYLIST_ENTRY,
        operand=_parse_int(args[0], "failed to parse playlist number"),
    )


def _search(args):
    _expect(args, 1, "must provide search string")
    return Command(
        "search", "search", "performSearch", [args[0]],
        response=ResponseKind.SEARCH_RESULTS,
    )


def _results(args):
    if not args:
        return Command(
            "results",
            channels=Channel.SEARCH_RESULTS,
            response=ResponseKind.SEARCH_RESULTS,
        )
    _expect(args, 1, "")
    return Command(
        "results", "search", "playResult",
        channels=Channel.SEARCH_RESULTS,
        resolution=Resolution.SEARCH_ENTRY,
        operand=_parse_int(args[0], "failed to parse result number"),
    )


def _volume(args):
    if not args:
        return Command("volume", "volume", "getVolume", response=ResponseKind.VOLUME)
    _expect(args, 1, "")
    if args[0] == "up":
        return Command("volume", "volume", "increaseVolume", [VOLUME_STEP])
    if args[0] == "down":
        return Command("volume", "volume", "decreaseVolume", [VOLUME_STEP])
    return Command("volume", "volume", "setVolume", [parse_volume(args[0])])


COMMANDS: Dict[str, Callable[[Sequence[str]], Command]] = {
    "auth": _auth,
    "status": _status,
    "play": _play,
    "pause": _simple("pause", "playback", "playPause"),
    "next": _simple("next", "playback", "forward"),
    "prev": _simple("prev", "playback", "rewind"),
    "replay": _simple("replay", "playback", "setCurrentTime", [0]),
    "seek": _seek,
    "lyrics": _snapshot_only("lyrics", Channel.LYRICS, ResponseKind.LYRICS),
    "thumbs": _thumbs,
    "shuffle": _shuffle,
    "repeat": _repeat,
    "queue": _snapshot_only("queue", Channel.QUEUE, ResponseKind.TRACK_LIST),
    "clear": _simple("clear", "queue", "clear"),
    "playlists": _snapshot_only("playlists", Channel.PLAYLISTS, ResponseKind.PLAYLIST_LIST),
    "playlist": _playlist,
    "search": _search,
    "results": _results,
    "volume": _volume,
}


def parse_command(verb: str, args: Sequence[str] = ()) -> Command:
    """Look up a verb and validate its arguments.

    Args:
        verb: Command name as typed by the user
        args: Remaining command line words

    Returns:
        The parsed Command

    Raises:
        ArgumentError: Unknown verb, wrong arity, unparsable number or
            invalid mode.
    """
    builder = COMMANDS.get(verb)
    if builder is None:
        raise ArgumentError(f"unknown command '{verb}'")
    return builder(list(args))
