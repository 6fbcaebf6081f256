"""Broadcast channels pushed by the player and the snapshot store that tracks them."""

import logging
from enum import IntFlag
from typing import Any, Dict, Optional

from .errors import ProtocolError

logger = logging.getLogger(__name__)


class Channel(IntFlag):
    """One bit per broadcast channel."""
    NONE = 0
    API_VERSION = 0x0001
    PLAYSTATE = 0x0002
    TRACK = 0x0004
    LYRICS = 0x0008
    TIME = 0x0010
    RATING = 0x0020
    SHUFFLE = 0x0040
    REPEAT = 0x0080
    PLAYLISTS = 0x0100
    QUEUE = 0x0200
    SEARCH_RESULTS = 0x0400
    LIBRARY = 0x0800
    VOLUME = 0x1000
    SETTINGS_THEMECOLOR = 0x2000
    SETTINGS_THEME = 0x4000
    SETTINGS_THEMETYPE = 0x8000


# Wire label for each channel bit
CHANNEL_LABELS: Dict[str, Channel] = {
    "API_VERSION": Channel.API_VERSION,
    "playState": Channel.PLAYSTATE,
    "track": Channel.TRACK,
    "lyrics": Channel.LYRICS,
    "time": Channel.TIME,
    "rating": Channel.RATING,
    "shuffle": Channel.SHUFFLE,
    "repeat": Channel.REPEAT,
    "playlists": Channel.PLAYLISTS,
    "queue": Channel.QUEUE,
    "search-results": Channel.SEARCH_RESULTS,
    "library": Channel.LIBRARY,
    "volume": Channel.VOLUME,
    "settings:themeColor": Channel.SETTINGS_THEMECOLOR,
    "settings:theme": Channel.SETTINGS_THEME,
    "settings:themeType": Channel.SETTINGS_THEMETYPE,
}

# The connect channel carries auth handshake results, not player state
CONNECT_CHANNEL = "connect"


class ChannelStore:
    """Latest payload per channel plus the set of channels seen since open.

    The observed set only ever grows during a session.
    """

    def __init__(self):
        self._payloads: Dict[Channel, Any] = {}
        self.observed = Channel.NONE

    def observe(self, label: str, payload: Any) -> Optional[Channel]:
        """Record a broadcast.

        Args:
            label: Channel label from the wire
            payload: Raw payload, stored as-is

        Returns:
            The channel bit that was set, or None for an unknown label.
        """
        channel = CHANNEL_LABELS.get(label)
        if channel is None:
            logger.debug("Ignoring unknown channel %r", label)
            return None

        self._payloads[channel] = payload
        self.observed |= channel
        logger.debug("Observed channel %s", label)
        return channel

    def snapshot(self, channel: Channel) -> Optional[Any]:
        """Latest payload for a channel, or None if it has not arrived."""
        return self._payloads.get(channel)

    def has_all(self, required: Channel) -> bool:
        return (self.observed & required) == required


def get_field(payload: Any, key: str, kind: type, where: str) -> Any:
    """Read a required, typed field from a JSON object.

    Raises:
        ProtocolError: If the payload is not an object, or the field is
            absent or of the wrong type.
    """
    if not isinstance(payload, dict):
        raise ProtocolError(f"{where}: expected an object, got {type(payload).__name__}")
    if key not in payload:
        raise ProtocolError(f"{where}: missing field '{key}'")
    value = payload[key]
    # bool is an int subclass, never accept it for numeric fields
    if isinstance(value, bool) and kind is not bool:
        raise ProtocolError(f"{where}: field '{key}' has the wrong type")
    if not isinstance(value, kind):
        raise ProtocolError(f"{where}: field '{key}' has the wrong type")
    return value


def get_list(payload: Any, where: str) -> list:
    """Require a JSON array."""
    if not isinstance(payload, list):
        raise ProtocolError(f"{where}: expected a list, got {type(payload).__name__}")
    return payload
