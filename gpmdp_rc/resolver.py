"""Resolve user ordinals and relative seeks against channel snapshots."""

from typing import Any

from .channels import get_field, get_list
from .errors import OutOfRangeError


def _pick(entries: list, ordinal: int, what: str) -> Any:
    if ordinal < 1 or ordinal > len(entries):
        raise OutOfRangeError(
            f"invalid {what} number {ordinal} (have {len(entries)})"
        )
    return entries[ordinal - 1]


def resolve_queue_entry(ordinal: int, queue: Any) -> Any:
    """Track object at a 1-based position in the queue.

    Raises:
        OutOfRangeError: If the ordinal is not between 1 and the queue length.
        ProtocolError: If the queue snapshot is not a list.
    """
    return _pick(get_list(queue, "queue"), ordinal, "track")


def resolve_playlist_entry(ordinal: int, playlists: Any) -> Any:
    """Playlist object at a 1-based position in the playlists snapshot."""
    return _pick(get_list(playlists, "playlists"), ordinal, "playlist")


def resolve_search_entry(ordinal: int, results: Any) -> Any:
    """Artist, album or track selected by a 1-based search result ordinal.

    Ordinals number the artists first, then the albums, then the tracks,
    matching the order the results are listed in.

    Args:
        ordinal: 1-based ordinal as shown to the user
        results: search-results snapshot with artists, albums and tracks

    Returns:
        The selected artist, album or track object.

    Raises:
        OutOfRangeError: If the ordinal falls outside all three groups.
    """
    artists = get_field(results, "artists", list, "search results")
    albums = get_field(results, "albums", list, "search results")
    tracks = get_field(results, "tracks", list, "search results")
    return _pick(artists + albums + tracks, ordinal, "result")


def seek_position(offset_ms: int, time_payload: Any) -> int:
    """Absolute position after moving by offset_ms, clamped to [0, total]."""
    current = get_field(time_payload, "current", int, "time")
    total = get_field(time_payload, "total", int, "time")
    return max(0, min(current + offset_ms, total))
