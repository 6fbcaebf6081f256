"""Turn responses and channel snapshots into the lines printed on stdout."""

from enum import Enum
from typing import Any, List, Optional

from .channels import Channel, ChannelStore, get_field, get_list
from .errors import ProtocolError

PLAYBACK_STATES = {0: "stopped", 1: "paused", 2: "playing"}

SHUFFLE_OFF = "NO_SHUFFLE"
REPEAT_NAMES = {"LIST_REPEAT": "all", "SINGLE_REPEAT": "single"}

LYRICS_MISSING = "Lyrics not available!"


class ResponseKind(Enum):
    """Shape of what a command prints."""
    NONE = "none"
    PLAYBACK_STATE = "playback_state"
    VOLUME = "volume"
    TRACK_LIST = "track_list"
    PLAYLIST_LIST = "playlist_list"
    SEARCH_RESULTS = "search_results"
    LYRICS = "lyrics"
    STATUS = "status"


def format_time(ms: int) -> str:
    """Format a millisecond count as H:M:SS, M:SS or 0:SS.

    Minutes are not zero padded in the hour form.
    """
    t = ms // 1000
    hour = 3600
    minute = 60
    if t >= hour:
        return f"{t // hour}:{(t % hour) // minute}:{(t % hour) % minute:02}"
    if t >= minute:
        return f"{t // minute}:{t % minute:02}"
    return f"0:{t:02}"


def _track_line(index: int, track: Any, where: str) -> str:
    artist = get_field(track, "artist", str, where)
    album = get_field(track, "album", str, where)
    title = get_field(track, "title", str, where)
    return f"{index}: {artist} | {album} | {title}"


def render_playback_state(value: Any) -> List[str]:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ProtocolError("playback state: expected an integer value")
    return [f"state: {PLAYBACK_STATES.get(value, 'unknown')}"]


def render_volume(value: Any) -> List[str]:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ProtocolError("volume: expected an integer value")
    return [str(value)]


def render_tracks(tracks: Any) -> List[str]:
    return [
        _track_line(i, track, "queue")
        for i, track in enumerate(get_list(tracks, "queue"), 1)
    ]


def render_playlists(playlists: Any) -> List[str]:
    return [
        f"{i}: {get_field(playlist, 'name', str, 'playlists')}"
        for i, playlist in enumerate(get_list(playlists, "playlists"), 1)
    ]


def render_search_results(results: Any) -> List[str]:
    """List artists, then albums, then tracks under one running ordinal."""
    artists = get_field(results, "artists", list, "search results")
    albums = get_field(results, "albums", list, "search results")
    tracks = get_field(results, "tracks", list, "search results")

    lines = []
    n = 1
    for artist in artists:
        lines.append(f"{n}: {get_field(artist, 'name', str, 'artist')}")
        n += 1
    for album in albums:
        lines.append(
            f"{n}: {get_field(album, 'artist', str, 'album')} | "
            f"{get_field(album, 'name', str, 'album')}"
        )
        n += 1
    for track in tracks:
        lines.append(_track_line(n, track, "track"))
        n += 1
    return lines


def render_lyrics(lyrics: Any) -> List[str]:
    if not lyrics:
        return [LYRICS_MISSING]
    if not isinstance(lyrics, str):
        raise ProtocolError("lyrics: expected a string payload")
    return [lyrics]


# =============================================================================
# Status aggregate
# =============================================================================

def current_track(store: ChannelStore) -> tuple:
    """(artist, album, title) of the current track; null fields become ''."""
    payload = store.snapshot(Channel.TRACK)
    if not isinstance(payload, dict):
        raise ProtocolError("track: expected an object payload")

    fields = []
    for key in ("artist", "album", "title"):
        if key not in payload:
            raise ProtocolError(f"track: missing field '{key}'")
        value = payload[key]
        if value is None:
            value = ""
        elif not isinstance(value, str):
            raise ProtocolError(f"track: field '{key}' has the wrong type")
        fields.append(value)
    return tuple(fields)


def queue_position(queue: Any, track: tuple) -> int:
    """1-based position of the track in the queue, 0 when it is not queued."""
    for i, entry in enumerate(get_list(queue, "queue"), 1):
        key = (
            get_field(entry, "artist", str, "queue"),
            get_field(entry, "album", str, "queue"),
            get_field(entry, "title", str, "queue"),
        )
        if key == track:
            return i
    return 0


def render_status(store: ChannelStore) -> List[str]:
    """Everything after the state line of the status command."""
    artist, album, title = current_track(store)

    time_payload = store.snapshot(Channel.TIME)
    elapsed = get_field(time_payload, "current", int, "time")
    total = get_field(time_payload, "total", int, "time")

    rating_payload = store.snapshot(Channel.RATING)
    if get_field(rating_payload, "liked", bool, "rating"):
        rating = "up"
    elif get_field(rating_payload, "disliked", bool, "rating"):
        rating = "down"
    else:
        rating = "none"

    volume = store.snapshot(Channel.VOLUME)
    if isinstance(volume, bool) or not isinstance(volume, int):
        raise ProtocolError("volume: expected an integer payload")

    shuffle = store.snapshot(Channel.SHUFFLE)
    repeat = store.snapshot(Channel.REPEAT)
    if not isinstance(shuffle, str) or not isinstance(repeat, str):
        raise ProtocolError("shuffle/repeat: expected string payloads")

    queue = get_list(store.snapshot(Channel.QUEUE), "queue")

    return [
        f"artist: {artist}",
        f"album: {album}",
        f"title: {title}",
        f"time_elapsed_fmt: {format_time(elapsed)}",
        f"time_elapsed_secs: {elapsed // 1000}",
        f"time_total_fmt: {format_time(total)}",
        f"time_total_secs: {total // 1000}",
        f"rating: {rating}",
        f"volume: {volume}",
        f"shuffle: {'off' if shuffle == SHUFFLE_OFF else 'on'}",
        f"repeat: {REPEAT_NAMES.get(repeat, 'off')}",
        f"queue_track: {queue_position(queue, (artist, album, title))}",
        f"queue_length: {len(queue)}",
    ]


def render(kind: ResponseKind, store: ChannelStore, value: Optional[Any] = None) -> List[str]:
    """Render a response or a satisfied snapshot.

    Args:
        kind: What the command prints
        store: Channel snapshots observed so far
        value: The correlated response's value, or the search-results
            snapshot for a bare listing

    Returns:
        Output lines, possibly empty.
    """
    if kind is ResponseKind.NONE:
        return []
    if kind is ResponseKind.PLAYBACK_STATE:
        return render_playback_state(value)
    if kind is ResponseKind.VOLUME:
        return render_volume(value)
    if kind is ResponseKind.TRACK_LIST:
        return render_tracks(store.snapshot(Channel.QUEUE))
    if kind is ResponseKind.PLAYLIST_LIST:
        return render_playlists(store.snapshot(Channel.PLAYLISTS))
    if kind is ResponseKind.SEARCH_RESULTS:
        return render_search_results(value)
    if kind is ResponseKind.LYRICS:
        return render_lyrics(store.snapshot(Channel.LYRICS))
    if kind is ResponseKind.STATUS:
        return render_playback_state(value) + render_status(store)
    raise ValueError(f"Unhandled response kind: {kind}")
