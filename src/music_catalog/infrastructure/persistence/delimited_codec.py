"""
Delimited record codec.

Converts one catalog entity to one line of text and back. Field layouts:

    Artist:    id SEP name
    Song:      id SEP name SEP {artistIds} SEP genre SEP duration SEP album
    PlayList:  id SEP name SEP {songIds}
    Customer:  variant SEP id SEP username SEP password SEP name SEP lastName
               SEP age SEP {artistIds} SEP {playListIds}

ID collections are wrapped in braces and comma separated, without escaping.
Durations must be positive and ages at least MINIMUM_AGE, in both directions.
Decoding an entity that references others yields a record holding the raw
ID tokens; turning tokens into entities is the job of the reference
resolver.
"""

import re
from dataclasses import dataclass, field
from typing import Iterable, List

from ...domain.catalog.entities import MINIMUM_AGE, Artist, Customer, PlayList, Song
from ...exceptions import FormatError

DEFAULT_SEPARATOR = ";"

ARTIST_FIELDS = 2
SONG_FIELDS = 6
PLAYLIST_FIELDS = 3
CUSTOMER_FIELDS = 9

_INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")
_FORBIDDEN_ID_CHARS = re.compile(r"[\s,{}]")
_LINE_BREAKS = ("\n", "\r")


@dataclass
class SongRecord:
    """A decoded song line with unresolved artist IDs."""
    id: str
    name: str
    artist_ids: List[str]
    genre: str
    duration_in_seconds: int
    album: str


@dataclass
class PlayListRecord:
    """A decoded playlist line with unresolved song IDs."""
    id: str
    name: str
    song_ids: List[str]


@dataclass
class CustomerRecord:
    """A decoded customer line with unresolved artist and playlist IDs."""
    customer_type: str
    id: str
    username: str
    password: str
    name: str
    last_name: str
    age: int
    followed_artist_ids: List[str] = field(default_factory=list)
    playlist_ids: List[str] = field(default_factory=list)


def format_id_collection(ids: Iterable[str]) -> str:
    """Encode IDs as ``{a,b,c}``; no IDs gives ``{}``."""
    ids = list(ids)
    for entity_id in ids:
        _check_id(entity_id)
    return "{" + ",".join(ids) + "}"


def parse_id_collection(value: str) -> List[str]:
    """
    Decode ``{a,b,c}`` into a list of ID strings.

    Tokens are stripped and empty tokens dropped, so ``{}``, ``{ }`` and
    ``{,}`` all decode to an empty list.
    """
    text = value.strip()
    if not (text.startswith("{") and text.endswith("}")):
        raise FormatError(f"Expected an ID collection like {{id1,id2}}, got {value!r}")
    inner = text[1:-1]
    if "{" in inner or "}" in inner:
        raise FormatError(f"Nested braces are not allowed in an ID collection: {value!r}")
    return [token.strip() for token in inner.split(",") if token.strip()]


def parse_int(value: str, field_name: str) -> int:
    """Strict integer parsing: optional sign and ASCII digits only."""
    if not _INTEGER_PATTERN.fullmatch(value):
        raise FormatError(f"Field {field_name} must be an integer, got {value!r}")
    return int(value)


def check_minimum(value: int, minimum: int, field_name: str) -> int:
    """Reject a numeric field below its allowed minimum."""
    if value < minimum:
        raise FormatError(f"Field {field_name} must be at least {minimum}, got {value}")
    return value


def parse_id(value: str) -> str:
    """Validate an identifier field."""
    if not value:
        raise FormatError("Identifier field is empty")
    if _FORBIDDEN_ID_CHARS.search(value):
        raise FormatError(f"Invalid identifier {value!r}")
    return value


def _check_id(entity_id: str) -> None:
    if not entity_id or _FORBIDDEN_ID_CHARS.search(entity_id):
        raise FormatError(f"Identifier {entity_id!r} cannot be stored in a delimited record")


class DelimitedRecordCodec:
    """Encode and decode catalog records with a fixed field separator."""

    def __init__(self, separator: str = DEFAULT_SEPARATOR):
        if not separator:
            raise ValueError("Separator must not be empty")
        self.separator = separator

    def split(self, line: str, expected_fields: int, record_type: str) -> List[str]:
        """Split a line into exactly ``expected_fields`` fields."""
        fields = line.split(self.separator)
        if len(fields) != expected_fields:
            raise FormatError(
                f"{record_type} record must have {expected_fields} fields separated by "
                f"{self.separator!r}, got {len(fields)}: {line!r}"
            )
        return fields

    def join(self, fields: List[str]) -> str:
        """Join fields into one line, refusing values that would corrupt it."""
        for value in fields:
            if self.separator in value:
                raise FormatError(f"Value {value!r} contains the field separator {self.separator!r}")
            if any(ch in value for ch in _LINE_BREAKS):
                raise FormatError(f"Value {value!r} contains a line break")
        return self.separator.join(fields)

    # Artist

    def encode_artist(self, artist: Artist) -> str:
        _check_id(artist.id)
        return self.join([artist.id, artist.name])

    def decode_artist(self, line: str) -> Artist:
        artist_id, name = self.split(line, ARTIST_FIELDS, "Artist")
        return Artist(id=parse_id(artist_id), name=name)

    # Song

    def encode_song(self, song: Song) -> str:
        _check_id(song.id)
        return self.join([
            song.id,
            song.name,
            format_id_collection(song.artist_ids),
            song.genre,
            str(check_minimum(song.duration_in_seconds, 1, "durationInSeconds")),
            song.album,
        ])

    def decode_song(self, line: str) -> SongRecord:
        song_id, name, artist_ids, genre, duration, album = self.split(line, SONG_FIELDS, "Song")
        return SongRecord(
            id=parse_id(song_id),
            name=name,
            artist_ids=parse_id_collection(artist_ids),
            genre=genre,
            duration_in_seconds=check_minimum(
                parse_int(duration, "durationInSeconds"), 1, "durationInSeconds"),
            album=album,
        )

    # PlayList

    def encode_playlist(self, playlist: PlayList) -> str:
        _check_id(playlist.id)
        return self.join([playlist.id, playlist.name, format_id_collection(playlist.song_ids)])

    def decode_playlist(self, line: str) -> PlayListRecord:
        playlist_id, name, song_ids = self.split(line, PLAYLIST_FIELDS, "PlayList")
        return PlayListRecord(
            id=parse_id(playlist_id),
            name=name,
            song_ids=parse_id_collection(song_ids),
        )

    # Customer

    def encode_customer(self, customer: Customer) -> str:
        _check_id(customer.id)
        return self.join([
            customer.customer_type.value,
            customer.id,
            customer.username,
            customer.password,
            customer.name,
            customer.last_name,
            str(check_minimum(customer.age, MINIMUM_AGE, "age")),
            format_id_collection(customer.followed_artist_ids),
            format_id_collection(customer.playlist_ids),
        ])

    def decode_customer(self, line: str) -> CustomerRecord:
        (customer_type, customer_id, username, password, name,
         last_name, age, artist_ids, playlist_ids) = self.split(line, CUSTOMER_FIELDS, "Customer")
        return CustomerRecord(
            customer_type=customer_type,
            id=parse_id(customer_id),
            username=username,
            password=password,
            name=name,
            last_name=last_name,
            age=check_minimum(parse_int(age, "age"), MINIMUM_AGE, "age"),
            followed_artist_ids=parse_id_collection(artist_ids),
            playlist_ids=parse_id_collection(playlist_ids),
        )
