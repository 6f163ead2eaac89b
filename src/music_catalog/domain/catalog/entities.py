"""Catalog Context Entities.

This module defines the core entities for the Catalog bounded context:
artists, songs, playlists and the two customer variants.

Every entity is identified by its ``id``; two instances with the same id
compare equal and hash the same regardless of their other fields. Entities
that could not be resolved while loading stored data are represented by
sentinel instances (``Artist.unknown`` and friends) flagged with
``is_unknown`` instead of ``None``.
"""

import random
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Iterable, List, Optional
from uuid import uuid4

from ..result import UnsupportedOperationError, UnsupportedTypeError

MINIMUM_AGE = 14
DEFAULT_PLAYLIST_NAME = "PlayListRegular"

UNKNOWN_ARTIST_NAME = "Unknown Artist"
UNKNOWN_SONG_NAME = "Unknown Song"
UNKNOWN_GENRE = "Unknown Genre"
UNKNOWN_ALBUM = "Unknown Album"
UNKNOWN_PLAYLIST_NAME = "Unknown PlayList"


def new_id() -> str:
    """Generate a fresh random entity id."""
    return str(uuid4())


class CatalogEntity:
    """Identity semantics shared by all catalog entities."""

    id: str
    entity_kind: ClassVar[str] = "entity"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CatalogEntity):
            return NotImplemented
        return self.entity_kind == other.entity_kind and self.id == other.id

    def __hash__(self) -> int:
        return hash((self.entity_kind, self.id))


@dataclass(eq=False, kw_only=True)
class Artist(CatalogEntity):
    """A musical artist or group."""

    entity_kind: ClassVar[str] = "artist"

    id: str = field(default_factory=new_id)
    name: str
    is_unknown: bool = field(default=False, repr=False)

    @classmethod
    def unknown(cls, artist_id: str) -> "Artist":
        """Placeholder for an artist id that could not be resolved."""
        return cls(id=artist_id, name=UNKNOWN_ARTIST_NAME, is_unknown=True)

    def __str__(self) -> str:
        return f"Name: {self.name} - id: {self.id}"


@dataclass(eq=False, kw_only=True)
class Song(CatalogEntity):
    """
    A single song in the catalog.

    The artist list is ordered and may be empty when the song is created;
    artists are attached afterwards with ``add_artists``.
    """

    entity_kind: ClassVar[str] = "song"

    id: str = field(default_factory=new_id)
    name: str
    genre: str
    duration_in_seconds: int
    album: str = ""
    artists: List[Artist] = field(default_factory=list)
    is_unknown: bool = field(default=False, repr=False)

    @classmethod
    def unknown(cls, song_id: str) -> "Song":
        """Placeholder for a song id that could not be resolved.

        The placeholder carries an unknown artist with the same id so code
        walking ``song.artists`` never sees an empty list for it.
        """
        return cls(
            id=song_id,
            name=UNKNOWN_SONG_NAME,
            genre=UNKNOWN_GENRE,
            duration_in_seconds=0,
            album=UNKNOWN_ALBUM,
            artists=[Artist.unknown(song_id)],
            is_unknown=True,
        )

    @property
    def artist_ids(self) -> List[str]:
        return [artist.id for artist in self.artists]

    def add_artists(self, artists: Iterable[Artist]) -> None:
        """Attach artists, skipping ones already on the song."""
        for artist in artists:
            if artist not in self.artists:
                self.artists.append(artist)

    def has_artist(self, artist_id: str) -> bool:
        return any(artist.id == artist_id for artist in self.artists)

    def play(self) -> str:
        return f"Playing song: {self.name}"

    def __str__(self) -> str:
        artist_names = ",".join(artist.name for artist in self.artists)
        return (
            f"Name: {self.name} - Artists: {artist_names} - Genre: {self.genre}"
            f" - Duration in seconds: {self.duration_in_seconds} - Album: {self.album}"
            f" - ID: {self.id}"
        )


@dataclass(eq=False, kw_only=True)
class PlayList(CatalogEntity):
    """
    An ordered list of songs.

    Songs are referenced, not owned. The same song may appear more than once;
    insertion order is the play order.
    """

    entity_kind: ClassVar[str] = "playlist"

    id: str = field(default_factory=new_id)
    name: str
    songs: List[Song] = field(default_factory=list)
    is_unknown: bool = field(default=False, repr=False)

    @classmethod
    def unknown(cls, playlist_id: str) -> "PlayList":
        """Placeholder for a playlist id that could not be resolved."""
        return cls(id=playlist_id, name=UNKNOWN_PLAYLIST_NAME, is_unknown=True)

    @property
    def song_ids(self) -> List[str]:
        return [song.id for song in self.songs]

    @property
    def total_duration_seconds(self) -> int:
        return sum(song.duration_in_seconds for song in self.songs)

    def add_song(self, song: Song) -> None:
        self.songs.append(song)

    def remove_song(self, song_id: str) -> bool:
        """Remove every occurrence of a song. Returns True if any was removed."""
        remaining = [song for song in self.songs if song.id != song_id]
        removed = len(remaining) != len(self.songs)
        self.songs = remaining
        return removed

    def __str__(self) -> str:
        return f"Playlist name: {self.name} with id: {self.id} and number of songs: {len(self.songs)}"


class CustomerType(Enum):
    """The closed set of customer variants."""
    REGULAR = "Regular"
    PREMIUM = "Premium"

    @classmethod
    def parse(cls, value: str) -> "CustomerType":
        """Parse a discriminator case-insensitively."""
        if isinstance(value, CustomerType):
            return value
        for member in cls:
            if member.value.lower() == str(value).strip().lower():
                return member
        raise UnsupportedTypeError(f"Unsupported customer type: {value}")


@dataclass(eq=False, kw_only=True)
class Customer(CatalogEntity, ABC):
    """
    A catalog customer.

    Customers follow artists (no ownership, no duplicates) and own
    playlists. How many playlists a customer may own depends on the
    variant, see ``RegularCustomer`` and ``PremiumCustomer``.
    """

    entity_kind: ClassVar[str] = "customer"
    customer_type: ClassVar[CustomerType]

    id: str = field(default_factory=new_id)
    username: str
    password: str
    name: str
    last_name: str
    age: int
    followed_artists: List[Artist] = field(default_factory=list)

    def __post_init__(self) -> None:
        unique: List[Artist] = []
        for artist in self.followed_artists:
            if artist not in unique:
                unique.append(artist)
        self.followed_artists = unique

    @property
    @abstractmethod
    def playlists(self) -> List[PlayList]:
        """Owned playlists, as a new list."""

    @abstractmethod
    def add_playlist(self, playlist: PlayList) -> None:
        """Attach a playlist to this customer."""

    @property
    def playlist_ids(self) -> List[str]:
        return [playlist.id for playlist in self.playlists]

    @property
    def followed_artist_ids(self) -> List[str]:
        return [artist.id for artist in self.followed_artists]

    @property
    def full_name(self) -> str:
        return f"{self.name} {self.last_name}"

    def owns_playlist(self, playlist_id: str) -> bool:
        return playlist_id in self.playlist_ids

    def follow_artist(self, artist: Artist) -> bool:
        """Follow an artist. Returns False if it was already followed."""
        if artist in self.followed_artists:
            return False
        self.followed_artists.append(artist)
        return True

    def unfollow_artist(self, artist_id: str) -> bool:
        before = len(self.followed_artists)
        self.followed_artists = [a for a in self.followed_artists if a.id != artist_id]
        return len(self.followed_artists) != before

    def check_password(self, password: str) -> bool:
        return self.password == password

    def __str__(self) -> str:
        return (
            f"Full name: {self.full_name} - username: {self.username} - Age: {self.age}"
            f" - Followed artists: {len(self.followed_artists)}"
            f" - Playlists: {len(self.playlists)}"
        )


@dataclass(eq=False, kw_only=True)
class RegularCustomer(Customer):
    """A customer that owns exactly one playlist."""

    customer_type: ClassVar[CustomerType] = CustomerType.REGULAR

    playlist: Optional[PlayList] = None

    def __post_init__(self) -> None:
        super().__post_init__()
        if self.playlist is None:
            self.playlist = PlayList(name=f"{DEFAULT_PLAYLIST_NAME}{random.randrange(1000)}")

    @property
    def playlists(self) -> List[PlayList]:
        return [self.playlist]

    def add_playlist(self, playlist: PlayList) -> None:
        raise UnsupportedOperationError("A regular customer can only have one playlist")


@dataclass(eq=False, kw_only=True)
class PremiumCustomer(Customer):
    """A customer with any number of playlists."""

    customer_type: ClassVar[CustomerType] = CustomerType.PREMIUM

    owned_playlists: List[PlayList] = field(default_factory=list)

    @property
    def playlists(self) -> List[PlayList]:
        return list(self.owned_playlists)

    def add_playlist(self, playlist: PlayList) -> None:
        self.owned_playlists.append(playlist)


def create_customer(
    customer_type: str,
    *,
    username: str,
    password: str,
    name: str,
    last_name: str,
    age: int,
    id: Optional[str] = None,
    followed_artists: Optional[Iterable[Artist]] = None,
    playlists: Optional[Iterable[PlayList]] = None,
) -> Customer:
    """
    Build the customer variant named by ``customer_type``.

    ``id`` is generated when omitted. A regular customer accepts at most one
    playlist and gets a default one when none is given.

    Raises:
        UnsupportedTypeError: If the type is neither Regular nor Premium.
        UnsupportedOperationError: If a regular customer is given more than
            one playlist.
    """
    variant = CustomerType.parse(customer_type)
    common = dict(
        id=id or new_id(),
        username=username,
        password=password,
        name=name,
        last_name=last_name,
        age=age,
        followed_artists=list(followed_artists or []),
    )
    owned = list(playlists or [])

    if variant is CustomerType.REGULAR:
        if len(owned) > 1:
            raise UnsupportedOperationError(
                f"A regular customer can only have one playlist, got {len(owned)}"
            )
        return RegularCustomer(playlist=owned[0] if owned else None, **common)

    return PremiumCustomer(owned_playlists=owned, **common)


@dataclass
class CatalogSnapshot:
    """
    The four entity collections of a catalog, as loaded or to be stored.

    This is the unit the persistence layer reads and writes; the catalog
    service applies it to its repositories wholesale.
    """

    artists: List[Artist] = field(default_factory=list)
    songs: List[Song] = field(default_factory=list)
    playlists: List[PlayList] = field(default_factory=list)
    customers: List[Customer] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.artists or self.songs or self.playlists or self.customers)

    def counts(self) -> dict:
        return {
            "artists": len(self.artists),
            "songs": len(self.songs),
            "playlists": len(self.playlists),
            "customers": len(self.customers),
        }
