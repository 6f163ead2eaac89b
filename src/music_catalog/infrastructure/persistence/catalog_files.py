"""
Catalog file management.

Loads and stores a whole catalog for one storage kind, delimited text or
binary. Entity types reference earlier ones by ID, so loading runs in a
fixed order, each step building the lookup table the next one needs:

    artists -> songs -> playlists -> customers

Nothing is handed back until every file decoded, so a failed load never
leaves a half-replaced catalog behind. Exports build all output before the
first file is written.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Optional, Set, Tuple, TypeVar

from ...domain.catalog.entities import (
    Artist,
    CatalogEntity,
    CatalogSnapshot,
    Customer,
    CustomerType,
    PlayList,
    Song,
    create_customer,
)
from ...domain.result import UnsupportedOperationError, UnsupportedTypeError
from ...exceptions import FormatError, StorageError
from ...models.config import ENTITY_KINDS, StorageConfig
from .binary_codec import BinarySnapshotCodec
from .delimited_codec import CustomerRecord, DelimitedRecordCodec
from .reference_resolver import ReferenceResolver, UnresolvedReference

logger = logging.getLogger(__name__)

T = TypeVar("T")
E = TypeVar("E", bound=CatalogEntity)


@dataclass
class LoadReport:
    """Result of loading a catalog from files."""
    snapshot: CatalogSnapshot
    unresolved: List[UnresolvedReference] = field(default_factory=list)

    @property
    def has_dangling_references(self) -> bool:
        return bool(self.unresolved)


class CatalogFileManager:
    """Import and export a catalog as flat files described by a StorageConfig."""

    def __init__(self, config: StorageConfig):
        self.config = config.validate()
        self.codec = DelimitedRecordCodec(config.separator)
        self.binary_codec = BinarySnapshotCodec()

    # Delimited text

    def import_delimited(self) -> LoadReport:
        """
        Load all four text files.

        Dangling references become sentinel entities and are listed in the
        report.

        Raises:
            StorageError: If a file is missing or unreadable.
            FormatError: If any record is malformed.
        """
        resolver = ReferenceResolver()

        artists = [artist for _, artist in self._decode_file("artists", self.codec.decode_artist)]
        artists_by_id = self._index(artists, "artists")

        songs = []
        for _, record in self._decode_file("songs", self.codec.decode_song):
            songs.append(Song(
                id=record.id,
                name=record.name,
                genre=record.genre,
                duration_in_seconds=record.duration_in_seconds,
                album=record.album,
                artists=resolver.resolve_artists(record.artist_ids, artists_by_id, f"song {record.id}"),
            ))
        songs_by_id = self._index(songs, "songs")

        playlists = []
        for _, record in self._decode_file("playlists", self.codec.decode_playlist):
            playlists.append(PlayList(
                id=record.id,
                name=record.name,
                songs=resolver.resolve_songs(record.song_ids, songs_by_id, f"playlist {record.id}"),
            ))
        playlists_by_id = self._index(playlists, "playlists")

        customers = []
        usernames: Set[str] = set()
        source = str(self.config.path_for("customers"))
        for line_number, record in self._decode_file("customers", self.codec.decode_customer):
            self._claim_username(usernames, record.username, source, line_number)
            customers.append(self._build_customer(
                record, resolver, artists_by_id, playlists_by_id, source, line_number
            ))
        self._index(customers, "customers")

        snapshot = CatalogSnapshot(artists=artists, songs=songs, playlists=playlists, customers=customers)
        logger.info(f"Imported catalog from {self.config.base_path}: {snapshot.counts()}")
        if resolver.unresolved:
            logger.warning(f"{len(resolver.unresolved)} references could not be resolved")
        return LoadReport(snapshot=snapshot, unresolved=list(resolver.unresolved))

    def export_delimited(self, snapshot: CatalogSnapshot) -> List[Path]:
        """
        Write all four text files, in load order.

        Raises:
            FormatError: If a value cannot be represented in a record. No file
                is written in that case.
            StorageError: If a file cannot be written.
        """
        contents = [
            ("artists", [self.codec.encode_artist(a) for a in snapshot.artists]),
            ("songs", [self.codec.encode_song(s) for s in snapshot.songs]),
            ("playlists", [self.codec.encode_playlist(p) for p in snapshot.playlists]),
            ("customers", [self.codec.encode_customer(c) for c in snapshot.customers]),
        ]

        written = []
        for kind, lines in contents:
            path = self.config.path_for(kind)
            self._write_text(path, lines)
            logger.info(f"Exported {len(lines)} {kind} to {path}")
            written.append(path)
        return written

    # Binary

    def load_binary(self) -> LoadReport:
        """
        Load the four per-collection binary files.

        Each file decodes to its own object graph, so references between
        collections come back as copies. They are relinked by ID to the
        entities of the referenced collection; IDs missing there become
        sentinels, as in a text import.

        Raises:
            StorageError: If a file is missing or unreadable.
            FormatError: If a blob is corrupt or the collections hold
                duplicate IDs or usernames.
        """
        expected = {"artists": Artist, "songs": Song, "playlists": PlayList, "customers": Customer}
        collections = {}
        sources = {}
        for kind, entity_type in expected.items():
            path = self.config.path_for(kind, binary=True)
            try:
                collections[kind] = self.binary_codec.loads(self._read_bytes(path), entity_type)
            except FormatError as e:
                raise FormatError(e.detail, source=str(path)) from e
            sources[kind] = str(path)
            logger.info(f"Loaded {len(collections[kind])} {kind} from {path}")
        return self._relink(CatalogSnapshot(**collections), sources)

    def save_binary(self, snapshot: CatalogSnapshot) -> List[Path]:
        """Write one binary file per collection, each encoded as a single graph."""
        blobs = [
            (kind, self.binary_codec.dumps(getattr(snapshot, kind)))
            for kind in ("artists", "songs", "playlists", "customers")
        ]
        written = []
        for kind, blob in blobs:
            path = self.config.path_for(kind, binary=True)
            self._write_bytes(path, blob)
            logger.info(f"Saved {kind} to {path} ({len(blob)} bytes)")
            written.append(path)
        return written

    def load_snapshot(self) -> LoadReport:
        """Load the whole catalog from the single-file snapshot."""
        path = self.config.snapshot_path
        try:
            snapshot = self.binary_codec.loads_catalog(self._read_bytes(path))
        except FormatError as e:
            raise FormatError(e.detail, source=str(path)) from e
        logger.info(f"Loaded catalog snapshot {path}: {snapshot.counts()}")
        return self._relink(snapshot, {kind: str(path) for kind in ENTITY_KINDS})

    def save_snapshot(self, snapshot: CatalogSnapshot) -> Path:
        """Store the whole catalog in one file, sharing references across collections."""
        path = self.config.snapshot_path
        self._write_bytes(path, self.binary_codec.dumps_catalog(snapshot))
        logger.info(f"Saved catalog snapshot {path}")
        return path

    # Helpers

    def _relink(self, snapshot: CatalogSnapshot, sources: Dict[str, str]) -> LoadReport:
        """Point every reference at the entity held by the referenced collection."""
        resolver = ReferenceResolver()

        artists_by_id = self._index(snapshot.artists, "artists", sources["artists"])

        for song in snapshot.songs:
            song.artists = resolver.resolve_artists(song.artist_ids, artists_by_id, f"song {song.id}")
        songs_by_id = self._index(snapshot.songs, "songs", sources["songs"])

        for playlist in snapshot.playlists:
            playlist.songs = resolver.resolve_songs(
                playlist.song_ids, songs_by_id, f"playlist {playlist.id}")
        playlists_by_id = self._index(snapshot.playlists, "playlists", sources["playlists"])

        customers = []
        usernames: Set[str] = set()
        for customer in snapshot.customers:
            self._claim_username(usernames, customer.username, sources["customers"])
            record = CustomerRecord(
                customer_type=customer.customer_type.value,
                id=customer.id,
                username=customer.username,
                password=customer.password,
                name=customer.name,
                last_name=customer.last_name,
                age=customer.age,
                followed_artist_ids=customer.followed_artist_ids,
                playlist_ids=customer.playlist_ids,
            )
            customers.append(self._build_customer(
                record, resolver, artists_by_id, playlists_by_id, sources["customers"]
            ))
        self._index(customers, "customers", sources["customers"])

        if resolver.unresolved:
            logger.warning(f"{len(resolver.unresolved)} references could not be resolved")
        return LoadReport(
            snapshot=CatalogSnapshot(
                artists=snapshot.artists,
                songs=snapshot.songs,
                playlists=snapshot.playlists,
                customers=customers,
            ),
            unresolved=list(resolver.unresolved),
        )

    @staticmethod
    def _claim_username(usernames: Set[str], username: str, source: str,
                        line_number: Optional[int] = None) -> None:
        if username in usernames:
            raise FormatError(f"Duplicate username {username}", line_number, source)
        usernames.add(username)

    def _build_customer(self, record: CustomerRecord, resolver: ReferenceResolver,
                        artists_by_id: Dict[str, Artist], playlists_by_id: Dict[str, PlayList],
                        source: str, line_number: Optional[int] = None) -> Customer:
        try:
            customer_type = CustomerType.parse(record.customer_type)
        except UnsupportedTypeError as e:
            location = source if line_number is None else f"{source}:{line_number}"
            raise UnsupportedTypeError(f"{location}: {e}") from e

        if customer_type is CustomerType.REGULAR and len(record.playlist_ids) != 1:
            raise FormatError(
                f"Regular customer {record.username} must own exactly one playlist, "
                f"got {len(record.playlist_ids)}",
                line_number,
                source,
            )

        referenced_by = f"customer {record.username}"
        try:
            return create_customer(
                customer_type.value,
                id=record.id,
                username=record.username,
                password=record.password,
                name=record.name,
                last_name=record.last_name,
                age=record.age,
                followed_artists=resolver.resolve_artists(
                    record.followed_artist_ids, artists_by_id, referenced_by),
                playlists=resolver.resolve_playlists(
                    record.playlist_ids, playlists_by_id, referenced_by),
            )
        except UnsupportedOperationError as e:
            raise FormatError(str(e), line_number, source) from e

    def _decode_file(self, kind: str, decode: Callable[[str], T]) -> List[Tuple[int, T]]:
        path = self.config.path_for(kind)
        decoded = []
        for line_number, line in self._read_lines(path):
            try:
                decoded.append((line_number, decode(line)))
            except FormatError as e:
                raise e.at(line_number, str(path)) from e
        logger.info(f"Read {len(decoded)} {kind} records from {path}")
        return decoded

    def _index(self, entities: List[E], kind: str, source: Optional[str] = None) -> Dict[str, E]:
        table: Dict[str, E] = {}
        for entity in entities:
            if entity.id in table:
                raise FormatError(
                    f"Duplicate id {entity.id} in {kind}", source=source or str(self.config.path_for(kind))
                )
            table[entity.id] = entity
        return table

    @staticmethod
    def _read_lines(path: Path) -> List[Tuple[int, str]]:
        try:
            with open(path, "r", encoding="utf-8-sig", newline="") as f:
                text = f.read()
        except OSError as e:
            raise StorageError(f"Cannot read {path}: {e}") from e

        lines = []
        for number, line in enumerate(text.split("\n"), start=1):
            line = line.rstrip("\r")
            if line.strip():
                lines.append((number, line))
        return lines

    @staticmethod
    def _write_text(path: Path, lines: List[str]) -> None:
        text = "".join(f"{line}\n" for line in lines)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "w", encoding="utf-8", newline="") as f:
                f.write(text)
        except OSError as e:
            raise StorageError(f"Cannot write {path}: {e}") from e

    @staticmethod
    def _read_bytes(path: Path) -> bytes:
        try:
            with open(path, "rb") as f:
                return f.read()
        except OSError as e:
            raise StorageError(f"Cannot read {path}: {e}") from e

    @staticmethod
    def _write_bytes(path: Path, blob: bytes) -> None:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "wb") as f:
                f.write(blob)
        except OSError as e:
            raise StorageError(f"Cannot write {path}: {e}") from e
