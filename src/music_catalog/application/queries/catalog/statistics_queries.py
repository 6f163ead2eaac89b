"""Statistics-related queries."""

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from ....domain.catalog.entities import CustomerType, Song
from ....domain.catalog.repositories import (
    ArtistRepository,
    CustomerRepository,
    PlayListRepository,
    SongRepository,
)


@dataclass(frozen=True, slots=True, kw_only=True)
class GetCatalogStatisticsQuery:
    """Query to get overall catalog statistics."""

    top_n: int = 10


@dataclass
class CatalogStatistics:
    """Aggregate counts over the catalog."""

    total_artists: int
    total_songs: int
    total_playlists: int
    total_customers: int
    premium_customers: int
    total_duration_hours: float
    genre_distribution: Dict[str, int]
    most_followed_artists: List[Tuple[str, int]]
    most_added_songs: List[Tuple[str, int]]
    songs_by_artist: List[Tuple[str, int]]
    unknown_references: int = 0


class GetCatalogStatisticsHandler:
    """Handler for getting catalog statistics."""

    def __init__(self, artist_repo: ArtistRepository, song_repo: SongRepository,
                 playlist_repo: PlayListRepository, customer_repo: CustomerRepository):
        self.artist_repo = artist_repo
        self.song_repo = song_repo
        self.playlist_repo = playlist_repo
        self.customer_repo = customer_repo

    def handle(self, query: GetCatalogStatisticsQuery) -> CatalogStatistics:
        """Handle the get catalog statistics query."""
        songs = self.song_repo.find_all()
        customers = self.customer_repo.find_all()

        genre_distribution: Dict[str, int] = {}
        for song in songs:
            genre_distribution[song.genre] = genre_distribution.get(song.genre, 0) + 1

        return CatalogStatistics(
            total_artists=self.artist_repo.count(),
            total_songs=len(songs),
            total_playlists=self.playlist_repo.count(),
            total_customers=len(customers),
            premium_customers=sum(1 for c in customers if c.customer_type is CustomerType.PREMIUM),
            total_duration_hours=sum(s.duration_in_seconds for s in songs) / 3600,
            genre_distribution=genre_distribution,
            most_followed_artists=self.most_followed_artists()[:query.top_n],
            most_added_songs=[
                (song.name, count) for song, count in self.song_counts_in_playlists()[:query.top_n]
            ],
            songs_by_artist=self.song_counts_by_artist()[:query.top_n],
            unknown_references=self._count_unknown_references(),
        )

    def most_followed_artists(self) -> List[Tuple[str, int]]:
        """Artist names with their follower count, most followed first."""
        counts: Dict[str, int] = {}
        for customer in self.customer_repo.find_all():
            for artist in customer.followed_artists:
                counts[artist.name] = counts.get(artist.name, 0) + 1
        return sorted(counts.items(), key=lambda x: x[1], reverse=True)

    def song_counts_in_playlists(self) -> List[Tuple[Song, int]]:
        """Songs with the number of times they appear in playlists, most added first."""
        counts: Dict[str, int] = {}
        songs: Dict[str, Song] = {}
        for playlist in self.playlist_repo.find_all():
            for song in playlist.songs:
                counts[song.id] = counts.get(song.id, 0) + 1
                songs.setdefault(song.id, song)
        return sorted(((songs[i], n) for i, n in counts.items()), key=lambda x: x[1], reverse=True)

    def most_added_song(self) -> Optional[Tuple[Song, int]]:
        ranked = self.song_counts_in_playlists()
        return ranked[0] if ranked else None

    def song_counts_by_artist(self) -> List[Tuple[str, int]]:
        """Artist names with the number of catalog songs they appear on."""
        counts: Dict[str, int] = {}
        for song in self.song_repo.find_all():
            for artist in song.artists:
                counts[artist.name] = counts.get(artist.name, 0) + 1
        return sorted(counts.items(), key=lambda x: x[1], reverse=True)

    def _count_unknown_references(self) -> int:
        count = 0
        for song in self.song_repo.find_all():
            count += sum(1 for a in song.artists if a.is_unknown)
        for playlist in self.playlist_repo.find_all():
            count += sum(1 for s in playlist.songs if s.is_unknown)
        for customer in self.customer_repo.find_all():
            count += sum(1 for a in customer.followed_artists if a.is_unknown)
            count += sum(1 for p in customer.playlists if p.is_unknown)
        return count
