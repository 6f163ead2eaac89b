"""Command line interface for music catalog."""

import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from . import __version__
from .application.queries.catalog import GetCatalogStatisticsHandler, GetCatalogStatisticsQuery
from .domain.catalog.services import CatalogService
from .exceptions import MusicCatalogError
from .infrastructure.persistence import CatalogFileManager, LoadReport
from .infrastructure.repositories import create_in_memory_catalog
from .models.config import StorageConfig, load_config

console = Console()

STORAGE_KINDS = ("csv", "binary", "snapshot")


def _build_config(directory: Path, config: Optional[Path], separator: Optional[str]) -> StorageConfig:
    cfg = load_config(config) if config else StorageConfig()
    cfg.base_path = directory
    if separator:
        cfg.separator = separator
    return cfg.validate()


def _load(manager: CatalogFileManager, kind: str) -> LoadReport:
    if kind == "csv":
        return manager.import_delimited()
    if kind == "binary":
        return manager.load_binary()
    return manager.load_snapshot()


def _store(manager: CatalogFileManager, kind: str, catalog: CatalogService) -> None:
    snapshot = catalog.snapshot()
    if kind == "csv":
        manager.export_delimited(snapshot)
    elif kind == "binary":
        manager.save_binary(snapshot)
    else:
        manager.save_snapshot(snapshot)


def _open_catalog(directory: Path, config: Optional[Path], separator: Optional[str],
                  kind: str) -> tuple:
    manager = CatalogFileManager(_build_config(directory, config, separator))
    report = _load(manager, kind)
    catalog = create_in_memory_catalog()
    catalog.apply_snapshot(report.snapshot)
    return catalog, report


def _fail(error: Exception) -> None:
    console.print(f"\n[red]Error: {escape(str(error))}[/red]")
    sys.exit(1)


storage_option = click.option(
    '--from', 'source_kind',
    type=click.Choice(STORAGE_KINDS),
    default='csv',
    show_default=True,
    help='Storage kind to read'
)
config_option = click.option(
    '--config',
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Storage configuration file (JSON)'
)
separator_option = click.option(
    '--separator',
    help='Field separator for delimited files (default ";")'
)


@click.group()
@click.version_option(version=__version__)
@click.option('--verbose', is_flag=True, help='Verbose output')
def cli(verbose: bool):
    """Manage a music catalog stored as delimited text or binary snapshots."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@click.argument('directory', type=click.Path(exists=True, file_okay=False, path_type=Path))
@storage_option
@config_option
@separator_option
def show(directory: Path, source_kind: str, config: Optional[Path], separator: Optional[str]):
    """Load the catalog in DIRECTORY and print its contents."""
    try:
        catalog, _ = _open_catalog(directory, config, separator, source_kind)
    except MusicCatalogError as e:
        _fail(e)
        return

    artists_table = Table(title="Artists")
    artists_table.add_column("ID", style="dim")
    artists_table.add_column("Name", style="cyan")
    for artist in catalog.get_artists():
        artists_table.add_row(artist.id, artist.name)
    console.print(artists_table)

    songs_table = Table(title="Songs")
    songs_table.add_column("ID", style="dim")
    songs_table.add_column("Name", style="cyan")
    songs_table.add_column("Artists")
    songs_table.add_column("Genre")
    songs_table.add_column("Duration", justify="right")
    songs_table.add_column("Album")
    for song in catalog.get_songs():
        songs_table.add_row(
            song.id,
            song.name,
            ", ".join(_mark(a.name, a.is_unknown) for a in song.artists),
            song.genre,
            str(song.duration_in_seconds),
            song.album,
        )
    console.print(songs_table)

    playlists_table = Table(title="Playlists")
    playlists_table.add_column("ID", style="dim")
    playlists_table.add_column("Name", style="cyan")
    playlists_table.add_column("Songs")
    for playlist in catalog.get_playlists():
        playlists_table.add_row(
            playlist.id,
            playlist.name,
            ", ".join(_mark(s.name, s.is_unknown) for s in playlist.songs),
        )
    console.print(playlists_table)

    customers_table = Table(title="Customers")
    customers_table.add_column("Type")
    customers_table.add_column("Username", style="cyan")
    customers_table.add_column("Name")
    customers_table.add_column("Age", justify="right")
    customers_table.add_column("Follows", justify="right")
    customers_table.add_column("Playlists", justify="right")
    for customer in catalog.get_customers():
        customers_table.add_row(
            customer.customer_type.value,
            customer.username,
            customer.full_name,
            str(customer.age),
            str(len(customer.followed_artists)),
            str(len(customer.playlists)),
        )
    console.print(customers_table)


def _mark(name: str, unknown: bool) -> str:
    return f"[yellow]{escape(name)}[/yellow]" if unknown else escape(name)


@cli.command()
@click.argument('source', type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.argument('target', type=click.Path(file_okay=False, path_type=Path))
@storage_option
@click.option(
    '--to', 'target_kind',
    type=click.Choice(STORAGE_KINDS),
    default='binary',
    show_default=True,
    help='Storage kind to write'
)
@config_option
@separator_option
@click.option('--target-separator', help='Field separator for the written delimited files')
def convert(source: Path, target: Path, source_kind: str, target_kind: str,
            config: Optional[Path], separator: Optional[str], target_separator: Optional[str]):
    """Load the catalog in SOURCE and write it to TARGET in another storage kind."""
    try:
        catalog, report = _open_catalog(source, config, separator, source_kind)
        target_config = _build_config(target, config, target_separator or separator)
        _store(CatalogFileManager(target_config), target_kind, catalog)
    except MusicCatalogError as e:
        _fail(e)
        return

    counts = catalog.snapshot().counts()
    console.print(f"[green]Converted {source_kind} catalog to {target_kind} in {target}[/green]")
    console.print(", ".join(f"{n} {kind}" for kind, n in counts.items()))
    if report.unresolved:
        console.print(f"[yellow]{len(report.unresolved)} unresolved references were kept as unknown entities[/yellow]")


@cli.command()
@click.argument('directory', type=click.Path(exists=True, file_okay=False, path_type=Path))
@config_option
@separator_option
@click.option('--strict', is_flag=True, help='Exit with status 1 when references are unresolved')
def check(directory: Path, config: Optional[Path], separator: Optional[str], strict: bool):
    """Check the delimited catalog in DIRECTORY for unresolved references."""
    try:
        _, report = _open_catalog(directory, config, separator, "csv")
    except MusicCatalogError as e:
        _fail(e)
        return

    if not report.unresolved:
        console.print("[green]All references resolved[/green]")
        return

    table = Table(title="Unresolved references")
    table.add_column("Kind", style="cyan")
    table.add_column("ID")
    table.add_column("Referenced by")
    for reference in report.unresolved:
        table.add_row(reference.kind, reference.id, reference.referenced_by)
    console.print(table)

    if strict:
        sys.exit(1)


@cli.command()
@click.argument('directory', type=click.Path(exists=True, file_okay=False, path_type=Path))
@storage_option
@config_option
@separator_option
@click.option('--top', default=5, show_default=True, help='Rows per ranking')
def report(directory: Path, source_kind: str, config: Optional[Path], separator: Optional[str], top: int):
    """Print statistics for the catalog in DIRECTORY."""
    try:
        catalog, _ = _open_catalog(directory, config, separator, source_kind)
    except MusicCatalogError as e:
        _fail(e)
        return

    handler = GetCatalogStatisticsHandler(
        catalog.artist_repo, catalog.song_repo, catalog.playlist_repo, catalog.customer_repo
    )
    stats = handler.handle(GetCatalogStatisticsQuery(top_n=top))

    summary = Table(title="Catalog")
    summary.add_column("Metric", style="cyan")
    summary.add_column("Value", justify="right")
    summary.add_row("Artists", str(stats.total_artists))
    summary.add_row("Songs", str(stats.total_songs))
    summary.add_row("Playlists", str(stats.total_playlists))
    summary.add_row("Customers", str(stats.total_customers))
    summary.add_row("Premium customers", str(stats.premium_customers))
    summary.add_row("Total duration (h)", f"{stats.total_duration_hours:.2f}")
    summary.add_row("Unknown references", str(stats.unknown_references))
    console.print(summary)

    for title, rows in (
        ("Most followed artists", stats.most_followed_artists),
        ("Most added songs", stats.most_added_songs),
        ("Songs by artist", stats.songs_by_artist),
    ):
        table = Table(title=title)
        table.add_column("Name", style="cyan")
        table.add_column("Count", justify="right")
        for name, count in rows:
            table.add_row(name, str(count))
        console.print(table)


def main():
    """Main entry point."""
    cli()


if __name__ == '__main__':
    main()
