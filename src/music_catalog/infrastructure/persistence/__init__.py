"""
Persistence - Infrastructure Layer

Delimited text and binary snapshot storage for the catalog.
"""

from .delimited_codec import (
    DEFAULT_SEPARATOR,
    CustomerRecord,
    DelimitedRecordCodec,
    PlayListRecord,
    SongRecord,
    format_id_collection,
    parse_id_collection,
)
from .reference_resolver import ReferenceResolver, UnresolvedReference
from .binary_codec import BinarySnapshotCodec
from .catalog_files import CatalogFileManager, LoadReport

__all__ = [
    "DEFAULT_SEPARATOR",
    "DelimitedRecordCodec",
    "SongRecord",
    "PlayListRecord",
    "CustomerRecord",
    "format_id_collection",
    "parse_id_collection",
    "ReferenceResolver",
    "UnresolvedReference",
    "BinarySnapshotCodec",
    "CatalogFileManager",
    "LoadReport",
]
