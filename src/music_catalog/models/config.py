"""Configuration model for music catalog storage."""

from pathlib import Path
from typing import Any, Dict
import json
from dataclasses import dataclass, field, fields, is_dataclass, asdict

from ..exceptions import ConfigurationError

ENTITY_KINDS = ("artists", "songs", "playlists", "customers")


@dataclass
class FileNamesConfig:
    """Base file names, without extension, for each entity collection."""
    artists: str = "artists"
    songs: str = "songs"
    playlists: str = "playlists"
    customers: str = "customers"


@dataclass
class StorageConfig:
    """Where and how the catalog is stored."""
    base_path: Path = field(default_factory=lambda: Path("."))
    separator: str = ";"
    text_extension: str = ".csv"
    binary_extension: str = ".spot"
    snapshot_name: str = "catalog"
    file_names: FileNamesConfig = field(default_factory=FileNamesConfig)

    def __post_init__(self):
        if isinstance(self.base_path, str):
            self.base_path = Path(self.base_path)
        if isinstance(self.file_names, dict):
            self.file_names = FileNamesConfig(**self.file_names)

    def validate(self) -> "StorageConfig":
        """Check every setting, raising ConfigurationError on the first problem."""
        if not str(self.base_path):
            raise ConfigurationError("base_path must not be empty")

        for name in ("separator", "text_extension", "binary_extension", "snapshot_name"):
            if not getattr(self, name):
                raise ConfigurationError(f"{name} must not be empty")

        for kind in ENTITY_KINDS:
            if not getattr(self.file_names, kind):
                raise ConfigurationError(f"file name for {kind} must not be empty")

        if any(ch in self.separator for ch in ",{}\r\n"):
            raise ConfigurationError(
                f"Separator {self.separator!r} clashes with the ID collection syntax"
            )
        return self

    def path_for(self, kind: str, binary: bool = False) -> Path:
        """File path of one entity collection."""
        if kind not in ENTITY_KINDS:
            raise ConfigurationError(f"Unknown entity collection: {kind}")
        extension = self.binary_extension if binary else self.text_extension
        return self.base_path / f"{getattr(self.file_names, kind)}{extension}"

    @property
    def snapshot_path(self) -> Path:
        """File path of the single-file binary catalog snapshot."""
        return self.base_path / f"{self.snapshot_name}{self.binary_extension}"


def _dataclass_to_dict(obj):
    """Convert dataclass to dict recursively."""
    if is_dataclass(obj):
        return {key: _dataclass_to_dict(value) for key, value in asdict(obj).items()}
    elif isinstance(obj, Path):
        return str(obj)
    elif isinstance(obj, dict):
        return {key: _dataclass_to_dict(value) for key, value in obj.items()}
    return obj


def _dict_to_dataclass(data: Dict[str, Any], dataclass_type):
    """Convert dict to dataclass recursively, ignoring unknown keys."""
    kwargs = {}
    for f in fields(dataclass_type):
        if f.name not in data:
            continue
        value = data[f.name]
        if f.name == "file_names" and isinstance(value, dict):
            value = _dict_to_dataclass(value, FileNamesConfig)
        kwargs[f.name] = value
    return dataclass_type(**kwargs)


def load_config(config_path: Path) -> StorageConfig:
    """Load configuration from JSON file."""
    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            config_data = json.load(f)
    except OSError as e:
        raise ConfigurationError(f"Cannot read configuration {config_path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid configuration {config_path}: {e}") from e

    if not isinstance(config_data, dict):
        raise ConfigurationError(f"Configuration {config_path} must be a JSON object")

    return _dict_to_dataclass(config_data, StorageConfig).validate()


def save_config(config: StorageConfig, config_path: Path) -> None:
    """Save configuration to JSON file."""
    config_dict = _dataclass_to_dict(config)

    with open(config_path, 'w', encoding='utf-8') as f:
        json.dump(config_dict, f, indent=2)
