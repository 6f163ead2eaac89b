"""Data models for music catalog."""

from .config import StorageConfig, FileNamesConfig, load_config, save_config

__all__ = ["StorageConfig", "FileNamesConfig", "load_config", "save_config"]
