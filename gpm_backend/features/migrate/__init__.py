"""Directory-level migration: pair sidecars and apply them in bulk."""
from .context import MigrationContext
from .runner import (
    MigrationReport,
    NoSidecarError,
    migrate_file,
    migrate_files,
    migrate_flat,
    pair_media_files,
    rename_to_actual_extension,
)
from .walker import iter_media_files

__all__ = [
    "MigrationContext",
    "MigrationReport",
    "NoSidecarError",
    "migrate_file",
    "migrate_files",
    "migrate_flat",
    "pair_media_files",
    "rename_to_actual_extension",
    "iter_media_files",
]
