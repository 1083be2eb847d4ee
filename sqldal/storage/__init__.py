"""File providers for SQL templates.

Two implementations of :class:`~sqldal.protocols.FileProviderProtocol` are available:

- :class:`MemoryFileProvider` holds file contents in memory; :func:`load_files` builds one from a directory.
- :class:`LocalFileProvider` reads from disk on every lookup.
"""

from pathlib import Path
from typing import Union

from sqldal.exceptions import ImproperConfigurationError
from sqldal.storage.backends import LocalFileProvider, MemoryFileProvider
from sqldal.storage.backends.local import resolve_within
from sqldal.utils.logging import get_logger

__all__ = ("LocalFileProvider", "MemoryFileProvider", "load_files")

logger = get_logger("storage")


def load_files(root: "Union[str, Path]", pattern: str = "**/*.sql") -> MemoryFileProvider:
    """Read every file under ``root`` matching ``pattern`` into memory.

    Names are paths relative to ``root`` in POSIX form, so ``root/customers/insert.sql`` is
    ``"customers/insert.sql"``. Symlinks leading outside ``root`` are skipped.

    Args:
        root: Directory to load.
        pattern: Glob selecting the files to load.

    Raises:
        ImproperConfigurationError: If ``root`` is not an existing directory.

    Returns:
        Provider holding the loaded files.
    """
    base_path = Path(root).expanduser().resolve()
    if not base_path.is_dir():
        msg = f"SQL root {str(root)!r} is not a directory"
        raise ImproperConfigurationError(msg)

    files = {
        path.relative_to(base_path).as_posix(): path.read_bytes()
        for path in sorted(base_path.glob(pattern))
        if path.is_file() and resolve_within(base_path, path) is not None
    }
    logger.debug("Loaded %d SQL files from %s", len(files), base_path)
    return MemoryFileProvider(files, root=str(base_path))
