"""Local file system provider.

Reads templates lazily from a directory. Every call hits the disk, so edits to SQL files are picked up without a
restart.
"""

from pathlib import Path
from typing import Union

from mypy_extensions import mypyc_attr

from sqldal.exceptions import ImproperConfigurationError
from sqldal.utils.text import normalize_template_name

__all__ = ("LocalFileProvider", "resolve_within")


def resolve_within(base_path: Path, path: Path) -> "Path | None":
    """Resolve symlinks in ``path``; ``None`` if the target lies outside ``base_path``.

    ``base_path`` must already be resolved.
    """
    resolved = path.resolve()
    return resolved if resolved.is_relative_to(base_path) else None


@mypyc_attr(allow_interpreted_subclasses=True)
class LocalFileProvider:
    """File provider rooted at a local directory.

    Names are resolved relative to ``base_path``. Names that are absolute, climb out of the root, or lead through a
    symlink to a file outside it never resolve.
    """

    __slots__ = ("backend_type", "base_path", "pattern")

    def __init__(self, base_path: "Union[str, Path]", pattern: str = "**/*.sql") -> None:
        """Initialize local provider.

        Args:
            base_path: Directory holding the SQL files.
            pattern: Glob used by :meth:`list_names`.

        Raises:
            ImproperConfigurationError: If ``base_path`` is not an existing directory.
        """
        path = Path(base_path).expanduser().resolve()
        if not path.is_dir():
            msg = f"SQL root {str(base_path)!r} is not a directory"
            raise ImproperConfigurationError(msg)
        self.base_path = path
        self.pattern = pattern
        self.backend_type = "local"

    def __repr__(self) -> str:
        return f"{type(self).__name__}(base_path={str(self.base_path)!r})"

    def _resolve_path(self, name: str) -> "Path | None":
        key = normalize_template_name(name)
        if key is None:
            return None
        return resolve_within(self.base_path, self.base_path / key)

    def read_bytes(self, name: str) -> bytes:
        resolved = self._resolve_path(name)
        if resolved is None or not resolved.is_file():
            raise FileNotFoundError(name)
        return resolved.read_bytes()

    def exists(self, name: str) -> bool:
        resolved = self._resolve_path(name)
        return resolved is not None and resolved.is_file()

    def list_names(self) -> "list[str]":
        return sorted(
            path.relative_to(self.base_path).as_posix()
            for path in self.base_path.glob(self.pattern)
            if path.is_file() and resolve_within(self.base_path, path) is not None
        )
