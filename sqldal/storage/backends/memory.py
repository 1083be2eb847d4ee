"""In-memory file provider.

Holds a snapshot of file contents keyed by logical name. Produced by :func:`sqldal.storage.load_files` and used
directly in tests.
"""

from collections.abc import Mapping
from types import MappingProxyType
from typing import Union

from mypy_extensions import mypyc_attr

from sqldal.utils.text import normalize_template_name

__all__ = ("MemoryFileProvider",)


@mypyc_attr(allow_interpreted_subclasses=True)
class MemoryFileProvider:
    """Read-only virtual file system backed by a dictionary."""

    __slots__ = ("_files", "backend_type", "root")

    def __init__(self, files: "Mapping[str, Union[bytes, str]]", root: str = "memory://") -> None:
        """Initialize the provider.

        Args:
            files: Mapping of logical name to content. ``str`` content is stored UTF-8 encoded.
            root: Label describing where the files came from.
        """
        snapshot: dict[str, bytes] = {}
        for name, content in files.items():
            key = normalize_template_name(name) or name
            snapshot[key] = content.encode("utf-8") if isinstance(content, str) else bytes(content)
        self._files = MappingProxyType(snapshot)
        self.root = root
        self.backend_type = "memory"

    def __repr__(self) -> str:
        return f"{type(self).__name__}(root={self.root!r}, files={len(self._files)})"

    def __len__(self) -> int:
        return len(self._files)

    def read_bytes(self, name: str) -> bytes:
        key = normalize_template_name(name)
        if key is None or key not in self._files:
            raise FileNotFoundError(name)
        return self._files[key]

    def exists(self, name: str) -> bool:
        key = normalize_template_name(name)
        return key is not None and key in self._files

    def list_names(self) -> "list[str]":
        return sorted(self._files)
