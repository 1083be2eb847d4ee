"""SQL template store.

Resolves logical template names to SQL text through an injected file provider. The store keeps no cache; every
call reads from the provider.
"""

import hashlib
from difflib import get_close_matches
from typing import Optional

from sqldal.exceptions import MissingFileProviderError, TemplateLoadError, TemplateNotFoundError
from sqldal.protocols import FileProviderProtocol, ListableFileProviderProtocol
from sqldal.utils.logging import get_logger
from sqldal.utils.text import normalize_template_name

__all__ = ("SQLTemplate", "TemplateStore")

logger = get_logger("loader")

MAX_SUGGESTIONS = 3


class SQLTemplate:
    """Raw content of a SQL template file."""

    __slots__ = ("_checksum", "content", "name")

    def __init__(self, name: str, content: bytes) -> None:
        self.name = name
        self.content = content
        self._checksum: Optional[str] = None

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, size={len(self.content)})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SQLTemplate):
            return NotImplemented
        return self.name == other.name and self.content == other.content

    def __hash__(self) -> int:
        return hash((self.name, self.content))

    @property
    def checksum(self) -> str:
        """MD5 hex digest of the content."""
        if self._checksum is None:
            self._checksum = hashlib.md5(self.content, usedforsecurity=False).hexdigest()
        return self._checksum

    @property
    def is_empty(self) -> bool:
        """Whether the template holds no SQL besides whitespace."""
        return not self.content.strip()

    def decode(self, encoding: str = "utf-8") -> str:
        """Decode the content.

        Args:
            encoding: Text encoding of the file.

        Raises:
            TemplateLoadError: If the content is not valid in ``encoding``.

        Returns:
            The SQL text.
        """
        try:
            return self.content.decode(encoding)
        except (UnicodeDecodeError, LookupError) as e:
            raise TemplateLoadError(self.name, f"cannot decode as {encoding}: {e}") from e

    @property
    def text(self) -> str:
        """Content decoded as UTF-8."""
        return self.decode()


class TemplateStore:
    """Loads SQL templates by logical name.

    Example:
        >>> store = TemplateStore(load_files("sql"))
        >>> store.load_text("customers/insert.sql")
    """

    __slots__ = ("encoding", "provider")

    def __init__(self, provider: Optional[FileProviderProtocol], encoding: str = "utf-8") -> None:
        self.provider = provider
        self.encoding = encoding

    def __repr__(self) -> str:
        return f"{type(self).__name__}(provider={self.provider!r})"

    def load(self, name: str) -> SQLTemplate:
        """Fetch the raw template stored under ``name``.

        Args:
            name: Logical template name.

        Raises:
            MissingFileProviderError: If no file provider is configured.
            TemplateNotFoundError: If ``name`` is empty or does not resolve.
            TemplateLoadError: If the provider fails to read existing content.

        Returns:
            The template; its content may be empty.
        """
        if self.provider is None:
            raise MissingFileProviderError(name)

        key = normalize_template_name(name) if name else None
        if key is None:
            raise TemplateNotFoundError(name)

        try:
            content = self.provider.read_bytes(key)
        except FileNotFoundError as e:
            raise TemplateNotFoundError(name, self._suggest(key)) from e
        except OSError as e:
            raise TemplateLoadError(name, str(e)) from e

        logger.debug("Loaded SQL template %s (%d bytes)", key, len(content))
        return SQLTemplate(key, content)

    def load_text(self, name: str) -> str:
        """Fetch and decode the template stored under ``name``.

        Raises:
            MissingFileProviderError: If no file provider is configured.
            TemplateNotFoundError: If ``name`` does not resolve.
            TemplateLoadError: If the content cannot be read or decoded.

        Returns:
            The SQL text.
        """
        return self.load(name).decode(self.encoding)

    def exists(self, name: str) -> bool:
        """Report whether ``name`` resolves to a template."""
        key = normalize_template_name(name) if name else None
        return self.provider is not None and key is not None and self.provider.exists(key)

    def list_templates(self) -> "list[str]":
        """List template names known to the provider.

        Raises:
            MissingFileProviderError: If no file provider is configured.

        Returns:
            Sorted names, or an empty list when the provider cannot enumerate.
        """
        if self.provider is None:
            raise MissingFileProviderError()
        if not isinstance(self.provider, ListableFileProviderProtocol):
            return []
        return sorted(self.provider.list_names())

    def _suggest(self, key: str) -> "list[str]":
        if not isinstance(self.provider, ListableFileProviderProtocol):
            return []
        return get_close_matches(key, self.provider.list_names(), n=MAX_SUGGESTIONS)
