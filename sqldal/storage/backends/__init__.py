from sqldal.storage.backends.local import LocalFileProvider
from sqldal.storage.backends.memory import MemoryFileProvider

__all__ = ("LocalFileProvider", "MemoryFileProvider")
