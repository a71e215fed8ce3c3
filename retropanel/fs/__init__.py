from .adapter import FileSystemAdapter, RawEntry
from .local import LocalFileSystem

__all__ = ['FileSystemAdapter', 'RawEntry', 'LocalFileSystem']
