"""
Filesystem adapter contract consumed by snapshots and the operation engine.

Every method raises a :class:`~retropanel.core.errors.FileOpError` subclass on
failure. Paths are full legacy paths (``C:\\DIR\\NAME.EXT``).
"""
from dataclasses import dataclass

from ..constants import ATTR_DIRECTORY


@dataclass(frozen=True)
class RawEntry:
    """One directory record exactly as the adapter enumerated it."""

    name: str
    attributes: int = 0
    size: int = 0
    modified: float = 0.0

    @property
    def is_dir(self):
        return bool(self.attributes & ATTR_DIRECTORY)


class FileSystemAdapter:
    """Raw file I/O used by the core.

    Subclasses implement every method below. Handles returned by ``open`` and
    ``create`` are opaque to callers and only passed back to ``read``,
    ``write`` and ``close``.
    """

    def drives(self):
        """Return the drive letters this adapter can serve."""
        raise NotImplementedError

    def list_directory(self, pattern):
        """Return ``RawEntry`` records matching ``C:\\DIR\\*.*``-style patterns."""
        raise NotImplementedError

    def open(self, path, mode='r'):
        raise NotImplementedError

    def create(self, path):
        raise NotImplementedError

    def read(self, handle, buffer):
        """Fill ``buffer`` from ``handle`` and return the byte count (0 at EOF)."""
        raise NotImplementedError

    def write(self, handle, buffer, count):
        """Write the first ``count`` bytes of ``buffer``; return bytes written."""
        raise NotImplementedError

    def close(self, handle):
        raise NotImplementedError

    def delete(self, path):
        raise NotImplementedError

    def rename(self, old_path, new_path):
        raise NotImplementedError

    def mkdir(self, path):
        raise NotImplementedError

    def rmdir(self, path):
        raise NotImplementedError

    def get_attributes(self, path):
        raise NotImplementedError

    def set_attributes(self, path, attributes):
        raise NotImplementedError

    def exists(self, path):
        raise NotImplementedError
