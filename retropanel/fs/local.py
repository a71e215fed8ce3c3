"""
Host-backed filesystem adapter.

Each legacy drive letter maps to a host directory, so ``D:\\DST\\A.TXT``
with ``{'D': '/srv/d'}`` resolves to ``/srv/d/DST/A.TXT``.
"""
import fnmatch
import logging
import os
import stat

from ..constants import (
    ATTR_ARCHIVE, ATTR_DIRECTORY, ATTR_HIDDEN, ATTR_READONLY, CURRENT_NAME, MATCH_ALL, PARENT_NAME,
)
from ..core import paths
from ..core.errors import AlreadyExists, CrossDevice, FileOpError, MediaNotReady, NotFound, WriteFailure, from_os_error
from .adapter import FileSystemAdapter, RawEntry

LOGGER = logging.getLogger(__name__)

_MAX_SIZE = 0xFFFFFFFF
_WRITE_BITS = stat.S_IWUSR | stat.S_IWGRP | stat.S_IWOTH
_OPEN_MODES = {'r': 'rb', 'w': 'r+b', 'rw': 'r+b'}


def _mask_matches(mask, name):
    if mask in (MATCH_ALL, '*'):
        return True
    return fnmatch.fnmatch(name.upper(), mask.upper())


def _same_host_file(first, second):
    try:
        return os.path.samefile(first, second)
    except OSError:
        return False


class LocalFileSystem(FileSystemAdapter):
    """Serve legacy drive letters from host directories."""

    def __init__(self, drives):
        self._roots = {}
        for letter, root in (drives or {}).items():
            self._roots[paths.drive_letter(letter)] = os.path.abspath(os.path.expanduser(str(root)))

    def drives(self):
        return sorted(self._roots)

    def host_path(self, full_path):
        """Resolve a legacy full path to the host path it refers to."""
        drive, directory = paths.split_full(full_path)
        root = self._roots.get(drive)
        if root is None:
            raise MediaNotReady(f'Drive {drive}: is not available', f'{drive}:')
        if not os.path.isdir(root):
            raise MediaNotReady(f'Drive {drive}: is not ready', f'{drive}:')
        host = os.path.join(root, *paths.components(directory))
        real_root = os.path.realpath(root)
        if os.path.commonpath([real_root, os.path.realpath(host)]) != real_root:
            raise NotFound('Path not found', full_path)
        return host

    def _raw_entry(self, host_dir, name):
        st = os.stat(os.path.join(host_dir, name))
        attributes = 0
        if stat.S_ISDIR(st.st_mode):
            attributes |= ATTR_DIRECTORY
        else:
            attributes |= ATTR_ARCHIVE
        if not st.st_mode & stat.S_IWUSR:
            attributes |= ATTR_READONLY
        if name.startswith('.'):
            attributes |= ATTR_HIDDEN
        size = 0 if attributes & ATTR_DIRECTORY else min(st.st_size, _MAX_SIZE)
        return RawEntry(name, attributes, size, st.st_mtime)

    def list_directory(self, pattern):
        directory = paths.parent(pattern.partition(':')[2])
        mask = paths.basename(pattern) or MATCH_ALL
        drive = paths.split_full(pattern)[0]
        host_dir = self.host_path(paths.build(drive, directory))
        try:
            names = os.listdir(host_dir)
        except OSError as exc:
            raise from_os_error(exc, paths.build(drive, directory)) from exc

        records = []
        if not paths.is_root(directory):
            records.append(RawEntry(CURRENT_NAME, ATTR_DIRECTORY))
            records.append(RawEntry(PARENT_NAME, ATTR_DIRECTORY))
        for name in names:
            if not _mask_matches(mask, name):
                continue
            try:
                records.append(self._raw_entry(host_dir, name))
            except OSError:
                # Dangling symlinks and entries removed mid-listing.
                LOGGER.debug('Skipping unreadable entry %s in %s', name, host_dir)
        return records

    def open(self, path, mode='r'):
        host = self.host_path(path)
        if os.path.isdir(host):
            raise AlreadyExists('Is a directory', path)
        try:
            return open(host, _OPEN_MODES.get(mode, 'rb'))
        except OSError as exc:
            raise from_os_error(exc, path) from exc

    def create(self, path):
        host = self.host_path(path)
        try:
            return open(host, 'wb')
        except OSError as exc:
            raise from_os_error(exc, path) from exc

    def read(self, handle, buffer):
        try:
            return handle.readinto(buffer) or 0
        except OSError as exc:
            raise from_os_error(exc) from exc

    def write(self, handle, buffer, count):
        try:
            written = handle.write(memoryview(buffer)[:count])
        except OSError as exc:
            raise from_os_error(exc) from exc
        if written != count:
            raise WriteFailure(f'Short write ({written} of {count} bytes)')
        return written

    def close(self, handle):
        try:
            handle.close()
        except OSError as exc:
            raise from_os_error(exc) from exc

    def delete(self, path):
        host = self.host_path(path)
        if os.path.isdir(host) and not os.path.islink(host):
            raise AlreadyExists('Is a directory', path)
        try:
            os.remove(host)
        except OSError as exc:
            raise from_os_error(exc, path) from exc

    def rename(self, old_path, new_path):
        old_drive = paths.split_full(old_path)[0]
        new_drive = paths.split_full(new_path)[0]
        if old_drive != new_drive:
            raise CrossDevice('Not same device', new_path)
        old_host = self.host_path(old_path)
        new_host = self.host_path(new_path)
        if not os.path.lexists(old_host):
            raise NotFound('File not found', old_path)
        # Legacy rename never replaces an existing target; a case-only
        # rename of the same host file is allowed.
        if os.path.lexists(new_host) and not _same_host_file(old_host, new_host):
            raise AlreadyExists('Access denied', new_path)
        try:
            os.rename(old_host, new_host)
        except OSError as exc:
            raise from_os_error(exc, new_path) from exc

    def mkdir(self, path):
        host = self.host_path(path)
        try:
            os.mkdir(host)
        except OSError as exc:
            raise from_os_error(exc, path) from exc

    def rmdir(self, path):
        host = self.host_path(path)
        try:
            os.rmdir(host)
        except OSError as exc:
            raise from_os_error(exc, path) from exc

    def get_attributes(self, path):
        host = self.host_path(path)
        try:
            return self._raw_entry(os.path.dirname(host), os.path.basename(host)).attributes
        except OSError as exc:
            raise from_os_error(exc, path) from exc

    def set_attributes(self, path, attributes):
        host = self.host_path(path)
        try:
            mode = stat.S_IMODE(os.stat(host).st_mode)
            if attributes & ATTR_READONLY:
                mode &= ~_WRITE_BITS
            else:
                mode |= stat.S_IWUSR
            os.chmod(host, mode)
        except OSError as exc:
            raise from_os_error(exc, path) from exc

    def exists(self, path):
        try:
            return os.path.lexists(self.host_path(path))
        except FileOpError:
            return False
