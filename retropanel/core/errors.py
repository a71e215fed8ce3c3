"""
Error taxonomy for filesystem operations.

Adapters raise these instead of bare ``OSError`` so the engine can decide
which failures are per-entry and which abort a job.
"""
import errno


class FileOpError(Exception):
    """Base class for every failure surfaced by the file manager core."""

    label = 'Error'

    def __init__(self, message, path=None):
        super().__init__(message)
        self.path = path

    @property
    def message(self):
        return str(self)

    def describe(self):
        """Return a one-line text suitable for an alert box."""
        if self.path:
            return f'{self.label}: {self.message} ({self.path})'
        return f'{self.label}: {self.message}'


class NotFound(FileOpError):
    label = 'Not found'


class PermissionOrReadOnly(FileOpError):
    label = 'Access denied'


class WriteFailure(FileOpError):
    label = 'Write failure'


class CrossDevice(WriteFailure):
    label = 'Not same device'


class MediaNotReady(FileOpError):
    label = 'Drive not ready'


class Cancelled(FileOpError):
    label = 'Cancelled'

    def __init__(self, message='Operation cancelled by user', path=None):
        super().__init__(message, path)


class InvalidName(FileOpError):
    label = 'Invalid name'


class AlreadyExists(FileOpError):
    label = 'Already exists'


_ERRNO_MAP = {
    errno.ENOENT: NotFound,
    errno.ENOTDIR: NotFound,
    errno.EACCES: PermissionOrReadOnly,
    errno.EPERM: PermissionOrReadOnly,
    errno.EROFS: PermissionOrReadOnly,
    errno.EBUSY: PermissionOrReadOnly,
    errno.ENOSPC: WriteFailure,
    errno.EIO: WriteFailure,
    errno.EFBIG: WriteFailure,
    errno.EEXIST: AlreadyExists,
    errno.ENOTEMPTY: AlreadyExists,
    errno.EISDIR: AlreadyExists,
    errno.ENODEV: MediaNotReady,
    errno.ENXIO: MediaNotReady,
    errno.EINVAL: InvalidName,
    errno.ENAMETOOLONG: InvalidName,
}

for _name, _cls in (('EDQUOT', WriteFailure), ('ENOMEDIUM', MediaNotReady), ('EXDEV', CrossDevice)):
    _code = getattr(errno, _name, None)
    if _code is not None:
        _ERRNO_MAP[_code] = _cls


def from_os_error(exc, path=None):
    """Translate a host ``OSError`` into the matching taxonomy error."""
    cls = _ERRNO_MAP.get(getattr(exc, 'errno', None), WriteFailure)
    message = exc.strerror or str(exc)
    return cls(message, path or getattr(exc, 'filename', None))
