"""
Path helpers for the legacy ``D:\\DIR\\NAME.EXT`` hierarchy.

Directory paths are kept drive-relative: ``\\`` is the root and
``\\SRC\\SUB`` a nested directory. Full paths carry the drive letter.
"""
import string

from ..constants import MAX_BASE_LEN, MAX_EXT_LEN, MAX_NAME_LEN, PARENT_NAME, CURRENT_NAME, SEPARATOR
from .errors import InvalidName

ROOT = SEPARATOR

# Characters DOS refuses in a filename component.
_ILLEGAL_CHARS = set('\\/:*?"<>|+=;,[] ') | {chr(code) for code in range(32)}


def drive_letter(drive):
    """Normalize ``2``, ``'c'``, ``'C:'`` or ``'c:\\'`` to ``'C'``."""
    if isinstance(drive, int):
        if 0 <= drive < 26:
            return string.ascii_uppercase[drive]
        raise InvalidName(f'Invalid drive number {drive}')
    text = str(drive or '').strip().rstrip('\\/').rstrip(':').upper()
    if len(text) == 1 and text in string.ascii_uppercase:
        return text
    raise InvalidName(f'Invalid drive {drive!r}')


def drive_index(drive):
    """Return ``0`` for drive A, ``1`` for B and so on."""
    return string.ascii_uppercase.index(drive_letter(drive))


def normalize(path):
    """Return ``path`` with backslashes, one leading separator and no trailing one.

    ``..`` removes the previous component and stops at the root.
    """
    text = str(path or '').replace('/', SEPARATOR)
    parts = []
    for part in text.split(SEPARATOR):
        if not part or part == CURRENT_NAME:
            continue
        if part == PARENT_NAME:
            if parts:
                parts.pop()
            continue
        parts.append(part)
    return ROOT + SEPARATOR.join(parts)


def is_root(path):
    """Return True for the empty path or a lone separator."""
    return normalize(path) == ROOT


def components(path):
    """Split a directory path into its components."""
    return [part for part in normalize(path).split(SEPARATOR) if part]


def append(path, component):
    """Append one component and normalize the result."""
    return normalize(normalize(path) + SEPARATOR + str(component))


def parent(path):
    """Return the parent directory; the root is its own parent."""
    parts = components(path)
    return ROOT + SEPARATOR.join(parts[:-1])


def basename(path):
    """Return the component after the last separator."""
    text = str(path or '')
    index = text.rfind(SEPARATOR)
    return text[index + 1:] if index >= 0 else text


def build(drive, path, name=None):
    """Build a full path such as ``C:\\SRC\\A.TXT``."""
    full = f'{drive_letter(drive)}:{normalize(path)}'
    if name:
        if not full.endswith(SEPARATOR):
            full += SEPARATOR
        full += name
    return full


def split_full(full):
    """Split ``C:\\SRC\\SUB`` into ``('C', '\\SRC\\SUB')``."""
    text = str(full or '').strip()
    drive, sep, rest = text.partition(':')
    if not sep:
        raise InvalidName(f'Path has no drive letter: {full!r}')
    return drive_letter(drive), normalize(rest)


def same_path(first, second):
    """Compare two full paths the way a case-insensitive filesystem would."""
    return first.rstrip(SEPARATOR).upper() == second.rstrip(SEPARATOR).upper()


def is_within(child, ancestor):
    """Return True when ``child`` lies strictly below ``ancestor``."""
    prefix = ancestor.rstrip(SEPARATOR).upper() + SEPARATOR
    return child.upper().startswith(prefix)


def validate_name(name):
    """Return the stripped name or raise InvalidName."""
    clean = str(name or '').strip()
    if not clean:
        raise InvalidName('Name cannot be empty.')
    if clean in (PARENT_NAME, CURRENT_NAME):
        raise InvalidName(f'Reserved name: {clean}')
    if len(clean) > MAX_NAME_LEN:
        raise InvalidName(f'Name longer than {MAX_NAME_LEN} characters: {clean}')
    bad = sorted(set(clean) & _ILLEGAL_CHARS)
    if bad:
        raise InvalidName(f'Illegal character {bad[0]!r} in name: {clean}')
    base, _, ext = clean.partition('.')
    if not base or len(base) > MAX_BASE_LEN or len(ext) > MAX_EXT_LEN or '.' in ext:
        raise InvalidName(f'Not an 8.3 name: {clean}')
    return clean


def join(full, name):
    """Join a full directory path and an entry name."""
    return full.rstrip(SEPARATOR) + SEPARATOR + name
