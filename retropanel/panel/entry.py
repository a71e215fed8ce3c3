"""
Entry record held by a panel snapshot, plus listing formatters.
"""
import time

from ..constants import ATTR_DIRECTORY, ATTR_READONLY, PARENT_NAME


def format_number(num):
    """Format an integer with thousands separators."""
    return f'{int(num):,}'


def format_size(size):
    """Format a byte count with a K or M suffix once it passes 1024."""
    if size < 1024:
        return format_number(size)
    if size < 1048576:
        return f'{format_number(size // 1024)}K'
    return f'{format_number(size // 1048576)}M'


def format_date(modified):
    """Format a timestamp as ``MM-DD-YY``; unknown dates render blank."""
    if not modified:
        return ' ' * 8
    return time.strftime('%m-%d-%y', time.localtime(modified))


class Entry:
    """Represents a file or directory entry in a panel."""
    __slots__ = ('name', 'is_dir', 'size', 'modified', 'attributes', 'selected')

    def __init__(self, name, is_dir, size=0, modified=0.0, attributes=0, selected=False):
        self.name = name
        self.is_dir = bool(is_dir)
        self.size = size
        self.modified = modified
        self.attributes = attributes | (ATTR_DIRECTORY if is_dir else 0)
        self.selected = selected

    @classmethod
    def parent(cls):
        """Build the synthetic ``..`` entry."""
        return cls(PARENT_NAME, True)

    @classmethod
    def from_raw(cls, raw):
        return cls(raw.name, raw.is_dir, raw.size, raw.modified, raw.attributes)

    @property
    def is_parent(self):
        return self.name == PARENT_NAME

    @property
    def is_readonly(self):
        return bool(self.attributes & ATTR_READONLY)

    def sort_key(self):
        """Directories first, then case-insensitive name."""
        return (0 if self.is_dir else 1, self.name.upper())

    def size_text(self):
        if self.is_dir:
            return '<DIR>'
        return format_size(self.size)

    @property
    def display_text(self):
        mark = '*' if self.selected else ' '
        if self.is_parent:
            return f'{mark}{self.name:<12} {"<UP>":>7}'
        return f'{mark}{self.name:<12} {self.size_text():>7} {format_date(self.modified)}'

    def __repr__(self):
        kind = 'dir' if self.is_dir else 'file'
        return f'Entry({self.name!r}, {kind}, size={self.size}, selected={self.selected})'
