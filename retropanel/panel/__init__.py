from .entry import Entry, format_size, format_date
from .snapshot import DirectorySnapshot
from .session import Session, LEFT, RIGHT

__all__ = ['Entry', 'format_size', 'format_date', 'DirectorySnapshot', 'Session', 'LEFT', 'RIGHT']
