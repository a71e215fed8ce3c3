"""
Directory snapshot owned by one panel: entries, cursor, viewport, selection.
"""
import fnmatch
import logging

from ..constants import CURRENT_NAME, MATCH_ALL, PANEL_HEIGHT, PARENT_NAME, DEFAULT_DRIVE
from ..core import paths
from ..core.actions import Direction
from .entry import Entry

LOGGER = logging.getLogger(__name__)


class DirectorySnapshot:
    """Point-in-time listing of one directory for one panel.

    The listing is replaced wholesale by every populate; a failed populate
    leaves the previous listing in place and re-raises the adapter error.
    """

    def __init__(self, fs, drive=DEFAULT_DRIVE, path=paths.ROOT, capacity=None, viewport_height=PANEL_HEIGHT):
        self.fs = fs
        self.drive = paths.drive_letter(drive)
        self.path = paths.normalize(path)
        self.capacity = capacity
        self.viewport_height = max(1, int(viewport_height))
        self.entries = []           # List[Entry]
        self.truncated = False
        self.cursor = 0
        self.top = 0
        self.selected_count = 0

    @property
    def count(self):
        return len(self.entries)

    @property
    def at_root(self):
        return paths.is_root(self.path)

    def full_path(self, name=None):
        """Full legacy path of this directory, or of ``name`` inside it."""
        return paths.build(self.drive, self.path, name)

    # --- Listing ---

    def _read_listing(self, drive, path):
        raw_entries = self.fs.list_directory(paths.build(drive, path, MATCH_ALL))
        found = [Entry.from_raw(raw) for raw in raw_entries if raw.name not in (CURRENT_NAME, PARENT_NAME)]

        truncated = self.capacity is not None and len(found) > self.capacity
        if truncated:
            found = found[:self.capacity]
        found.sort(key=Entry.sort_key)

        entries = [] if paths.is_root(path) else [Entry.parent()]
        entries.extend(found)
        return entries, truncated

    def populate(self, drive=None, path=None):
        """Read ``drive``/``path`` (defaults: current ones) into this snapshot."""
        drive = paths.drive_letter(drive if drive is not None else self.drive)
        path = paths.normalize(path if path is not None else self.path)
        entries, truncated = self._read_listing(drive, path)

        self.drive = drive
        self.path = path
        self.entries = entries
        self.truncated = truncated
        self.cursor = 0
        self.top = 0
        self.selected_count = 0
        LOGGER.debug('Populated %s with %d entries%s', self.full_path(), len(entries),
                     ' (truncated)' if truncated else '')
        return self

    def refresh(self):
        """Re-read the current directory, keeping the cursor index if still valid."""
        old_cursor = self.cursor
        self.populate()
        if old_cursor < self.count:
            self.cursor = old_cursor
            self._scroll_to_cursor()
        return self

    def change_directory(self, name):
        self.cursor = 0
        self.top = 0
        return self.populate(self.drive, paths.append(self.path, name))

    def go_parent(self):
        """Populate the parent directory; return False when already at root."""
        if self.at_root:
            return False
        left = paths.basename(self.path)
        self.populate(self.drive, paths.parent(self.path))
        self.select_name(left)
        return True

    def set_drive(self, drive):
        return self.populate(drive, paths.ROOT)

    def activate(self):
        """Enter the directory under the cursor; return False for files."""
        entry = self.cursor_entry()
        if entry is None or not entry.is_dir:
            return False
        if entry.is_parent:
            return self.go_parent()
        self.change_directory(entry.name)
        return True

    # --- Cursor ---

    def _scroll_to_cursor(self):
        if self.cursor < self.top:
            self.top = self.cursor
        elif self.cursor > self.top + self.viewport_height - 1:
            self.top = self.cursor - self.viewport_height + 1

    def navigate(self, direction):
        """Move the cursor and scroll the viewport only as far as needed."""
        direction = Direction(direction)
        last = self.count - 1
        if last < 0:
            self.cursor = 0
            self.top = 0
            return self.cursor

        if direction == Direction.UP:
            self.cursor -= 1
        elif direction == Direction.DOWN:
            self.cursor += 1
        elif direction == Direction.HOME:
            self.cursor = 0
        elif direction == Direction.END:
            self.cursor = last
        elif direction == Direction.PAGE_UP:
            self.cursor -= self.viewport_height
        elif direction == Direction.PAGE_DOWN:
            self.cursor += self.viewport_height

        self.cursor = max(0, min(self.cursor, last))
        self._scroll_to_cursor()
        return self.cursor

    def select_name(self, name):
        """Place the cursor on ``name`` (case-insensitive); return True if found."""
        wanted = str(name).upper()
        for index, entry in enumerate(self.entries):
            if entry.name.upper() == wanted:
                self.cursor = index
                self._scroll_to_cursor()
                return True
        return False

    def entry(self, index):
        if 0 <= index < self.count:
            return self.entries[index]
        return None

    def cursor_entry(self):
        return self.entry(self.cursor)

    def visible_entries(self):
        return self.entries[self.top:self.top + self.viewport_height]

    # --- Selection ---

    def toggle_selection(self):
        """Flip selection at the cursor; the ``..`` entry never selects."""
        entry = self.cursor_entry()
        if entry is None or entry.is_parent:
            return False
        entry.selected = not entry.selected
        self.selected_count += 1 if entry.selected else -1
        return True

    def select_matching(self, mask):
        """Select every entry whose name matches ``mask`` (case-insensitive wildcards).

        Returns the number of entries that matched, already selected or not.
        """
        wanted = str(mask).upper()
        match_all = wanted in (MATCH_ALL, '*')
        matched = 0
        for entry in self.entries:
            if entry.is_parent:
                continue
            if not match_all and not fnmatch.fnmatchcase(entry.name.upper(), wanted):
                continue
            matched += 1
            if not entry.selected:
                entry.selected = True
                self.selected_count += 1
        return matched

    def clear_selection(self):
        for entry in self.entries:
            entry.selected = False
        self.selected_count = 0

    def selected_entries(self):
        return [entry for entry in self.entries if entry.selected]

    def __repr__(self):
        return (f'DirectorySnapshot({self.full_path()!r}, count={self.count}, '
                f'cursor={self.cursor}, top={self.top}, selected={self.selected_count})')
