"""
Two-panel session state.
"""
import logging

from ..constants import PANEL_HEIGHT
from ..core.config import AppConfig
from ..core.errors import FileOpError
from .snapshot import DirectorySnapshot

LOGGER = logging.getLogger(__name__)

LEFT = 0
RIGHT = 1


class Session:
    """Owns the left and right snapshots and which one is active."""

    def __init__(self, left, right, active_panel=LEFT):
        self.left = left
        self.right = right
        self.active_panel = RIGHT if active_panel == RIGHT else LEFT

    @classmethod
    def from_config(cls, config, fs, viewport_height=PANEL_HEIGHT):
        """Build both snapshots from persisted state and populate them.

        A panel whose saved directory can no longer be read falls back to the
        root of its drive; if that also fails the panel stays empty.
        """
        panels = []
        for drive, path in ((config.left_drive, config.left_path), (config.right_drive, config.right_path)):
            snapshot = DirectorySnapshot(fs, drive, path, capacity=config.capacity,
                                         viewport_height=viewport_height)
            try:
                snapshot.populate()
            except FileOpError:
                LOGGER.debug('Cannot restore %s, trying drive root', snapshot.full_path(), exc_info=True)
                try:
                    snapshot.set_drive(drive)
                except FileOpError:
                    LOGGER.warning('Panel drive %s: is not readable', drive)
            panels.append(snapshot)
        return cls(panels[0], panels[1], config.active_panel)

    def to_config(self, base=None):
        """Return ``base`` (or defaults) updated with the current panel state."""
        base = base or AppConfig()
        return AppConfig(
            left_drive=self.left.drive,
            left_path=self.left.path,
            right_drive=self.right.drive,
            right_path=self.right.path,
            active_panel=self.active_panel,
            memory_tier=base.memory_tier,
            drives=dict(base.drives),
        )

    @property
    def active(self):
        return self.left if self.active_panel == LEFT else self.right

    @property
    def other(self):
        return self.right if self.active_panel == LEFT else self.left

    def switch(self):
        self.active_panel = RIGHT if self.active_panel == LEFT else LEFT
        return self.active
