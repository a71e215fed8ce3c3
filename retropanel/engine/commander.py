"""User-level panel actions: the function-key layer over a Session."""
import logging

from ..constants import MAX_NAME_LEN
from ..core.actions import Direction, JobKind, Outcome
from ..core.errors import FileOpError
from .job import OperationJob, resolve_targets

LOGGER = logging.getLogger(__name__)


class Commander:
    """Runs confirm -> job -> refresh for the active panel of a session."""

    def __init__(self, session, engine, prompt, cancel=None):
        self.session = session
        self.engine = engine
        self.prompt = prompt
        self.cancel = cancel if cancel is not None else engine.cancel

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _alert(self, title, exc):
        LOGGER.debug('%s: %s', title, exc.describe())
        self.prompt.alert(title, exc.describe())

    def _reset_cancel(self):
        reset = getattr(self.cancel, 'reset', None)
        if callable(reset):
            reset()

    def _refresh(self, *snapshots):
        for snapshot in snapshots:
            try:
                snapshot.refresh()
            except FileOpError as exc:
                self._alert('Refresh Error', exc)

    def _run(self, job, name=None):
        self._reset_cancel()
        result = self.engine.run(job, name)
        LOGGER.info('%s finished: %s (%d ok, %d skipped, %d errors)', job.kind.value, result.outcome.value,
                    result.count(Outcome.OK), result.count(Outcome.SKIP), len(result.errors))
        return result

    # ------------------------------------------------------------------
    # Batch operations
    # ------------------------------------------------------------------

    def _transfer(self, kind, verb):
        source, dest = self.session.active, self.session.other
        targets = resolve_targets(source)
        if not targets:
            return None
        if len(targets) == 1:
            message = f'{verb} {targets[0].name}?'
        else:
            message = f'{verb} {len(targets)} files?'
        if not self.prompt.confirm(verb, message):
            return None
        result = self._run(OperationJob(kind, source, dest, targets))
        self._refresh(source, dest)
        return result

    def copy(self):
        """Copy the target set of the active panel into the other panel."""
        return self._transfer(JobKind.COPY, 'Copy')

    def move(self):
        """Move the target set of the active panel into the other panel."""
        return self._transfer(JobKind.MOVE, 'Move')

    def delete(self):
        source = self.session.active
        targets = resolve_targets(source)
        if not targets:
            return None
        if len(targets) == 1:
            kind = 'directory' if targets[0].is_dir else 'file'
            message = f'Delete {kind} {targets[0].name}?'
        else:
            message = f'Delete {len(targets)} files?'
        if not self.prompt.confirm('Delete', message):
            return None
        result = self._run(OperationJob(JobKind.DELETE, source, None, targets))
        self._refresh(source)
        if self.session.other.full_path() == source.full_path():
            self._refresh(self.session.other)
        return result

    def mkdir(self, name=None):
        """Create a directory in the active panel, asking for a name if none given."""
        source = self.session.active
        if name is None:
            name = self.prompt.input_text('Make Directory', 'Directory name:', MAX_NAME_LEN)
        if not name or not name.strip():
            return None
        result = self._run(OperationJob(JobKind.MKDIR, source), name)
        self._refresh(source)
        source.select_name(name.strip())
        return result

    def rename(self, new_name=None):
        """Rename the entry under the cursor of the active panel."""
        source = self.session.active
        entry = source.cursor_entry()
        if entry is None or entry.is_parent:
            return None
        if new_name is None:
            new_name = self.prompt.input_text('Rename', f'Rename {entry.name} to:', MAX_NAME_LEN,
                                              initial=entry.name)
        if not new_name or not new_name.strip():
            return None
        result = self._run(OperationJob(JobKind.RENAME, source, None, [entry]), new_name)
        self._refresh(source)
        source.select_name(new_name.strip())
        return result

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def enter(self):
        """Enter the directory under the cursor; return True if the panel changed."""
        try:
            return self.session.active.activate()
        except FileOpError as exc:
            self._alert('Directory Error', exc)
            return False

    def parent(self):
        try:
            return self.session.active.go_parent()
        except FileOpError as exc:
            self._alert('Directory Error', exc)
            return False

    def change_drive(self, drive):
        """Show the root of ``drive`` in the active panel."""
        try:
            self.session.active.set_drive(drive)
        except FileOpError as exc:
            self._alert('Drive Error', exc)
            return False
        return True

    def switch_panel(self):
        return self.session.switch()

    def navigate(self, direction):
        return self.session.active.navigate(direction)

    def mark(self):
        """Toggle selection at the cursor, then move down."""
        toggled = self.session.active.toggle_selection()
        self.session.active.navigate(Direction.DOWN)
        return toggled
