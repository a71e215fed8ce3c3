"""
File operation engine: copy, move, delete, rename and mkdir over panel entries.

Everything runs synchronously on the caller's thread. Cancellation is
cooperative: the cancel signal is polled before each directory entry and
after each copied chunk, never while an adapter call is in flight.
"""
import logging
from contextlib import contextmanager

from ..constants import (
    ATTR_DIRECTORY, ATTR_READONLY, COPY_BUFFER_SIZE, CURRENT_NAME, DEFAULT_MEMORY_TIER, MATCH_ALL, PARENT_NAME,
)
from ..core import paths
from ..core.actions import EntryOutcome, JobKind, JobState, Outcome, OverwriteChoice, OverwritePolicy
from ..core.errors import AlreadyExists, Cancelled, CrossDevice, FileOpError, InvalidName, NotFound
from .collaborators import CancelSignal, ProgressSink

LOGGER = logging.getLogger(__name__)

# Which rename failures make a move fall back to copy + delete.
RENAME_FALLBACK_ANY = 'any'
RENAME_FALLBACK_CROSS_DEVICE = 'cross_device'

_LABELS = {
    JobKind.COPY: 'Copying',
    JobKind.MOVE: 'Moving',
    JobKind.DELETE: 'Deleting',
    JobKind.RENAME: 'Renaming',
    JobKind.MKDIR: 'Creating',
}

_ERROR_TITLES = {
    JobKind.COPY: 'Copy Error',
    JobKind.MOVE: 'Move Error',
    JobKind.DELETE: 'Delete Error',
    JobKind.RENAME: 'Rename Error',
    JobKind.MKDIR: 'Make Directory Error',
}


def _merge(outcomes):
    """Fold child outcomes into the outcome of their directory."""
    if Outcome.ERROR in outcomes:
        return Outcome.ERROR
    if Outcome.SKIP in outcomes:
        return Outcome.SKIP
    return Outcome.OK


class OperationEngine:
    """Runs operation jobs against a filesystem adapter.

    The engine owns one copy buffer, so only one job may run at a time;
    starting a second job while one is running raises ``RuntimeError``.
    """

    def __init__(self, fs, prompt, progress=None, cancel=None, buffer_size=None,
                 rename_fallback=RENAME_FALLBACK_ANY):
        self.fs = fs
        self.prompt = prompt
        self.progress = progress or ProgressSink()
        self.cancel = cancel or CancelSignal()
        self.rename_fallback = rename_fallback
        self._buffer = bytearray(buffer_size or COPY_BUFFER_SIZE[DEFAULT_MEMORY_TIER])
        self._job = None

    @property
    def busy(self):
        return self._job is not None

    def run(self, job, name=None):
        """Dispatch ``job`` to the operation matching its kind."""
        if job.kind == JobKind.COPY:
            return self.copy(job)
        if job.kind == JobKind.MOVE:
            return self.move(job)
        if job.kind == JobKind.DELETE:
            return self.delete(job)
        if job.kind == JobKind.RENAME:
            return self.rename(job, name)
        return self.mkdir(job, name)

    # ------------------------------------------------------------------
    # Job lifecycle
    # ------------------------------------------------------------------

    @contextmanager
    def _running(self, job, kind):
        if self._job is not None:
            raise RuntimeError('Another operation is already running.')
        if job.kind != kind:
            raise ValueError(f'Cannot run a {job.kind.value} job as {kind.value}')
        if job.state != JobState.PENDING:
            raise RuntimeError(f'Job already {job.state.value}')

        self._job = job
        job.state = JobState.RUNNING
        LOGGER.debug('Job %s started with %d target(s)', job.kind.value, len(job.targets))
        try:
            yield
        except Cancelled:
            job.state = JobState.CANCELLED
            job.result.outcome = Outcome.CANCEL
        else:
            job.state = JobState.DONE
            job.result.outcome = Outcome.ERROR if job.result.errors else Outcome.OK
        finally:
            self._job = None
            self.progress.hide()
        LOGGER.debug('Job %s finished: %s', job.kind.value, job.result.outcome.value)

    def _run_targets(self, job, handler):
        label = _LABELS[job.kind]
        for index, entry in enumerate(job.targets, start=1):
            job.progress_current = index
            self.progress.show(label, entry.name, index, job.progress_total)
            message = None
            try:
                outcome = handler(job, entry)
            except Cancelled:
                job.result.entries.append(EntryOutcome(entry.name, Outcome.CANCEL))
                raise
            except FileOpError as exc:
                self._report(job, exc)
                outcome, message = Outcome.ERROR, exc.describe()
            job.result.entries.append(EntryOutcome(entry.name, outcome, message))

    def _report(self, job, exc):
        """Surface a per-entry failure and wait for acknowledgment."""
        LOGGER.warning('%s failed: %s', job.kind.value, exc.describe())
        self.prompt.alert(_ERROR_TITLES[job.kind], exc.describe())

    def _checkpoint(self):
        if self.cancel.requested():
            raise Cancelled()

    def _show_nested(self, job, name):
        self.progress.show(_LABELS[job.kind], name, job.progress_current, job.progress_total)

    # ------------------------------------------------------------------
    # Adapter helpers
    # ------------------------------------------------------------------

    def _children(self, directory):
        pattern = paths.join(directory, MATCH_ALL)
        return [raw for raw in self.fs.list_directory(pattern) if raw.name not in (CURRENT_NAME, PARENT_NAME)]

    def _is_dir(self, path):
        try:
            return bool(self.fs.get_attributes(path) & ATTR_DIRECTORY)
        except NotFound:
            return False

    def _close_quietly(self, handle):
        try:
            self.fs.close(handle)
        except FileOpError:
            LOGGER.debug('Closing source handle failed', exc_info=True)

    def _discard(self, path):
        """Remove a partially written file."""
        try:
            self.fs.delete(path)
        except FileOpError as exc:
            LOGGER.warning('Could not remove partial file %s: %s', path, exc)

    def _rollback(self, created):
        """Undo what a failed move copied, newest first."""
        for path, is_dir in reversed(created):
            try:
                if is_dir:
                    self.fs.rmdir(path)
                else:
                    self.fs.delete(path)
            except FileOpError as exc:
                LOGGER.warning('Rollback could not remove %s: %s', path, exc)
        del created[:]

    def _target_paths(self, job, entry):
        src = job.source.full_path(entry.name)
        dst = job.dest.full_path(entry.name)
        if paths.same_path(src, dst):
            raise AlreadyExists('Source and destination are the same', dst)
        if entry.is_dir and paths.is_within(dst, src):
            raise InvalidName('Cannot copy/move a directory into itself or its children', dst)
        return src, dst

    # ------------------------------------------------------------------
    # Copy
    # ------------------------------------------------------------------

    def copy(self, job):
        """Copy every target of ``job`` into the destination snapshot's directory."""
        with self._running(job, JobKind.COPY):
            self._run_targets(job, self._copy_target)
        return job.result

    def _copy_target(self, job, entry):
        self._checkpoint()
        src, dst = self._target_paths(job, entry)
        return self._copy_entry(job, src, dst, entry.is_dir, [])

    def _copy_entry(self, job, src, dst, is_dir, created):
        if is_dir:
            return self._copy_dir(job, src, dst, created)
        return self._copy_file(job, src, dst, created)

    def _copy_dir(self, job, src, dst, created):
        try:
            self.fs.mkdir(dst)
            created.append((dst, True))
        except AlreadyExists:
            if not self._is_dir(dst):
                raise AlreadyExists('A file with that name already exists', dst) from None

        outcomes = []
        for raw in self._children(src):
            self._checkpoint()
            self._show_nested(job, raw.name)
            try:
                outcome = self._copy_entry(job, paths.join(src, raw.name), paths.join(dst, raw.name),
                                           raw.is_dir, created)
            except Cancelled:
                raise
            except FileOpError as exc:
                self._report(job, exc)
                outcome = Outcome.ERROR
            outcomes.append(outcome)
        return _merge(outcomes)

    def _copy_file(self, job, src, dst, created):
        if self.fs.exists(dst):
            if self._is_dir(dst):
                raise AlreadyExists('A directory with that name already exists', dst)
            if not job.overwrite_all:
                choice = OverwriteChoice(self.prompt.overwrite(paths.basename(dst)))
                if choice == OverwriteChoice.NO:
                    LOGGER.debug('Skipping existing %s', dst)
                    return Outcome.SKIP
                if choice == OverwriteChoice.CANCEL:
                    raise Cancelled(path=dst)
                if choice == OverwriteChoice.ALL:
                    job.overwrite_policy = OverwritePolicy.OVERWRITE_ALL
            self._delete_file(dst)
        self._stream(src, dst, created)
        return Outcome.OK

    def _stream(self, src, dst, created):
        """Copy file bytes chunk by chunk through the shared buffer."""
        source = self.fs.open(src, 'r')
        try:
            target = self.fs.create(dst)
        except FileOpError:
            self._close_quietly(source)
            raise
        created.append((dst, False))

        failure = None
        try:
            while True:
                count = self.fs.read(source, self._buffer)
                if not count:
                    break
                self.fs.write(target, self._buffer, count)
                if self.cancel.requested():
                    failure = Cancelled(path=src)
                    break
        except FileOpError as exc:
            failure = exc
        finally:
            self._close_quietly(source)
            try:
                self.fs.close(target)
            except FileOpError as exc:
                failure = failure or exc

        if failure is not None:
            self._discard(dst)
            created.remove((dst, False))
            raise failure

    # ------------------------------------------------------------------
    # Move
    # ------------------------------------------------------------------

    def move(self, job):
        """Move targets: rename on the same drive, otherwise copy then delete."""
        with self._running(job, JobKind.MOVE):
            self._run_targets(job, self._move_target)
        return job.result

    def _rename_falls_back(self, exc):
        if self.rename_fallback == RENAME_FALLBACK_ANY:
            return True
        return isinstance(exc, (CrossDevice, AlreadyExists))

    def _move_target(self, job, entry):
        self._checkpoint()
        src, dst = self._target_paths(job, entry)
        if job.source.drive == job.dest.drive:
            try:
                self.fs.rename(src, dst)
                return Outcome.OK
            except FileOpError as exc:
                if not self._rename_falls_back(exc):
                    raise
                LOGGER.debug('Rename %s -> %s failed (%s), copying instead', src, dst, exc.describe())

        created = []
        try:
            outcome = self._copy_entry(job, src, dst, entry.is_dir, created)
        except FileOpError:
            self._rollback(created)
            raise
        if outcome != Outcome.OK:
            self._rollback(created)
            return outcome
        return self._remove(job, src, entry.is_dir, checkpoints=False)

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------

    def delete(self, job):
        """Delete targets depth-first. Deletion is not transactional."""
        with self._running(job, JobKind.DELETE):
            self._run_targets(job, self._delete_target)
        return job.result

    def _delete_target(self, job, entry):
        self._checkpoint()
        return self._remove(job, job.source.full_path(entry.name), entry.is_dir, checkpoints=True)

    def _remove(self, job, path, is_dir, checkpoints):
        if is_dir:
            return self._delete_dir(job, path, checkpoints)
        self._delete_file(path)
        return Outcome.OK

    def _delete_file(self, path):
        attributes = self.fs.get_attributes(path)
        if attributes & ATTR_READONLY:
            self.fs.set_attributes(path, attributes & ~ATTR_READONLY)
        self.fs.delete(path)

    def _delete_dir(self, job, path, checkpoints):
        outcomes = []
        for raw in self._children(path):
            if checkpoints:
                self._checkpoint()
            self._show_nested(job, raw.name)
            child = paths.join(path, raw.name)
            try:
                outcome = self._remove(job, child, raw.is_dir, checkpoints)
            except Cancelled:
                raise
            except FileOpError as exc:
                self._report(job, exc)
                outcome = Outcome.ERROR
            outcomes.append(outcome)

        if _merge(outcomes) != Outcome.OK:
            return Outcome.ERROR
        self.fs.rmdir(path)
        return Outcome.OK

    # ------------------------------------------------------------------
    # Rename / mkdir
    # ------------------------------------------------------------------

    def rename(self, job, new_name):
        """Rename the single target of ``job`` inside its own directory."""
        with self._running(job, JobKind.RENAME):
            self._run_targets(job, lambda job, entry: self._rename_target(job, entry, new_name))
        return job.result

    def _rename_target(self, job, entry, new_name):
        if entry.name in (PARENT_NAME, CURRENT_NAME):
            raise InvalidName('Cannot rename parent entry.')
        clean = paths.validate_name(new_name)
        if clean == entry.name:
            raise InvalidName('New name is the same as the current name.')
        self.fs.rename(job.source.full_path(entry.name), job.source.full_path(clean))
        LOGGER.debug('Renamed %s to %s', entry.name, clean)
        return Outcome.OK

    def mkdir(self, job, name):
        """Create directory ``name`` inside the source snapshot's directory."""
        with self._running(job, JobKind.MKDIR):
            job.progress_total = job.progress_current = 1
            try:
                clean = paths.validate_name(name)
                self.progress.show(_LABELS[job.kind], clean, 1, 1)
                self.fs.mkdir(job.source.full_path(clean))
            except FileOpError as exc:
                self._report(job, exc)
                job.result.entries.append(EntryOutcome(str(name or ''), Outcome.ERROR, exc.describe()))
            else:
                job.result.entries.append(EntryOutcome(clean, Outcome.OK))
        return job.result
