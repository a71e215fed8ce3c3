"""
Operation job model and target-set resolution.
"""
from dataclasses import dataclass, field
from typing import Any, List, Optional

from ..constants import CURRENT_NAME, PARENT_NAME
from ..core.actions import JobKind, JobResult, JobState, OverwritePolicy


def resolve_targets(snapshot):
    """Return the entries a job acts on.

    With nothing selected the target is the cursor entry, unless that is the
    parent entry or the listing is empty. Otherwise every selected entry, in
    snapshot order.
    """
    if snapshot.selected_count:
        return snapshot.selected_entries()
    entry = snapshot.cursor_entry()
    if entry is None or entry.name in (PARENT_NAME, CURRENT_NAME):
        return []
    return [entry]


@dataclass
class OperationJob:
    """One user-initiated batch operation and its run-to-completion state."""

    kind: JobKind
    source: Any
    dest: Optional[Any] = None
    targets: List[Any] = field(default_factory=list)
    overwrite_policy: OverwritePolicy = OverwritePolicy.ASK_EACH
    progress_current: int = 0
    progress_total: int = 0
    state: JobState = JobState.PENDING
    result: Optional[JobResult] = None

    def __post_init__(self):
        if self.result is None:
            self.result = JobResult(self.kind)
        if not self.progress_total:
            self.progress_total = len(self.targets)

    @classmethod
    def for_snapshot(cls, kind, source, dest=None):
        """Build a job over the target set of ``source``."""
        return cls(JobKind(kind), source, dest, resolve_targets(source))

    @property
    def overwrite_all(self):
        return self.overwrite_policy == OverwritePolicy.OVERWRITE_ALL

    @property
    def finished(self):
        return self.state in (JobState.DONE, JobState.CANCELLED)
