"""
Typed result contract shared by snapshots, the operation engine and callers.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class JobKind(str, Enum):
    """Batch operations a user can start from a panel."""

    COPY = "copy"
    MOVE = "move"
    DELETE = "delete"
    RENAME = "rename"
    MKDIR = "mkdir"


class JobState(str, Enum):
    """Lifecycle of one operation job."""

    PENDING = "pending"
    RUNNING = "running"
    DONE = "done"
    CANCELLED = "cancelled"


class Outcome(str, Enum):
    """Resolution of a single target entry (or a whole job)."""

    OK = "ok"
    SKIP = "skip"
    ERROR = "error"
    CANCEL = "cancel"


class OverwriteChoice(str, Enum):
    """Answers accepted from the overwrite prompt."""

    YES = "yes"
    NO = "no"
    ALL = "all"
    CANCEL = "cancel"


class OverwritePolicy(str, Enum):
    """Per-job overwrite decision state."""

    ASK_EACH = "ask_each"
    OVERWRITE_ALL = "overwrite_all"


class Direction(str, Enum):
    """Cursor movements supported by a panel snapshot."""

    UP = "up"
    DOWN = "down"
    HOME = "home"
    END = "end"
    PAGE_UP = "page_up"
    PAGE_DOWN = "page_down"


@dataclass(frozen=True)
class EntryOutcome:
    """Outcome recorded for one top-level target of a job."""

    name: str
    outcome: Outcome
    message: Any = None


@dataclass
class JobResult:
    """Final report handed back to whoever started a job."""

    kind: JobKind
    outcome: Outcome = Outcome.OK
    entries: list = field(default_factory=list)

    @property
    def cancelled(self):
        return self.outcome == Outcome.CANCEL

    def count(self, outcome):
        """Return how many targets resolved to ``outcome``."""
        return sum(1 for item in self.entries if item.outcome == outcome)

    @property
    def errors(self):
        return [item for item in self.entries if item.outcome == Outcome.ERROR]
