"""Operation engine package exports."""

from .collaborators import CancelFlag, CancelSignal, ProgressSink, UserPrompt
from .commander import Commander
from .job import OperationJob, resolve_targets
from .operations import RENAME_FALLBACK_ANY, RENAME_FALLBACK_CROSS_DEVICE, OperationEngine

__all__ = [
    "CancelFlag",
    "CancelSignal",
    "Commander",
    "OperationEngine",
    "OperationJob",
    "ProgressSink",
    "RENAME_FALLBACK_ANY",
    "RENAME_FALLBACK_CROSS_DEVICE",
    "UserPrompt",
    "resolve_targets",
]
