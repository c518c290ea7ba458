"""Core functionality for git squash tool."""

from .config import SquashConfig
from .types import (
    CommitRecord, WorkingTreeStatus, PendingRewrite, RewriteState, SquashPath,
    SquashPlan, SquashResult, SquashPreview, PreviewEntry,
    GitSquashError, FetchError, InsufficientCommitsError, SelectionError,
    StaleSelectionError, ValidationError, GitOperationError, CherryPickConflictError
)
from .history import CommitSequence, Selection, HistoryReader
from .classifier import is_latest_and_contiguous, classify
from .squash import FastPathSquasher
from .reconstruct import GeneralPathReconstructor
from .guard import WorkingTreeGuard

__all__ = [
    "SquashConfig",
    "CommitRecord", "WorkingTreeStatus", "PendingRewrite", "RewriteState", "SquashPath",
    "SquashPlan", "SquashResult", "SquashPreview", "PreviewEntry",
    "GitSquashError", "FetchError", "InsufficientCommitsError", "SelectionError",
    "StaleSelectionError", "ValidationError", "GitOperationError", "CherryPickConflictError",
    "CommitSequence", "Selection", "HistoryReader",
    "is_latest_and_contiguous", "classify",
    "FastPathSquasher", "GeneralPathReconstructor", "WorkingTreeGuard"
]
