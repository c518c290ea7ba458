"""Type definitions for the git squash tool."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional, Tuple


@dataclass(frozen=True)
class CommitRecord:
    """A single commit as read from history. Never mutated after the read."""
    hash: str
    date: str  # ISO format string
    subject: str
    message: str
    datetime: datetime

    @property
    def short_hash(self) -> str:
        """Get short version of commit hash."""
        return self.hash[:7]


@dataclass(frozen=True)
class WorkingTreeStatus:
    """Uncommitted changes to tracked files."""
    change_count: int

    @property
    def has_changes(self) -> bool:
        return self.change_count > 0


class SquashPath(Enum):
    """How a selection gets squashed."""
    FAST = "fast"
    GENERAL = "general"


class RewriteState(Enum):
    """Progress of a general-path reconstruction."""
    START = "start"
    TEMP_BRANCH_CREATED = "temp_branch_created"
    RECONSTRUCTED = "reconstructed"
    TRANSPLANTED = "transplanted"
    CLEANED_UP = "cleaned_up"
    ROLLED_BACK = "rolled_back"


@dataclass
class PendingRewrite:
    """In-flight state of a general-path reconstruction.

    ``later_commits`` keeps history order (newest first); use
    :meth:`replay_order` for the order they are cherry-picked in.
    """
    original_branch: str
    original_tip: str
    temp_branch: str
    anchor: str
    later_commits: Tuple[CommitRecord, ...]
    squashed_hash: Optional[str] = None
    state: RewriteState = RewriteState.START
    original_branch_reset: bool = False
    picking: Optional[str] = None

    def replay_order(self) -> List[CommitRecord]:
        """Later commits oldest-to-newest, as a fresh list."""
        return list(reversed(self.later_commits))


@dataclass
class SquashPlan:
    """Everything needed to squash a selection, computed without mutating."""
    selection: 'Selection'
    message: str
    path: SquashPath
    anchor: str
    branch: str
    tip: str
    status: WorkingTreeStatus

    @property
    def commit_count(self) -> int:
        return len(self.selection)

    def summary_stats(self) -> str:
        """Get summary statistics as string."""
        return f"{self.commit_count} commits → 1 squashed commit ({self.path.value} path)"


@dataclass
class SquashResult:
    """Outcome of an executed squash."""
    path: SquashPath
    new_hash: str
    squashed_count: int
    replayed: List[str] = field(default_factory=list)
    stashed: bool = False


@dataclass(frozen=True)
class PreviewEntry:
    """One line of a dry-run listing."""
    short_hash: str
    subject: str
    selected: bool = False
    is_new: bool = False


@dataclass
class SquashPreview:
    """Read-only projection of a squash: history before and after."""
    before: List[PreviewEntry]
    after: List[PreviewEntry]
    commit_count: int
    message: str
    uncommitted_changes: int
    path: SquashPath


class GitSquashError(Exception):
    """Base exception for git squash operations."""
    pass


class FetchError(GitSquashError):
    """Raised when commit history cannot be read."""
    pass


class InsufficientCommitsError(GitSquashError):
    """Raised when there are not enough commits to squash."""
    pass


class SelectionError(GitSquashError):
    """Raised when a selection is not valid for the history it came from."""
    pass


class StaleSelectionError(SelectionError):
    """Raised when the branch tip moved after the selection was made."""
    pass


class ValidationError(GitSquashError):
    """Raised when the squash message is empty."""
    pass


class GitOperationError(GitSquashError):
    """Raised when git operations fail."""
    pass


class CherryPickConflictError(GitOperationError):
    """Raised when a commit's changes cannot be applied cleanly."""

    def __init__(self, commit_hash: str, detail: str = ""):
        self.commit_hash = commit_hash
        message = f"Cherry-pick of {commit_hash[:7]} failed with conflicts"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
