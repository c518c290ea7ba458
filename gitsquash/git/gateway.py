"""Abstract interface to the version-control backend."""

from abc import ABC, abstractmethod
from typing import List, Optional
from ..core.types import CommitRecord, WorkingTreeStatus


class RepositoryGateway(ABC):
    """Operations the squash tool needs from a repository.

    Every call issues one backend operation and returns once it has finished.
    Failures surface as ``GitOperationError`` and are never retried here.
    """

    @abstractmethod
    def log(self, max_count: Optional[int] = None) -> List[CommitRecord]:
        """Commits reachable from HEAD, most recent first."""
        pass

    @abstractmethod
    def status(self) -> WorkingTreeStatus:
        """Uncommitted changes to tracked files."""
        pass

    @abstractmethod
    def current_branch(self) -> str:
        """Name of the checked out branch ("HEAD" when detached)."""
        pass

    @abstractmethod
    def branch_exists(self, branch_name: str) -> bool:
        pass

    @abstractmethod
    def create_branch(self, branch_name: str) -> None:
        """Create a branch at HEAD without switching to it."""
        pass

    @abstractmethod
    def checkout(self, branch_name: str) -> None:
        pass

    @abstractmethod
    def delete_branch(self, branch_name: str, force: bool = False) -> None:
        pass

    @abstractmethod
    def soft_reset(self, commit_hash: str) -> None:
        """Move the branch tip, keeping index and working tree."""
        pass

    @abstractmethod
    def hard_reset(self, commit_hash: str) -> None:
        """Move the branch tip and discard tracked changes."""
        pass

    @abstractmethod
    def commit(self, message: str) -> str:
        """Commit the index and return the new commit hash."""
        pass

    @abstractmethod
    def cherry_pick(self, commit_hash: str) -> None:
        """Apply one commit's changes on top of HEAD as a new commit.

        Raises:
            CherryPickConflictError: the changes do not apply cleanly
        """
        pass

    @abstractmethod
    def abort_cherry_pick(self) -> None:
        """Abandon an in-progress cherry-pick."""
        pass

    @abstractmethod
    def stash_save(self, label: str) -> None:
        pass

    @abstractmethod
    def stash_pop(self) -> None:
        pass

    @abstractmethod
    def resolve_parent(self, commit_hash: str) -> str:
        """Hash of the commit's first parent."""
        pass
