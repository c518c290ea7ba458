"""Commit history snapshots and selections made against them."""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Optional, Tuple
from .types import CommitRecord, FetchError, GitOperationError, SelectionError, InsufficientCommitsError
from ..git.gateway import RepositoryGateway

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommitSequence:
    """Commits from one history read, most recent first."""
    commits: Tuple[CommitRecord, ...]
    _index: Dict[str, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, 'commits', tuple(self.commits))
        object.__setattr__(self, '_index', {c.hash: i for i, c in enumerate(self.commits)})

    def __len__(self) -> int:
        return len(self.commits)

    def __iter__(self) -> Iterator[CommitRecord]:
        return iter(self.commits)

    def __getitem__(self, position: int) -> CommitRecord:
        return self.commits[position]

    def __contains__(self, commit_hash: str) -> bool:
        return commit_hash in self._index

    @property
    def tip(self) -> Optional[CommitRecord]:
        return self.commits[0] if self.commits else None

    @property
    def hashes(self) -> List[str]:
        return [c.hash for c in self.commits]

    def position(self, commit_hash: str) -> int:
        """Distance from the tip (0 is the most recent commit)."""
        try:
            return self._index[commit_hash]
        except KeyError:
            raise SelectionError(f"Commit {commit_hash[:7]} is not in the listed history")

    def get(self, commit_hash: str) -> CommitRecord:
        return self.commits[self.position(commit_hash)]

    def head(self, count: int) -> 'CommitSequence':
        """The ``count`` most recent commits."""
        return CommitSequence(self.commits[:count])

    def newer_than(self, commit_hash: str) -> List[CommitRecord]:
        """Commits strictly newer than ``commit_hash``, most recent first."""
        return list(self.commits[:self.position(commit_hash)])


@dataclass(frozen=True)
class Selection:
    """Commits chosen for squashing, validated against a CommitSequence.

    Click order is irrelevant: the selected commits are held in history
    order (newest first), and the oldest/newest selected commits are
    positions within the sequence.
    """
    sequence: CommitSequence
    commits: Tuple[CommitRecord, ...]

    @classmethod
    def from_hashes(cls, hashes: Iterable[str], sequence: CommitSequence,
                    min_size: int = 2) -> 'Selection':
        """Build a selection, rejecting duplicates, unknown commits and short selections."""
        hashes = list(hashes)
        if len(set(hashes)) != len(hashes):
            raise SelectionError("Selection contains the same commit more than once")
        if len(hashes) < min_size:
            raise InsufficientCommitsError(
                f"Select at least {min_size} commits to squash (got {len(hashes)})")

        positions = sorted(sequence.position(h) for h in hashes)
        return cls(sequence=sequence, commits=tuple(sequence[p] for p in positions))

    def __len__(self) -> int:
        return len(self.commits)

    def __iter__(self) -> Iterator[CommitRecord]:
        return iter(self.commits)

    def __contains__(self, commit_hash: str) -> bool:
        return commit_hash in self.hashes

    @property
    def hashes(self) -> frozenset:
        return frozenset(c.hash for c in self.commits)

    @property
    def newest(self) -> CommitRecord:
        return self.commits[0]

    @property
    def oldest(self) -> CommitRecord:
        return self.commits[-1]

    def chronological(self) -> List[CommitRecord]:
        """Selected commits oldest-to-newest, the order they are replayed in."""
        return list(reversed(self.commits))

    def unselected_newer_than_oldest(self) -> List[CommitRecord]:
        """Unselected commits above the oldest selected one, most recent first."""
        selected = self.hashes
        return [c for c in self.sequence.newer_than(self.oldest.hash)
                if c.hash not in selected]


class HistoryReader:
    """Reads commit history through a repository gateway."""

    def __init__(self, gateway: RepositoryGateway):
        self.gateway = gateway

    def read(self, max_count: Optional[int] = None) -> CommitSequence:
        """Read recent history as a CommitSequence.

        Raises:
            FetchError: the log could not be read or is empty
        """
        logger.debug("Reading history (max_count=%s)", max_count)
        try:
            commits = self.gateway.log(max_count)
        except GitOperationError as e:
            raise FetchError(f"Error fetching git commits: {e}") from e

        if not commits:
            raise FetchError("No commits found in this repository")
        return CommitSequence(tuple(commits))
