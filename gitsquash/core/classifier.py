"""Decides which squash strategy a selection needs."""

import logging
from .history import CommitSequence, Selection
from .types import SquashPath

logger = logging.getLogger(__name__)


def is_latest_and_contiguous(selection: Selection, sequence: CommitSequence) -> bool:
    """True when the selection is exactly the N most recent commits.

    Compares sets of hashes, so the order commits were picked in does not
    matter. Commits with identical content but different hashes are distinct.
    """
    size = len(selection)
    if size == 0 or size > len(sequence):
        return False
    return selection.hashes == frozenset(sequence.head(size).hashes)


def classify(selection: Selection, sequence: CommitSequence) -> SquashPath:
    """Pick the fast path for a contiguous run at the tip, else the general path."""
    path = SquashPath.FAST if is_latest_and_contiguous(selection, sequence) else SquashPath.GENERAL
    logger.debug("Selection of %d commits classified as %s path", len(selection), path.value)
    return path
