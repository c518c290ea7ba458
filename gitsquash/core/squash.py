"""In-place squash for a selection of the most recent commits."""

import logging
from .history import Selection
from .types import SquashPath, SquashResult
from ..git.gateway import RepositoryGateway

logger = logging.getLogger(__name__)


class FastPathSquasher:
    """Squashes the N most recent commits with a soft reset and one commit."""

    def __init__(self, gateway: RepositoryGateway):
        self.gateway = gateway

    def run(self, selection: Selection, message: str, anchor: str) -> SquashResult:
        """Collapse the selection into one commit on top of ``anchor``.

        ``anchor`` is the parent of the oldest selected commit. A failed reset
        leaves the tip where it was and a failed commit creates nothing, so
        errors propagate without cleanup.
        """
        logger.info("Squashing the %d most recent commits", len(selection))
        self.gateway.soft_reset(anchor)
        new_hash = self.gateway.commit(message)
        logger.info("Created squashed commit %s", new_hash[:7])
        return SquashResult(path=SquashPath.FAST, new_hash=new_hash, squashed_count=len(selection))
