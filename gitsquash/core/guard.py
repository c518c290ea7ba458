"""Keeps uncommitted work out of the way while history is rewritten."""

import logging
from typing import Optional
from .types import WorkingTreeStatus
from ..git.gateway import RepositoryGateway

logger = logging.getLogger(__name__)


class WorkingTreeGuard:
    """Context manager that stashes uncommitted changes around a rewrite.

    Changes are restored only when the block succeeds. After a failure the
    stash is left in place for the user to pop once the repository is in a
    state they are happy with.
    """

    def __init__(self, gateway: RepositoryGateway, label: str,
                 status: Optional[WorkingTreeStatus] = None):
        self.gateway = gateway
        self.label = label
        self.status = status
        self.stashed = False

    def __enter__(self) -> 'WorkingTreeGuard':
        status = self.status or self.gateway.status()
        if status.has_changes:
            logger.warning("You have %d uncommitted changes. Stashing them...", status.change_count)
            self.gateway.stash_save(self.label)
            self.stashed = True
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> bool:
        if not self.stashed:
            return False

        if exc_type is None:
            self.gateway.stash_pop()
            self.stashed = False
        else:
            logger.warning("Uncommitted changes remain stashed as '%s'; "
                           "run 'git stash pop' to restore them", self.label)
        return False
