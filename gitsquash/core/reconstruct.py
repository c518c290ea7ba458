"""Squash for arbitrary selections by rebuilding history on a temporary branch."""

import logging
import time
from typing import Callable
from .config import SquashConfig
from .history import HistoryReader, Selection
from .types import (
    PendingRewrite, RewriteState, SquashPath, SquashResult,
    GitOperationError, StaleSelectionError
)
from ..git.gateway import RepositoryGateway

logger = logging.getLogger(__name__)


class GeneralPathReconstructor:
    """Squashes non-contiguous or non-latest selections.

    The squashed commit is built on a temporary branch, then the original
    branch is reset to the parent of the oldest selected commit and the
    squashed commit plus every preserved commit is cherry-picked back on top.

    Any failure rolls back: the original branch is checked out and returned
    to its original tip, and the temporary branch is removed.
    """

    def __init__(self, gateway: RepositoryGateway, history: HistoryReader, config: SquashConfig):
        self.gateway = gateway
        self.history = history
        self.config = config

    def run(self, selection: Selection, message: str, anchor: str) -> SquashResult:
        """Squash ``selection`` into one commit placed directly on ``anchor``."""
        logger.info("Phase 1: Analyzing commits...")
        rewrite = self._start(selection, anchor)
        logger.info("Found %d commits to preserve", len(rewrite.later_commits))

        try:
            self._create_temp_branch(rewrite)
            self._reconstruct(rewrite, selection, message)
            self._transplant(rewrite)
        except Exception:
            self._rollback(rewrite)
            raise

        self._cleanup(rewrite)

        new_hash = self.gateway.log(len(rewrite.later_commits) + 1)[-1].hash
        return SquashResult(
            path=SquashPath.GENERAL,
            new_hash=new_hash,
            squashed_count=len(selection),
            replayed=[c.hash for c in rewrite.replay_order()]
        )

    def _start(self, selection: Selection, anchor: str) -> PendingRewrite:
        original_branch = self.gateway.current_branch()
        if original_branch == "HEAD":
            raise GitOperationError("HEAD is detached; check out a branch before squashing")

        depth = selection.sequence.position(selection.oldest.hash) + 1
        sequence = self.history.read(depth)
        if sequence.hashes != selection.sequence.hashes[:depth]:
            raise StaleSelectionError(
                f"History of {original_branch} changed since the commits were selected")

        # Everything above the oldest selected commit that was not selected,
        # interleaved commits included.
        later = selection.unselected_newer_than_oldest()

        return PendingRewrite(
            original_branch=original_branch,
            original_tip=sequence.tip.hash,
            temp_branch=self._temp_branch_name(),
            anchor=anchor,
            later_commits=tuple(later)
        )

    def _temp_branch_name(self) -> str:
        base = f"{self.config.temp_branch_prefix}{time.time_ns()}"
        name = base
        suffix = 1
        while self.gateway.branch_exists(name):
            name = f"{base}-{suffix}"
            suffix += 1
        return name

    def _create_temp_branch(self, rewrite: PendingRewrite) -> None:
        logger.info("Phase 2: Preparing workspace...")
        logger.info("Creating temporary branch: %s", rewrite.temp_branch)
        self.gateway.create_branch(rewrite.temp_branch)
        self.gateway.checkout(rewrite.temp_branch)
        self._advance(rewrite, RewriteState.TEMP_BRANCH_CREATED)

    def _reconstruct(self, rewrite: PendingRewrite, selection: Selection, message: str) -> None:
        logger.info("Phase 3: Reconstructing history...")
        logger.info("Resetting to parent of %s", selection.oldest.short_hash)
        self.gateway.hard_reset(rewrite.anchor)

        logger.info("Cherry picking selected commits:")
        for commit in selection.chronological():
            self._cherry_pick(rewrite, commit.hash, commit.subject)

        logger.info("Creating squashed commit")
        self.gateway.soft_reset(rewrite.anchor)
        rewrite.squashed_hash = self.gateway.commit(message)
        logger.info("New commit hash: %s", rewrite.squashed_hash[:7])
        self._advance(rewrite, RewriteState.RECONSTRUCTED)

    def _transplant(self, rewrite: PendingRewrite) -> None:
        logger.info("Phase 4: Applying changes to %s...", rewrite.original_branch)
        self.gateway.checkout(rewrite.original_branch)
        self.gateway.hard_reset(rewrite.anchor)
        rewrite.original_branch_reset = True

        self._cherry_pick(rewrite, rewrite.squashed_hash, "squashed commit")

        if rewrite.later_commits:
            logger.info("Restoring preserved commits:")
            for commit in rewrite.replay_order():
                self._cherry_pick(rewrite, commit.hash, commit.subject)
        self._advance(rewrite, RewriteState.TRANSPLANTED)

    def _cleanup(self, rewrite: PendingRewrite) -> None:
        logger.info("Phase 5: Cleanup")
        logger.info("Removing temporary branch %s", rewrite.temp_branch)
        try:
            self.gateway.delete_branch(rewrite.temp_branch, force=True)
        except GitOperationError as e:
            # The squash itself is complete; only the scratch ref is left over.
            logger.warning("Could not delete temporary branch %s (%s); remove it with 'git branch -D %s'",
                           rewrite.temp_branch, e, rewrite.temp_branch)
            return
        self._advance(rewrite, RewriteState.CLEANED_UP)

    def _cherry_pick(self, rewrite: PendingRewrite, commit_hash: str, label: str) -> None:
        logger.info("Processing %s %s", commit_hash[:7], label)
        rewrite.picking = commit_hash
        self.gateway.cherry_pick(commit_hash)
        rewrite.picking = None

    def _rollback(self, rewrite: PendingRewrite) -> None:
        logger.warning("Squash failed in state %s, rolling back", rewrite.state.value)

        if rewrite.picking:
            self._best_effort(f"abort cherry-pick of {rewrite.picking[:7]}",
                              self.gateway.abort_cherry_pick)

        logger.warning("Switching back to %s", rewrite.original_branch)
        on_original = self._best_effort(f"check out {rewrite.original_branch}",
                                        lambda: self.gateway.checkout(rewrite.original_branch))

        if rewrite.original_branch_reset:
            if on_original:
                logger.warning("Restoring %s to %s", rewrite.original_branch, rewrite.original_tip[:7])
                self._best_effort(f"reset {rewrite.original_branch} to {rewrite.original_tip[:7]}",
                                  lambda: self.gateway.hard_reset(rewrite.original_tip))
            else:
                logger.error("Branch %s was rewritten; its previous tip was %s. "
                             "Recover with 'git checkout %s && git reset --hard %s'",
                             rewrite.original_branch, rewrite.original_tip,
                             rewrite.original_branch, rewrite.original_tip)

        logger.warning("Removing temporary branch %s", rewrite.temp_branch)
        self._best_effort(f"delete {rewrite.temp_branch}",
                          lambda: self.gateway.delete_branch(rewrite.temp_branch, force=True))
        self._advance(rewrite, RewriteState.ROLLED_BACK)

    def _best_effort(self, description: str, action: Callable[[], None]) -> bool:
        try:
            action()
            return True
        except GitOperationError as e:
            logger.warning("Rollback step failed (%s): %s", description, e)
            return False

    def _advance(self, rewrite: PendingRewrite, state: RewriteState) -> None:
        logger.debug("Rewrite %s: %s -> %s", rewrite.temp_branch, rewrite.state.value, state.value)
        rewrite.state = state
