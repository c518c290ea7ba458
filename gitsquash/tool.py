"""Main git squash tool implementation."""

import logging
from typing import Iterable, Optional, Union
from .core.classifier import classify
from .core.config import SquashConfig
from .core.guard import WorkingTreeGuard
from .core.history import CommitSequence, HistoryReader, Selection
from .core.reconstruct import GeneralPathReconstructor
from .core.squash import FastPathSquasher
from .core.types import (
    PreviewEntry, SquashPath, SquashPlan, SquashPreview, SquashResult,
    GitOperationError, InsufficientCommitsError, StaleSelectionError, ValidationError
)
from .git.gateway import RepositoryGateway

logger = logging.getLogger(__name__)


class SquashTool:
    """Squashes any selection of recent commits into a single commit."""

    def __init__(self, gateway: RepositoryGateway, config: SquashConfig):
        self.gateway = gateway
        self.config = config
        self.history = HistoryReader(gateway)
        self.fast_path = FastPathSquasher(gateway)
        self.general_path = GeneralPathReconstructor(gateway, self.history, config)

    def fetch_commits(self, count: Optional[int] = None) -> CommitSequence:
        """Read the commits a user can choose from."""
        count = count or self.config.commit_count
        logger.info("Fetching %d recent commits...", count)
        sequence = self.history.read(count)
        if len(sequence) < self.config.min_selection:
            raise InsufficientCommitsError(
                f"Not enough commits to squash. Need at least {self.config.min_selection} commits.")
        return sequence

    def select(self, hashes: Iterable[str], sequence: CommitSequence) -> Selection:
        return Selection.from_hashes(hashes, sequence, self.config.min_selection)

    def prepare_squash(self, selection: Selection, message: str) -> SquashPlan:
        """Validate a selection and work out how to squash it.

        Only reads from the repository, so it is safe for dry runs.
        """
        if len(selection) < self.config.min_selection:
            raise InsufficientCommitsError(
                f"Select at least {self.config.min_selection} commits to squash (got {len(selection)})")
        if not message or not message.strip():
            raise ValidationError("Commit message cannot be empty")

        branch = self.gateway.current_branch()
        if branch == "HEAD":
            raise GitOperationError("HEAD is detached; check out a branch before squashing")

        depth = selection.sequence.position(selection.oldest.hash) + 1
        current = self.history.read(depth)
        if current.hashes != selection.sequence.hashes[:depth]:
            raise StaleSelectionError(
                f"History of {branch} changed since the commits were listed; list them again")

        anchor = self.gateway.resolve_parent(selection.oldest.hash)
        path = classify(selection, current)
        status = self.gateway.status()

        plan = SquashPlan(
            selection=selection,
            message=message,
            path=path,
            anchor=anchor,
            branch=branch,
            tip=current.tip.hash,
            status=status
        )
        logger.info("Plan complete: %s", plan.summary_stats())
        return plan

    def preview(self, plan: SquashPlan) -> SquashPreview:
        """Project the history before and after the squash without changing anything."""
        selection = plan.selection
        window = self.config.preview_window(
            len(selection), selection.sequence.position(selection.oldest.hash))
        sequence = self.history.read(window)

        before = []
        after = []
        for commit in sequence:
            is_selected = commit.hash in selection
            before.append(PreviewEntry(commit.short_hash, commit.subject, selected=is_selected))
            if not is_selected:
                after.append(PreviewEntry(commit.short_hash, commit.subject))
            elif commit.hash == selection.oldest.hash:
                after.append(PreviewEntry("NEW", plan.message.split('\n')[0], is_new=True))

        return SquashPreview(
            before=before,
            after=after,
            commit_count=len(selection),
            message=plan.message,
            uncommitted_changes=plan.status.change_count,
            path=plan.path
        )

    def execute_squash(self, plan: SquashPlan) -> SquashResult:
        """Rewrite history according to a plan."""
        logger.info("Executing squash on branch: %s", plan.branch)

        tip = self.history.read(1).tip.hash
        if tip != plan.tip:
            raise StaleSelectionError(
                f"{plan.branch} moved from {plan.tip[:7]} to {tip[:7]} since the squash was planned")

        with WorkingTreeGuard(self.gateway, self.config.stash_label) as guard:
            if plan.path is SquashPath.FAST:
                result = self.fast_path.run(plan.selection, plan.message, plan.anchor)
            else:
                logger.info("Using advanced squash approach (non-consecutive or non-latest commits)...")
                result = self.general_path.run(plan.selection, plan.message, plan.anchor)
            result.stashed = guard.stashed

        logger.info("Squash execution complete!")
        return result

    def squash(self, selection: Selection, message: str,
               dry_run: bool = False) -> Union[SquashPreview, SquashResult]:
        """Plan a squash and either preview or execute it."""
        plan = self.prepare_squash(selection, message)
        if dry_run:
            return self.preview(plan)
        return self.execute_squash(plan)
