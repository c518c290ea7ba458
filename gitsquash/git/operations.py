"""Git operations for the squash tool."""

import logging
import subprocess
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Union
from .gateway import RepositoryGateway
from ..core.types import (
    CommitRecord, WorkingTreeStatus, GitOperationError, CherryPickConflictError
)

logger = logging.getLogger(__name__)

# ASCII unit/record separators - very unlikely to appear in commit messages
FIELD_SEP = '\x1f'
RECORD_SEP = '\x1e'


class GitOperations(RepositoryGateway):
    """Repository gateway backed by the git command line."""

    def __init__(self, repo_path: Optional[Union[str, Path]] = None):
        self.repo_path = Path(repo_path) if repo_path else None
        self._validate_git_repository()

    def _run_git_command(self, cmd: List[str], check: bool = True) -> subprocess.CompletedProcess:
        """Run a git command and return the result."""
        full_cmd = ["git"] + cmd
        logger.debug("Running git command: %s", " ".join(full_cmd))

        try:
            result = subprocess.run(
                full_cmd,
                cwd=self.repo_path,
                capture_output=True,
                text=True,
                check=check
            )
            return result
        except subprocess.CalledProcessError as e:
            logger.error("Git command failed: %s\nStderr: %s", " ".join(full_cmd), e.stderr)
            raise GitOperationError(f"Git command failed: {e.stderr.strip() or e.stdout.strip()}")

    def _validate_git_repository(self) -> None:
        """Validate that we're in a git repository."""
        try:
            result = self._run_git_command(["rev-parse", "--git-dir"], check=True)
            logger.debug("Git repository found at: %s", result.stdout.strip())
        except GitOperationError:
            raise GitOperationError(
                "Not in a git repository. Please run this command from within a git repository."
            )

    def log(self, max_count: Optional[int] = None) -> List[CommitRecord]:
        """Get commits reachable from HEAD, most recent first."""
        cmd = ["log", f"--pretty=format:%H{FIELD_SEP}%ad{FIELD_SEP}%s{FIELD_SEP}%B{RECORD_SEP}",
               "--date=iso-strict"]
        if max_count is not None:
            cmd.append(f"--max-count={max_count}")
        cmd.append("HEAD")

        result = self._run_git_command(cmd)

        commits = []
        for record in result.stdout.split(RECORD_SEP):
            record = record.strip('\n')
            if not record:
                continue

            parts = record.split(FIELD_SEP, 3)
            if len(parts) != 4:
                logger.warning("Skipping malformed commit record: %s", repr(record))
                continue

            hash_id, date_str, subject, message = parts
            try:
                date_obj = datetime.fromisoformat(date_str)
            except ValueError as e:
                logger.warning("Failed to parse date '%s' for commit %s: %s", date_str, hash_id[:7], e)
                date_obj = datetime.now()

            commits.append(CommitRecord(
                hash=hash_id,
                date=date_str,
                subject=subject,
                message=message.strip(),
                datetime=date_obj
            ))

        logger.debug("Read %d commits", len(commits))
        return commits

    def status(self) -> WorkingTreeStatus:
        """Count uncommitted changes to tracked files."""
        result = self._run_git_command(["status", "--porcelain", "--untracked-files=no"])
        changes = [line for line in result.stdout.split('\n') if line.strip()]
        return WorkingTreeStatus(change_count=len(changes))

    def current_branch(self) -> str:
        """Get the name of the current branch."""
        result = self._run_git_command(["rev-parse", "--abbrev-ref", "HEAD"])
        return result.stdout.strip()

    def branch_exists(self, branch_name: str) -> bool:
        """Check if a branch exists."""
        result = self._run_git_command(["show-ref", "--verify", "--quiet", f"refs/heads/{branch_name}"], check=False)
        return result.returncode == 0

    def create_branch(self, branch_name: str) -> None:
        """Create a new branch at HEAD."""
        logger.info("Creating branch: %s", branch_name)
        self._run_git_command(["branch", branch_name])

    def checkout(self, branch_name: str) -> None:
        """Checkout an existing branch."""
        logger.info("Checking out branch: %s", branch_name)
        self._run_git_command(["checkout", branch_name])

    def delete_branch(self, branch_name: str, force: bool = False) -> None:
        logger.info("Deleting branch: %s", branch_name)
        self._run_git_command(["branch", "-D" if force else "-d", branch_name])

    def soft_reset(self, commit_hash: str) -> None:
        self._reset(commit_hash, "--soft")

    def hard_reset(self, commit_hash: str) -> None:
        self._reset(commit_hash, "--hard")

    def _reset(self, commit_hash: str, reset_type: str) -> None:
        """Reset current branch to a specific commit."""
        logger.info("Resetting to commit %s (%s)", commit_hash[:7], reset_type)
        self._run_git_command(["reset", reset_type, commit_hash])

    def commit(self, message: str) -> str:
        """Commit the index and return the new commit hash."""
        self._run_git_command(["commit", "-m", message])
        result = self._run_git_command(["rev-parse", "HEAD"])
        new_hash = result.stdout.strip()
        logger.debug("Created commit %s", new_hash[:7])
        return new_hash

    def cherry_pick(self, commit_hash: str) -> None:
        logger.debug("Cherry-picking %s", commit_hash[:7])
        result = self._run_git_command(["cherry-pick", commit_hash], check=False)
        if result.returncode == 0:
            return

        output = f"{result.stdout}\n{result.stderr}".strip()
        logger.error("Cherry-pick of %s failed:\n%s", commit_hash[:7], output)
        if "conflict" in output.lower() or "could not apply" in output.lower():
            raise CherryPickConflictError(commit_hash, result.stderr.strip())
        raise GitOperationError(f"Git command failed: {output}")

    def abort_cherry_pick(self) -> None:
        self._run_git_command(["cherry-pick", "--abort"])

    def stash_save(self, label: str) -> None:
        logger.info("Stashing uncommitted changes: %s", label)
        self._run_git_command(["stash", "push", "-m", label])

    def stash_pop(self) -> None:
        logger.info("Restoring stashed changes")
        self._run_git_command(["stash", "pop"])

    def resolve_parent(self, commit_hash: str) -> str:
        """Get the first parent of a commit."""
        result = self._run_git_command(
            ["rev-parse", "--verify", "--quiet", f"{commit_hash}^"],
            check=False
        )
        if result.returncode != 0:
            raise GitOperationError(
                f"Commit {commit_hash[:7]} has no parent; the root commit cannot be squashed")
        return result.stdout.strip()
