"""
Git Squash Tool

Squash any selection of recent commits into one, keeping every commit that
was not selected in its original order.
"""

__version__ = "1.0.0"

from .core.config import SquashConfig
from .core.history import CommitSequence, Selection, HistoryReader
from .core.types import CommitRecord, SquashPath, SquashPlan, SquashResult, SquashPreview
from .git.gateway import RepositoryGateway
from .git.operations import GitOperations
from .tool import SquashTool

__all__ = [
    "SquashConfig",
    "CommitRecord",
    "CommitSequence",
    "Selection",
    "HistoryReader",
    "SquashPath",
    "SquashPlan",
    "SquashResult",
    "SquashPreview",
    "RepositoryGateway",
    "GitOperations",
    "SquashTool"
]
