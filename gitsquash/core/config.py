"""Configuration management for git squash tool."""

from dataclasses import dataclass


@dataclass
class SquashConfig:
    """Configuration for git squash operations."""

    # History listing
    commit_count: int = 10
    min_selection: int = 2

    # Rewrite settings
    temp_branch_prefix: str = "temp-squash-"
    stash_label: str = "temporary stash before squash"

    # Dry-run context window
    preview_min_context: int = 10
    preview_extra_context: int = 3

    def __post_init__(self):
        """Validate configuration parameters after initialization."""
        if not isinstance(self.commit_count, int) or self.commit_count <= 0:
            raise ValueError(
                f"commit_count must be a positive integer, got {self.commit_count!r}")
        if self.min_selection < 2:
            raise ValueError(
                f"min_selection must be at least 2, got {self.min_selection}")

        if self.preview_min_context <= 0:
            raise ValueError(
                f"preview_min_context must be positive, got {self.preview_min_context}")
        if self.preview_extra_context < 0:
            raise ValueError(
                f"preview_extra_context cannot be negative, got {self.preview_extra_context}")

        if not isinstance(self.temp_branch_prefix, str) or not self.temp_branch_prefix:
            raise ValueError(
                f"temp_branch_prefix must be a non-empty string, got {self.temp_branch_prefix!r}")

        # Branch prefix must stay a valid ref fragment
        invalid_chars = [' ', '\n', '\t', '..',
                         '~', '^', ':', '?', '*', '[', '\\']
        for char in invalid_chars:
            if char in self.temp_branch_prefix:
                raise ValueError(
                    f"temp_branch_prefix contains invalid character '{char}': {self.temp_branch_prefix}")

        if not isinstance(self.stash_label, str) or not self.stash_label.strip():
            raise ValueError("stash_label must be a non-empty string")

    @classmethod
    def from_cli_args(cls, args) -> 'SquashConfig':
        """Create config from command line arguments."""
        try:
            return cls(
                commit_count=getattr(args, 'number', cls.commit_count),
            )
        except ValueError as e:
            raise ValueError(
                f"Invalid configuration from command line arguments: {e}") from e

    def with_overrides(self, **kwargs) -> 'SquashConfig':
        """Create a new config with specific overrides."""
        fields = {field.name: getattr(self, field.name)
                  for field in self.__dataclass_fields__.values()}
        fields.update(kwargs)
        return SquashConfig(**fields)

    def preview_window(self, selection_size: int, oldest_position: int = 0) -> int:
        """Number of commits a dry run shows for a selection."""
        return max(self.preview_min_context,
                   selection_size + self.preview_extra_context,
                   oldest_position + 1)
