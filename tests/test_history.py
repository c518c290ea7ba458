"""Tests for history snapshots, selections and classification."""

import pytest
from itertools import permutations
from unittest.mock import Mock
from gitsquash.core.classifier import classify, is_latest_and_contiguous
from gitsquash.core.history import CommitSequence, HistoryReader, Selection
from gitsquash.core.types import (
    SquashPath, FetchError, GitOperationError, InsufficientCommitsError, SelectionError
)
from fakes import FakeRepository, linear_repository


def read_sequence(repo):
    return HistoryReader(repo).read()


class TestCommitSequence:
    """Test positional lookups on a history snapshot."""

    def setup_method(self):
        self.repo = linear_repository("C1", "C2", "C3", "C4", "C5")
        self.sequence = read_sequence(self.repo)

    def test_most_recent_first(self):
        assert [c.subject for c in self.sequence] == ["C5", "C4", "C3", "C2", "C1", "Initial commit"]
        assert self.sequence.tip.subject == "C5"

    def test_position(self):
        assert self.sequence.position(self.repo.hash_of("C5")) == 0
        assert self.sequence.position(self.repo.hash_of("C2")) == 3

    def test_position_unknown_commit(self):
        with pytest.raises(SelectionError):
            self.sequence.position("deadbeef")

    def test_newer_than(self):
        newer = self.sequence.newer_than(self.repo.hash_of("C3"))
        assert [c.subject for c in newer] == ["C5", "C4"]

    def test_newer_than_tip_is_empty(self):
        assert self.sequence.newer_than(self.repo.hash_of("C5")) == []

    def test_head(self):
        head = self.sequence.head(2)
        assert len(head) == 2
        assert head.hashes == [self.repo.hash_of("C5"), self.repo.hash_of("C4")]

    def test_contains(self):
        assert self.repo.hash_of("C1") in self.sequence
        assert "deadbeef" not in self.sequence


class TestSelection:
    """Test selection validation and ordering."""

    def setup_method(self):
        self.repo = linear_repository("C1", "C2", "C3", "C4", "C5")
        self.sequence = read_sequence(self.repo)

    def select(self, *subjects):
        return Selection.from_hashes([self.repo.hash_of(s) for s in subjects], self.sequence)

    def test_click_order_is_irrelevant(self):
        selection = self.select("C2", "C4", "C3")

        assert [c.subject for c in selection] == ["C4", "C3", "C2"]
        assert selection.newest.subject == "C4"
        assert selection.oldest.subject == "C2"

    def test_chronological_order(self):
        selection = self.select("C4", "C1")
        assert [c.subject for c in selection.chronological()] == ["C1", "C4"]

    def test_chronological_returns_fresh_list(self):
        selection = self.select("C4", "C1")
        replay = selection.chronological()
        replay.reverse()

        assert [c.subject for c in selection.chronological()] == ["C1", "C4"]
        assert [c.subject for c in selection] == ["C4", "C1"]

    def test_single_commit_rejected(self):
        with pytest.raises(InsufficientCommitsError):
            self.select("C3")

    def test_duplicates_rejected(self):
        c3 = self.repo.hash_of("C3")
        with pytest.raises(SelectionError):
            Selection.from_hashes([c3, c3], self.sequence)

    def test_unknown_commit_rejected(self):
        with pytest.raises(SelectionError):
            Selection.from_hashes([self.repo.hash_of("C3"), "deadbeef"], self.sequence)

    def test_unselected_newer_than_oldest(self):
        selection = self.select("C4", "C2")
        preserved = selection.unselected_newer_than_oldest()
        assert [c.subject for c in preserved] == ["C5", "C3"]


class TestHistoryReader:
    """Test reading history through the gateway."""

    def test_read_with_limit(self):
        repo = linear_repository("C1", "C2", "C3")
        sequence = HistoryReader(repo).read(2)

        assert isinstance(sequence, CommitSequence)
        assert [c.subject for c in sequence] == ["C3", "C2"]

    def test_empty_repository(self):
        with pytest.raises(FetchError):
            HistoryReader(FakeRepository()).read()

    def test_gateway_failure_becomes_fetch_error(self):
        gateway = Mock()
        gateway.log.side_effect = GitOperationError("Not in a git repository")

        with pytest.raises(FetchError) as exc_info:
            HistoryReader(gateway).read(10)

        assert "Not in a git repository" in str(exc_info.value)

    def test_empty_log_is_fetch_error(self):
        gateway = Mock()
        gateway.log.return_value = []

        with pytest.raises(FetchError):
            HistoryReader(gateway).read()


class TestClassifier:
    """Test fast/general path classification."""

    def setup_method(self):
        self.repo = linear_repository("C1", "C2", "C3", "C4", "C5")
        self.sequence = read_sequence(self.repo)

    def select(self, *subjects):
        return Selection.from_hashes([self.repo.hash_of(s) for s in subjects], self.sequence)

    def test_latest_contiguous_any_order(self):
        for order in permutations(["C5", "C4", "C3"]):
            selection = self.select(*order)
            assert is_latest_and_contiguous(selection, self.sequence) is True
            assert classify(selection, self.sequence) is SquashPath.FAST

    def test_unselected_newer_commit_needs_general_path(self):
        selection = self.select("C4", "C3")
        assert is_latest_and_contiguous(selection, self.sequence) is False
        assert classify(selection, self.sequence) is SquashPath.GENERAL

    def test_gap_needs_general_path(self):
        selection = self.select("C5", "C3")
        assert classify(selection, self.sequence) is SquashPath.GENERAL

    def test_gap_and_newer_commit(self):
        selection = self.select("C4", "C2")
        assert classify(selection, self.sequence) is SquashPath.GENERAL

    def test_identical_messages_classified_by_hash(self):
        repo = FakeRepository()
        repo.make_commit("Initial commit", {"README.md": "#\n"})
        repo.make_commit("wip", {"a.txt": "1\n"})
        repo.make_commit("wip", {"a.txt": "2\n"})
        repo.make_commit("wip", {"a.txt": "3\n"})
        sequence = read_sequence(repo)

        latest = Selection.from_hashes([sequence[0].hash, sequence[1].hash], sequence)
        skipping = Selection.from_hashes([sequence[0].hash, sequence[2].hash], sequence)

        assert classify(latest, sequence) is SquashPath.FAST
        assert classify(skipping, sequence) is SquashPath.GENERAL
