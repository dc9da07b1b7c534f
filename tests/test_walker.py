"""Tests for bugmap.walker (pagination, termination, cutoff)."""

from datetime import datetime, timezone

import pytest

from bugmap.adapters.base import GitPlatformError
from bugmap.matcher import BugMatcher
from bugmap.walker import PageWalker, WalkState, retention_cutoff
from tests.helpers import NOW, make_pr, scripted_adapter

CUTOFF = retention_cutoff(NOW, 6)


def _walker(adapter, known=("PROJECT-1",), **kwargs) -> PageWalker:
    return PageWalker(adapter, "owner/repo", BugMatcher(known), CUTOFF, **kwargs)


class TestRetentionCutoff:
    """retention_cutoff subtracts calendar months."""

    def test_six_months(self) -> None:
        assert retention_cutoff(NOW, 6) == datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)

    def test_crosses_year(self) -> None:
        now = datetime(2024, 3, 10, tzinfo=timezone.utc)
        assert retention_cutoff(now, 6) == datetime(2023, 9, 10, tzinfo=timezone.utc)

    def test_day_clamped_to_month_length(self) -> None:
        now = datetime(2024, 8, 31, tzinfo=timezone.utc)
        assert retention_cutoff(now, 6) == datetime(2024, 2, 29, tzinfo=timezone.utc)

    def test_zero_months(self) -> None:
        assert retention_cutoff(NOW, 0) == NOW


class TestExhausted:
    """An empty page ends the walk."""

    def test_empty_first_page_returns_empty(self) -> None:
        adapter = scripted_adapter([])
        walker = _walker(adapter)

        assert walker.walk() == []
        assert walker.stop_reason is WalkState.EXHAUSTED
        assert walker.state is WalkState.DONE
        assert adapter.list_pulls.call_count == 1

    def test_empty_page_logs_requested_page(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level("INFO", logger="bugmap.walker"):
            _walker(scripted_adapter([])).walk(start_page=4)
        messages = [r.getMessage() for r in caplog.records if r.name == "bugmap.walker"]
        assert any(m.startswith("Page 4 is empty") for m in messages)

    def test_stops_after_first_empty_page(self) -> None:
        pages = [[make_pr(3), make_pr(2)], [make_pr(1)]]
        adapter = scripted_adapter(pages)
        walker = _walker(adapter)

        result = walker.walk(page_size=2)

        assert [pr.number for pr in result] == [3, 2, 1]
        assert walker.stop_reason is WalkState.EXHAUSTED
        assert walker.pages_fetched == 3
        requested = [c.kwargs["page"] for c in adapter.list_pulls.call_args_list]
        assert requested == [1, 2, 3]

    def test_starts_at_start_page(self) -> None:
        pages = [[make_pr(9, "PROJECT-1 skipped")], [make_pr(8)]]
        adapter = scripted_adapter(pages)
        result = _walker(adapter).walk(start_page=2)
        assert [pr.number for pr in result] == [8]
        assert adapter.list_pulls.call_args_list[0].kwargs["page"] == 2

    def test_passes_page_size_and_state(self) -> None:
        adapter = scripted_adapter([])
        _walker(adapter, state="all").walk(page_size=30)
        call = adapter.list_pulls.call_args
        assert call.args[0] == "owner/repo"
        assert call.kwargs["per_page"] == 30
        assert call.kwargs["state"] == "all"


class TestExpired:
    """A page whose first item is older than the cutoff is the last one."""

    def test_expired_page_is_still_filtered(self) -> None:
        old_page = [
            make_pr(5, "PROJECT-1: old fix", merged_days_ago=400, created_days_ago=401),
            make_pr(4, "PROJECT-77: not ours", merged_days_ago=410, created_days_ago=411),
            make_pr(3, "docs: typo", merged_days_ago=420, created_days_ago=421),
        ]
        adapter = scripted_adapter([old_page, [make_pr(2)]])
        walker = _walker(adapter)

        result = walker.walk()

        assert [pr.number for pr in result] == [5, 3]
        assert walker.stop_reason is WalkState.EXPIRED
        assert adapter.list_pulls.call_count == 1

    def test_only_first_item_decides(self) -> None:
        """An old item later in the page does not stop the walk."""
        page1 = [make_pr(10), make_pr(9, merged_days_ago=400, created_days_ago=401)]
        page2 = [make_pr(8, merged_days_ago=300, created_days_ago=301)]
        adapter = scripted_adapter([page1, page2, [make_pr(7)]])
        walker = _walker(adapter)

        result = walker.walk(page_size=2)

        assert [pr.number for pr in result] == [10, 9, 8]
        assert walker.stop_reason is WalkState.EXPIRED
        assert walker.pages_fetched == 2

    def test_unmerged_first_item_uses_created_at(self) -> None:
        """A recent pull request closed without merge does not expire the walk."""
        page1 = [make_pr(10, merged_days_ago=None, created_days_ago=3)]
        adapter = scripted_adapter([page1])
        walker = _walker(adapter)

        result = walker.walk()

        assert [pr.number for pr in result] == [10]
        assert walker.stop_reason is WalkState.EXHAUSTED

    def test_merged_only_drops_unmerged(self) -> None:
        page1 = [make_pr(10, merged_days_ago=None), make_pr(9)]
        result = _walker(scripted_adapter([page1]), merged_only=True).walk()
        assert [pr.number for pr in result] == [9]


class TestValidationAndErrors:
    """Bad arguments and transport failures."""

    @pytest.mark.parametrize(("start_page", "page_size"), [(0, 10), (1, 0), (1, 101)])
    def test_invalid_arguments(self, start_page: int, page_size: int) -> None:
        adapter = scripted_adapter([])
        with pytest.raises(ValueError):
            _walker(adapter).walk(start_page=start_page, page_size=page_size)
        adapter.list_pulls.assert_not_called()

    def test_transport_error_propagates(self) -> None:
        adapter = scripted_adapter([])
        adapter.list_pulls.side_effect = GitPlatformError("GitHub API error 401: Bad credentials")
        with pytest.raises(GitPlatformError):
            _walker(adapter).walk()

    def test_walk_can_be_repeated(self) -> None:
        """State is reset at the start of every walk."""
        adapter = scripted_adapter([[make_pr(1)]])
        walker = _walker(adapter)
        first = walker.walk()
        second = walker.walk()
        assert first == second
        assert walker.pages_fetched == 2
