"""Tests for work-item bucketing and priority ordering."""

from huddle.config.models.standup import StandupConfig
from huddle.standup.worklist import priority_rank, sort_by_priority, split_work_items
from tests.factories import WorkItemFactory


class TestPriorityRank:
    """Tests for priority_rank."""

    def test_known_priorities(self) -> None:
        """Known priority names map to their rank regardless of case."""
        assert priority_rank("Highest") == 0
        assert priority_rank("high") == 1
        assert priority_rank(" Medium ") == 2
        assert priority_rank("Low") == 3
        assert priority_rank("lowest") == 4

    def test_unknown_priority_ranks_as_medium(self) -> None:
        """Missing or unrecognised priorities sort with medium."""
        assert priority_rank(None) == 2
        assert priority_rank("") == 2
        assert priority_rank("Whenever") == 2

    def test_sort_is_stable_within_rank(self) -> None:
        """Items of equal rank keep tracker order."""
        first = WorkItemFactory.create(priority="Medium")
        second = WorkItemFactory.create(priority=None)
        top = WorkItemFactory.create(priority="High")

        assert sort_by_priority([first, second, top]) == [top, first, second]


class TestSplitWorkItems:
    """Tests for split_work_items."""

    def test_caps_phase_a_to_top_priorities(self) -> None:
        """Five in-progress items are cut to the three highest priorities."""
        config = StandupConfig()
        low = WorkItemFactory.create(priority="Low")
        highest = WorkItemFactory.create(priority="Highest")
        medium = WorkItemFactory.create(priority="Medium")
        high = WorkItemFactory.create(priority="High")
        unknown = WorkItemFactory.create(priority=None)

        phase_a, phase_b, in_progress = split_work_items(
            [low, highest, medium, high, unknown], config
        )

        assert phase_a == [highest, high, medium]
        assert phase_b == []
        assert in_progress == 5

    def test_buckets_by_status(self) -> None:
        """In-progress and not-started statuses land in their phase; done items in neither."""
        config = StandupConfig()
        doing = WorkItemFactory.create(status="In Progress")
        reviewing = WorkItemFactory.create(status="In Review")
        todo = WorkItemFactory.create(status="To Do")
        backlog = WorkItemFactory.create(status="Backlog")
        done = WorkItemFactory.create(status="Done")

        phase_a, phase_b, in_progress = split_work_items(
            [doing, reviewing, todo, backlog, done], config
        )

        assert phase_a == [doing, reviewing]
        assert phase_b == [todo, backlog]
        assert in_progress == 2

    def test_caps_phase_b(self) -> None:
        """Not-started items are capped at max_phase_b_items."""
        config = StandupConfig(max_phase_b_items=2)
        items = [WorkItemFactory.create(status="To Do") for _ in range(4)]

        _, phase_b, _ = split_work_items(items, config)

        assert phase_b == items[:2]

    def test_empty(self) -> None:
        """No items yields empty phases."""
        assert split_work_items([], StandupConfig()) == ([], [], 0)
