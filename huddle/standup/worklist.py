"""Bucketing and ordering of a participant's open work items."""

from huddle.config.models.standup import StandupConfig
from huddle.standup.models import WorkItem

PRIORITY_RANKS: dict[str, int] = {
    "blocker": 0,
    "highest": 0,
    "critical": 0,
    "p0": 0,
    "high": 1,
    "major": 1,
    "p1": 1,
    "medium": 2,
    "normal": 2,
    "p2": 2,
    "low": 3,
    "minor": 3,
    "p3": 3,
    "lowest": 4,
    "trivial": 4,
    "p4": 4,
}

_UNKNOWN_PRIORITY_RANK = 2


def priority_rank(priority: str | None) -> int:
    """Rank a tracker priority name; lower ranks are asked first."""
    if not priority:
        return _UNKNOWN_PRIORITY_RANK
    return PRIORITY_RANKS.get(priority.strip().lower(), _UNKNOWN_PRIORITY_RANK)


def _matches(status: str, fragments: list[str]) -> bool:
    status_lower = status.lower()
    return any(fragment in status_lower for fragment in fragments)


def sort_by_priority(items: list[WorkItem]) -> list[WorkItem]:
    """Stable sort by priority, keeping tracker order within a rank."""
    return sorted(items, key=lambda item: priority_rank(item.priority))


def split_work_items(
    items: list[WorkItem],
    config: StandupConfig,
) -> tuple[list[WorkItem], list[WorkItem], int]:
    """Split open items into Phase A and Phase B lists.

    Returns:
        (phase_a_items, phase_b_items, in_progress_count) where both lists
        are priority-sorted and capped, and in_progress_count is the number
        of in-progress items before capping.
    """
    in_progress = [i for i in items if _matches(i.status, config.in_progress_statuses)]
    in_progress_ids = {i.item_id for i in in_progress}
    not_started = [
        i
        for i in items
        if i.item_id not in in_progress_ids
        and _matches(i.status, config.not_started_statuses)
    ]

    phase_a = sort_by_priority(in_progress)[: config.max_phase_a_items]
    phase_b = sort_by_priority(not_started)[: config.max_phase_b_items]
    return phase_a, phase_b, len(in_progress)
