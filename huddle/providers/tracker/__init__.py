"""Ticket tracker implementations."""

from huddle.config.models.providers import TrackerConfig
from huddle.providers.tracker.errors import TrackerError
from huddle.providers.tracker.inmemory import InMemoryTicketTracker
from huddle.providers.tracker.jira import JiraTicketTracker
from huddle.standup.collaborators import TicketTracker


def create_tracker(config: TrackerConfig) -> TicketTracker:
    """Build the tracker backend named by the configuration."""
    if config.backend == "jira":
        return JiraTicketTracker(config)
    return InMemoryTicketTracker()


__all__ = [
    "InMemoryTicketTracker",
    "JiraTicketTracker",
    "TrackerError",
    "create_tracker",
]
