"""Test factories for creating test data."""

from tests.factories.standup import (
    ClassificationFactory,
    ParticipantFactory,
    ScriptedClassifier,
    WorkItemFactory,
)

__all__ = [
    "ClassificationFactory",
    "ParticipantFactory",
    "ScriptedClassifier",
    "WorkItemFactory",
]
