"""Tests for LLMResponseClassifier."""

import json
from unittest.mock import AsyncMock

import pytest

from huddle.providers.classifier import LLMResponseClassifier
from huddle.providers.llm import LLMProvider, MockLLMProvider, RateLimitError
from huddle.standup.models import Classification
from tests.factories import WorkItemFactory

VERDICT = {
    "taskUpdates": [
        {
            "ticketKey": "ENG-1",
            "newStatus": "In Review",
            "progressNote": "Retries implemented",
            "timeline": "Friday",
        },
        {"ticketKey": None, "progressNote": "dropped"},
    ],
    "blockers": ["Waiting on Bob for the API review", ""],
    "isOffTopic": False,
    "offTopicReason": None,
    "needsClarification": False,
    "followUpQuestions": ["When will the migration land?"],
    "summary": "Retries are in review, shipping Friday.",
}


class TestParse:
    """Tests for LLMResponseClassifier.parse."""

    def test_maps_fields(self) -> None:
        classification = LLMResponseClassifier.parse(json.dumps(VERDICT))

        assert len(classification.updates) == 1
        update = classification.updates[0]
        assert update.item_id == "ENG-1"
        assert update.target_status == "In Review"
        assert update.note == "Retries implemented"
        assert update.timeline == "Friday"
        assert classification.blockers == ["Waiting on Bob for the API review"]
        assert classification.follow_up_questions == ["When will the migration land?"]
        assert classification.summary == "Retries are in review, shipping Friday."

    def test_markdown_fence(self) -> None:
        content = "```json\n" + json.dumps({"isOffTopic": True, "offTopicReason": "HLD"}) + "\n```"

        classification = LLMResponseClassifier.parse(content)

        assert classification.is_off_topic is True
        assert classification.off_topic_reason == "HLD"

    def test_prose_around_json(self) -> None:
        content = 'Here is the analysis: {"summary": "All good"} Hope that helps!'

        assert LLMResponseClassifier.parse(content).summary == "All good"

    @pytest.mark.parametrize("content", ["", "no json here", "{not json}", "[1, 2]"])
    def test_garbage_is_neutral(self, content: str) -> None:
        assert LLMResponseClassifier.parse(content) == Classification.neutral()

    def test_wrong_types_are_dropped(self) -> None:
        content = json.dumps({"taskUpdates": "none", "blockers": "none", "summary": None})

        assert LLMResponseClassifier.parse(content) == Classification.neutral()


class TestClassify:
    """Tests for LLMResponseClassifier.classify."""

    async def test_prompt_includes_items_and_reply(self) -> None:
        llm = MockLLMProvider(default_response=json.dumps(VERDICT))
        classifier = LLMResponseClassifier(llm)
        item = WorkItemFactory.create(item_id="ENG-1", title="Payment retries", status="In Progress")

        classification = await classifier.classify("retries in review", [item])

        assert classification.updates[0].item_id == "ENG-1"
        messages = llm.call_history[0]["messages"]
        assert messages[0].role == "system"
        assert "- ENG-1: Payment retries [In Progress]" in messages[1].content
        assert "retries in review" in messages[1].content

    async def test_provider_error_is_neutral(self) -> None:
        llm = AsyncMock(spec=LLMProvider)
        llm.provider_name = "mock"
        llm.generate.side_effect = RateLimitError("slow down")

        classification = await LLMResponseClassifier(llm).classify("hello", [])

        assert classification == Classification.neutral()

    async def test_custom_template(self) -> None:
        llm = MockLLMProvider(default_response="{}")
        classifier = LLMResponseClassifier(llm, prompt_template="R={reply} I={items}")

        await classifier.classify("hi", [])

        assert llm.call_history[0]["messages"][1].content == "R=hi I=(no items)"
