"""LLM-backed response classifier.

Renders the reply and the participant's items into a prompt, asks the
configured provider for a JSON verdict, and maps it onto a
Classification. Any failure along the way yields the neutral
classification so the interview can keep going.
"""

import json
import time
from pathlib import Path
from typing import Any

from huddle.observability.logging import get_logger
from huddle.providers.llm import LLMMessage, LLMProvider, ProviderError
from huddle.standup.collaborators import ResponseClassifier
from huddle.standup.models import Classification, TaskUpdate, WorkItem

logger = get_logger(__name__)

_PROMPTS_DIR = Path(__file__).parent / "prompts"
_SYSTEM_PROMPT_PATH = _PROMPTS_DIR / "standup_system.txt"
_CLASSIFY_PROMPT_PATH = _PROMPTS_DIR / "classify_reply.txt"


class LLMResponseClassifier(ResponseClassifier):
    """Classifies standup replies with a language model."""

    def __init__(
        self,
        llm: LLMProvider,
        prompt_template: str | None = None,
        system_prompt: str | None = None,
    ) -> None:
        """Initialize the classifier.

        Args:
            llm: Provider used for the classification call
            prompt_template: Optional custom prompt with {items} and {reply}
            system_prompt: Optional custom system prompt
        """
        self._llm = llm
        self._prompt_template = prompt_template or _CLASSIFY_PROMPT_PATH.read_text()
        self._system_prompt = system_prompt or _SYSTEM_PROMPT_PATH.read_text()

    async def classify(self, reply_text: str, open_items: list[WorkItem]) -> Classification:
        start_time = time.perf_counter()
        prompt = self._build_prompt(reply_text, open_items)

        try:
            response = await self._llm.generate(
                [
                    LLMMessage(role="system", content=self._system_prompt),
                    LLMMessage(role="user", content=prompt),
                ],
                temperature=0.0,
            )
        except ProviderError as e:
            logger.warning(
                "classification_failed",
                provider=self._llm.provider_name,
                error=str(e),
            )
            return Classification.neutral()

        classification = self.parse(response.content)
        logger.debug(
            "reply_classified",
            updates=len(classification.updates),
            blockers=len(classification.blockers),
            off_topic=classification.is_off_topic,
            latency_ms=(time.perf_counter() - start_time) * 1000,
        )
        return classification

    def _build_prompt(self, reply_text: str, open_items: list[WorkItem]) -> str:
        return self._prompt_template.replace("{items}", self._format_items(open_items)).replace(
            "{reply}", reply_text
        )

    def _format_items(self, items: list[WorkItem]) -> str:
        if not items:
            return "(no items)"
        return "\n".join(f"- {item.item_id}: {item.title} [{item.status}]" for item in items)

    @staticmethod
    def parse(content: str) -> Classification:
        """Parse a raw model response into a Classification.

        Tolerates markdown code fences and prose around the JSON object.
        """
        content = content.strip()

        if "```json" in content:
            start = content.find("```json") + 7
            end = content.find("```", start)
            if end > start:
                content = content[start:end].strip()
        elif "```" in content:
            start = content.find("```") + 3
            end = content.find("```", start)
            if end > start:
                content = content[start:end].strip()

        start = content.find("{")
        end = content.rfind("}")
        if start == -1 or end <= start:
            logger.warning("classification_missing_json", content_preview=content[:100])
            return Classification.neutral()

        try:
            data = json.loads(content[start : end + 1])
        except json.JSONDecodeError:
            logger.warning("classification_parse_failed", content_preview=content[:100])
            return Classification.neutral()

        if not isinstance(data, dict):
            return Classification.neutral()

        return Classification(
            updates=_parse_updates(data.get("taskUpdates")),
            blockers=_string_list(data.get("blockers")),
            is_off_topic=bool(data.get("isOffTopic", False)),
            off_topic_reason=_optional_str(data.get("offTopicReason")),
            needs_clarification=bool(data.get("needsClarification", False)),
            follow_up_questions=_string_list(data.get("followUpQuestions")),
            summary=_optional_str(data.get("summary")) or "",
        )


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _string_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [text for text in (_optional_str(v) for v in value) if text]


def _parse_updates(value: Any) -> list[TaskUpdate]:
    if not isinstance(value, list):
        return []

    updates = []
    for raw in value:
        if not isinstance(raw, dict):
            continue
        item_id = _optional_str(raw.get("ticketKey"))
        if item_id is None:
            continue
        updates.append(
            TaskUpdate(
                item_id=item_id,
                target_status=_optional_str(raw.get("newStatus")),
                note=_optional_str(raw.get("progressNote")),
                timeline=_optional_str(raw.get("timeline")),
            )
        )
    return updates
