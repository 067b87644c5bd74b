"""LLM-backed narrator for off-topic redirects and the run summary."""

import time
from pathlib import Path

from huddle.observability.logging import get_logger
from huddle.providers.llm import LLMMessage, LLMProvider, ProviderError
from huddle.standup.collaborators import StandupNarrator
from huddle.standup.models import RunSummary

logger = get_logger(__name__)

_PROMPTS_DIR = Path(__file__).parent / "prompts"
_SYSTEM_PROMPT_PATH = _PROMPTS_DIR / "standup_system.txt"
_REDIRECT_PROMPT_PATH = _PROMPTS_DIR / "redirect_reply.txt"
_SUMMARY_PROMPT_PATH = _PROMPTS_DIR / "summarize_run.txt"

# Characters of the off-topic reply quoted in the prompt
_MAX_REPLY_CHARS = 500


class LLMStandupNarrator(StandupNarrator):
    """Writes redirects and run summaries with a language model.

    Provider errors and empty completions are raised as ProviderError;
    the run falls back to its fixed templates.
    """

    def __init__(self, llm: LLMProvider, system_prompt: str | None = None) -> None:
        self._llm = llm
        self._system_prompt = system_prompt or _SYSTEM_PROMPT_PATH.read_text()
        self._redirect_template = _REDIRECT_PROMPT_PATH.read_text()
        self._summary_template = _SUMMARY_PROMPT_PATH.read_text()

    async def redirect(self, reason: str | None, reply_text: str) -> str:
        prompt = self._redirect_template.replace(
            "{reason}", reason or "off-topic discussion"
        ).replace("{reply}", reply_text[:_MAX_REPLY_CHARS])
        return await self._complete("redirect", prompt)

    async def summarize(self, summary: RunSummary) -> str:
        prompt = self._summary_template.replace("{updates}", format_summary(summary))
        return await self._complete("summarize", prompt)

    async def _complete(self, operation: str, prompt: str) -> str:
        start_time = time.perf_counter()
        response = await self._llm.generate(
            [
                LLMMessage(role="system", content=self._system_prompt),
                LLMMessage(role="user", content=prompt),
            ]
        )
        content = response.content.strip()
        if not content:
            raise ProviderError(f"{self._llm.provider_name} returned an empty {operation} text")

        logger.debug(
            "narration_generated",
            operation=operation,
            length=len(content),
            latency_ms=(time.perf_counter() - start_time) * 1000,
        )
        return content


def format_summary(summary: RunSummary) -> str:
    """Render a run summary as prompt text, leaving out work-item ids."""
    lines: list[str] = []

    for entry in summary.completed:
        lines.append(f"{entry.name}: {entry.summary or 'no summary'}")
        for update in entry.updates:
            details = [
                f"status -> {update.target_status}" if update.target_status else None,
                update.note,
                f"timeline {update.timeline}" if update.timeline else None,
            ]
            text = "; ".join(d for d in details if d)
            if text:
                lines.append(f"  - {text}")

    for follow_up in summary.needs_follow_up:
        lines.append(f"{follow_up.name} needs follow-up: " + "; ".join(follow_up.reasons))

    if summary.skipped:
        lines.append("Skipped: " + ", ".join(summary.skipped))

    for blocker in summary.blockers:
        lines.append(f"Blocker raised by {blocker.from_participant}: {blocker.text}")

    return "\n".join(lines) or "(no updates)"
