"""Chat-facing message composition.

Everything a participant reads in the thread is produced here. Work-item
identifiers are kept out of these texts; they stay in the structured
updates used for the run summary.
"""

import re
from datetime import date

from huddle.standup.models import (
    AbsentParticipant,
    BlockerNotice,
    Classification,
    RunSummary,
    WorkItem,
)
from huddle.standup.session import ParticipantSession

_MAX_TIMELINE_ITEMS = 3


def standup_header(day: date) -> str:
    return (
        f"*Daily Standup - {day.strftime('%A, %B %d, %Y')}*\n"
        "Good morning team! I'll go through everyone one at a time in this thread.\n"
        "When it's your turn, share progress on your in-progress work, expected "
        "timelines, and anything blocking you."
    )


def on_leave_notice(absent: list[AbsentParticipant]) -> str:
    lines = ["*Team members on leave today:*"]
    for member in absent:
        lines.append(f"- {member.name}" + (f" ({member.reason})" if member.reason else ""))
    return "\n".join(lines)


def blocker_notices(notices: list[BlockerNotice]) -> str:
    lines = []
    for notice in notices:
        lines.append(f'You are blocking {notice.blocked_participant} on: "{notice.description}"')
    lines.append("Could you share where these stand?")
    return "\n".join(lines)


def scrub_item_ids(text: str, items: list[WorkItem]) -> str:
    """Replace known work-item identifiers in free text with their titles.

    Classifier and narrator output can echo ticket keys back; those must
    not reach the thread.
    """
    for item in items:
        pattern = re.compile(rf"(?<![\w-]){re.escape(item.item_id)}(?![\w-])", re.IGNORECASE)
        text = pattern.sub(lambda _, title=item.title: title, text)
    return text


def _item_lines(items: list[WorkItem]) -> str:
    return "\n".join(f"{n}. {item.title} ({item.status})" for n, item in enumerate(items, 1))


def phase_a_prompt(session: ParticipantSession, notices: list[BlockerNotice]) -> str:
    parts = []
    if notices:
        parts.append(blocker_notices(notices))

    if session.phase_a_tasks:
        parts.append(
            f"{session.name}, you're up! Here's what you have in progress:\n"
            f"{_item_lines(session.phase_a_tasks)}\n"
            "How are these going? Please include an expected timeline and any blockers."
        )
    else:
        parts.append(
            f"{session.name}, you're up! What are you working on today, "
            "and is anything blocking you?"
        )
    return "\n\n".join(parts)


def phase_b_prompt(session: ParticipantSession) -> str:
    return (
        "Thanks! You also have these waiting to be started:\n"
        f"{_item_lines(session.phase_b_tasks)}\n"
        "When do you expect to pick them up?"
    )


def items_missing_timeline(session: ParticipantSession) -> list[WorkItem]:
    timed = {u.item_id for u in session.updates if u.timeline}
    return [item for item in session.current_items if item.item_id not in timed]


def redirect_message(reason: str | None) -> str:
    topic = f" ({reason})" if reason else ""
    return (
        f"That sounds like a great topic for a separate discussion{topic}! "
        "For now, let's keep to status: how are your tasks progressing?"
    )


def follow_up_question(session: ParticipantSession, classification: Classification) -> str:
    """Pick the most targeted follow-up for an unsatisfactory reply."""
    if classification.is_off_topic:
        reason = classification.off_topic_reason
        return redirect_message(scrub_item_ids(reason, session.open_items) if reason else None)

    missing = items_missing_timeline(session)[:_MAX_TIMELINE_ITEMS]
    if missing and (classification.updates or classification.summary):
        titles = ", ".join(item.title for item in missing)
        return f"Thanks! Could you give an estimated timeline for: {titles}?"

    if classification.follow_up_questions:
        return scrub_item_ids(classification.follow_up_questions[0], session.open_items)

    if classification.blockers:
        return "Who or what exactly is blocking you, and what do you need to get unblocked?"

    return (
        "Could you add a bit more detail? What progress have you made, "
        "when do you expect to finish, and is anything blocking you?"
    )


def completion_message(session: ParticipantSession) -> str:
    parts = [f"Thanks for your update, {session.participant.first_name}!"]

    summary = " ".join(s for s in session.summaries if s)
    if summary:
        parts.append(f"*Summary:* {summary}")

    if session.blockers:
        parts.append(
            "*Blockers noted:* " + "; ".join(session.blockers)
            + "\nI'll flag these for the team."
        )

    updated = {u.item_id for u in session.updates if u.target_status or u.note or u.timeline}
    if updated:
        noun = "item" if len(updated) == 1 else "items"
        parts.append(f"Updated {len(updated)} work {noun} in the tracker.")

    return "\n".join(parts)


def needs_followup_message(session: ParticipantSession) -> str:
    return (
        f"Thanks, {session.participant.first_name}. Let's pick up the details "
        "after standup. Moving on!"
    )


def reminder_message(session: ParticipantSession) -> str:
    return f"{session.name}, just a reminder that it's your turn for standup."


def timed_out_message(session: ParticipantSession) -> str:
    return f"No response from {session.name}, moving on. We can catch up later."


def absence_acknowledgement(session: ParticipantSession) -> str:
    return f"Thanks for letting us know. Skipping {session.name} today."


def courtesy_message(session: ParticipantSession, active: ParticipantSession | None) -> str:
    if session.is_terminal:
        return "You're all done for today, thanks! I'm talking with others right now."
    if active is not None:
        return f"Thanks! I'm with {active.name} right now and will get to you shortly."
    return "Thanks! I'll get to you shortly."


def summary_message(summary: RunSummary) -> str:
    lines = ["*Standup Summary*"]

    if summary.narrative:
        lines.append("")
        lines.append(summary.narrative)

    if summary.completed:
        lines.append("")
        lines.append("*Updates:*")
        for entry in summary.completed:
            count = len({u.item_id for u in entry.updates})
            detail = entry.summary or "No details shared."
            if count:
                detail += f" ({count} work item{'s' if count != 1 else ''} updated)"
            lines.append(f"- *{entry.name}*: {detail}")

    if summary.needs_follow_up:
        lines.append("")
        lines.append("*Needs follow-up:*")
        for entry in summary.needs_follow_up:
            lines.append(f"- *{entry.name}*: " + "; ".join(entry.reasons))

    if summary.skipped:
        lines.append("")
        lines.append("*Skipped:* " + ", ".join(summary.skipped))

    if summary.blockers:
        lines.append("")
        lines.append("*Blockers requiring attention:*")
        for blocker in summary.blockers:
            lines.append(f"- *{blocker.from_participant}*: {blocker.text}")

    if len(lines) == 1:
        lines.append("No one was interviewed today.")

    return "\n".join(lines)
