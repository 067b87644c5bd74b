"""Name and phrase heuristics used for blocker attribution and absence reports.

Everything fuzzy about matching free text to participants lives here so
the state machine only ever sees a resolved Participant or None.
"""

import re
from collections.abc import Iterable

from huddle.standup.models import Participant

_WORD = re.compile(r"[a-z0-9][a-z0-9._-]*")

# Whole-word nicknames shorter than this are not treated as name prefixes
_MIN_PREFIX_LEN = 4

_WHO = r"(?P<who>@?[A-Za-z][\w.'-]*(?:\s+[A-Z][\w'-]*)?)"

RAW_BLOCKER_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"(?i:\bblocked\s+(?:on|by)\s+)" + _WHO),
    re.compile(r"(?i:\bwaiting\s+(?:for|on)\s+)" + _WHO),
    re.compile(
        r"(?i:\bneed(?:s|ed|ing)?\s+(?:an?\s+|the\s+)?"
        r"(?:approval|review|sign[- ]?off|input|feedback|answer|access|help)\s+from\s+)"
        + _WHO
    ),
    re.compile(r"(?i:\bdepend(?:s|ing|ent)?\s+on\s+)" + _WHO),
)

ABSENCE_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"\b(?:out|off)\s+(?:today|sick|this morning|for the day)\b"),
    re.compile(r"\bon\s+(?:leave|vacation|holiday|pto)\b"),
    re.compile(r"\bout of (?:the )?office\b"),
    re.compile(r"\b(?:ooo|sick|unavailable|absent)\b"),
    re.compile(r"\b(?:won'?t|can'?t|cannot)\s+(?:make it|join|attend)\b"),
    re.compile(r"\bnot\s+(?:available|around|here|joining|in today)\b"),
)

THIRD_PERSON = re.compile(r"\b(?:he|she|they|him|her|them)(?:'s|'re)?\b")

_SENTENCE_SPLIT = re.compile(r"(?<=[.!?;])\s+|\n+")


def _normalize(text: str) -> str:
    text = text.lower().replace("\u2019", "'")
    return re.sub(r"'s\b", "", text)


def name_variants(participant: Participant) -> set[str]:
    """Lowercase names a participant may be referred to by."""
    variants = {participant.name.lower(), participant.first_name.lower()}
    local_part = participant.contact.split("@", 1)[0].lower()
    if local_part:
        variants.add(local_part)
    return {v for v in variants if v}


def _match_score(
    normalized: str,
    tokens: list[str],
    participant: Participant,
    allow_prefix: bool,
) -> int:
    participant_id = participant.participant_id.lower()
    if participant_id and re.search(rf"\b{re.escape(participant_id)}\b", normalized):
        return 4

    full_name = participant.name.lower()
    if " " in full_name and re.search(rf"\b{re.escape(full_name)}\b", normalized):
        return 3

    local_part = participant.contact.split("@", 1)[0].lower()
    first_name = participant.first_name.lower()
    for token in tokens:
        token = token.lstrip("@").rstrip(".,")
        if token == first_name or (local_part and token == local_part):
            return 2

    if not allow_prefix:
        return 0

    for token in tokens:
        token = token.lstrip("@").rstrip(".,")
        if len(token) >= _MIN_PREFIX_LEN and first_name.startswith(token):
            return 1

    return 0


def match_participant_name(
    text: str,
    candidates: Iterable[Participant],
    *,
    allow_prefix: bool = False,
) -> Participant | None:
    """Resolve the participant a piece of text refers to.

    Heuristics, strongest first: chat id mention, full name, first name or
    contact local part as a whole word. With `allow_prefix`, a word that is
    a prefix of a first name also matches (nicknames such as "Alex" for
    "Alexandra"); only pass it for a short span already known to name
    someone, since ordinary words like "will" prefix names too. Ties go to
    the earlier candidate.
    """
    if not text:
        return None

    normalized = _normalize(text)
    tokens = _WORD.findall(normalized)
    best: Participant | None = None
    best_score = 0
    for candidate in candidates:
        score = _match_score(normalized, tokens, candidate, allow_prefix)
        if score > best_score:
            best, best_score = candidate, score
    return best


def _sentence_around(text: str, position: int) -> str:
    offset = 0
    for sentence in _SENTENCE_SPLIT.split(text):
        start = text.find(sentence, offset)
        end = start + len(sentence)
        if start <= position < end:
            return sentence.strip()
        offset = end
    return text.strip()


def extract_raw_blockers(
    text: str,
    candidates: Iterable[Participant],
) -> list[tuple[Participant, str]]:
    """Find "blocked on X" style phrasings naming a known participant.

    Returns (blocking participant, sentence containing the phrase) pairs
    in order of appearance, without duplicates.
    """
    candidate_list = list(candidates)
    found: list[tuple[Participant, str]] = []
    seen: set[tuple[str, str]] = set()

    matches = sorted(
        (m for pattern in RAW_BLOCKER_PATTERNS for m in pattern.finditer(text)),
        key=lambda m: m.start(),
    )
    for match in matches:
        blocker = match_participant_name(match.group("who"), candidate_list, allow_prefix=True)
        if blocker is None:
            continue
        description = _sentence_around(text, match.start())
        key = (blocker.participant_id, description)
        if key not in seen:
            seen.add(key)
            found.append((blocker, description))
    return found


def is_absence_report(
    text: str,
    about: Participant,
    roster: Iterable[Participant] = (),
) -> bool:
    """Whether a third party's message reports `about` as absent.

    Requires an absence phrase and a reference to `about`: their name, or
    a third-person pronoun when no other member of `roster` is named.
    """
    normalized = _normalize(text)
    if not any(pattern.search(normalized) for pattern in ABSENCE_PATTERNS):
        return False
    if match_participant_name(text, [about]) is not None:
        return True

    others = [p for p in roster if p.participant_id != about.participant_id]
    if match_participant_name(text, others) is not None:
        return False
    return THIRD_PERSON.search(normalized) is not None
