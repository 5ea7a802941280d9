import math
from typing import Any, List, Mapping, Optional, Sequence

from app.schemas.forms import FormDefinition, FormField
from app.schemas.responses import FormResponse, LeaderboardEntry, LeaderboardResponse
from app.services.form_catalog import collect_all_fields

LEADERBOARD_SIZE = 5
PREFERRED_NAME_FIELD_IDS = (
    "participant_name",
    "student_name",
    "studentName",
    "participantName",
    "name",
    "full_name",
)
NAME_TOKENS = ("नाम", "name")
DEFAULT_DISPLAY_NAME = "प्रतिभागी"
EMPTY_MESSAGE = "अब तक स्कोर उपलब्ध नहीं है।"
UNAVAILABLE_MESSAGE = "लीडरबोर्ड अभी उपलब्ध नहीं है।"


def _clean_name(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def extract_display_name(answers: Mapping[str, Any], fields: Sequence[FormField]) -> str:
    for key in PREFERRED_NAME_FIELD_IDS:
        name = _clean_name(answers.get(key))
        if name:
            return name

    fallback_field = None
    for field in fields:
        match_target = f"{field.id} {field.label or ''}".lower()
        if any(token in match_target for token in NAME_TOKENS):
            fallback_field = field
            break

    if fallback_field is not None:
        name = _clean_name(answers.get(fallback_field.id))
        if name:
            return name

    return DEFAULT_DISPLAY_NAME


def _rank_key(entry: LeaderboardEntry):
    submitted = entry.submitted_at.timestamp() if entry.submitted_at else math.inf
    return (-entry.score, submitted)


def build_leaderboard(
    responses: Sequence[FormResponse],
    form: FormDefinition,
    limit: int = LEADERBOARD_SIZE,
) -> List[LeaderboardEntry]:
    fields = collect_all_fields(form)
    entries = [
        LeaderboardEntry(
            id=response.id,
            name=extract_display_name(response.answers or {}, fields),
            score=response.scoring.total_score,
            max_score=response.scoring.max_score,
            submitted_at=response.submitted_at,
        )
        for response in responses
        if response.scoring is not None and response.scoring.max_score > 0
    ]
    entries.sort(key=_rank_key)
    return entries[: max(limit, 0)]


def leaderboard_view(entries: List[LeaderboardEntry]) -> LeaderboardResponse:
    return LeaderboardResponse(
        entries=entries,
        available=True,
        message=None if entries else EMPTY_MESSAGE,
    )


def unavailable_leaderboard() -> LeaderboardResponse:
    return LeaderboardResponse(entries=[], available=False, message=UNAVAILABLE_MESSAGE)
