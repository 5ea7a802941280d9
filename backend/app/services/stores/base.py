from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Protocol

from app.schemas.responses import FormResponse
from app.schemas.scoring import QuizScoring


class ResponseStore(Protocol):
    async def add_response(
        self,
        form_id: str,
        answers: Dict[str, Any],
        scoring: Optional[QuizScoring],
    ) -> FormResponse:
        ...

    async def list_responses(self, form_id: str) -> List[FormResponse]:
        ...


class StoreUnavailableError(RuntimeError):
    pass


def dump_scoring(scoring: Optional[QuizScoring]) -> Optional[Dict[str, Any]]:
    if scoring is None:
        return None
    return scoring.model_dump(exclude_none=True)


def load_scoring(raw: Any) -> Optional[QuizScoring]:
    if raw is None:
        return None
    if isinstance(raw, QuizScoring):
        return raw
    return QuizScoring.model_validate(raw)


def parse_timestamp(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _timestamp_key(response: FormResponse) -> float:
    return response.submitted_at.timestamp() if response.submitted_at else 0.0


def sort_newest_first(responses: List[FormResponse]) -> List[FormResponse]:
    """Stable sort, newest first; responses without a timestamp sort as oldest."""
    return sorted(responses, key=_timestamp_key, reverse=True)
