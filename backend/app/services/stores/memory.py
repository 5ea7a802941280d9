import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from app.schemas.responses import FormResponse
from app.schemas.scoring import QuizScoring

from .base import ResponseStore, dump_scoring, load_scoring, sort_newest_first


class MemoryResponseStore(ResponseStore):
    """Primary store kept in process memory, for offline runs."""

    def __init__(self) -> None:
        self._collections: Dict[str, List[Dict[str, Any]]] = {}

    async def add_response(
        self,
        form_id: str,
        answers: Dict[str, Any],
        scoring: Optional[QuizScoring],
    ) -> FormResponse:
        document = {
            "id": uuid.uuid4().hex,
            "answers": dict(answers),
            "submitted_at": datetime.now(timezone.utc),
            "scoring": dump_scoring(scoring),
        }
        self._collections.setdefault(form_id, []).append(document)
        return self._to_response(document)

    async def list_responses(self, form_id: str) -> List[FormResponse]:
        documents = self._collections.get(form_id, [])
        return sort_newest_first([self._to_response(document) for document in documents])

    @staticmethod
    def _to_response(document: Dict[str, Any]) -> FormResponse:
        return FormResponse(
            id=document["id"],
            answers=dict(document["answers"]),
            submitted_at=document["submitted_at"],
            scoring=load_scoring(document["scoring"]),
        )
