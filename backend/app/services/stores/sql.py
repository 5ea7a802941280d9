from typing import Any, Dict, List, Optional

from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session, sessionmaker

from app.db import models
from app.schemas.responses import FormResponse
from app.schemas.scoring import QuizScoring

from .base import ResponseStore, dump_scoring, load_scoring, parse_timestamp


def _to_response(record: models.FormResponseRecord) -> FormResponse:
    return FormResponse(
        id=record.id,
        answers=record.answers_json or {},
        submitted_at=parse_timestamp(record.submitted_at),
        scoring=load_scoring(record.scoring_json),
    )


class SqlResponseStore(ResponseStore):
    """Primary store backed by the ``form_responses`` table."""

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def _add_sync(
        self,
        form_id: str,
        answers: Dict[str, Any],
        scoring: Optional[QuizScoring],
    ) -> FormResponse:
        db: Session = self.session_factory()
        try:
            record = models.FormResponseRecord(
                form_id=form_id,
                answers_json=dict(answers),
                scoring_json=dump_scoring(scoring),
            )
            db.add(record)
            db.commit()
            db.refresh(record)
            return _to_response(record)
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def _list_sync(self, form_id: str) -> List[FormResponse]:
        db: Session = self.session_factory()
        try:
            records = (
                db.query(models.FormResponseRecord)
                .filter(models.FormResponseRecord.form_id == form_id)
                .order_by(models.FormResponseRecord.submitted_at.desc())
                .all()
            )
            return [_to_response(record) for record in records]
        finally:
            db.close()

    async def add_response(
        self,
        form_id: str,
        answers: Dict[str, Any],
        scoring: Optional[QuizScoring],
    ) -> FormResponse:
        return await run_in_threadpool(self._add_sync, form_id, answers, scoring)

    async def list_responses(self, form_id: str) -> List[FormResponse]:
        return await run_in_threadpool(self._list_sync, form_id)
