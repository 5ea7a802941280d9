import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, JSON, String
from sqlalchemy.dialects import mysql

from .session import Base

# MySQL DATETIME drops fractional seconds unless fsp is given
SubmittedAtType = DateTime(timezone=True).with_variant(mysql.DATETIME(fsp=6), "mysql")


def _new_response_id() -> str:
    return uuid.uuid4().hex


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class FormResponseRecord(Base):
    __tablename__ = "form_responses"

    id = Column(String(36), primary_key=True, default=_new_response_id)
    form_id = Column(String(128), nullable=False, index=True)
    answers_json = Column(JSON, nullable=False)
    scoring_json = Column(JSON, nullable=True)
    submitted_at = Column(SubmittedAtType, default=_utcnow, nullable=False, index=True)
