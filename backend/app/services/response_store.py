import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional

from fastapi.concurrency import run_in_threadpool

from app.schemas.responses import FormResponse
from app.schemas.scoring import QuizScoring
from app.services.form_catalog import FormCatalog, FormNotFoundError
from app.services.stores.base import ResponseStore, sort_newest_first
from app.services.stores.fallback import FallbackStore

logger = logging.getLogger(__name__)


class PersistStatus(str, Enum):
    primary = "primary"
    fallback = "fallback"
    failed = "failed"


@dataclass(frozen=True)
class PersistResult:
    status: PersistStatus
    response: Optional[FormResponse] = None
    reason: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status != PersistStatus.failed

    @property
    def response_id(self) -> Optional[str]:
        return self.response.id if self.response else None


class ResponseStoreAdapter:
    """Writes submissions to the primary store, falling back to the local bucket.

    Reads merge both sources: fallback entries first, then primary entries,
    re-sorted newest first.
    """

    def __init__(self, catalog: FormCatalog, primary: ResponseStore, fallback: FallbackStore):
        self.catalog = catalog
        self.primary = primary
        self.fallback = fallback

    def _ensure_form(self, form_id: str) -> None:
        if not self.catalog.has_form(form_id):
            raise FormNotFoundError(form_id)

    async def persist(
        self,
        form_id: str,
        answers: Dict[str, Any],
        scoring: Optional[QuizScoring] = None,
    ) -> PersistResult:
        self._ensure_form(form_id)

        try:
            stored = await self.primary.add_response(form_id, answers, scoring)
            return PersistResult(status=PersistStatus.primary, response=stored)
        except Exception as exc:
            logger.warning("Falling back to local storage for responses of form %s: %s", form_id, exc)

        try:
            stored = await run_in_threadpool(self.fallback.append, form_id, answers, scoring)
        except Exception as exc:
            logger.exception("Fallback write failed for form %s.", form_id)
            return PersistResult(status=PersistStatus.failed, reason=str(exc))
        return PersistResult(status=PersistStatus.fallback, response=stored)

    async def fetch_all(self, form_id: str) -> List[FormResponse]:
        self._ensure_form(form_id)

        remote_responses: List[FormResponse] = []
        try:
            remote_responses = await self.primary.list_responses(form_id)
        except Exception as exc:
            logger.warning("Reading responses of form %s from local fallback store only: %s", form_id, exc)

        fallback_responses = await run_in_threadpool(self.fallback.read, form_id)
        return sort_newest_first(fallback_responses + remote_responses)
