from typing import Any, Dict, List, Optional

import httpx

from app.schemas.responses import FormResponse
from app.schemas.scoring import QuizScoring

from .base import ResponseStore, StoreUnavailableError, dump_scoring, load_scoring, parse_timestamp


def _document_to_response(document: Dict[str, Any]) -> FormResponse:
    return FormResponse(
        id=str(document.get("id") or ""),
        answers=document.get("answers") or {},
        submitted_at=parse_timestamp(document.get("submittedAt")),
        scoring=load_scoring(document.get("scoring")),
    )


class HttpDocumentStore(ResponseStore):
    """Remote document store exposing one ``responses`` collection per form.

    The server assigns document ids and ``submittedAt`` timestamps; reads are
    requested newest first.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str = "",
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = (base_url or "").strip().rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self._client = client or httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            headers=self._headers(),
        )

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def _collection_path(self, form_id: str) -> str:
        return f"/forms/{form_id}/responses"

    async def add_response(
        self,
        form_id: str,
        answers: Dict[str, Any],
        scoring: Optional[QuizScoring],
    ) -> FormResponse:
        payload: Dict[str, Any] = {"answers": answers}
        scoring_payload = dump_scoring(scoring)
        if scoring_payload is not None:
            payload["scoring"] = scoring_payload
        try:
            response = await self._client.post(self._collection_path(form_id), json=payload)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise StoreUnavailableError(f"Document store write failed: {exc}") from exc
        if not isinstance(data, dict) or not data.get("id"):
            raise StoreUnavailableError("Document store returned no document id")
        data.setdefault("answers", answers)
        data.setdefault("scoring", scoring_payload)
        return _document_to_response(data)

    async def list_responses(self, form_id: str) -> List[FormResponse]:
        try:
            response = await self._client.get(
                self._collection_path(form_id),
                params={"orderBy": "submittedAt", "direction": "desc"},
            )
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise StoreUnavailableError(f"Document store read failed: {exc}") from exc
        documents = data.get("documents") if isinstance(data, dict) else data
        if not isinstance(documents, list):
            raise StoreUnavailableError("Document store returned an unexpected payload")
        return [_document_to_response(item) for item in documents if isinstance(item, dict)]

    async def aclose(self) -> None:
        await self._client.aclose()
