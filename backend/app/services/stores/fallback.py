import json
import logging
import os
import secrets
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol

from app.schemas.responses import FormResponse
from app.schemas.scoring import QuizScoring

from .base import dump_scoring, load_scoring, parse_timestamp, sort_newest_first

logger = logging.getLogger(__name__)

FallbackBucket = Dict[str, List[Dict[str, Any]]]


class FallbackWriteError(RuntimeError):
    pass


class StorageMedium(Protocol):
    def get_item(self, key: str) -> Optional[str]:
        ...

    def set_item(self, key: str, value: str) -> None:
        ...


class FileStorageMedium(StorageMedium):
    """One file per storage key under ``directory``."""

    def __init__(self, directory: str):
        self.directory = Path(directory)

    def _path_for(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def get_item(self, key: str) -> Optional[str]:
        path = self._path_for(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set_item(self, key: str, value: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self._path_for(key)
        tmp_path = path.with_suffix(".json.tmp")
        tmp_path.write_text(value, encoding="utf-8")
        os.replace(tmp_path, path)


def _local_response_id() -> str:
    return f"local-{int(time.time() * 1000)}-{secrets.token_hex(3)}"


class FallbackStore:
    """Local ordered list of responses per form, stored as one JSON bucket.

    Without a durable medium the bucket lives in process memory with the
    same read and merge behaviour. The read/append/write cycle is not
    guarded against concurrent writers in one process.
    """

    def __init__(self, medium: Optional[StorageMedium] = None, storage_key: str = "gfc-local-responses"):
        self.medium = medium
        self.storage_key = storage_key
        self._memory: FallbackBucket = {}

    @property
    def is_durable(self) -> bool:
        return self.medium is not None

    def load_bucket(self) -> FallbackBucket:
        if self.medium is None:
            return {form_id: list(items) for form_id, items in self._memory.items()}

        try:
            raw = self.medium.get_item(self.storage_key)
        except OSError as exc:
            logger.warning("Unable to read fallback responses from storage: %s", exc)
            return {}
        if not raw:
            return {}
        try:
            parsed = json.loads(raw)
        except json.JSONDecodeError as exc:
            logger.warning("Fallback response bucket is not valid JSON, ignoring it: %s", exc)
            return {}
        return parsed if isinstance(parsed, dict) else {}

    def save_bucket(self, bucket: FallbackBucket) -> None:
        if self.medium is None:
            for form_id, items in bucket.items():
                self._memory[form_id] = list(items)
            return

        try:
            self.medium.set_item(self.storage_key, json.dumps(bucket, ensure_ascii=False))
        except (OSError, TypeError, ValueError) as exc:
            raise FallbackWriteError(f"Unable to persist fallback responses: {exc}") from exc

    def append(
        self,
        form_id: str,
        answers: Dict[str, Any],
        scoring: Optional[QuizScoring] = None,
    ) -> FormResponse:
        bucket = self.load_bucket()
        items = bucket.get(form_id)
        if not isinstance(items, list):
            items = []
        entry: Dict[str, Any] = {
            "id": _local_response_id(),
            "answers": dict(answers),
            "submittedAt": datetime.now(timezone.utc).isoformat(),
        }
        scoring_payload = dump_scoring(scoring)
        if scoring_payload is not None:
            entry["scoring"] = scoring_payload
        items.insert(0, entry)
        bucket[form_id] = items
        self.save_bucket(bucket)
        return self._to_response(entry)

    def read(self, form_id: str) -> List[FormResponse]:
        bucket = self.load_bucket()
        items = bucket.get(form_id)
        if not isinstance(items, list):
            items = []
        responses: List[FormResponse] = []
        for entry in items:
            if not isinstance(entry, dict) or not entry.get("id"):
                continue
            try:
                responses.append(self._to_response(entry))
            except ValueError as exc:
                logger.warning("Skipping malformed fallback response %s: %s", entry.get("id"), exc)
        return sort_newest_first(responses)

    @staticmethod
    def _to_response(entry: Dict[str, Any]) -> FormResponse:
        return FormResponse(
            id=str(entry["id"]),
            answers=entry.get("answers") or {},
            submitted_at=parse_timestamp(entry.get("submittedAt")),
            scoring=load_scoring(entry.get("scoring")),
        )
