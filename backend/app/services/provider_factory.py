import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from sqlalchemy.engine import Engine

from app.core.config import Settings
from app.db.session import Base, build_engine, build_session_factory
from app.services.form_catalog import FormCatalog
from app.services.quiz_evaluator import QuizEvaluator
from app.services.response_store import ResponseStoreAdapter
from app.services.stores import (
    FallbackStore,
    FileStorageMedium,
    HttpDocumentStore,
    MemoryResponseStore,
    ResponseStore,
    SqlResponseStore,
)

logger = logging.getLogger(__name__)
MEMORY_FALLBACK_VALUES = {"", "memory", "none"}
SQLITE_FILE_PREFIX = "sqlite:///"


@dataclass
class ServiceContainer:
    settings: Settings
    catalog: FormCatalog
    evaluator: QuizEvaluator
    primary_store: ResponseStore
    fallback_store: FallbackStore
    responses: ResponseStoreAdapter
    engine: Optional[Engine] = None

    def init_storage(self) -> None:
        if self.engine is None or not self.settings.create_tables:
            return
        url = self.settings.database_url
        if url.startswith(SQLITE_FILE_PREFIX) and url != SQLITE_FILE_PREFIX + ":memory:":
            Path(url[len(SQLITE_FILE_PREFIX):]).parent.mkdir(parents=True, exist_ok=True)
        Base.metadata.create_all(bind=self.engine)

    async def close(self) -> None:
        if isinstance(self.primary_store, HttpDocumentStore):
            await self.primary_store.aclose()
        if self.engine is not None:
            self.engine.dispose()


def build_primary_store(settings: Settings) -> Tuple[ResponseStore, Optional[Engine]]:
    backend = (settings.response_store or "").strip().lower() or "sql"
    if backend == "sql":
        engine = build_engine(settings.database_url)
        return SqlResponseStore(build_session_factory(engine)), engine

    if backend in {"http", "document", "remote"}:
        base_url = (settings.document_store_url or "").strip()
        if not base_url:
            logger.warning(
                "RESPONSE_STORE=%s but DOCUMENT_STORE_URL is missing. Using MemoryResponseStore.",
                backend,
            )
            return MemoryResponseStore(), None
        store = HttpDocumentStore(
            base_url=base_url,
            api_key=settings.document_store_api_key,
            timeout=settings.document_store_timeout,
        )
        return store, None

    if backend == "memory":
        return MemoryResponseStore(), None

    logger.warning("Unknown RESPONSE_STORE=%s. Using MemoryResponseStore.", backend)
    return MemoryResponseStore(), None


def build_fallback_store(settings: Settings) -> FallbackStore:
    directory = (settings.fallback_dir or "").strip()
    if directory.lower() in MEMORY_FALLBACK_VALUES:
        logger.info("No durable fallback medium configured. Fallback responses stay in memory.")
        return FallbackStore(medium=None, storage_key=settings.fallback_storage_key)
    return FallbackStore(medium=FileStorageMedium(directory), storage_key=settings.fallback_storage_key)


def build_services(settings: Settings, catalog: Optional[FormCatalog] = None) -> ServiceContainer:
    catalog = catalog or FormCatalog.from_files(settings.forms_path, settings.answer_keys_path)
    primary_store, engine = build_primary_store(settings)
    fallback_store = build_fallback_store(settings)
    return ServiceContainer(
        settings=settings,
        catalog=catalog,
        evaluator=QuizEvaluator(catalog.answer_keys),
        primary_store=primary_store,
        fallback_store=fallback_store,
        responses=ResponseStoreAdapter(catalog, primary_store, fallback_store),
        engine=engine,
    )
