from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import TypeVar

from pydantic import TypeAdapter, ValidationError

from ats_matcher.analysis import analyze, has_content
from ats_matcher.core.config import settings
from ats_matcher.core.scoring_config import ScoringConfig, load_scoring_config
from ats_matcher.errors import AtsMatcherError, ExtractionError, InputError, StorageError, UpstreamError
from ats_matcher.parsing import TextExtractor, extract_text, sanitize_extracted_text
from ats_matcher.schemas.analysis import (
    Document,
    FileInput,
    HistoryEntry,
    ScoringResult,
    SessionState,
    TextInput,
)
from ats_matcher.services.optimizer import OptimizationResult, ResumeOptimizer, get_optimizer
from ats_matcher.session.history import HistoryLedger
from ats_matcher.session.storage import KeyValueStore

logger = logging.getLogger(__name__)

RESUME_KEY = "ats-resume"
JOB_DESCRIPTION_KEY = "ats-jd"
HISTORY_KEY = "ats-history"

MIN_DOCUMENT_CHARS = 10

_history_adapter = TypeAdapter(list[HistoryEntry])

T = TypeVar("T")


class SessionStateManager:
    """Owns the documents, the latest result and the analysis history of one session.

    Every operation reports failures through ``state.error`` instead of raising.
    Documents and history are written to ``store`` after each change and read
    back on construction, one key at a time, so a corrupt value only resets
    its own field.
    """

    def __init__(
        self,
        store: KeyValueStore,
        *,
        extractor: TextExtractor = extract_text,
        optimizer: ResumeOptimizer | None = None,
        scoring_config: ScoringConfig | None = None,
        history_capacity: int | None = None,
    ) -> None:
        self._store = store
        self._extractor = extractor
        self._optimizer = optimizer
        self._scoring_config = scoring_config or _load_scoring_config()
        self._generation = 0
        self._loading = False
        self._error: str | None = None
        self._suggestions: str | None = None
        self._result: ScoringResult | None = None

        self._resume = self._restore_document(RESUME_KEY)
        self._job_description = self._restore_document(JOB_DESCRIPTION_KEY)
        self._history = HistoryLedger(
            self._restore_history(),
            capacity=history_capacity or settings.history_capacity,
        )

    # -- read side -----------------------------------------------------

    @property
    def state(self) -> SessionState:
        return SessionState(
            resume_document=self._resume,
            job_description_document=self._job_description,
            current_result=self._result,
            history=self._history.entries,
            loading=self._loading,
            error=self._error,
            suggestions=self._suggestions,
        )

    @property
    def history(self) -> HistoryLedger:
        return self._history

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def ready_to_analyze(self) -> bool:
        return (
            not self._loading
            and self._resume is not None
            and self._job_description is not None
            and has_content(self._resume.text)
            and has_content(self._job_description.text)
        )

    # -- documents -----------------------------------------------------

    def load_resume(self, text: str, file_name: str = "pasted-resume.txt") -> SessionState:
        self._supersede()
        document = self._build_document(text, file_name, label="Resume")
        if document is not None:
            self._resume = document
            self._persist_document(RESUME_KEY, document)
            logger.info("resume_loaded file=%s characters=%s", document.file_name, len(document.text))
        return self.state

    def load_job_description(
        self, text: str, file_name: str = "pasted-job-description.txt"
    ) -> SessionState:
        self._supersede()
        document = self._build_document(text, file_name, label="Job description")
        if document is not None:
            self._job_description = document
            self._persist_document(JOB_DESCRIPTION_KEY, document)
            logger.info("job_description_loaded file=%s characters=%s", document.file_name, len(document.text))
        return self.state

    async def ingest_resume(self, source: TextInput | FileInput) -> SessionState:
        return await self._ingest(source, self.load_resume)

    async def ingest_job_description(self, source: TextInput | FileInput) -> SessionState:
        return await self._ingest(source, self.load_job_description)

    async def _ingest(
        self,
        source: TextInput | FileInput,
        loader: Callable[[str, str], SessionState],
    ) -> SessionState:
        if isinstance(source, TextInput):
            return loader(source.text, source.file_name)
        if self._loading:
            logger.info("ingest_ignored_busy file=%s", source.file_name)
            return self.state

        generation = self._begin()
        failure: AtsMatcherError | None = None
        text = ""
        try:
            text = await asyncio.to_thread(self._extractor, source.content, source.mime_type)
        except ExtractionError as exc:
            failure = exc
        except Exception as exc:  # noqa: BLE001 - extractor failures must stay inside the session
            logger.exception("extraction_crashed file=%s", source.file_name)
            failure = ExtractionError(f"Failed to process {source.file_name}: {exc}")
        finally:
            self._finish(generation)

        if not self._is_current(generation):
            logger.info("ingest_discarded_stale file=%s", source.file_name)
            return self.state
        if failure is not None:
            self._fail(failure)
            return self.state
        return loader(text, source.file_name)

    # -- analysis ------------------------------------------------------

    def run_analysis(self) -> ScoringResult | None:
        if self._loading:
            logger.info("analysis_ignored_busy")
            return None

        resume = self._resume
        job_description = self._job_description
        missing: list[str] = []
        if resume is None or not has_content(resume.text):
            missing.append("a resume")
        if job_description is None or not has_content(job_description.text):
            missing.append("a job description")
        if missing or resume is None or job_description is None:
            self._fail(InputError(f"Please upload or paste {' and '.join(missing)} before running the analysis."))
            return None

        result = analyze(resume.text, job_description.text, self._scoring_config)
        self._result = result

        latest = self._history.latest
        entry = HistoryEntry(
            id=max(result.timestamp, latest.id + 1) if latest else result.timestamp,
            timestamp=result.timestamp,
            resume_file_name=resume.file_name,
            jd_file_name=job_description.file_name,
            score=result.score,
            coverage=result.coverage,
            matched=len(result.matched_keywords),
            missing=len(result.missing_keywords),
        )
        self._history = self._history.append(entry)
        self._persist_history()
        self._error = None
        logger.info(
            "analysis_completed score=%s coverage=%s matched=%s missing=%s",
            result.score,
            result.coverage,
            len(result.matched_keywords),
            len(result.missing_keywords),
        )
        return result

    # -- optional AI assist --------------------------------------------

    async def request_optimization(self, credential: str | None = None) -> str | None:
        return await self._assist(
            lambda optimizer, resume, jd: optimizer.optimize_resume(resume, jd, credential),
            purpose="optimize",
        )

    async def request_cover_letter(self, company_name: str, credential: str | None = None) -> str | None:
        if not company_name.strip():
            self._fail(InputError("Please provide the company name for the cover letter."))
            return None
        return await self._assist(
            lambda optimizer, resume, jd: optimizer.generate_cover_letter(resume, jd, company_name, credential),
            purpose="cover_letter",
        )

    async def _assist(
        self,
        call: Callable[[ResumeOptimizer, str, str], OptimizationResult],
        *,
        purpose: str,
    ) -> str | None:
        if self._loading:
            logger.info("assist_ignored_busy purpose=%s", purpose)
            return None
        if self._resume is None or self._job_description is None:
            self._fail(InputError("Please upload your resume and job description first."))
            return None

        optimizer = self._optimizer or get_optimizer()
        resume_text = self._resume.text
        jd_text = self._job_description.text
        generation = self._begin()
        failure: AtsMatcherError | None = None
        outcome: OptimizationResult | None = None
        try:
            outcome = await asyncio.to_thread(call, optimizer, resume_text, jd_text)
        except AtsMatcherError as exc:
            failure = exc
        except Exception as exc:  # noqa: BLE001 - assist failures must stay inside the session
            logger.exception("assist_crashed purpose=%s", purpose)
            failure = UpstreamError(f"AI assist failed: {exc}", code="assist_crashed")
        finally:
            self._finish(generation)

        if not self._is_current(generation):
            logger.info("assist_discarded_stale purpose=%s", purpose)
            return None
        if failure is not None or outcome is None:
            self._fail(failure or UpstreamError("AI assist returned no result."))
            return None
        self._suggestions = outcome.text
        self._error = None
        return outcome.text

    # -- resets --------------------------------------------------------

    def reset(self) -> SessionState:
        """Drop documents, result and notices; history is kept."""
        self._generation += 1
        self._loading = False
        self._resume = None
        self._job_description = None
        self._result = None
        self._error = None
        self._suggestions = None
        self._persist_document(RESUME_KEY, None)
        self._persist_document(JOB_DESCRIPTION_KEY, None)
        logger.info("session_reset")
        return self.state

    def clear_history(self) -> SessionState:
        self._history = self._history.clear()
        self._persist_history()
        logger.info("history_cleared")
        return self.state

    def dismiss_error(self) -> SessionState:
        self._error = None
        return self.state

    # -- internals -----------------------------------------------------

    def _begin(self) -> int:
        self._generation += 1
        self._loading = True
        self._error = None
        return self._generation

    def _supersede(self) -> None:
        # A direct document load wins over work still in flight.
        self._generation += 1
        self._loading = False

    def _is_current(self, generation: int) -> bool:
        return generation == self._generation

    def _finish(self, generation: int) -> None:
        if self._is_current(generation):
            self._loading = False

    def _fail(self, exc: AtsMatcherError) -> None:
        logger.info("session_error code=%s message=%s", exc.code, exc)
        self._error = str(exc)

    def _build_document(self, text: str, file_name: str, *, label: str) -> Document | None:
        clean = sanitize_extracted_text(text or "")
        if len(clean) <= MIN_DOCUMENT_CHARS or not has_content(clean):
            self._fail(InputError(f"{label} appears empty or unreadable."))
            return None
        self._error = None
        name = (file_name or "").strip()[:255] or "untitled.txt"
        return Document(file_name=name, text=clean)

    def _write(self, key: str, value: str | None) -> None:
        try:
            if value is None:
                self._store.remove(key)
            else:
                self._store.set(key, value)
        except (StorageError, OSError) as exc:
            logger.warning("session_store_write_failed key=%s: %s", key, exc)

    def _persist_document(self, key: str, document: Document | None) -> None:
        self._write(key, document.model_dump_json() if document is not None else None)

    def _persist_history(self) -> None:
        self._write(HISTORY_KEY, _history_adapter.dump_json(list(self._history.entries)).decode("utf-8"))

    def _read(self, key: str) -> str | None:
        try:
            return self._store.get(key)
        except (StorageError, OSError) as exc:
            logger.warning("session_store_read_failed key=%s: %s", key, exc)
            return None

    def _restore(self, key: str, parse: Callable[[str], T], default: T) -> T:
        raw = self._read(key)
        if raw is None:
            return default
        try:
            return parse(raw)
        except (ValidationError, ValueError) as exc:
            logger.warning("session_store_corrupt key=%s: %s", key, exc)
            return default

    def _restore_document(self, key: str) -> Document | None:
        return self._restore(key, Document.model_validate_json, None)

    def _restore_history(self) -> list[HistoryEntry]:
        return self._restore(HISTORY_KEY, _history_adapter.validate_json, [])


def _load_scoring_config() -> ScoringConfig:
    try:
        return load_scoring_config()
    except RuntimeError as exc:
        logger.warning("scoring_config_invalid using_defaults=true: %s", exc)
        return ScoringConfig()
