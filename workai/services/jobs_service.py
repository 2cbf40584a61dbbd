from __future__ import annotations

import logging

from workai.core.job_store import JobStoreError, JsonJobStore
from workai.pricing.engine import EngineOutcome, evaluate
from workai.pricing.notes import NoteRefiner, select_note
from workai.pricing.rules import BandRules
from workai.schemas.jobs import JobSubmission, MediaRef, RecommendationResult, StoredJob

logger = logging.getLogger(__name__)


class RecommendationFailed(RuntimeError):
    def __init__(self, message: str = "Backend error while building your ticket."):
        super().__init__(message)


def _evaluate_against_history(
    submission: JobSubmission, *, store: JsonJobStore, rules: BandRules
) -> EngineOutcome:
    try:
        history = store.load()
        return evaluate(submission, history, rules)
    except JobStoreError as exc:
        logger.error("job_history_unavailable error=%s", exc)
        raise RecommendationFailed() from exc
    except (ValueError, ArithmeticError) as exc:
        logger.exception("job_recommendation_failed error=%s", exc)
        raise RecommendationFailed() from exc


def preview_job(submission: JobSubmission, *, store: JsonJobStore, rules: BandRules) -> RecommendationResult:
    return _evaluate_against_history(submission, store=store, rules=rules).result


async def submit_job(
    submission: JobSubmission,
    *,
    store: JsonJobStore,
    rules: BandRules,
    refiner: NoteRefiner | None = None,
    media: MediaRef | None = None,
    refine_timeout_s: float = 8.0,
) -> StoredJob:
    """Build, annotate and persist the recommendation for one submission."""
    outcome = _evaluate_against_history(submission, store=store, rules=rules)
    notes = await select_note(
        outcome.note_context(),
        outcome.result.notes,
        refiner,
        timeout_s=refine_timeout_s,
    )
    result = outcome.result.model_copy(update={"notes": notes, "media_ref": media})

    try:
        job = store.append(result, operator_id=submission.operator_id)
    except JobStoreError as exc:
        logger.error("job_persist_failed error=%s", exc)
        raise RecommendationFailed() from exc

    logger.info(
        "job_recommendation_built id=%s price=%s scope=%s band=%s-%s upsell=%s rules=%s tuned=%s shield=%s refined=%s",
        job.id,
        job.price,
        job.scope_type,
        job.ai_low,
        job.ai_high,
        job.upsell_potential,
        ",".join(outcome.rules_fired) or "-",
        outcome.history_tuned,
        outcome.shield or "-",
        notes != outcome.result.notes,
    )
    return job


def list_jobs(store: JsonJobStore) -> list[StoredJob]:
    try:
        return store.load()
    except JobStoreError as exc:
        logger.error("job_list_failed error=%s", exc)
        raise RecommendationFailed("Backend error while reading stored jobs.") from exc
