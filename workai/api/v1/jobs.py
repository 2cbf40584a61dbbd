from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile, status

from workai.core.config import settings
from workai.core.job_store import JsonJobStore, get_job_store
from workai.core.pricing_config import load_band_rules
from workai.core.rate_limit import rate_limit
from workai.core.security import require_api_key
from workai.pricing.notes import NoteRefiner
from workai.pricing.rules import BandRules
from workai.schemas.jobs import JobSubmission, RecommendationResult, StoredJob
from workai.services.jobs_service import RecommendationFailed, list_jobs, preview_job, submit_job
from workai.services.media_storage import MediaRejected, MediaStorage, get_media_storage
from workai.services.note_refiner import get_note_refiner

router = APIRouter()


def _raise_failure(exc: RecommendationFailed) -> None:
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)) from exc


@router.post("/jobs/upload", response_model=StoredJob)
@rate_limit(settings.upload_rate_limit)
async def upload_job(
    request: Request,
    price: str | None = Form(default=None),
    description: str | None = Form(default="", max_length=5000),
    scope_type: str | None = Form(default="snapshot", alias="scopeType"),
    operator_id: str | None = Form(default=None, alias="operatorId", max_length=200),
    media: UploadFile | None = File(default=None),
    store: JsonJobStore = Depends(get_job_store),
    storage: MediaStorage = Depends(get_media_storage),
    rules: BandRules = Depends(load_band_rules),
    refiner: NoteRefiner | None = Depends(get_note_refiner),
):
    _ = request
    media_ref = None
    if media is not None and media.filename:
        try:
            media_ref = await storage.save(media)
        except MediaRejected as exc:
            raise HTTPException(status_code=exc.status_code, detail=str(exc)) from exc

    submission = JobSubmission(
        price=price,
        description=description,
        scope_type=scope_type,
        operator_id=operator_id,
    )
    try:
        return await submit_job(
            submission,
            store=store,
            rules=rules,
            refiner=refiner,
            media=media_ref,
            refine_timeout_s=settings.note_refiner_timeout_s,
        )
    except RecommendationFailed as exc:
        _raise_failure(exc)


@router.post("/jobs/preview", response_model=RecommendationResult)
@rate_limit()
async def preview(
    request: Request,
    payload: JobSubmission,
    store: JsonJobStore = Depends(get_job_store),
    rules: BandRules = Depends(load_band_rules),
):
    _ = request
    try:
        return preview_job(payload, store=store, rules=rules)
    except RecommendationFailed as exc:
        _raise_failure(exc)


@router.get("/jobs/list", response_model=list[StoredJob])
async def jobs_list(
    _: None = Depends(require_api_key),
    store: JsonJobStore = Depends(get_job_store),
):
    try:
        return list_jobs(store)
    except RecommendationFailed as exc:
        _raise_failure(exc)
