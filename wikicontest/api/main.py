"""
HTTP interface for contest submission intake and screening.
"""

from fastapi import FastAPI, HTTPException

from .schemas import (
    EntrySubmissionRequest,
    EntrySubmissionResponse,
    ScreeningRequest,
    ScreeningResponse,
    ScreeningResultsResponse,
    ScreeningEventResponse,
    ScreeningEventListResponse,
    FlagListResponse,
    FormSchemaModel,
    AudioMetaFieldResponse,
    SubmissionResponse,
    HealthResponse,
)
from ..core import dao
from ..core.config import VERSION, debug_enabled, validate_config
from ..core.db import init_db, health_check
from ..core.errors import SubmissionStoreError, ScreeningStoreError
from ..core.field_mapper import find_audio_meta_field
from ..core.flags import filter_allowed_flags, get_available_flags
from ..core.intake import process_entry
from ..core.schema import FormSchema
from ..core.screening import bootstrap, get_screening_results, record_screening_result
from ..util.logging import logger

for issue in validate_config():
    logger.warning(f"Configuration issue: {issue}")

init_db()
bootstrap()

app = FastAPI(
    title="Wikimedia Contest Intake API",
    version=VERSION,
    description="Contest submission intake and screening with SQLite backend",
    docs_url="/docs" if debug_enabled() else None,
    redoc_url="/redoc" if debug_enabled() else None
)


def _require_submission(submission_id: int):
    try:
        submission = dao.get_submission(submission_id)
    except SubmissionStoreError as e:
        raise HTTPException(status_code=500, detail=str(e))
    if submission is None:
        raise HTTPException(status_code=404, detail="Submission not found")
    return submission


@app.get("/health", response_model=HealthResponse)
def health_check_endpoint():
    """Check system health."""
    db_health = health_check()

    return HealthResponse(
        status="healthy" if db_health else "unhealthy",
        version=VERSION,
        db_health=db_health,
        submission_count=dao.get_submission_count() if db_health else 0
    )


@app.post("/submissions", response_model=EntrySubmissionResponse)
def submit_entry(request: EntrySubmissionRequest):
    """Process a submitted form entry into a stored submission."""
    form = FormSchema.from_dict(request.form.model_dump())

    try:
        submission = process_entry(request.entry, form)
    except SubmissionStoreError as e:
        raise HTTPException(status_code=500, detail=f"Failed to store submission: {e}")

    try:
        flags = sorted(get_screening_results(submission.id).flags)
    except ScreeningStoreError as e:
        logger.warning(f"Could not read screening results for submission {submission.id}: {e}")
        flags = []

    return EntrySubmissionResponse(
        success=True,
        id=submission.id,
        unique_code=submission.unique_code,
        flags=flags
    )


@app.get("/submissions/{submission_id}", response_model=SubmissionResponse)
def get_submission_endpoint(submission_id: int):
    submission = _require_submission(submission_id)
    return SubmissionResponse(**submission.to_dict())


@app.post("/submissions/{submission_id}/screening", response_model=ScreeningResponse)
def add_screening_result_endpoint(submission_id: int, request: ScreeningRequest):
    """Append a screener's decision and flags to a submission."""
    _require_submission(submission_id)

    try:
        event_id = record_screening_result(
            submission_id,
            decision=request.decision,
            flags=request.flags,
            author=request.author
        )
    except ScreeningStoreError as e:
        raise HTTPException(status_code=500, detail=f"Failed to store screening result: {e}")

    allowed, _ = filter_allowed_flags(request.flags)
    return ScreeningResponse(success=True, id=event_id, flags=allowed)


@app.get("/submissions/{submission_id}/screening", response_model=ScreeningResultsResponse)
def get_screening_results_endpoint(submission_id: int):
    _require_submission(submission_id)

    try:
        results = get_screening_results(submission_id)
    except ScreeningStoreError as e:
        raise HTTPException(status_code=500, detail=str(e))

    return ScreeningResultsResponse(submission_id=submission_id, **results.to_dict())


@app.get("/submissions/{submission_id}/screening/events", response_model=ScreeningEventListResponse)
def list_screening_events_endpoint(submission_id: int):
    _require_submission(submission_id)

    try:
        events = dao.list_screening_events(submission_id)
    except ScreeningStoreError as e:
        raise HTTPException(status_code=500, detail=str(e))

    return ScreeningEventListResponse(
        submission_id=submission_id,
        events=[
            ScreeningEventResponse(
                id=event.id,
                decision=event.decision,
                flags=list(event.flags),
                author=event.author,
                created_at=event.created_at
            )
            for event in events
        ]
    )


@app.get("/screening/flags", response_model=FlagListResponse)
def list_flags_endpoint():
    return FlagListResponse(flags=get_available_flags())


@app.post("/forms/audio-meta-field", response_model=AudioMetaFieldResponse)
def audio_meta_field_endpoint(form: FormSchemaModel):
    """Locate the hidden input the submission form fills with audio metadata."""
    schema = FormSchema.from_dict(form.model_dump())
    return AudioMetaFieldResponse(field_id=find_audio_meta_field(schema))
