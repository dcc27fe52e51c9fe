import asyncio

from fastapi import APIRouter, HTTPException, Request, status

from ats_matcher.core.rate_limit import rate_limit
from ats_matcher.errors import (
    AuthError,
    ConfigurationError,
    NetworkError,
    RateLimitError,
    UpstreamError,
)
from ats_matcher.schemas.api import (
    CoverLetterRequest,
    CoverLetterResponse,
    OptimizeRequest,
    OptimizeResponse,
)
from ats_matcher.services.optimizer import get_optimizer

router = APIRouter()

AI_RATE_LIMIT = "10/minute"


def _upstream_status(exc: UpstreamError) -> int:
    if isinstance(exc, ConfigurationError):
        return status.HTTP_500_INTERNAL_SERVER_ERROR
    if isinstance(exc, AuthError):
        return status.HTTP_401_UNAUTHORIZED
    if isinstance(exc, RateLimitError):
        return status.HTTP_429_TOO_MANY_REQUESTS
    if isinstance(exc, NetworkError):
        return status.HTTP_504_GATEWAY_TIMEOUT if exc.timeout else status.HTTP_503_SERVICE_UNAVAILABLE
    return status.HTTP_502_BAD_GATEWAY


def _raise_upstream_http_error(exc: UpstreamError) -> None:
    raise HTTPException(status_code=_upstream_status(exc), detail=str(exc)) from exc


@router.post("/optimize-resume", response_model=OptimizeResponse)
@rate_limit(AI_RATE_LIMIT)
async def optimize_resume(request: Request, payload: OptimizeRequest):
    _ = request
    if not payload.resume_text.strip() or not payload.job_description.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Both resume_text and job_description are required.",
        )
    try:
        result = await asyncio.to_thread(
            get_optimizer().optimize_resume, payload.resume_text, payload.job_description
        )
    except UpstreamError as exc:
        _raise_upstream_http_error(exc)
    return OptimizeResponse(suggestions=result.text, timestamp=result.generated_at)


@router.post("/cover-letter", response_model=CoverLetterResponse)
@rate_limit(AI_RATE_LIMIT)
async def cover_letter(request: Request, payload: CoverLetterRequest):
    _ = request
    if not payload.resume_text.strip() or not payload.job_description.strip() or not payload.company_name.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="resume_text, job_description and company_name are required.",
        )
    try:
        result = await asyncio.to_thread(
            get_optimizer().generate_cover_letter,
            payload.resume_text,
            payload.job_description,
            payload.company_name.strip(),
        )
    except UpstreamError as exc:
        _raise_upstream_http_error(exc)
    return CoverLetterResponse(
        cover_letter=result.text,
        company_name=payload.company_name.strip(),
        timestamp=result.generated_at,
    )
