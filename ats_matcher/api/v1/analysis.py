import asyncio

from fastapi import APIRouter, File, HTTPException, Request, UploadFile, status

from ats_matcher.analysis import analyze
from ats_matcher.core.config import settings
from ats_matcher.core.rate_limit import rate_limit
from ats_matcher.errors import ExtractionError
from ats_matcher.parsing import (
    SUPPORTED_MIME_TYPES,
    extract_text,
    mime_type_for_filename,
    sanitize_extracted_text,
)
from ats_matcher.schemas.analysis import ScoringResult
from ats_matcher.schemas.api import AnalyzeRequest, ExtractTextResponse

router = APIRouter()

UPLOAD_CHUNK_BYTES = 64 * 1024


@router.post("/analyze", response_model=ScoringResult)
@rate_limit()
async def analyze_documents(request: Request, payload: AnalyzeRequest):
    _ = request
    return analyze(payload.resume_text, payload.job_description_text)


@router.post("/extract-text", response_model=ExtractTextResponse)
@rate_limit()
async def extract_uploaded_text(request: Request, file: UploadFile = File(...)):
    _ = request
    filename = file.filename or "uploaded-file"
    mime_type = mime_type_for_filename(filename)
    if mime_type not in SUPPORTED_MIME_TYPES and file.content_type in SUPPORTED_MIME_TYPES:
        mime_type = file.content_type
    if mime_type not in SUPPORTED_MIME_TYPES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Unsupported file type. Please upload PDF, DOCX, TXT or MD.",
        )

    limit = settings.max_upload_bytes
    chunks: list[bytes] = []
    total = 0
    while True:
        chunk = await file.read(UPLOAD_CHUNK_BYTES)
        if not chunk:
            break
        total += len(chunk)
        if total > limit:
            raise HTTPException(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                detail=f"File too large. Maximum allowed size is {settings.max_upload_mb} MB.",
            )
        chunks.append(chunk)

    try:
        text = await asyncio.to_thread(extract_text, b"".join(chunks), mime_type)
    except ExtractionError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    clean = sanitize_extracted_text(text)
    return ExtractTextResponse(filename=filename, mime_type=mime_type, text=clean, characters=len(clean))
