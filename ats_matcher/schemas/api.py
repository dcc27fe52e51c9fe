from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class AnalyzeRequest(BaseModel):
    resume_text: str = Field(default="", max_length=1_000_000)
    job_description_text: str = Field(default="", max_length=1_000_000)


class ExtractTextResponse(BaseModel):
    filename: str
    mime_type: str
    text: str
    characters: int = Field(ge=0)


class OptimizeRequest(BaseModel):
    resume_text: str = Field(default="", max_length=50000)
    job_description: str = Field(default="", max_length=50000)


class OptimizeResponse(BaseModel):
    success: bool = True
    suggestions: str
    timestamp: datetime


class CoverLetterRequest(BaseModel):
    resume_text: str = Field(default="", max_length=50000)
    job_description: str = Field(default="", max_length=50000)
    company_name: str = Field(default="", max_length=200)


class CoverLetterResponse(BaseModel):
    success: bool = True
    cover_letter: str
    company_name: str
    timestamp: datetime
