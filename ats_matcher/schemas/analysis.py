from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

MatchLevel = Literal["Strong", "Moderate", "Weak"]


class Document(BaseModel):
    model_config = ConfigDict(frozen=True)

    file_name: str = Field(default="", max_length=255)
    text: str


class TextInput(BaseModel):
    kind: Literal["text"] = "text"
    text: str
    file_name: str = Field(default="pasted-text.txt", max_length=255)


class FileInput(BaseModel):
    kind: Literal["file"] = "file"
    content: bytes
    mime_type: str
    file_name: str = Field(default="uploaded-file", max_length=255)


DocumentInput = Annotated[Union[TextInput, FileInput], Field(discriminator="kind")]


class ScoringResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    score: int = Field(ge=0, le=100)
    coverage: int = Field(ge=0, le=100)
    matched_keywords: tuple[str, ...] = ()
    missing_keywords: tuple[str, ...] = ()
    required_keywords: tuple[str, ...] = ()
    optional_keywords: tuple[str, ...] = ()
    section_scores: dict[str, int] = Field(default_factory=dict)
    experience_match: float = Field(ge=0.0, le=1.0)
    match_level: MatchLevel
    insights: tuple[str, ...] = ()
    timestamp: int

    @property
    def keyword_total(self) -> int:
        return len(self.matched_keywords) + len(self.missing_keywords)


class HistoryEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    timestamp: int
    resume_file_name: str
    jd_file_name: str
    score: int = Field(ge=0, le=100)
    coverage: int = Field(ge=0, le=100)
    matched: int = Field(default=0, ge=0)
    missing: int = Field(default=0, ge=0)


class SessionState(BaseModel):
    model_config = ConfigDict(frozen=True)

    resume_document: Document | None = None
    job_description_document: Document | None = None
    current_result: ScoringResult | None = None
    history: tuple[HistoryEntry, ...] = ()
    loading: bool = False
    error: str | None = None
    suggestions: str | None = None
