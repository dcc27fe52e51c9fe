from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from functools import lru_cache

import openai
from openai import OpenAI

from ats_matcher.core.config import Settings, settings
from ats_matcher.errors import (
    AuthError,
    ConfigurationError,
    InputError,
    NetworkError,
    RateLimitError,
    UpstreamError,
)

logger = logging.getLogger(__name__)

OPTIMIZE_MAX_TOKENS = 1000
COVER_LETTER_MAX_TOKENS = 600

OPTIMIZE_SYSTEM_PROMPT = (
    "You are an ATS (Applicant Tracking System) expert. You review a resume against "
    "a job description and give specific, actionable optimization suggestions."
)
COVER_LETTER_SYSTEM_PROMPT = (
    "You are a professional career coach who writes concise, personalized cover letters."
)


@dataclass(frozen=True)
class OptimizationResult:
    text: str
    model: str
    generated_at: datetime


def _looks_like_placeholder(value: str) -> bool:
    lower = value.strip().lower()
    return lower.startswith("your_") or lower.startswith("replace_") or lower in {"changeme", "todo"}


def _optimize_prompt(resume_text: str, job_description: str) -> str:
    return (
        "Analyze the following resume and job description, then suggest how to optimize "
        "the resume for ATS compatibility.\n\n"
        f"Job Description:\n{job_description}\n\n"
        f"Resume:\n{resume_text}\n\n"
        "Provide suggestions in these categories:\n"
        "1. Keywords to add\n"
        "2. Skills to highlight\n"
        "3. Format improvements\n"
        "4. Content enhancements\n\n"
        "Be specific and actionable."
    )


def _cover_letter_prompt(resume_text: str, job_description: str, company_name: str) -> str:
    return (
        "Write a cover letter for the following job application.\n\n"
        f"Company: {company_name}\n\n"
        f"Job Description:\n{job_description}\n\n"
        f"Candidate Resume:\n{resume_text}\n\n"
        "The letter should highlight relevant experience from the resume, match the job "
        "requirements, show enthusiasm for the role and stay concise with a professional tone."
    )


class ResumeOptimizer:
    """Client for the remote language model used by the optional AI assist flow."""

    def __init__(self, config: Settings | None = None) -> None:
        self._settings = config or settings

    @property
    def model(self) -> str:
        return self._settings.ai_model

    def enabled(self, credential: str | None = None) -> bool:
        if not self._settings.ai_enabled:
            return False
        key = (credential or self._settings.openai_api_key or "").strip()
        return bool(key) and not _looks_like_placeholder(key)

    def _client(self, credential: str | None) -> OpenAI:
        if not self._settings.ai_enabled:
            raise ConfigurationError("AI suggestions are disabled on this server.")
        key = (credential or self._settings.openai_api_key or "").strip()
        if not key or _looks_like_placeholder(key):
            raise ConfigurationError(
                "API key not configured. Please set the OPENAI_API_KEY environment variable."
            )
        return OpenAI(
            api_key=key,
            base_url=self._settings.openai_base_url,
            timeout=self._settings.ai_timeout_s,
            max_retries=self._settings.openai_max_retries,
        )

    def _complete(
        self,
        *,
        system_prompt: str,
        user_prompt: str,
        credential: str | None,
        temperature: float,
        max_tokens: int,
        purpose: str,
    ) -> str:
        client = self._client(credential)
        started = time.perf_counter()
        try:
            response = client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                temperature=temperature,
                top_p=0.95,
                max_tokens=max_tokens,
            )
        except openai.AuthenticationError as exc:
            logger.warning("optimizer_auth_failed purpose=%s model=%s", purpose, self.model)
            raise AuthError("API authentication failed. Check the configured API key.", status_code=401) from exc
        except openai.RateLimitError as exc:
            logger.warning("optimizer_rate_limited purpose=%s model=%s", purpose, self.model)
            raise RateLimitError("Too many requests. Please try again later.", status_code=429) from exc
        except openai.APITimeoutError as exc:
            logger.warning("optimizer_timeout purpose=%s model=%s", purpose, self.model)
            raise NetworkError("AI request timed out. Please try again.", timeout=True) from exc
        except openai.APIConnectionError as exc:
            logger.warning("optimizer_connection_failed purpose=%s model=%s: %s", purpose, self.model, exc)
            raise NetworkError("Unable to connect to the AI service.") from exc
        except openai.APIStatusError as exc:
            logger.warning(
                "optimizer_upstream_error purpose=%s model=%s status=%s", purpose, self.model, exc.status_code
            )
            raise UpstreamError(f"AI service error: {exc.status_code}", status_code=exc.status_code) from exc
        except openai.APIError as exc:
            logger.warning("optimizer_api_error purpose=%s model=%s: %s", purpose, self.model, exc)
            raise UpstreamError("Unable to parse AI service response.", code="invalid_response") from exc

        message = response.choices[0].message if response.choices else None
        content = message.content if message is not None else None
        latency_ms = int((time.perf_counter() - started) * 1000)
        if not content or not content.strip():
            logger.warning("optimizer_empty_response purpose=%s model=%s latency_ms=%s", purpose, self.model, latency_ms)
            raise UpstreamError("Unable to parse AI service response.", code="empty_response")
        logger.info(
            "optimizer_completed purpose=%s model=%s latency_ms=%s chars=%s",
            purpose,
            self.model,
            latency_ms,
            len(content),
        )
        return content.strip()

    def optimize_resume(
        self, resume_text: str, job_description: str, credential: str | None = None
    ) -> OptimizationResult:
        if not resume_text.strip() or not job_description.strip():
            raise InputError("Resume text and job description are required.")
        text = self._complete(
            system_prompt=OPTIMIZE_SYSTEM_PROMPT,
            user_prompt=_optimize_prompt(resume_text, job_description),
            credential=credential,
            temperature=0.7,
            max_tokens=OPTIMIZE_MAX_TOKENS,
            purpose="optimize",
        )
        return OptimizationResult(text=text, model=self.model, generated_at=datetime.now(timezone.utc))

    def generate_cover_letter(
        self,
        resume_text: str,
        job_description: str,
        company_name: str,
        credential: str | None = None,
    ) -> OptimizationResult:
        if not resume_text.strip() or not job_description.strip() or not company_name.strip():
            raise InputError("Resume text, job description, and company name are required.")
        text = self._complete(
            system_prompt=COVER_LETTER_SYSTEM_PROMPT,
            user_prompt=_cover_letter_prompt(resume_text, job_description, company_name.strip()),
            credential=credential,
            temperature=0.8,
            max_tokens=COVER_LETTER_MAX_TOKENS,
            purpose="cover_letter",
        )
        return OptimizationResult(text=text, model=self.model, generated_at=datetime.now(timezone.utc))

    def validate_credential(self, credential: str | None = None) -> bool:
        """Send a tiny request; False when the key is rejected."""
        try:
            self._complete(
                system_prompt="Reply with OK.",
                user_prompt="Test",
                credential=credential,
                temperature=0.0,
                max_tokens=5,
                purpose="validate",
            )
        except (AuthError, ConfigurationError):
            return False
        return True


@lru_cache(maxsize=1)
def get_optimizer() -> ResumeOptimizer:
    return ResumeOptimizer()
