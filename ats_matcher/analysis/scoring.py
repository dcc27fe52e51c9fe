from __future__ import annotations

import re
import threading
import time
from functools import lru_cache

from ats_matcher.analysis.insights import generate_insights
from ats_matcher.analysis.normalizer import unique_tokens
from ats_matcher.core.scoring_config import ScoringConfig, load_scoring_config
from ats_matcher.schemas.analysis import MatchLevel, ScoringResult

# A resume token matches a JD keyword when it only adds one of these endings,
# so "experienced" covers "experience" and "engineers" covers "engineer".
INFLECTION_SUFFIXES = ("s", "es", "d", "ed", "ing", "er", "ers")

RESPONSIBILITY_TERMS = frozenset(
    {
        "lead", "leading", "leadership", "manage", "managing", "management",
        "mentor", "mentoring", "own", "ownership", "drive", "driving",
        "design", "designing", "architect", "architecture", "develop", "developing",
        "development", "build", "building", "implement", "implementing",
        "deliver", "delivering", "delivery", "deploy", "deployment", "maintain",
        "maintaining", "optimize", "optimizing", "scale", "scaling", "coordinate",
        "collaborate", "collaboration", "stakeholder", "stakeholders", "strategy",
        "responsible", "responsibilities", "senior", "experience", "ensure",
        "support", "analyze", "analysis", "improve", "launch", "plan", "planning",
    }
)

_clock_lock = threading.Lock()
_last_timestamp = 0


def next_timestamp() -> int:
    """Epoch milliseconds, strictly increasing within the process."""
    global _last_timestamp
    with _clock_lock:
        now = time.time_ns() // 1_000_000
        _last_timestamp = max(now, _last_timestamp + 1)
        return _last_timestamp


def round_half_up(value: float) -> int:
    return int(value + 0.5) if value >= 0 else -int(-value + 0.5)


def clamp_percent(value: float) -> int:
    return max(0, min(100, round_half_up(value)))


@lru_cache(maxsize=32)
def _section_pattern(name: str) -> re.Pattern[str]:
    return re.compile(rf"\b{re.escape(name)}(?:[:\s]|$)", re.IGNORECASE)


def _keyword_found(keyword: str, resume_tokens: set[str]) -> bool:
    if keyword in resume_tokens:
        return True
    return any(keyword + suffix in resume_tokens for suffix in INFLECTION_SUFFIXES)


def partition_keywords(
    jd_keywords: list[str], resume_tokens: set[str]
) -> tuple[list[str], list[str]]:
    matched: list[str] = []
    missing: list[str] = []
    for keyword in jd_keywords:
        (matched if _keyword_found(keyword, resume_tokens) else missing).append(keyword)
    return matched, missing


def section_scores(resume_text: str, sections: tuple[str, ...]) -> dict[str, int]:
    """Binary completeness: 100 when a '<name>:' style header is present."""
    return {
        name: 100 if _section_pattern(name).search(resume_text or "") else 0
        for name in sections
    }


def experience_match(
    jd_keywords: list[str],
    matched: list[str],
    *,
    resume_has_tokens: bool,
    coverage: int,
) -> float:
    if not resume_has_tokens or not jd_keywords:
        return 0.0
    responsibilities = [keyword for keyword in jd_keywords if keyword in RESPONSIBILITY_TERMS]
    if not responsibilities:
        return round(coverage / 100, 4)
    matched_set = set(matched)
    hits = sum(1 for keyword in responsibilities if keyword in matched_set)
    return round(hits / len(responsibilities), 4)


def composite_score(
    coverage: int,
    sections: dict[str, int],
    experience: float,
    config: ScoringConfig,
) -> int:
    section_average = sum(sections.values()) / len(sections) if sections else 0.0
    raw = (
        coverage * config.coverage_weight
        + section_average * config.section_weight
        + experience * 100 * config.experience_weight
    )
    return clamp_percent(raw)


def match_level(score_value: int, config: ScoringConfig) -> MatchLevel:
    if score_value > config.strong_threshold:
        return "Strong"
    if score_value >= config.moderate_threshold:
        return "Moderate"
    return "Weak"


def score(
    resume_text: str,
    job_description_text: str,
    config: ScoringConfig | None = None,
) -> ScoringResult:
    cfg = config or load_scoring_config()
    resume_tokens = set(unique_tokens(resume_text or "", min_length=cfg.min_token_length))
    jd_keywords = unique_tokens(job_description_text or "", min_length=cfg.min_token_length)

    matched, missing = partition_keywords(jd_keywords, resume_tokens)
    coverage = clamp_percent(100 * len(matched) / len(jd_keywords)) if jd_keywords else 0

    sections = section_scores(resume_text or "", cfg.sections)
    experience = experience_match(
        jd_keywords,
        matched,
        resume_has_tokens=bool(resume_tokens),
        coverage=coverage,
    )
    total = composite_score(coverage, sections, experience, cfg)

    required_terms = set(cfg.required_terms)
    required = [keyword for keyword in jd_keywords if keyword in required_terms]
    optional = [keyword for keyword in jd_keywords if keyword not in required_terms]

    return ScoringResult(
        score=total,
        coverage=coverage,
        matched_keywords=tuple(matched),
        missing_keywords=tuple(missing),
        required_keywords=tuple(required),
        optional_keywords=tuple(optional),
        section_scores=sections,
        experience_match=experience,
        match_level=match_level(total, cfg),
        timestamp=next_timestamp(),
    )


def analyze(
    resume_text: str,
    job_description_text: str,
    config: ScoringConfig | None = None,
) -> ScoringResult:
    """Score both texts and attach the improvement insights."""
    result = score(resume_text, job_description_text, config)
    return result.model_copy(update={"insights": tuple(generate_insights(result))})
