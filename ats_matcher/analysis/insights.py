from __future__ import annotations

from ats_matcher.schemas.analysis import ScoringResult

MAX_INSIGHTS = 20
# Missing keywords beyond this count get no individual tips.
KEYWORD_TIP_LIMIT = 6
SECTION_TIP_THRESHOLD = 70
EXPERIENCE_TIP_THRESHOLD = 0.6
LOW_COVERAGE_THRESHOLD = 50

_KEYWORD_TEMPLATES = (
    'Add a concrete bullet using "{keyword}" with measurable impact (e.g., increased X by Y%).',
    'Place "{keyword}" in both Summary and Experience sections to pass ATS term frequency checks.',
)


def generate_insights(result: ScoringResult, limit: int = MAX_INSIGHTS) -> list[str]:
    tips: list[str] = []

    if result.keyword_total == 0:
        tips.append("Add a job description with concrete requirements so keywords can be compared.")
    if not result.matched_keywords and not any(result.section_scores.values()):
        tips.append(
            "Add resume content: a Skills section, an Experience section with "
            "responsibilities, and your Education."
        )
    if result.keyword_total and result.coverage < LOW_COVERAGE_THRESHOLD:
        tips.append("Low keyword coverage. Add more role-specific terms from the job description.")

    for keyword in result.missing_keywords[:KEYWORD_TIP_LIMIT]:
        tips.extend(template.format(keyword=keyword) for template in _KEYWORD_TEMPLATES)

    matched = set(result.matched_keywords)
    for keyword in result.required_keywords:
        if keyword not in matched:
            tips.append(f'Mark as Required: ensure "{keyword}" appears verbatim at least once.')

    for name, value in result.section_scores.items():
        if value < SECTION_TIP_THRESHOLD:
            tips.append(
                f"Strengthen {name}: add a clear '{name.title()}' heading with 2-3 bullets "
                "of quantified results and relevant tools."
            )

    if result.experience_match < EXPERIENCE_TIP_THRESHOLD:
        tips.append(
            "Align experience: mirror JD responsibilities with action verbs and matching scope/scale."
        )

    return list(dict.fromkeys(tips))[: max(0, limit)]
