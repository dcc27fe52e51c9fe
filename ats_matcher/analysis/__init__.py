from .insights import MAX_INSIGHTS, generate_insights
from .normalizer import (
    CONTENT_MIN_LENGTH,
    KEYWORD_MIN_LENGTH,
    STOPWORDS,
    has_content,
    normalize,
    tokens_with_duplicates,
    unique_tokens,
)
from .scoring import analyze, score

__all__ = [
    "CONTENT_MIN_LENGTH",
    "KEYWORD_MIN_LENGTH",
    "MAX_INSIGHTS",
    "STOPWORDS",
    "analyze",
    "generate_insights",
    "has_content",
    "normalize",
    "score",
    "tokens_with_duplicates",
    "unique_tokens",
]
