from __future__ import annotations

import re

WORD_RE = re.compile(r"[a-z]+")

# Scoring call sites drop anything shorter than this.
KEYWORD_MIN_LENGTH = 4
# Content checks accept short acronyms like "sql" or "aws".
CONTENT_MIN_LENGTH = 3
MAX_UNIQUE_TOKENS = 50_000

STOPWORDS = frozenset(
    {
        # Articles, conjunctions, prepositions
        "the", "and", "is", "in", "to", "of", "a", "for", "an", "or", "on", "at", "by",
        "as", "be", "are", "was", "were", "with", "from", "into", "onto", "over", "under",
        "about", "above", "after", "before", "between", "during", "through", "within",
        "without", "upon", "than", "then", "also", "but", "nor", "yet", "per", "via",
        # Pronouns and determiners
        "this", "that", "these", "those", "they", "them", "their", "there", "here",
        "your", "yours", "ours", "what", "which", "whom", "whose", "where", "when",
        "each", "every", "both", "some", "many", "much", "most", "other", "such", "very",
        # Auxiliaries and modals
        "have", "has", "had", "will", "would", "shall", "should", "could", "must", "been",
        "being", "does", "doing", "can", "may", "might", "just", "only", "well",
    }
)


def tokens_with_duplicates(text: str, *, min_length: int = KEYWORD_MIN_LENGTH) -> list[str]:
    """Lowercase word tokens in document order, frequency preserved."""
    if not text:
        return []
    return [
        token
        for token in WORD_RE.findall(text.lower())
        if len(token) >= min_length and token not in STOPWORDS
    ]


def unique_tokens(
    text: str,
    *,
    min_length: int = KEYWORD_MIN_LENGTH,
    limit: int = MAX_UNIQUE_TOKENS,
) -> list[str]:
    """Distinct tokens in first-seen order, capped at ``limit`` entries."""
    seen: dict[str, None] = {}
    for token in tokens_with_duplicates(text, min_length=min_length):
        if token in seen:
            continue
        seen[token] = None
        if len(seen) >= limit:
            break
    return list(seen)


def normalize(text: str, *, min_length: int = KEYWORD_MIN_LENGTH) -> list[str]:
    return tokens_with_duplicates(text, min_length=min_length)


def has_content(text: str, *, min_length: int = CONTENT_MIN_LENGTH) -> bool:
    if not text:
        return False
    return any(
        len(token) >= min_length and token not in STOPWORDS
        for token in WORD_RE.findall(text.lower())
    )
