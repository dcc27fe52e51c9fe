from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

_SCORING_CONFIG_CACHE: dict[str, Any] | None = None
_DEFAULT_SCORING_CONFIG_PATH = Path(__file__).resolve().parents[2] / "config" / "scoring.yaml"


def _scoring_config_path() -> Path:
    override = (os.getenv("SCORING_CONFIG_PATH") or "").strip()
    return Path(override) if override else _DEFAULT_SCORING_CONFIG_PATH


def get_scoring_config() -> dict[str, Any]:
    """Load scoring config from repo-level config/scoring.yaml and cache it.

    A missing file yields an empty mapping so the built-in defaults apply.
    """
    global _SCORING_CONFIG_CACHE

    if _SCORING_CONFIG_CACHE is not None:
        return _SCORING_CONFIG_CACHE

    path = _scoring_config_path()
    if not path.exists():
        logger.info("scoring_config_missing path=%s using_defaults=true", path)
        _SCORING_CONFIG_CACHE = {}
        return _SCORING_CONFIG_CACHE

    import yaml

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise RuntimeError(f"Failed to read scoring config '{path}': {exc}") from exc

    try:
        parsed = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise RuntimeError(f"Invalid YAML in scoring config '{path}': {exc}") from exc

    if parsed is None:
        parsed = {}
    if not isinstance(parsed, dict):
        raise RuntimeError(f"Invalid scoring config '{path}': expected a top-level mapping.")

    _SCORING_CONFIG_CACHE = parsed
    return _SCORING_CONFIG_CACHE


def clear_scoring_config_cache() -> None:
    global _SCORING_CONFIG_CACHE
    _SCORING_CONFIG_CACHE = None


def get_scoring_value(path: str, default: Any = None) -> Any:
    """Get nested config value using dot path notation, e.g. 'weights.coverage'."""
    if not path:
        return default

    current: Any = get_scoring_config()
    for key in path.split("."):
        if not isinstance(current, dict):
            return default
        if key not in current:
            return default
        current = current[key]
    return current


@dataclass(frozen=True)
class ScoringConfig:
    coverage_weight: float = 0.4
    section_weight: float = 0.3
    experience_weight: float = 0.3
    min_token_length: int = 4
    sections: tuple[str, ...] = ("skills", "experience", "education")
    required_terms: tuple[str, ...] = ("experience", "skills", "education")
    strong_threshold: int = 60
    moderate_threshold: int = 40


def load_scoring_config() -> ScoringConfig:
    defaults = ScoringConfig()
    sections = get_scoring_value("sections", None)
    required = get_scoring_value("required_terms", None)
    return ScoringConfig(
        coverage_weight=float(get_scoring_value("weights.coverage", defaults.coverage_weight)),
        section_weight=float(get_scoring_value("weights.sections", defaults.section_weight)),
        experience_weight=float(get_scoring_value("weights.experience", defaults.experience_weight)),
        min_token_length=int(get_scoring_value("tokens.min_length", defaults.min_token_length)),
        sections=tuple(str(item).strip().lower() for item in sections) if sections else defaults.sections,
        required_terms=tuple(str(item).strip().lower() for item in required) if required else defaults.required_terms,
        strong_threshold=int(get_scoring_value("match_level.strong_above", defaults.strong_threshold)),
        moderate_threshold=int(get_scoring_value("match_level.moderate_from", defaults.moderate_threshold)),
    )
