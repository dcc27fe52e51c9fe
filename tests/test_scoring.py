import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from ats_matcher.analysis.normalizer import unique_tokens  # noqa: E402
from ats_matcher.analysis.scoring import analyze, round_half_up, score  # noqa: E402
from ats_matcher.core.scoring_config import ScoringConfig  # noqa: E402

RESUME_A = "Experienced engineer with Python and distributed systems skills."
JD_A = "Looking for an engineer with Python, Kubernetes, and distributed systems experience."

FULL_RESUME = (
    "Jane Doe\n"
    "Skills: Python, Kubernetes, Terraform\n"
    "Experience:\n"
    "- Led platform team building Python services on Kubernetes.\n"
    "Education: BSc Computer Science\n"
)


class ScoringEngineTests(unittest.TestCase):
    def setUp(self):
        self.config = ScoringConfig()

    def test_reference_scenario_keywords_and_score(self):
        result = score(RESUME_A, JD_A, self.config)

        self.assertEqual(
            list(result.matched_keywords),
            ["engineer", "python", "distributed", "systems", "experience"],
        )
        self.assertEqual(list(result.missing_keywords), ["looking", "kubernetes"])
        self.assertEqual(result.coverage, 71)
        self.assertEqual(result.section_scores, {"skills": 0, "experience": 0, "education": 0})
        self.assertEqual(result.experience_match, 1.0)
        self.assertEqual(result.score, 58)
        self.assertEqual(result.match_level, "Moderate")
        self.assertEqual(list(result.required_keywords), ["experience"])
        self.assertNotIn("experience", result.optional_keywords)

    def test_matched_and_missing_partition_jd_keywords(self):
        samples = [
            (RESUME_A, JD_A),
            (FULL_RESUME, "Senior Python engineer. Kubernetes, Terraform, AWS and Go required."),
            ("", "Data analyst with SQL and Tableau"),
            ("Managing budgets", ""),
        ]
        for resume_text, jd_text in samples:
            with self.subTest(jd=jd_text):
                result = score(resume_text, jd_text, self.config)
                matched = set(result.matched_keywords)
                missing = set(result.missing_keywords)
                self.assertFalse(matched & missing)
                self.assertEqual(matched | missing, set(unique_tokens(jd_text)))
                self.assertEqual(result.keyword_total, len(unique_tokens(jd_text)))
                self.assertEqual(
                    set(result.required_keywords) | set(result.optional_keywords),
                    set(unique_tokens(jd_text)),
                )

    def test_same_inputs_give_identical_results_except_timestamp(self):
        first = score(RESUME_A, JD_A, self.config)
        second = score(RESUME_A, JD_A, self.config)
        self.assertLess(first.timestamp, second.timestamp)
        self.assertEqual(
            first.model_dump_json(exclude={"timestamp"}),
            second.model_dump_json(exclude={"timestamp"}),
        )

    def test_empty_inputs_are_safe(self):
        result = score("", "", self.config)
        self.assertEqual(result.coverage, 0)
        self.assertEqual(result.score, 0)
        self.assertEqual(result.matched_keywords, ())
        self.assertEqual(result.missing_keywords, ())
        self.assertEqual(result.experience_match, 0.0)

    def test_whitespace_only_resume_scores_zero(self):
        result = score("   \n\t", JD_A, self.config)
        self.assertEqual(result.coverage, 0)
        self.assertEqual(result.score, 0)
        self.assertEqual(result.match_level, "Weak")

    def test_empty_input_pipeline_still_produces_insights(self):
        for resume_text, jd_text in (("", ""), ("", JD_A), (RESUME_A, "")):
            with self.subTest(resume=resume_text, jd=jd_text):
                result = analyze(resume_text, jd_text, self.config)
                self.assertTrue(result.insights)

    def test_adding_a_jd_keyword_never_lowers_coverage(self):
        jd_text = "Python Kubernetes Terraform"
        before = score("Python developer", jd_text, self.config)
        after = score("Python developer Kubernetes", jd_text, self.config)
        self.assertEqual(before.coverage, 33)
        self.assertEqual(after.coverage, 67)
        self.assertGreaterEqual(after.coverage, before.coverage)

    def test_inflected_resume_words_match_base_keywords(self):
        result = score("Managed releases and deployed services", "manage release deploy service", self.config)
        self.assertEqual(list(result.matched_keywords), ["manage", "release", "deploy", "service"])

    def test_section_headers_are_detected_case_insensitively(self):
        result = score(FULL_RESUME, "Python Kubernetes", self.config)
        self.assertEqual(result.section_scores, {"skills": 100, "experience": 100, "education": 100})
        self.assertEqual(result.coverage, 100)
        self.assertEqual(result.experience_match, 1.0)
        self.assertEqual(result.score, 100)
        self.assertEqual(result.match_level, "Strong")

    def test_word_prefix_is_not_a_section_header(self):
        result = score("Experienced engineer", "engineer", self.config)
        self.assertEqual(result.section_scores["experience"], 0)

    def test_experience_match_uses_responsibility_terms(self):
        jd_text = "You will lead and mentor engineers and design services."
        result = score("I design services.", jd_text, self.config)
        # lead, mentor, design -> only design is covered
        self.assertAlmostEqual(result.experience_match, 0.3333)

    def test_weights_come_from_configuration(self):
        coverage_only = ScoringConfig(coverage_weight=1.0, section_weight=0.0, experience_weight=0.0)
        result = score(RESUME_A, JD_A, coverage_only)
        self.assertEqual(result.score, 71)

    def test_custom_sections_are_scored(self):
        config = ScoringConfig(sections=("summary", "projects"))
        result = score("Summary: backend engineer", "backend", config)
        self.assertEqual(result.section_scores, {"summary": 100, "projects": 0})

    def test_score_is_clamped(self):
        heavy = ScoringConfig(coverage_weight=2.0, section_weight=0.0, experience_weight=0.0)
        result = score("Python", "Python", heavy)
        self.assertEqual(result.score, 100)

    def test_round_half_up(self):
        self.assertEqual(round_half_up(0.5), 1)
        self.assertEqual(round_half_up(2.5), 3)
        self.assertEqual(round_half_up(71.42), 71)


if __name__ == "__main__":
    unittest.main()
