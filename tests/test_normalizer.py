import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from ats_matcher.analysis.normalizer import (  # noqa: E402
    CONTENT_MIN_LENGTH,
    KEYWORD_MIN_LENGTH,
    STOPWORDS,
    has_content,
    normalize,
    tokens_with_duplicates,
    unique_tokens,
)


class NormalizerTests(unittest.TestCase):
    def test_lowercases_and_drops_short_and_stop_words(self):
        tokens = normalize("The Python and SQL engineer with Kubernetes")
        self.assertEqual(tokens, ["python", "engineer", "kubernetes"])

    def test_duplicates_are_kept_in_document_order(self):
        tokens = tokens_with_duplicates("Python, python; PYTHON docker")
        self.assertEqual(tokens, ["python", "python", "python", "docker"])

    def test_unique_tokens_keep_first_seen_order(self):
        tokens = unique_tokens("docker python docker terraform python")
        self.assertEqual(tokens, ["docker", "python", "terraform"])

    def test_unique_tokens_respect_limit(self):
        self.assertEqual(unique_tokens("alpha bravo charlie delta", limit=2), ["alpha", "bravo"])

    def test_markup_and_control_characters_do_not_produce_tokens(self):
        tokens = normalize("<div>\x00\x07Leadership</div>&nbsp;1234")
        self.assertEqual(tokens, ["leadership", "nbsp"])

    def test_empty_text_yields_empty_sequence(self):
        self.assertEqual(normalize(""), [])
        self.assertEqual(unique_tokens(""), [])

    def test_thresholds_are_configurable(self):
        self.assertEqual(KEYWORD_MIN_LENGTH, 4)
        self.assertEqual(CONTENT_MIN_LENGTH, 3)
        self.assertEqual(normalize("SQL AWS", min_length=3), ["sql", "aws"])
        self.assertEqual(normalize("SQL AWS"), [])

    def test_stopword_set_is_explicit(self):
        self.assertGreaterEqual(len(STOPWORDS), 8)
        for word in ("the", "and", "is", "in", "to", "of", "a", "for"):
            self.assertIn(word, STOPWORDS)

    def test_has_content_uses_short_threshold(self):
        self.assertTrue(has_content("SQL AWS"))
        self.assertFalse(has_content("a an to of"))
        self.assertFalse(has_content("   \n\t"))


if __name__ == "__main__":
    unittest.main()
