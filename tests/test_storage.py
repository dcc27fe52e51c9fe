import sys
import tempfile
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from ats_matcher.session.storage import InMemoryStore, SqliteStore  # noqa: E402


class SqliteStoreTests(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.db_path = str(Path(self._tmp.name) / "nested" / "session.db")

    def tearDown(self):
        self._tmp.cleanup()

    def test_set_get_remove(self):
        store = SqliteStore(self.db_path)
        try:
            self.assertIsNone(store.get("ats-resume"))
            store.set("ats-resume", '{"file_name": "cv.pdf"}')
            self.assertEqual(store.get("ats-resume"), '{"file_name": "cv.pdf"}')
            store.set("ats-resume", "second")
            self.assertEqual(store.get("ats-resume"), "second")
            store.remove("ats-resume")
            self.assertIsNone(store.get("ats-resume"))
            store.remove("ats-resume")
        finally:
            store.close()

    def test_values_survive_reopen(self):
        first = SqliteStore(self.db_path)
        first.set("ats-history", "[]")
        first.close()

        second = SqliteStore(self.db_path)
        try:
            self.assertEqual(second.get("ats-history"), "[]")
        finally:
            second.close()


class InMemoryStoreTests(unittest.TestCase):
    def test_initial_values_are_copied(self):
        initial = {"ats-jd": "text"}
        store = InMemoryStore(initial)
        store.remove("ats-jd")
        self.assertEqual(initial, {"ats-jd": "text"})
        self.assertEqual(store.keys(), [])


if __name__ == "__main__":
    unittest.main()
