import json
import tempfile
import unittest
from pathlib import Path

from pkgcheck.config import DEFAULT_MAX_WORKERS, DEFAULT_RESULTS_DIRNAME
from pkgcheck.core.contexts import (
    ASSET_STORE_LABEL,
    CANDIDATES_LABEL,
    PRODUCTION_LABEL,
    STRUCTURE_LABEL,
    context_choices,
    context_from_label,
    default_label,
    eligible_for_standards,
)
from pkgcheck.core.settings import (
    SuiteSettings,
    ensure_default_settings_on_disk,
    from_json_dict,
    load_settings,
    save_settings,
)
from pkgcheck.models import ValidationContext


class TestSettings(unittest.TestCase):
    def test_defaults_written_once(self):
        with tempfile.TemporaryDirectory() as td:
            path = ensure_default_settings_on_disk(td)
            self.assertTrue(path.exists())

            s = load_settings(td)
            self.assertEqual(s.results_dir, DEFAULT_RESULTS_DIRNAME)
            self.assertEqual(s.max_workers, DEFAULT_MAX_WORKERS)
            self.assertEqual(s.disabled_checks, frozenset())

            save_settings(td, SuiteSettings(max_workers=3))
            ensure_default_settings_on_disk(td)
            self.assertEqual(load_settings(td).max_workers, 3)

    def test_round_trip(self):
        with tempfile.TemporaryDirectory() as td:
            s = SuiteSettings(
                results_dir="out",
                max_workers=2,
                disabled_checks=frozenset({"B", "A"}),
                persist_reports=True,
            )
            path = save_settings(td, s)
            self.assertEqual(json.loads(Path(path).read_text(encoding="utf-8"))["disabled_checks"], ["A", "B"])
            self.assertEqual(load_settings(td), s)

    def test_from_json_dict_is_tolerant(self):
        self.assertEqual(from_json_dict({}), SuiteSettings())
        self.assertEqual(from_json_dict({"max_workers": "many"}).max_workers, DEFAULT_MAX_WORKERS)
        self.assertEqual(from_json_dict({"max_workers": 0}).max_workers, 1)
        self.assertEqual(from_json_dict({"disabled_checks": [" X ", ""]}).disabled_checks, frozenset({"X"}))


class TestContexts(unittest.TestCase):
    def test_choices(self):
        self.assertEqual(context_choices(False), [STRUCTURE_LABEL, ASSET_STORE_LABEL])
        self.assertEqual(
            context_choices(True),
            [STRUCTURE_LABEL, ASSET_STORE_LABEL, CANDIDATES_LABEL, PRODUCTION_LABEL],
        )

    def test_standards_gated_on_name_prefix(self):
        self.assertTrue(eligible_for_standards("com.unity.render-pipelines.core"))
        self.assertFalse(eligible_for_standards("com.demo.crate"))
        self.assertFalse(eligible_for_standards("unity.com.crate"))
        self.assertTrue(eligible_for_standards("com.demo.crate", prefixes=["com.demo."]))
        self.assertEqual(default_label(True), PRODUCTION_LABEL)
        self.assertEqual(default_label(False), STRUCTURE_LABEL)

    def test_label_mapping(self):
        self.assertEqual(context_from_label(STRUCTURE_LABEL), ValidationContext.STRUCTURE)
        self.assertEqual(context_from_label(ASSET_STORE_LABEL), ValidationContext.ASSET_STORE)
        self.assertEqual(context_from_label(CANDIDATES_LABEL), ValidationContext.LOCAL_DEVELOPMENT)
        self.assertEqual(context_from_label(PRODUCTION_LABEL), ValidationContext.PROMOTION)
        self.assertEqual(
            context_from_label(PRODUCTION_LABEL, local_source=True),
            ValidationContext.LOCAL_DEVELOPMENT_INTERNAL,
        )
        with self.assertRaises(ValueError):
            context_from_label("Everything")


if __name__ == "__main__":
    unittest.main()
