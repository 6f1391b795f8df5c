import json
import os
import tempfile
import threading
import unittest
from pathlib import Path

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PySide6.QtWidgets import QApplication
from PySide6.QtTest import QTest
from PySide6.QtCore import Qt

from pkgcheck.core.contexts import PRODUCTION_LABEL, STRUCTURE_LABEL
from pkgcheck.models import ValidationContext
from pkgcheck.ui.main_window import MainWindow


def _make_package(root: Path, name: str, version: str, files: dict) -> None:
    root.mkdir(parents=True, exist_ok=True)
    (root / "package.json").write_text(json.dumps({"name": name, "version": version}), encoding="utf-8")
    for rel, data in files.items():
        p = root / rel
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_bytes(data)


def _wait_for_validation(window, timeout_ms=10000):
    waited = 0
    while window.is_validating() and waited < timeout_ms:
        QTest.qWait(20)
        waited += 20


class TestMainWindowUI(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        # Ensure one QApplication exists
        cls.app = QApplication.instance() or QApplication([])

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.base = Path(self._tmp.name)
        self.results = self.base / "results"

        _make_package(self.base / "v1", "com.unity.crate", "1.0.0", {"Runtime/Crate.cs": b"class Crate {}"})
        _make_package(
            self.base / "v2",
            "com.unity.crate",
            "1.1.0",
            {"Runtime/Crate.cs": b"class Crate {}", "README.md": b"hi"},
        )
        _make_package(self.base / "demo", "com.demo.crate", "1.0.0", {"README.md": b"hi"})

        self.window = MainWindow(results_dir=str(self.results))
        self.window.show()
        QTest.qWaitForWindowExposed(self.window)

    def tearDown(self):
        _wait_for_validation(self.window)
        self.window.close()
        self._tmp.cleanup()

    def _choices(self):
        combo = self.window.context_combo
        return [combo.itemText(i) for i in range(combo.count())]

    def _result_texts(self):
        results = self.window.results_list
        return [results.item(i).text() for i in range(results.count())]

    def test_validate_with_previous_version_writes_diff(self):
        self.window.package_edit.setText(str(self.base / "v2"))
        self.window.previous_edit.setText(str(self.base / "v1"))
        self.assertEqual(self.window.context_combo.currentText(), PRODUCTION_LABEL)

        btn = self.window.findChild(type(self.window.btn_validate), "btn_validate")
        QTest.mouseClick(btn, Qt.LeftButton)
        _wait_for_validation(self.window)

        results = self.window.findChild(type(self.window.results_list), "results_list")
        self.assertGreater(results.count(), 0)

        self.assertEqual(self.window.status_label.text(), "Success")
        self.assertTrue((self.results / "com.unity.crate@1.1.0.delta").is_file())
        self.assertTrue((self.results / "com.unity.crate@1.1.0.html").is_file())
        self.assertTrue(self.window.btn_view_diff.isEnabled())
        self.assertTrue(self.window.btn_view_results.isEnabled())
        self.assertTrue(self.window.btn_validate.isEnabled())

        log_box = self.window.findChild(type(self.window.log_box), "log_box")
        self.assertIn("VALIDATION DONE", log_box.toPlainText())

    def test_checks_run_off_the_gui_thread(self):
        threads = []

        def _record_thread(ctx, log):
            threads.append(threading.current_thread())

        self.window._runner.registry.add("record thread", _record_thread, [ValidationContext.STRUCTURE])
        self.window.package_edit.setText(str(self.base / "v2"))
        self.window.context_combo.setCurrentText(STRUCTURE_LABEL)

        QTest.mouseClick(self.window.btn_validate, Qt.LeftButton)
        self.assertTrue(self.window.is_validating() or threads)
        _wait_for_validation(self.window)

        self.assertFalse(self.window.is_validating())
        self.assertEqual(len(threads), 1)
        self.assertIsNot(threads[0], threading.main_thread())
        self.assertTrue(any("record thread: succeeded" in t for t in self._result_texts()))

    def test_standards_offered_only_for_eligible_names(self):
        self.window.package_edit.setText(str(self.base / "v2"))
        self.assertIn(PRODUCTION_LABEL, self._choices())

        self.window.package_edit.setText(str(self.base / "demo"))
        self.assertNotIn(PRODUCTION_LABEL, self._choices())
        self.assertEqual(self.window.context_combo.currentText(), STRUCTURE_LABEL)

        self.window.package_edit.setText(str(self.base / "missing"))
        self.assertEqual(len(self._choices()), 2)

    def test_structure_validation_runs_no_diff(self):
        self.window.package_edit.setText(str(self.base / "v2"))
        self.window.previous_edit.setText(str(self.base / "v1"))
        self.window.context_combo.setCurrentText(STRUCTURE_LABEL)

        QTest.mouseClick(self.window.btn_validate, Qt.LeftButton)
        _wait_for_validation(self.window)

        self.assertTrue(any("No checks apply" in t for t in self._result_texts()))
        self.assertFalse(self.window.btn_view_diff.isEnabled())

    def test_invalid_manifest_is_reported(self):
        (self.base / "v2" / "package.json").write_text("{}", encoding="utf-8")
        self.window.package_edit.setText(str(self.base / "v2"))

        QTest.mouseClick(self.window.btn_validate, Qt.LeftButton)

        self.assertFalse(self.window.is_validating())
        self.assertTrue(any("MANIFEST_INVALID" in t for t in self._result_texts()))
        self.assertEqual(self.window.status_label.text(), "")


if __name__ == "__main__":
    unittest.main()
