import dataclasses
import json
import os
import tempfile
import unittest
from pathlib import Path

from pkgcheck.core.manifest import (
    ManifestData,
    create_package_id,
    is_preview_version,
    load_manifest,
    parse_semver,
)


class TestManifest(unittest.TestCase):
    def test_load_manifest(self):
        with tempfile.TemporaryDirectory() as td:
            (Path(td) / "package.json").write_text(
                json.dumps({"name": "com.demo.crate", "version": "1.2.0"}), encoding="utf-8"
            )
            previous = ManifestData("com.demo.crate", "1.1.0", td)

            m = load_manifest(td, previous=previous)

            self.assertEqual(m.name, "com.demo.crate")
            self.assertEqual(m.version, "1.2.0")
            self.assertEqual(m.path, str(Path(td).resolve()))
            self.assertIs(m.previous, previous)
            self.assertEqual(m.package_id, "com.demo.crate@1.2.0")

    def test_missing_package_json(self):
        with tempfile.TemporaryDirectory() as td:
            with self.assertRaises(FileNotFoundError):
                load_manifest(td)

    def test_invalid_package_json(self):
        with tempfile.TemporaryDirectory() as td:
            pj = Path(td) / "package.json"

            pj.write_text("{not json", encoding="utf-8")
            with self.assertRaises(ValueError):
                load_manifest(td)

            pj.write_text(json.dumps({"name": "x", "version": "one"}), encoding="utf-8")
            with self.assertRaises(ValueError):
                load_manifest(td)

            pj.write_text(json.dumps({"version": "1.0.0"}), encoding="utf-8")
            with self.assertRaises(ValueError):
                load_manifest(td)

    def test_semver(self):
        self.assertEqual(parse_semver("1.2.3"), (1, 2, 3, "", ""))
        self.assertEqual(parse_semver("0.4.0-preview.2+build5"), (0, 4, 0, "preview.2", "build5"))
        for bad in ("", "1.2", "01.2.3", "v1.2.3"):
            with self.assertRaises(ValueError):
                parse_semver(bad)

        self.assertTrue(is_preview_version("0.9.0"))
        self.assertTrue(is_preview_version("2.0.0-pre.1"))
        self.assertFalse(is_preview_version("2.0.0"))

    def test_package_id(self):
        self.assertEqual(create_package_id("com.demo.crate", "1.0.0"), "com.demo.crate@1.0.0")
        with self.assertRaises(ValueError):
            create_package_id("", "1.0.0")
        with self.assertRaises(ValueError):
            create_package_id("com.demo.crate", " ")

    def test_manifest_is_immutable(self):
        m = ManifestData("a", "1.0.0", os.getcwd())
        with self.assertRaises(dataclasses.FrozenInstanceError):
            m.name = "b"


if __name__ == "__main__":
    unittest.main()
