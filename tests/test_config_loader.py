from __future__ import annotations

from pathlib import Path
import tempfile
import textwrap
import unittest

from wixcore.config_loader import (
    load_config_file,
    lookup_table,
    merge_mappings,
    normalize_string_list,
)


class ConfigLoaderTests(unittest.TestCase):
    def setUp(self) -> None:
        self.temp_dir = tempfile.TemporaryDirectory()
        self.root = Path(self.temp_dir.name)

    def tearDown(self) -> None:
        self.temp_dir.cleanup()

    def test_loads_toml_json_and_yaml(self) -> None:
        (self.root / "settings.toml").write_text('culture = "fr-FR"\n', encoding="utf-8")
        (self.root / "settings.json").write_text('{"culture": "de-DE"}', encoding="utf-8")
        (self.root / "settings.yaml").write_text(
            textwrap.dedent(
                """
                culture: ja-JP
                include:
                  - wix/extra.wxs
                """
            ),
            encoding="utf-8",
        )

        self.assertEqual(load_config_file(self.root / "settings.toml")["culture"], "fr-FR")
        self.assertEqual(load_config_file(self.root / "settings.json")["culture"], "de-DE")
        data = load_config_file(self.root / "settings.yaml")
        self.assertEqual(data["culture"], "ja-JP")
        self.assertEqual(data["include"], ["wix/extra.wxs"])

    def test_empty_yaml_is_an_empty_mapping(self) -> None:
        path = self.root / "empty.yml"
        path.write_text("", encoding="utf-8")
        self.assertEqual(load_config_file(path), {})

    def test_unsupported_extension_raises(self) -> None:
        path = self.root / "settings.ini"
        path.write_text("", encoding="utf-8")
        with self.assertRaises(ValueError):
            load_config_file(path)

    def test_non_mapping_root_raises(self) -> None:
        path = self.root / "list.json"
        path.write_text("[1, 2]", encoding="utf-8")
        with self.assertRaises(TypeError):
            load_config_file(path)

    def test_merge_mappings_is_deep(self) -> None:
        base = {"wix": {"culture": "en-US", "no-build": False}, "name": "demo"}
        overlay = {"wix": {"culture": "fr-FR"}}
        merged = merge_mappings(base, overlay)
        self.assertEqual(merged, {"wix": {"culture": "fr-FR", "no-build": False}, "name": "demo"})
        self.assertEqual(base["wix"]["culture"], "en-US")

    def test_lookup_table_follows_dotted_path(self) -> None:
        document = {"package": {"metadata": {"wix": {"culture": "fr-FR"}}}}
        self.assertEqual(lookup_table(document, "package.metadata.wix"), {"culture": "fr-FR"})
        self.assertEqual(lookup_table(document, "package.metadata.other"), {})
        with self.assertRaises(TypeError):
            lookup_table({"package": {"metadata": 3}}, "package.metadata")

    def test_normalize_string_list(self) -> None:
        self.assertEqual(normalize_string_list(None), [])
        self.assertEqual(normalize_string_list(" a.wxs "), ["a.wxs"])
        self.assertEqual(normalize_string_list(["a.wxs", " ", "b.wxs"]), ["a.wxs", "b.wxs"])
        with self.assertRaises(TypeError):
            normalize_string_list([1], field_name="include")
        with self.assertRaises(TypeError):
            normalize_string_list(3)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
