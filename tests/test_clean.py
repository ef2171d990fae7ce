from __future__ import annotations

from pathlib import Path
import tempfile
import unittest

from cargowix.clean import CleanBuilder
from cargowix.purge import PurgeBuilder
from wixcore.console import Console

from package_fixtures import isolate_environment, write_package


class CleanTests(unittest.TestCase):
    def setUp(self) -> None:
        self.temp_dir = tempfile.TemporaryDirectory()
        self.root = Path(self.temp_dir.name).resolve()
        isolate_environment(self)
        self.manifest = write_package(self.root)
        self.console = Console("none")

    def tearDown(self) -> None:
        self.temp_dir.cleanup()

    def _populate(self) -> None:
        (self.root / "target" / "wix").mkdir(parents=True)
        (self.root / "target" / "wix" / "main.wixobj").write_text("", encoding="utf-8")
        (self.root / "target" / "release").mkdir(parents=True)
        (self.root / "target" / "release" / "example.exe").write_text("", encoding="utf-8")
        (self.root / "wix").mkdir()
        (self.root / "wix" / "main.wxs").write_text("<Wix/>", encoding="utf-8")

    def _snapshot(self) -> list:
        return sorted(str(path.relative_to(self.root)) for path in self.root.rglob("*"))

    def test_clean_without_outputs_changes_nothing(self) -> None:
        before = self._snapshot()
        result = CleanBuilder(input=self.manifest).build(console=self.console).run()
        self.assertEqual(result.removed, ())
        self.assertEqual(self._snapshot(), before)

    def test_clean_removes_only_wix_outputs(self) -> None:
        self._populate()
        result = CleanBuilder(input=self.manifest).build(console=self.console).run()

        self.assertEqual(result.removed, (self.root / "target" / "wix",))
        self.assertFalse((self.root / "target" / "wix").exists())
        self.assertTrue((self.root / "target" / "release" / "example.exe").is_file())
        self.assertTrue((self.root / "wix" / "main.wxs").is_file())

    def test_clean_honours_target_dir_variable(self) -> None:
        custom = self.root / "custom"
        (custom / "wix").mkdir(parents=True)
        isolate_environment(self, CARGO_TARGET_DIR=str(custom))

        result = CleanBuilder(input=self.manifest).build(console=self.console).run()

        self.assertEqual(result.removed, (custom / "wix",))

    def test_purge_removes_sources_too(self) -> None:
        self._populate()
        result = PurgeBuilder(input=self.manifest).build(console=self.console).run()

        self.assertEqual(result.removed, (self.root / "target" / "wix", self.root / "wix"))
        self.assertFalse((self.root / "wix").exists())
        self.assertTrue((self.root / "Cargo.toml").is_file())
        self.assertTrue((self.root / "target" / "release").is_dir())

    def test_purge_twice_is_harmless(self) -> None:
        self._populate()
        PurgeBuilder(input=self.manifest).build(console=self.console).run()
        result = PurgeBuilder(input=self.manifest).build(console=self.console).run()
        self.assertEqual(result.removed, ())


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
