from __future__ import annotations

from pathlib import Path
import tempfile
import textwrap
import unittest

from cargowix.errors import GenericError
from cargowix.licenses import Licenses
from cargowix.manifest import load_package
from cargowix.templates import Template
from wixcore.console import Console

from package_fixtures import MANIFEST, isolate_environment, write_package


class LicensesTests(unittest.TestCase):
    def setUp(self) -> None:
        self.temp_dir = tempfile.TemporaryDirectory()
        self.root = Path(self.temp_dir.name).resolve()
        isolate_environment(self)
        self.console = Console("none")

    def tearDown(self) -> None:
        self.temp_dir.cleanup()

    def _summary(self, manifest: str = MANIFEST):
        return load_package(write_package(self.root, manifest))

    def test_known_license_is_generated_into_destination(self) -> None:
        licenses = Licenses.resolve(self._summary(), dest_dir=self.root / "wix", console=self.console)
        self.assertIsNotNone(licenses.source)
        self.assertIs(licenses.source.generate, Template.MIT)
        self.assertEqual(licenses.source.stored_path.as_str(), "wix/License.rtf")
        self.assertEqual(licenses.source.destination, self.root / "wix" / "License.rtf")
        self.assertEqual(licenses.end_user.stored_path.as_str(), "wix/License.rtf")

    def test_known_license_without_destination_is_ignored(self) -> None:
        licenses = Licenses.resolve(self._summary(), console=self.console)
        self.assertIsNone(licenses.source)
        self.assertIsNone(licenses.end_user)

    def test_license_file_is_used_verbatim(self) -> None:
        manifest = MANIFEST.replace('license = "MIT"', 'license-file = "LICENSE.txt"')
        summary = self._summary(manifest)
        (self.root / "LICENSE.txt").write_text("text", encoding="utf-8")
        licenses = Licenses.resolve(summary, dest_dir=self.root / "wix", console=self.console)
        self.assertEqual(licenses.source.stored_path.as_str(), "LICENSE.txt")
        self.assertIsNone(licenses.source.generate)
        self.assertIsNone(licenses.end_user)

    def test_missing_license_file_is_generic_error(self) -> None:
        manifest = MANIFEST.replace('license = "MIT"', 'license-file = "MISSING.txt"')
        with self.assertRaises(GenericError):
            Licenses.resolve(self._summary(manifest), console=self.console)

    def test_metadata_can_disable_license_and_eula(self) -> None:
        manifest = MANIFEST + textwrap.dedent(
            """
            [package.metadata.wix]
            license = false
            eula = false
            """
        )
        licenses = Licenses.resolve(self._summary(manifest), dest_dir=self.root / "wix", console=self.console)
        self.assertIsNone(licenses.source)
        self.assertIsNone(licenses.end_user)

    def test_metadata_paths(self) -> None:
        manifest = MANIFEST + textwrap.dedent(
            """
            [package.metadata.wix]
            license = "docs/LICENSE.rtf"
            eula = "docs/EULA.rtf"
            """
        )
        summary = self._summary(manifest)
        (self.root / "docs").mkdir()
        (self.root / "docs" / "LICENSE.rtf").write_text("", encoding="utf-8")
        (self.root / "docs" / "EULA.rtf").write_text("", encoding="utf-8")
        licenses = Licenses.resolve(summary, console=self.console)
        self.assertEqual(licenses.source.stored_path.as_str(), "docs/LICENSE.rtf")
        self.assertEqual(licenses.end_user.stored_path.as_str(), "docs/EULA.rtf")

    def test_metadata_of_wrong_type_is_generic_error(self) -> None:
        manifest = MANIFEST + "\n[package.metadata.wix]\neula = 3\n"
        with self.assertRaises(GenericError):
            Licenses.resolve(self._summary(manifest), console=self.console)

    def test_explicit_paths_win(self) -> None:
        licenses = Licenses.resolve(
            self._summary(),
            license_path=Path("legal") / "COPYING.rtf",
            eula_path=Path("legal") / "EULA.rtf",
            dest_dir=self.root / "wix",
            console=self.console,
        )
        self.assertEqual(licenses.source.stored_path.as_str(), "legal/COPYING.rtf")
        self.assertEqual(licenses.end_user.stored_path.as_str(), "legal/EULA.rtf")

    def test_rtf_source_license_becomes_eula(self) -> None:
        licenses = Licenses.resolve(self._summary(), license_path=Path("COPYING.rtf"), console=self.console)
        self.assertEqual(licenses.end_user.stored_path.as_str(), "COPYING.rtf")


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
