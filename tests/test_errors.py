from __future__ import annotations

import unittest

from cargowix.errors import (
    CommandError,
    GenericError,
    ManifestError,
    MustacheError,
    TomlError,
    UuidError,
    VersionError,
    WixIoError,
    XPathError,
    XmlError,
    describe,
    exit_code,
    io_errors,
)
from wixcore.command_runner import CommandResult


class ErrorTaxonomyTests(unittest.TestCase):
    def test_each_kind_has_a_distinct_exit_code(self) -> None:
        kinds = [
            CommandError(CommandResult(["candle"], 1, "", "")),
            GenericError("x"),
            WixIoError("x"),
            ManifestError("authors"),
            MustacheError("x"),
            TomlError("x"),
            XmlError("x"),
            XPathError("x"),
            UuidError("x"),
            VersionError("x"),
        ]
        codes = [exit_code(error) for error in kinds]
        self.assertEqual(len(set(codes)), len(codes))
        self.assertNotIn(0, codes)
        self.assertEqual(exit_code(CommandError(CommandResult(["a"], 1, "", ""))), 1)
        self.assertEqual(exit_code(GenericError("x")), 2)
        self.assertEqual(exit_code(RuntimeError("x")), 2)

    def test_command_error_names_the_process_and_output(self) -> None:
        result = CommandResult(["C:/wix/bin/candle.exe", "main.wxs"], 204, "main.wxs(3) : error CNDL0104", "")
        error = CommandError(result)
        self.assertEqual(error.program, "candle")
        self.assertIn("'candle'", str(error))
        self.assertIn("204", str(error))
        self.assertIn("CNDL0104", str(error))

    def test_streamed_command_error_does_not_repeat_output(self) -> None:
        error = CommandError(CommandResult(["light"], 1, "", "", streamed=True))
        self.assertIn("streamed", str(error))

    def test_manifest_error_message(self) -> None:
        self.assertEqual(
            str(ManifestError("authors")),
            "No 'authors' field found in the package's manifest (Cargo.toml)",
        )

    def test_describe_includes_cause_chain(self) -> None:
        try:
            with io_errors("write 'wix/main.wxs'"):
                raise PermissionError(13, "Permission denied")
        except WixIoError as exc:
            lines = describe(exc)
        self.assertEqual(lines[0], "Error[Io]: Failed to write 'wix/main.wxs': Permission denied")
        self.assertEqual(len(lines), 2)
        self.assertTrue(lines[1].startswith("  caused by:"))


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
