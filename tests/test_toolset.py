from __future__ import annotations

from pathlib import Path
import os
import stat
import tempfile
import unittest

from cargowix.errors import GenericError
from cargowix.toolset import find_signer, find_wix_tool, launch_failure

from package_fixtures import write_tools


def _executable(folder: Path, name: str) -> Path:
    folder.mkdir(parents=True, exist_ok=True)
    path = folder / name
    path.write_text("#!/bin/sh\n", encoding="utf-8")
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


class FindWixToolTests(unittest.TestCase):
    def setUp(self) -> None:
        self.temp_dir = tempfile.TemporaryDirectory()
        self.root = Path(self.temp_dir.name).resolve()
        self.empty = self.root / "empty"
        self.empty.mkdir()

    def tearDown(self) -> None:
        self.temp_dir.cleanup()

    def test_bin_path_folder(self) -> None:
        tools = write_tools(self.root / "tools", "candle", "light")
        self.assertEqual(find_wix_tool("candle", bin_path=tools, environ={}), tools / "candle.exe")

    def test_bin_path_file(self) -> None:
        tools = write_tools(self.root / "tools", "light")
        self.assertEqual(
            find_wix_tool("light", bin_path=tools / "light.exe", environ={}), tools / "light.exe"
        )

    def test_bin_path_without_tool_fails(self) -> None:
        with self.assertRaises(GenericError):
            find_wix_tool("candle", bin_path=self.empty, environ={})

    def test_path_lookup(self) -> None:
        tool = _executable(self.root / "onpath", "candle")
        found = find_wix_tool("candle", environ={"PATH": str(tool.parent)})
        self.assertEqual(found, tool)

    def test_wix_environment_variable(self) -> None:
        tools = write_tools(self.root / "wix" / "bin", "candle")
        found = find_wix_tool("candle", environ={"PATH": str(self.empty), "WIX": str(self.root / "wix")})
        self.assertEqual(found, tools / "candle.exe")

    def test_missing_tool(self) -> None:
        with self.assertRaises(GenericError) as ctx:
            find_wix_tool("light", environ={"PATH": str(self.empty)})
        self.assertIn("'light'", str(ctx.exception))
        self.assertIn("--bin-path", str(ctx.exception))


class FindSignerTests(unittest.TestCase):
    def setUp(self) -> None:
        self.temp_dir = tempfile.TemporaryDirectory()
        self.root = Path(self.temp_dir.name).resolve()
        self.empty = self.root / "empty"
        self.empty.mkdir()

    def tearDown(self) -> None:
        self.temp_dir.cleanup()

    def test_bin_path_wins(self) -> None:
        tools = write_tools(self.root / "tools", "signtool")
        other = write_tools(self.root / "other", "signtool")
        found = find_signer(bin_path=tools, environ={"SIGNTOOL_PATH": str(other)}, sdk_roots=[])
        self.assertEqual(found, tools / "signtool.exe")

    def test_environment_variable(self) -> None:
        tools = write_tools(self.root / "tools", "signtool")
        found = find_signer(environ={"SIGNTOOL_PATH": str(tools), "PATH": str(self.empty)}, sdk_roots=[])
        self.assertEqual(found, tools / "signtool.exe")

    def test_environment_variable_pointing_nowhere(self) -> None:
        with self.assertRaises(GenericError):
            find_signer(environ={"SIGNTOOL_PATH": str(self.root / "missing")}, sdk_roots=[])

    def test_path_lookup(self) -> None:
        tool = _executable(self.root / "onpath", "signtool")
        self.assertEqual(find_signer(environ={"PATH": str(tool.parent)}, sdk_roots=[]), tool)

    def test_newest_sdk_version(self) -> None:
        kits = self.root / "kits"
        write_tools(kits / "10.0.17763.0" / "x64", "signtool")
        newest = write_tools(kits / "10.0.22621.0" / "x64", "signtool")
        write_tools(kits / "10.0.9600.0" / "x64", "signtool")

        found = find_signer(environ={"PATH": str(self.empty)}, sdk_roots=[self.root / "absent", kits])

        self.assertEqual(found, newest / "signtool.exe")

    def test_missing_signer(self) -> None:
        with self.assertRaises(GenericError):
            find_signer(environ={"PATH": str(self.empty)}, sdk_roots=[])


class LaunchFailureTests(unittest.TestCase):
    def test_names_the_program(self) -> None:
        error = launch_failure(os.path.join("bin", "cargo"), FileNotFoundError(2, "No such file"))
        self.assertIn("'cargo'", str(error))
        self.assertIn("No such file", str(error))


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
