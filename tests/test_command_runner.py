from __future__ import annotations

from pathlib import Path
import sys
import unittest

from wixcore.command_runner import CommandResult, RecordingCommandRunner, SubprocessCommandRunner


class CommandResultTests(unittest.TestCase):
    def test_program_strips_folders_and_exe_suffix(self) -> None:
        result = CommandResult(["C:\\WiX Toolset\\bin\\candle.exe", "-o", "x"], 0, "", "")
        self.assertEqual(result.program, "candle")
        self.assertEqual(CommandResult(["/usr/bin/cargo"], 0, "", "").program, "cargo")
        self.assertEqual(CommandResult([], 0, "", "").program, "")


class RecordingCommandRunnerTests(unittest.TestCase):
    def test_records_commands_and_scripted_exit_codes(self) -> None:
        runner = RecordingCommandRunner(returncodes={"light": 5})
        first = runner.run(["cargo", "build"], cwd=Path("/pkg"))
        second = runner.run(["/wix/bin/light.exe", "-out", "a.msi"], capture_output=False)

        self.assertEqual(first.returncode, 0)
        self.assertEqual(second.returncode, 5)
        self.assertTrue(second.streamed)
        self.assertEqual(runner.programs(), ["cargo", "light"])
        self.assertEqual(runner.commands[0].cwd, str(Path("/pkg")))
        self.assertEqual(
            list(runner.iter_formatted()),
            [f"(cwd={Path('/pkg')}) cargo build", "/wix/bin/light.exe -out a.msi"],
        )

    def test_responder_can_override_exit_code(self) -> None:
        seen = []

        def responder(record):
            seen.append(record.program)
            return 3 if record.program == "candle" else None

        runner = RecordingCommandRunner(responder=responder)
        self.assertEqual(runner.run(["candle"]).returncode, 3)
        self.assertEqual(runner.run(["light"]).returncode, 0)
        self.assertEqual(seen, ["candle", "light"])


class SubprocessCommandRunnerTests(unittest.TestCase):
    def test_captures_output(self) -> None:
        runner = SubprocessCommandRunner()
        result = runner.run([sys.executable, "-c", "print('hello')"])
        self.assertEqual(result.returncode, 0)
        self.assertEqual(result.stdout.strip(), "hello")
        self.assertFalse(result.streamed)

    def test_reports_non_zero_exit_without_raising(self) -> None:
        runner = SubprocessCommandRunner()
        result = runner.run([sys.executable, "-c", "import sys; sys.exit(4)"], capture_output=False)
        self.assertEqual(result.returncode, 4)
        self.assertTrue(result.streamed)

    def test_missing_program_raises_os_error(self) -> None:
        with self.assertRaises(OSError):
            SubprocessCommandRunner().run(["definitely-not-a-real-tool-0b1f"])


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
