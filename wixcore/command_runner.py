"""Utilities for executing external tools with captured or inherited output."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Mapping, Sequence
import os
import shlex
import subprocess


@dataclass
class CommandResult:
    """Represents the outcome of an executed command."""

    command: Sequence[str]
    returncode: int
    stdout: str
    stderr: str
    streamed: bool = False

    @property
    def program(self) -> str:
        """Name of the executed program without directories or the ``.exe`` suffix."""

        if not self.command:
            return ""
        name = Path(str(self.command[0]).replace("\\", "/")).name
        if name.lower().endswith(".exe"):
            name = name[:-4]
        return name

    @property
    def succeeded(self) -> bool:
        return self.returncode == 0


class CommandRunner:
    """Abstract command runner interface."""

    def run(
        self,
        command: Sequence[str],
        *,
        cwd: Path | None = None,
        env: Mapping[str, str] | None = None,
        capture_output: bool = True,
    ) -> CommandResult:
        raise NotImplementedError

    def format_command(self, command: Sequence[str]) -> str:
        return " ".join(shlex.quote(str(part)) for part in command)


class SubprocessCommandRunner(CommandRunner):
    """Command runner that executes commands via :mod:`subprocess`.

    The runner blocks until the child exits. With ``capture_output`` the child's
    stdout/stderr are collected into the result; otherwise they are inherited
    from the parent process and the result is marked as streamed.

    Launch failures (``FileNotFoundError``, ``PermissionError``) propagate to
    the caller, which knows how to describe the missing tool.
    """

    @staticmethod
    def _merge_environment(env: Mapping[str, str] | None) -> Dict[str, str] | None:
        if env is None:
            return None
        merged = os.environ.copy()
        merged.update(env)
        return merged

    def run(
        self,
        command: Sequence[str],
        *,
        cwd: Path | None = None,
        env: Mapping[str, str] | None = None,
        capture_output: bool = True,
    ) -> CommandResult:
        arguments = [str(part) for part in command]
        merged_env = self._merge_environment(env)
        if capture_output:
            process = subprocess.run(
                arguments,
                cwd=str(cwd) if cwd else None,
                env=merged_env,
                capture_output=True,
                text=True,
                errors="replace",
                check=False,
            )
            return CommandResult(
                command=arguments,
                returncode=process.returncode,
                stdout=process.stdout,
                stderr=process.stderr,
            )

        process = subprocess.run(
            arguments,
            cwd=str(cwd) if cwd else None,
            env=merged_env,
            check=False,
        )
        return CommandResult(
            command=arguments,
            returncode=process.returncode,
            stdout="",
            stderr="",
            streamed=True,
        )


@dataclass(slots=True)
class RecordedCommand:
    command: List[str]
    cwd: str | None
    env: Dict[str, str]
    capture_output: bool

    @property
    def program(self) -> str:
        return CommandResult(self.command, 0, "", "").program


Responder = Callable[[RecordedCommand], int | None]


@dataclass
class RecordingCommandRunner(CommandRunner):
    """Command runner that records commands instead of executing them.

    ``returncodes`` maps a program name (see :attr:`CommandResult.program`) to
    the exit code reported for it. A ``responder`` callable may inspect each
    recorded command, create files the real tool would have produced, and
    optionally return an exit code that takes precedence.
    """

    returncodes: Dict[str, int] = field(default_factory=dict)
    responder: Responder | None = None
    commands: List[RecordedCommand] = field(default_factory=list)

    def run(
        self,
        command: Sequence[str],
        *,
        cwd: Path | None = None,
        env: Mapping[str, str] | None = None,
        capture_output: bool = True,
    ) -> CommandResult:
        record = RecordedCommand(
            command=[str(part) for part in command],
            cwd=str(cwd) if cwd else None,
            env=dict(env) if env else {},
            capture_output=capture_output,
        )
        self.commands.append(record)
        returncode = self.returncodes.get(record.program, 0)
        if self.responder is not None:
            override = self.responder(record)
            if override is not None:
                returncode = override
        return CommandResult(
            command=record.command,
            returncode=returncode,
            stdout="",
            stderr="",
            streamed=not capture_output,
        )

    def programs(self) -> List[str]:
        return [record.program for record in self.commands]

    def iter_formatted(self) -> Iterable[str]:
        for record in self.commands:
            cmd = self.format_command(record.command)
            if record.cwd:
                yield f"(cwd={record.cwd}) {cmd}"
            else:
                yield cmd


__all__ = [
    "CommandResult",
    "CommandRunner",
    "RecordedCommand",
    "RecordingCommandRunner",
    "SubprocessCommandRunner",
]
