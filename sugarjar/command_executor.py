"""Execution of configured check commands.

Check commands come from the repository configuration and are run without
a shell: the command string is split with shlex and the first token must
name an existing executable, either a path (relative to the working
directory) or a program on PATH. Shell operators such as ``&&`` or ``|``
and leading ``VAR=value`` assignments are rejected; wrap such pipelines
in a script.
"""

import os
import re
import shlex
import shutil
import subprocess
import time
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from sugarjar.logging import get_logger

logger = get_logger("command_executor")

SHELL_OPERATORS = frozenset({"&&", "||", "|", ";", "&", ">", ">>", "<", "2>", "2>&1"})
ENV_ASSIGNMENT = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*=")


class CommandValidationError(Exception):
    """Raised when a command string cannot be parsed."""

    pass


@dataclass
class CommandResult:
    """Result of command execution."""

    command: list[str]
    exit_code: int
    stdout: str
    stderr: str
    duration_ms: int
    success: bool
    timestamp: datetime = field(default_factory=datetime.now)

    def format_for_exception(self) -> str:
        """Render the command, exit code and output for error reports."""
        return (
            f"Command: {' '.join(self.command)}\n"
            f"Exit code: {self.exit_code}\n"
            f"STDOUT:\n{self.stdout}\n"
            f"STDERR:\n{self.stderr}"
        )


def short_name(command: str) -> str:
    """First whitespace-delimited token of a command string."""
    parts = command.split()
    return parts[0] if parts else ""


class CommandExecutor:
    """Runs check commands in a fixed working directory."""

    def __init__(
        self,
        working_dir: Path | str | None = None,
        timeout: int | None = None,
    ):
        """Initialize command executor.

        Args:
            working_dir: Working directory for command execution
            timeout: Timeout in seconds, None to wait indefinitely
        """
        self.working_dir = Path(working_dir) if working_dir else Path.cwd()
        self.timeout = timeout

    def _resolve(self, program: str) -> str | None:
        if os.path.isabs(program):
            return program if os.path.exists(program) else None
        candidate = self.working_dir / program
        if candidate.exists():
            return str(candidate)
        if os.sep in program or program.startswith("."):
            return None
        return shutil.which(program)

    def find_executable(self, command: str) -> str | None:
        """Locate the executable a command string starts with.

        Args:
            command: Command string

        Returns:
            Path of the executable, or None if it does not exist
        """
        short = short_name(command)
        if not short:
            return None
        return self._resolve(short)

    def parse_command(self, command: str) -> list[str]:
        """Parse command string into argument list safely.

        Shell syntax is not interpreted, so operators and leading
        ``VAR=value`` assignments are rejected rather than passed on as
        arguments.

        Args:
            command: Command string

        Returns:
            List of command arguments

        Raises:
            CommandValidationError: If the string cannot be split or uses shell syntax
        """
        try:
            args = shlex.split(command)
        except ValueError as e:
            raise CommandValidationError(f"Failed to parse command: {e}") from e

        operators = [arg for arg in args if arg in SHELL_OPERATORS]
        if operators:
            raise CommandValidationError(
                f"Shell operators are not supported: {' '.join(operators)}"
            )
        if args and ENV_ASSIGNMENT.match(args[0]):
            raise CommandValidationError(
                f"Environment assignments are not supported: {args[0]}"
            )
        return args

    def execute(
        self,
        command: str | list[str],
        timeout: int | None = None,
        executable: str | None = None,
    ) -> CommandResult:
        """Execute a command and capture its output.

        Args:
            command: Command string or argument list
            timeout: Timeout in seconds (overrides default)
            executable: Already-resolved path of the program to run

        Returns:
            CommandResult with execution details

        Raises:
            CommandValidationError: If the command string cannot be parsed
        """
        start_time = time.time()
        cmd_args = self.parse_command(command) if isinstance(command, str) else list(command)
        if not cmd_args:
            raise CommandValidationError("Empty command")

        cmd_args[0] = executable or self._resolve(cmd_args[0]) or cmd_args[0]

        try:
            result = subprocess.run(
                cmd_args,
                cwd=str(self.working_dir),
                capture_output=True,
                text=True,
                timeout=timeout or self.timeout,
            )
            cmd_result = CommandResult(
                command=cmd_args,
                exit_code=result.returncode,
                stdout=result.stdout,
                stderr=result.stderr,
                duration_ms=int((time.time() - start_time) * 1000),
                success=result.returncode == 0,
            )

        except subprocess.TimeoutExpired as e:
            raw_stdout = getattr(e, "stdout", None)
            if isinstance(raw_stdout, bytes):
                timeout_stdout = raw_stdout.decode("utf-8", errors="replace")
            else:
                timeout_stdout = raw_stdout or ""
            cmd_result = CommandResult(
                command=cmd_args,
                exit_code=-1,
                stdout=timeout_stdout,
                stderr=f"Command timed out after {timeout or self.timeout}s",
                duration_ms=int((time.time() - start_time) * 1000),
                success=False,
            )

        except OSError as e:
            cmd_result = CommandResult(
                command=cmd_args,
                exit_code=-1,
                stdout="",
                stderr=str(e),
                duration_ms=int((time.time() - start_time) * 1000),
                success=False,
            )

        self._log_execution(cmd_result)
        return cmd_result

    def _log_execution(self, result: CommandResult) -> None:
        cmd_preview = " ".join(result.command)[:100]
        if result.success:
            logger.debug(f"Command OK: {cmd_preview} (exit={result.exit_code}, {result.duration_ms}ms)")
        else:
            logger.debug(f"Command FAILED: {cmd_preview} (exit={result.exit_code})")

