"""SugarJar exception hierarchy."""

from typing import Any


class SugarJarError(Exception):
    """Base exception for all SugarJar errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class ConfigurationError(SugarJarError):
    """Error in user or repository configuration."""

    pass


class NotInRepositoryError(SugarJarError):
    """Command requires a git repository but none was found."""

    pass


class GitError(SugarJarError):
    """Error in git operations."""

    def __init__(
        self,
        message: str,
        command: str | None = None,
        exit_code: int | None = None,
        stdout: str = "",
        stderr: str = "",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.command = command
        self.exit_code = exit_code
        self.stdout = stdout
        self.stderr = stderr


class UpstreamResolutionError(SugarJarError):
    """No remote can safely be chosen as the upstream."""

    def __init__(self, message: str, remotes: list[str]) -> None:
        super().__init__(message, {"remotes": remotes})
        self.remotes = remotes


class ProtectedBranchError(SugarJarError):
    """Attempted a destructive operation on a main branch."""

    def __init__(self, branch: str) -> None:
        super().__init__(f"Cannot remove {branch} branch", {"branch": branch})
        self.branch = branch


class OutputParseError(SugarJarError):
    """Backend output did not match the expected line grammar."""

    def __init__(self, message: str, line: str, grammar: str) -> None:
        super().__init__(message, {"line": line, "grammar": grammar})
        self.line = line
        self.grammar = grammar


class HostingCLIError(SugarJarError):
    """Error running the code-hosting CLI."""

    def __init__(
        self,
        message: str,
        command: str | None = None,
        exit_code: int | None = None,
        stdout: str = "",
        stderr: str = "",
    ) -> None:
        super().__init__(message, {"command": command, "exit_code": exit_code})
        self.command = command
        self.exit_code = exit_code
        self.stdout = stdout
        self.stderr = stderr
