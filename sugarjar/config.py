"""SugarJar configuration management using Pydantic."""

from collections.abc import Iterable
from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from sugarjar.constants import (
    DEFAULT_MAX_LINT_CORRECTIONS,
    REPO_CONFIG_FILE,
    SYSTEM_CONFIG_PATH,
    USER_CONFIG_PATH,
    HostingFlavor,
)
from sugarjar.exceptions import ConfigurationError
from sugarjar.logging import get_logger

logger = get_logger("config")


def _read_yaml(path: Path) -> dict[str, Any]:
    """Read a YAML mapping, returning {} for a missing or empty file."""
    if not path.exists():
        return {}
    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}", {"error": str(e)}) from e
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {path} must contain a mapping")
    return data


class UserConfig(BaseModel):
    """Per-user settings, merged from system and user config files."""

    github_user: str | None = None
    github_host: str | None = None
    github_cli: str = Field(default=HostingFlavor.GH.value, pattern="^(gh|hub)$")
    ignore_dirty: bool = False
    ignore_prerun_failure: bool = False
    color: bool = True
    log_level: str = Field(default="info", pattern="^(debug|info|warn|error)$")
    log_dir: str | None = None
    max_lint_corrections: int = Field(default=DEFAULT_MAX_LINT_CORRECTIONS, ge=1, le=100)

    @classmethod
    def load(
        cls,
        paths: Iterable[str | Path] | None = None,
        overrides: dict[str, Any] | None = None,
    ) -> "UserConfig":
        """Load configuration from YAML files plus explicit overrides.

        Later files override earlier ones; ``overrides`` entries that are
        ``None`` are ignored so unset CLI options do not clobber files.

        Args:
            paths: Config files in increasing precedence. Defaults to the
                system file then the user file.
            overrides: Values taking precedence over every file

        Returns:
            UserConfig instance

        Raises:
            ConfigurationError: If a file is malformed or a value is invalid
        """
        if paths is None:
            paths = [SYSTEM_CONFIG_PATH, USER_CONFIG_PATH]

        data: dict[str, Any] = {}
        for path in paths:
            file_data = _read_yaml(Path(path))
            if file_data:
                logger.debug(f"Loaded config from {path}")
            data.update(file_data)

        for key, value in (overrides or {}).items():
            if value is not None:
                data[key] = value

        try:
            return cls(**data)
        except ValidationError as e:
            raise ConfigurationError("Invalid configuration", {"errors": e.errors()}) from e

    @property
    def hosting_flavor(self) -> HostingFlavor:
        """Get the configured hosting CLI flavor."""
        return HostingFlavor(self.github_cli)


class RepoConfig(BaseModel):
    """Per-repository settings read from ``.sugarjar.yaml``.

    Besides the known keys, any ``<type>`` list or ``<type>_list_cmd``
    string defines an additional check type. Check commands are run without
    a shell, so a pipeline or an ``&&`` chain belongs in a script.
    """

    model_config = ConfigDict(extra="allow")

    lint: list[str] = Field(default_factory=list)
    unit: list[str] = Field(default_factory=list)
    lint_list_cmd: str | None = None
    unit_list_cmd: str | None = None
    on_push: list[str] = Field(default_factory=list)
    commit_template: str | None = None

    @classmethod
    def load(cls, repo_root: str | Path) -> "RepoConfig":
        """Load the repository config from the repository root.

        Args:
            repo_root: Repository root directory

        Returns:
            RepoConfig instance (defaults if the file is absent)
        """
        path = Path(repo_root) / REPO_CONFIG_FILE
        data = _read_yaml(path)
        try:
            return cls(**data)
        except ValidationError as e:
            raise ConfigurationError(
                f"Invalid repository config {path}", {"errors": e.errors()}
            ) from e

    def _extra(self, key: str) -> Any:
        return (self.model_extra or {}).get(key)

    def list_cmd_for(self, check_type: str) -> str | None:
        """Get the command enumerating checks of a type, if configured."""
        key = f"{check_type}_list_cmd"
        value = getattr(self, key, None) if key in type(self).model_fields else self._extra(key)
        if value is not None and not isinstance(value, str):
            raise ConfigurationError(f"{key} must be a string", {"value": value})
        return value or None

    def checks_for(self, check_type: str) -> list[str]:
        """Get the statically configured checks of a type."""
        if check_type in type(self).model_fields:
            value = getattr(self, check_type)
        else:
            value = self._extra(check_type)
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        if not isinstance(value, list):
            raise ConfigurationError(f"{check_type} must be a list of commands", {"value": value})
        return [str(v) for v in value]
