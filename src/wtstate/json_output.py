"""Machine-readable command results for scripts and agents."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from wtstate.config import ConfigError
from wtstate.git_ops import GitError, NotAGitRepositoryError


class ErrorCode(str, Enum):
    """Stable error codes for programmatic handling."""

    NOT_GIT_REPO = "NOT_GIT_REPO"
    DETACHED_HEAD = "DETACHED_HEAD"
    UNCOMMITTED_CHANGES = "UNCOMMITTED_CHANGES"
    BRANCH_EXISTS = "BRANCH_EXISTS"
    BRANCH_NOT_FOUND = "BRANCH_NOT_FOUND"
    STASH_FAILED = "STASH_FAILED"
    INVALID_CONFIG = "INVALID_CONFIG"
    USER_CANCELLED = "USER_CANCELLED"
    INVALID_ARGUMENT = "INVALID_ARGUMENT"
    MISSING_ARGUMENT = "MISSING_ARGUMENT"
    INVALID_ACTION = "INVALID_ACTION"
    OPERATION_FAILED = "OPERATION_FAILED"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


class ErrorInfo(BaseModel):
    code: ErrorCode
    message: str
    details: dict[str, Any] | None = None


class CommandResult(BaseModel):
    """Envelope shared by every command's JSON output."""

    success: bool
    command: str
    timestamp: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    data: dict[str, Any] | None = None
    warnings: list[str] | None = None
    error: ErrorInfo | None = None


def create_success_result(
    command: str, data: dict[str, Any], warnings: list[str] | None = None
) -> CommandResult:
    return CommandResult(success=True, command=command, data=data, warnings=warnings or None)


def create_error_result(
    command: str,
    code: ErrorCode,
    message: str,
    details: dict[str, Any] | None = None,
) -> CommandResult:
    return CommandResult(
        success=False,
        command=command,
        error=ErrorInfo(code=code, message=message, details=details),
    )


def format_json_result(result: CommandResult) -> str:
    return json.dumps(result.model_dump(mode="json", exclude_none=True), indent=2)


def error_code_for(error: Exception) -> ErrorCode:
    """Pick the error code that best describes an exception."""
    if isinstance(error, NotAGitRepositoryError):
        return ErrorCode.NOT_GIT_REPO
    if isinstance(error, ConfigError):
        return ErrorCode.INVALID_CONFIG
    if isinstance(error, GitError):
        return ErrorCode.OPERATION_FAILED
    return ErrorCode.UNKNOWN_ERROR
