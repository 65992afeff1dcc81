"""Typed build error model with stable, machine-readable error codes."""

from __future__ import annotations

from collections.abc import Mapping
from enum import StrEnum


class ErrorCode(StrEnum):
    """Stable error identifiers used across API surfaces."""

    CONFIGURATION = "E_CONFIGURATION"
    IO = "E_IO"
    EXTERNAL_TOOL = "E_EXTERNAL_TOOL"
    NATIVE_LIBRARY = "E_NATIVE_LIBRARY"


class BuildError(Exception):
    """Base class for every failure that aborts a build.

    ``str()`` renders the operator-facing block printed by the CLI: the
    message, an optional hint, then one indented ``key: value`` line per
    non-empty context entry (step, command, cwd, path, ...).
    """

    code: str
    hint: str | None
    context: Mapping[str, str]

    def __init__(
        self,
        message: str,
        *,
        code: ErrorCode,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code.value
        self.hint = hint
        self.context = dict(context or {})

    def __str__(self) -> str:
        parts = [super().__str__()]
        if self.hint:
            parts.append(f"Hint: {self.hint}")
        if self.context:
            for k, v in self.context.items():
                if v:
                    parts.append(f"  {k}: {v}")
        return "\n".join(parts)

    def to_dict(self) -> dict[str, object]:
        payload: dict[str, object] = {
            "code": self.code,
            "message": str(self),
            "context": dict(self.context),
        }
        if self.hint is not None:
            payload["hint"] = self.hint
        return payload


class ConfigurationError(BuildError):
    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message, code=ErrorCode.CONFIGURATION, hint=hint, context=context)


class IoError(BuildError):
    """A filesystem operation failed; ``path`` names the offending location."""

    path: str

    def __init__(
        self,
        message: str,
        *,
        path: str,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        merged = {"path": path, **dict(context or {})}
        super().__init__(message, code=ErrorCode.IO, hint=hint, context=merged)
        self.path = path


class ExternalToolError(BuildError):
    """An external process exited non-zero (or could not be spawned).

    The context carries everything needed to reproduce the failure by hand:
    the step, the exact command line, the working directory and the exit
    status.
    """

    step: str
    command: str
    cwd: str
    exit_status: int | None

    def __init__(
        self,
        message: str,
        *,
        step: str,
        command: str,
        cwd: str,
        exit_status: int | None,
        hint: str | None = None,
    ) -> None:
        context = {
            "step": step,
            "command": command,
            "cwd": cwd,
            "exit_status": "" if exit_status is None else str(exit_status),
        }
        super().__init__(message, code=ErrorCode.EXTERNAL_TOOL, hint=hint, context=context)
        self.step = step
        self.command = command
        self.cwd = cwd
        self.exit_status = exit_status


class NativeLibraryError(BuildError):
    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message, code=ErrorCode.NATIVE_LIBRARY, hint=hint, context=context)


__all__ = [
    "BuildError",
    "ConfigurationError",
    "ErrorCode",
    "ExternalToolError",
    "IoError",
    "NativeLibraryError",
]
