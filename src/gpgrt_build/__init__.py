"""Build orchestration for the vendored libgpg-error source tree."""

from .artifacts import emit_metadata, metadata_lines, rerun_if_changed, resolve
from .bindings import BindingGenerator, BindingRequest, generate_bindings
from .build import Build, source_dir
from .driver import BuildDriver, Toolchain
from .errors import (
    BuildError,
    ConfigurationError,
    ErrorCode,
    ExternalToolError,
    IoError,
    NativeLibraryError,
)
from .models import (
    ArtifactDescriptor,
    BuildOptions,
    ProcessInvocation,
    SourceTree,
    Toggle,
    Workspace,
)
from .native import GpgError, NativeErrorStrings
from .observability import StructuredLogger
from .workspace import prepare, relocate

__all__ = [
    "ArtifactDescriptor",
    "BindingGenerator",
    "BindingRequest",
    "Build",
    "BuildDriver",
    "BuildError",
    "BuildOptions",
    "ConfigurationError",
    "ErrorCode",
    "ExternalToolError",
    "GpgError",
    "IoError",
    "NativeErrorStrings",
    "NativeLibraryError",
    "ProcessInvocation",
    "SourceTree",
    "StructuredLogger",
    "Toggle",
    "Toolchain",
    "Workspace",
    "emit_metadata",
    "generate_bindings",
    "metadata_lines",
    "prepare",
    "relocate",
    "rerun_if_changed",
    "resolve",
    "source_dir",
]
