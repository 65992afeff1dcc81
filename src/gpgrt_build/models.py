"""Core typed dataclasses for the source tree, workspace, options and artifacts."""

from __future__ import annotations

import json
import shlex
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Literal

import cbor2

Step = Literal["generate", "configure", "compile", "test", "install"]

DEFAULT_LIBS = ("gpg-error",)


class Toggle(Enum):
    """Three-valued build option: unspecified leaves the toolchain default alone."""

    ENABLED = "enabled"
    DISABLED = "disabled"
    UNSPECIFIED = "unspecified"


@dataclass(frozen=True, slots=True)
class SourceTree:
    """Read-only reference to the vendored native source."""

    path: Path

    @property
    def name(self) -> str:
        return self.path.name


@dataclass(slots=True)
class Workspace:
    """Mutable on-disk build area rooted at ``output_root``.

    ``source_dir`` is where the Build Driver runs every step. It starts as the
    private copy under ``build/`` and can be redirected with
    :func:`gpgrt_build.workspace.relocate`.
    """

    output_root: Path
    build_dir: Path
    install_dir: Path
    source_dir: Path


@dataclass(frozen=True, slots=True)
class BuildOptions:
    """Named toggles translated into ``--enable-<name>`` / ``--disable-<name>``.

    Field declaration order is the order flags appear on the configure
    command line.
    """

    static: Toggle = Toggle.UNSPECIFIED
    shared: Toggle = Toggle.UNSPECIFIED
    doc: Toggle = Toggle.UNSPECIFIED
    install_path: Path | None = None

    @classmethod
    def default(cls) -> BuildOptions:
        """Static-only library without documentation."""
        return cls(static=Toggle.ENABLED, shared=Toggle.DISABLED, doc=Toggle.DISABLED)

    def toggles(self) -> tuple[tuple[str, Toggle], ...]:
        return (("static", self.static), ("shared", self.shared), ("doc", self.doc))

    def configure_flags(self) -> list[str]:
        flags: list[str] = []
        for name, toggle in self.toggles():
            if toggle is Toggle.ENABLED:
                flags.append(f"--enable-{name}")
            elif toggle is Toggle.DISABLED:
                flags.append(f"--disable-{name}")
            elif toggle is not Toggle.UNSPECIFIED:
                raise TypeError(f"Unknown toggle for {name}: {toggle!r}")
        return flags


@dataclass(frozen=True, slots=True)
class ProcessInvocation:
    step: Step
    program: str
    cwd: Path
    args: tuple[str, ...] = ()
    description: str = ""

    @property
    def argv(self) -> list[str]:
        return [self.program, *self.args]

    @property
    def command_line(self) -> str:
        return shlex.join(self.argv)


@dataclass(frozen=True, slots=True)
class ArtifactDescriptor:
    install_dir: Path
    include_dir: Path
    lib_dir: Path
    bin_dir: Path
    libs: tuple[str, ...] = field(default_factory=tuple)
    schema_version: int = 1

    def to_json(self, path: str | Path | None = None) -> str:
        encoded = json.dumps(self._payload(), indent=2, sort_keys=True) + "\n"
        if path is not None:
            Path(path).write_text(encoded, encoding="utf-8")
        return encoded

    def to_cbor(self, path: str | Path | None = None) -> bytes:
        encoded = cbor2.dumps(self._payload(), canonical=True)
        if path is not None:
            Path(path).write_bytes(encoded)
        return encoded

    def _payload(self) -> dict[str, object]:
        return {
            "schema_version": self.schema_version,
            "install_dir": str(self.install_dir),
            "include_dir": str(self.include_dir),
            "lib_dir": str(self.lib_dir),
            "bin_dir": str(self.bin_dir),
            "libs": list(self.libs),
        }
