"""Artifact resolution and link metadata emission."""

from __future__ import annotations

import sys
from collections.abc import Sequence
from pathlib import Path
from typing import TextIO

from gpgrt_build.models import ArtifactDescriptor, SourceTree

DIRECTIVE_PREFIX = "cargo:"


def resolve(install_root: Path, libs: Sequence[str]) -> ArtifactDescriptor:
    """Derive include/lib/bin under ``install_root``. Does not touch the filesystem."""
    return ArtifactDescriptor(
        install_dir=install_root,
        include_dir=install_root / "include",
        lib_dir=install_root / "lib",
        bin_dir=install_root / "bin",
        libs=tuple(libs),
    )


def metadata_lines(descriptor: ArtifactDescriptor) -> list[str]:
    lines = [f"{DIRECTIVE_PREFIX}rustc-link-search=native={descriptor.lib_dir}"]
    lines.extend(f"{DIRECTIVE_PREFIX}rustc-link-lib=static={lib}" for lib in descriptor.libs)
    lines.append(f"{DIRECTIVE_PREFIX}include={descriptor.include_dir}")
    lines.append(f"{DIRECTIVE_PREFIX}lib={descriptor.lib_dir}")
    return lines


def emit_metadata(descriptor: ArtifactDescriptor, stream: TextIO | None = None) -> list[str]:
    """Write link metadata, one directive per line, to ``stream`` (stdout by default)."""
    lines = metadata_lines(descriptor)
    out = stream if stream is not None else sys.stdout
    for line in lines:
        out.write(line + "\n")
    return lines


def rerun_if_changed(source: SourceTree, stream: TextIO | None = None) -> str:
    line = f"{DIRECTIVE_PREFIX}rerun-if-changed={source.path}"
    out = stream if stream is not None else sys.stdout
    out.write(line + "\n")
    return line
