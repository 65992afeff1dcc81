"""Workspace preparation: clean build/install trees and a private source copy.

Concurrent runs against the same output root are not supported. Each call to
:func:`prepare` removes ``build/`` and ``install/`` outright, so a second run
started mid-flight destroys the first run's state. Callers must serialize.
"""

from __future__ import annotations

import shutil
from pathlib import Path

from gpgrt_build.errors import ConfigurationError, IoError
from gpgrt_build.models import SourceTree, Workspace

VCS_METADATA_DIRS = frozenset({".git", ".hg", ".svn"})


def prepare(source: SourceTree, output_root: Path | None) -> Workspace:
    """Recreate ``build/`` and ``install/`` and copy ``source`` into ``build/<name>/``."""
    if output_root is None:
        raise ConfigurationError(
            "Output root is not set; cannot decide where to place build outputs.",
            hint="Pass an output directory explicitly or set OUT_DIR.",
            context={"operation": "prepare"},
        )
    if not source.path.is_dir():
        raise ConfigurationError(
            "Source tree does not exist or is not a directory.",
            hint="Point the build at the vendored native source tree.",
            context={"operation": "prepare", "source": str(source.path)},
        )

    # configure runs inside build/<name>, so relative paths would point into the copy
    output_root = output_root.absolute()

    build_dir = output_root / "build"
    install_dir = output_root / "install"
    for directory in (build_dir, install_dir):
        _remove_tree(directory)
        _make_dirs(directory)

    source_dir = build_dir / source.name
    _make_dirs(source_dir)
    copy_tree(source.path, source_dir)

    return Workspace(
        output_root=output_root,
        build_dir=build_dir,
        install_dir=install_dir,
        source_dir=source_dir,
    )


def relocate(workspace: Workspace, new_source_dir: Path) -> Workspace:
    """Point subsequent Build Driver steps at an already-populated directory."""
    if not new_source_dir.is_dir():
        raise ConfigurationError(
            "Relocation target is not a directory.",
            context={"operation": "relocate", "source_dir": str(new_source_dir)},
        )
    workspace.source_dir = new_source_dir
    return workspace


def copy_tree(src: Path, dst: Path) -> None:
    """Copy ``src`` into ``dst`` recursively, skipping VCS metadata directories.

    Symbolic links are followed and their targets copied as regular files;
    permission bits are kept so scripts such as ``autogen.sh`` stay executable.
    """
    try:
        entries = sorted(src.iterdir())
    except OSError as exc:
        raise IoError(f"Cannot read directory: {exc.strerror}", path=str(src)) from exc

    for entry in entries:
        target = dst / entry.name
        if entry.is_dir():
            if entry.name in VCS_METADATA_DIRS:
                continue
            _make_dirs(target)
            copy_tree(entry, target)
            continue
        try:
            target.unlink(missing_ok=True)
            shutil.copy(entry, target)
        except OSError as exc:
            raise IoError(
                f"Cannot copy file: {exc.strerror}",
                path=str(entry),
                context={"destination": str(target)},
            ) from exc


def _remove_tree(path: Path) -> None:
    if not path.exists():
        return
    try:
        shutil.rmtree(path)
    except OSError as exc:
        raise IoError(f"Cannot remove directory: {exc.strerror}", path=str(path)) from exc


def _make_dirs(path: Path) -> None:
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise IoError(f"Cannot create directory: {exc.strerror}", path=str(path)) from exc
