"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest
from fakes import RecordingRunner

from gpgrt_build.driver import BuildDriver
from gpgrt_build.models import SourceTree
from gpgrt_build.observability import StructuredLogger


@pytest.fixture
def runner() -> RecordingRunner:
    return RecordingRunner()


@pytest.fixture
def driver(runner: RecordingRunner) -> BuildDriver:
    return BuildDriver(runner=runner, logger=StructuredLogger(echo=False))


@pytest.fixture
def source_tree(tmp_path: Path) -> SourceTree:
    root = tmp_path / "libgpg-error"
    (root / "src").mkdir(parents=True)
    (root / ".git" / "objects").mkdir(parents=True)
    (root / "autogen.sh").write_text("#!/bin/sh\n", encoding="utf-8")
    (root / "configure.ac").write_text("AC_INIT\n", encoding="utf-8")
    (root / "src" / "gpgrt.h.in").write_text("/* header */\n", encoding="utf-8")
    (root / ".git" / "HEAD").write_text("ref: refs/heads/main\n", encoding="utf-8")
    return SourceTree(root)
