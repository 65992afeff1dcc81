import shutil
import sys
from pathlib import Path

import pytest
from fakes import RecordingRunner

from gpgrt_build.build import OUT_DIR_SUBDIR, Build, source_dir
from gpgrt_build.driver import BuildDriver
from gpgrt_build.errors import ConfigurationError, ExternalToolError
from gpgrt_build.models import BuildOptions, SourceTree
from gpgrt_build.observability import StructuredLogger


def test_build_runs_every_step_and_resolves_artifacts(
    tmp_path: Path,
    source_tree: SourceTree,
    runner: RecordingRunner,
    driver: BuildDriver,
) -> None:
    build = Build(source=source_tree, driver=driver).out_dir(tmp_path / "out")

    artifacts = build.build()

    assert runner.steps == ["generate", "configure", "compile", "test", "install"]
    install_dir = tmp_path / "out" / "install"
    assert runner.calls[1].args == (
        "--enable-static",
        "--disable-shared",
        "--disable-doc",
        f"--prefix={install_dir}",
    )
    assert artifacts.install_dir == install_dir
    assert artifacts.lib_dir == install_dir / "lib"
    assert artifacts.libs == ("gpg-error",)


def test_build_can_skip_check(
    tmp_path: Path,
    source_tree: SourceTree,
    runner: RecordingRunner,
    driver: BuildDriver,
) -> None:
    Build(output_root=tmp_path, source=source_tree, driver=driver, run_tests=False).build()

    assert runner.steps == ["generate", "configure", "compile", "install"]


@pytest.mark.parametrize("failing", ["generate", "configure", "compile", "test", "install"])
def test_failure_stops_pipeline_without_descriptor(
    tmp_path: Path,
    source_tree: SourceTree,
    failing: str,
) -> None:
    runner = RecordingRunner(fail_step=failing, status=1)
    driver = BuildDriver(runner=runner, logger=StructuredLogger(echo=False))
    build = Build(output_root=tmp_path / "out", source=source_tree, driver=driver)

    with pytest.raises(ExternalToolError) as excinfo:
        build.build()

    assert excinfo.value.step == failing
    assert runner.steps[-1] == failing


def test_build_without_output_root_fails_before_any_process(
    source_tree: SourceTree,
    runner: RecordingRunner,
    driver: BuildDriver,
) -> None:
    build = Build.from_env({}, source=source_tree, driver=driver)

    with pytest.raises(ConfigurationError):
        build.build()

    assert runner.calls == []


def test_from_env_uses_out_dir_subdirectory(tmp_path: Path) -> None:
    build = Build.from_env({"OUT_DIR": str(tmp_path)})

    assert build.output_root == tmp_path / OUT_DIR_SUBDIR


def test_build_is_repeatable_against_same_output_root(
    tmp_path: Path,
    source_tree: SourceTree,
    runner: RecordingRunner,
    driver: BuildDriver,
) -> None:
    build = Build(output_root=tmp_path / "out", source=source_tree, driver=driver)
    first = build.build()
    second = build.build()

    assert first == second
    assert runner.steps.count("install") == 2


def test_custom_install_path_is_used_for_prefix_and_artifacts(
    tmp_path: Path,
    source_tree: SourceTree,
    runner: RecordingRunner,
    driver: BuildDriver,
) -> None:
    prefix = tmp_path / "prefix"
    options = BuildOptions(install_path=prefix)

    artifacts = Build(
        output_root=tmp_path / "out",
        source=source_tree,
        options=options,
        driver=driver,
    ).build()

    assert runner.calls[1].args == (f"--prefix={prefix}",)
    assert artifacts.include_dir == prefix / "include"


def test_vendored_source_location() -> None:
    assert source_dir().parts[-2:] == ("vendor", "libgpg-error")


@pytest.mark.skipif(
    not sys.platform.startswith("linux") or shutil.which("make") is None,
    reason="Needs a POSIX shell and make.",
)
def test_real_toolchain_round_trip(tmp_path: Path) -> None:
    src = tmp_path / "fake-gpgrt"
    src.mkdir()
    autogen = src / "autogen.sh"
    autogen.write_text(
        "#!/bin/sh\n"
        "cat > configure <<'EOS'\n"
        "#!/bin/sh\n"
        "for arg in \"$@\"; do case $arg in --prefix=*) prefix=${arg#--prefix=};; esac; done\n"
        "printf 'PREFIX=%s\\n' \"$prefix\" > config.mk\n"
        "EOS\n"
        "chmod +x configure\n",
        encoding="utf-8",
    )
    autogen.chmod(0o755)
    (src / "Makefile").write_text(
        "include config.mk\n"
        "all:\n\ttouch built\n"
        "check:\n\ttest -f built\n"
        "install:\n"
        "\tmkdir -p $(PREFIX)/include $(PREFIX)/lib $(PREFIX)/bin\n"
        "\ttouch $(PREFIX)/include/gpgrt.h $(PREFIX)/lib/libgpg-error.a\n",
        encoding="utf-8",
    )

    build = Build(
        output_root=tmp_path / "out",
        source=SourceTree(src),
        driver=BuildDriver(logger=StructuredLogger(echo=False)),
    )
    artifacts = build.build()

    assert (artifacts.include_dir / "gpgrt.h").exists()
    assert (artifacts.lib_dir / "libgpg-error.a").exists()
    assert not (src / "configure").exists()


def test_relative_output_root_yields_absolute_prefix_and_artifacts(
    tmp_path: Path,
    source_tree: SourceTree,
    runner: RecordingRunner,
    driver: BuildDriver,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.chdir(tmp_path)

    artifacts = Build(source=source_tree, driver=driver).out_dir("out").build()

    install_dir = tmp_path / "out" / "install"
    configure = runner.calls[1]
    assert configure.args[-1] == f"--prefix={install_dir}"
    assert configure.cwd == tmp_path / "out" / "build" / "libgpg-error"
    assert artifacts.install_dir == install_dir
    assert artifacts.lib_dir.is_absolute()


def test_relative_install_path_matches_descriptor(
    tmp_path: Path,
    source_tree: SourceTree,
    runner: RecordingRunner,
    driver: BuildDriver,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.chdir(tmp_path)
    options = BuildOptions(install_path=Path("prefix"))

    artifacts = Build(output_root=Path("out"), source=source_tree, options=options, driver=driver).build()

    assert runner.calls[1].args == (f"--prefix={tmp_path / 'prefix'}",)
    assert artifacts.include_dir == tmp_path / "prefix" / "include"
