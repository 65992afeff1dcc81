"""End-to-end build of the vendored libgpg-error tree.

Example::

    build = Build.from_env(os.environ)
    artifacts = build.build()
    emit_metadata(artifacts)
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from gpgrt_build.artifacts import resolve
from gpgrt_build.driver import BuildDriver
from gpgrt_build.models import DEFAULT_LIBS, ArtifactDescriptor, BuildOptions, SourceTree
from gpgrt_build.workspace import prepare

OUT_DIR_SUBDIR = "gpgrt-build"


def source_dir() -> Path:
    """Location of the vendored native source shipped with this package."""
    return Path(__file__).resolve().parent / "vendor" / "libgpg-error"


@dataclass(slots=True)
class Build:
    output_root: Path | None = None
    source: SourceTree = field(default_factory=lambda: SourceTree(source_dir()))
    options: BuildOptions = field(default_factory=BuildOptions.default)
    run_tests: bool = True
    libs: Sequence[str] = DEFAULT_LIBS
    driver: BuildDriver = field(default_factory=BuildDriver)

    @classmethod
    def from_env(cls, environ: Mapping[str, str], **kwargs: object) -> Build:
        """Use ``<OUT_DIR>/gpgrt-build`` as the output root when OUT_DIR is set."""
        out_dir = environ.get("OUT_DIR")
        output_root = Path(out_dir) / OUT_DIR_SUBDIR if out_dir else None
        return cls(output_root=output_root, **kwargs)  # type: ignore[arg-type]

    def out_dir(self, path: str | Path) -> Build:
        self.output_root = Path(path)
        return self

    def build(self) -> ArtifactDescriptor:
        workspace = prepare(self.source, self.output_root)
        install_root = (self.options.install_path or workspace.install_dir).absolute()

        driver = self.driver
        driver.reset()
        driver.generate(workspace)
        driver.configure(workspace, self.options, install_root)
        driver.compile(workspace)
        if self.run_tests:
            driver.test(workspace)
        driver.install(workspace)

        return resolve(install_root, self.libs)
