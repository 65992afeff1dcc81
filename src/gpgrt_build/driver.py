"""Autotools build driver.

Runs generate -> configure -> compile -> [test] -> install as blocking
external processes inside the workspace's private source copy. Each step
refuses to start until the step it depends on has succeeded, and once a step
fails nothing else runs until ``generate`` starts a new chain.
"""

from __future__ import annotations

import subprocess
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from gpgrt_build.errors import ConfigurationError, ExternalToolError
from gpgrt_build.models import BuildOptions, ProcessInvocation, Step, Workspace
from gpgrt_build.observability import StructuredLogger

ProcessRunner = Callable[[ProcessInvocation], int]

# step -> step that must have succeeded first
_REQUIRES: dict[Step, Step | None] = {
    "generate": None,
    "configure": "generate",
    "compile": "configure",
    "test": "compile",
    "install": "compile",
}


def run_subprocess(invocation: ProcessInvocation) -> int:
    """Run ``invocation`` to completion, inheriting stdio; return its exit status."""
    result = subprocess.run(invocation.argv, cwd=str(invocation.cwd), check=False)
    return result.returncode


@dataclass(slots=True)
class Toolchain:
    autogen: str = "./autogen.sh"
    configure: str = "./configure"
    make: str = "make"
    check_target: str = "check"
    install_target: str = "install"


@dataclass(slots=True)
class BuildDriver:
    toolchain: Toolchain = field(default_factory=Toolchain)
    runner: ProcessRunner = run_subprocess
    logger: StructuredLogger = field(default_factory=StructuredLogger)
    completed: list[Step] = field(default_factory=list)
    failed: Step | None = None
    source_dir: Path | None = None

    def generate(self, workspace: Workspace) -> None:
        """Start a fresh chain for ``workspace``; earlier progress no longer counts."""
        self.reset()
        self.source_dir = workspace.source_dir
        self._run(
            ProcessInvocation(
                step="generate",
                program=self.toolchain.autogen,
                cwd=workspace.source_dir,
                description="generating configure script",
            )
        )

    def configure(
        self,
        workspace: Workspace,
        options: BuildOptions,
        install_path: Path | None = None,
    ) -> None:
        self._run(self.configure_invocation(workspace, options, install_path))

    def configure_invocation(
        self,
        workspace: Workspace,
        options: BuildOptions,
        install_path: Path | None = None,
    ) -> ProcessInvocation:
        prefix = (install_path or options.install_path or workspace.install_dir).absolute()
        return ProcessInvocation(
            step="configure",
            program=self.toolchain.configure,
            cwd=workspace.source_dir,
            args=(*options.configure_flags(), f"--prefix={prefix}"),
            description="configuring",
        )

    def compile(self, workspace: Workspace) -> None:
        self._run(
            ProcessInvocation(
                step="compile",
                program=self.toolchain.make,
                cwd=workspace.source_dir,
                description="building",
            )
        )

    def test(self, workspace: Workspace) -> None:
        self._run(
            ProcessInvocation(
                step="test",
                program=self.toolchain.make,
                cwd=workspace.source_dir,
                args=(self.toolchain.check_target,),
                description="checking",
            )
        )

    def install(self, workspace: Workspace) -> None:
        self._run(
            ProcessInvocation(
                step="install",
                program=self.toolchain.make,
                cwd=workspace.source_dir,
                args=(self.toolchain.install_target,),
                description="installing",
            )
        )

    def reset(self) -> None:
        self.completed.clear()
        self.failed = None
        self.source_dir = None

    def _run(self, invocation: ProcessInvocation) -> None:
        self._require(invocation)
        command = invocation.command_line
        cwd = str(invocation.cwd)
        self.logger.log(
            operation="run",
            step=invocation.step,
            command=command,
            cwd=cwd,
            message=f"running: {command} (in {cwd})",
        )

        try:
            status = self.runner(invocation)
        except OSError as exc:
            self.failed = invocation.step
            self._log_failure(invocation, f"{invocation.description} failed to start: {exc}")
            raise ExternalToolError(
                f"Error {invocation.description}: could not start {invocation.program}.",
                step=invocation.step,
                command=command,
                cwd=cwd,
                exit_status=None,
                hint="Check that the program exists and is executable in the working directory.",
            ) from exc

        if status != 0:
            self.failed = invocation.step
            self._log_failure(invocation, f"{invocation.description} exited with status {status}")
            raise ExternalToolError(
                f"Error {invocation.description}.",
                step=invocation.step,
                command=command,
                cwd=cwd,
                exit_status=status,
                hint="Re-run the command by hand in the working directory to reproduce.",
            )

        self.completed.append(invocation.step)

    def _require(self, invocation: ProcessInvocation) -> None:
        step = invocation.step
        if step != "generate" and invocation.cwd != self.source_dir:
            raise ConfigurationError(
                f"Cannot run {step} in a workspace that was not generated by this driver.",
                hint="Start again from generate for this workspace.",
                context={"operation": step, "missing": "generate", "cwd": str(invocation.cwd)},
            )
        if self.failed is not None:
            raise ConfigurationError(
                f"Cannot run {step} after {self.failed} failed.",
                hint="Fix the failure and start again from generate.",
                context={"operation": step, "failed": self.failed},
            )
        prerequisite = _REQUIRES[step]
        if prerequisite is not None and prerequisite not in self.completed:
            raise ConfigurationError(
                f"Cannot run {step} before {prerequisite} has succeeded.",
                hint="Run the pipeline steps in order: generate, configure, compile, [test], install.",
                context={"operation": step, "missing": prerequisite},
            )

    def _log_failure(self, invocation: ProcessInvocation, message: str) -> None:
        self.logger.log(
            operation="run",
            step=invocation.step,
            command=invocation.command_line,
            cwd=str(invocation.cwd),
            message=message,
            level="error",
        )
