"""Contract with the binding generator that turns installed headers into declarations.

The generator itself lives outside this package. This module only guarantees
it is handed a populated include directory and a stable allow-list.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from gpgrt_build.errors import ConfigurationError
from gpgrt_build.models import ArtifactDescriptor

DEFAULT_HEADER = "gpgrt.h"
DEFAULT_ALLOWLIST = ("GPG.*", "gpg.*")


@dataclass(frozen=True, slots=True)
class BindingRequest:
    include_dir: Path
    header: str
    output: Path
    allowlist_vars: tuple[str, ...] = DEFAULT_ALLOWLIST
    allowlist_types: tuple[str, ...] = DEFAULT_ALLOWLIST
    allowlist_functions: tuple[str, ...] = DEFAULT_ALLOWLIST

    @property
    def header_path(self) -> Path:
        return self.include_dir / self.header

    def allows(self, symbol: str) -> bool:
        """Case-sensitive match of ``symbol`` against any allow-list pattern."""
        patterns = {*self.allowlist_vars, *self.allowlist_types, *self.allowlist_functions}
        return any(re.fullmatch(pattern, symbol) for pattern in patterns)


class BindingGenerator(Protocol):
    def generate(self, request: BindingRequest) -> Path:
        """Write declarations for every allow-listed symbol and return the output path."""


def generate_bindings(
    descriptor: ArtifactDescriptor,
    generator: BindingGenerator,
    *,
    output: Path,
    header: str = DEFAULT_HEADER,
) -> Path:
    request = BindingRequest(include_dir=descriptor.include_dir, header=header, output=output)
    if not request.header_path.is_file():
        raise ConfigurationError(
            "Installed header not found; the include directory is not populated.",
            hint="Run the full build (including install) before generating bindings.",
            context={"operation": "generate_bindings", "header": str(request.header_path)},
        )
    return generator.generate(request)
