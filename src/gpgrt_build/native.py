"""Error-code wrapper backed by the installed libgpg-error.

Lookups copy the C string returned by the library into a Python ``str``
before returning; no reference to library-owned memory survives the call.
"""

from __future__ import annotations

import ctypes
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from gpgrt_build.errors import NativeLibraryError


class ErrorStringLookup(Protocol):
    def strerror(self, code: int) -> str: ...

    def strsource(self, code: int) -> str: ...


class NativeErrorStrings:
    """``gpg_strerror`` / ``gpg_strsource`` through ctypes."""

    def __init__(self, library: str | Path) -> None:
        try:
            self._lib = ctypes.CDLL(str(library))
        except OSError as exc:
            raise NativeLibraryError(
                "Cannot load libgpg-error.",
                hint="Build with shared libraries enabled to load them at runtime.",
                context={"library": str(library), "error": str(exc)},
            ) from exc
        for name in ("gpg_strerror", "gpg_strsource"):
            try:
                function = getattr(self._lib, name)
            except AttributeError as exc:
                raise NativeLibraryError(
                    f"Library does not export {name}.",
                    hint="Point at the libgpg-error shared library from the install tree.",
                    context={"library": str(library), "symbol": name},
                ) from exc
            function.argtypes = [ctypes.c_uint]
            function.restype = ctypes.c_char_p

    def strerror(self, code: int) -> str:
        return self._decode(self._lib.gpg_strerror(code))

    def strsource(self, code: int) -> str:
        return self._decode(self._lib.gpg_strsource(code))

    @staticmethod
    def _decode(raw: bytes | None) -> str:
        if raw is None:
            return ""
        return raw.decode("utf-8", errors="replace")


@dataclass(frozen=True, slots=True)
class GpgError:
    code: int
    lookup: ErrorStringLookup

    def error_string(self) -> str:
        return self.lookup.strerror(self.code)

    def error_source(self) -> str:
        return self.lookup.strsource(self.code)

    def __str__(self) -> str:
        return f"gpg returned with an error code of {self.code}: {self.error_string()}"

    def __repr__(self) -> str:
        return f"GpgError(error_code={self.code}, error_msg={self.error_string()!r})"


def shared_library_path(lib_dir: Path, name: str = "gpg-error") -> Path:
    """First ``lib<name>.so*`` / ``lib<name>.dylib`` in ``lib_dir``."""
    for pattern in (f"lib{name}.so", f"lib{name}.so.*", f"lib{name}.dylib"):
        matches = sorted(lib_dir.glob(pattern))
        if matches:
            return matches[0]
    raise NativeLibraryError(
        "No shared libgpg-error found in the install tree.",
        hint="Configure with shared enabled to produce a loadable library.",
        context={"lib_dir": str(lib_dir)},
    )
