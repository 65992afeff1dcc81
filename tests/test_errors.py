from gpgrt_build.errors import (
    ConfigurationError,
    ErrorCode,
    ExternalToolError,
    IoError,
    NativeLibraryError,
)


def test_error_codes_are_stable_and_machine_readable() -> None:
    errors = [
        ConfigurationError("bad input"),
        IoError("cannot copy", path="/tmp/a"),
        ExternalToolError("make failed", step="compile", command="make", cwd="/w", exit_status=2),
        NativeLibraryError("cannot load"),
    ]
    assert [error.code for error in errors] == [
        ErrorCode.CONFIGURATION.value,
        ErrorCode.IO.value,
        ErrorCode.EXTERNAL_TOOL.value,
        ErrorCode.NATIVE_LIBRARY.value,
    ]


def test_external_tool_error_renders_diagnostic_block() -> None:
    error = ExternalToolError(
        "Error configuring.",
        step="configure",
        command="./configure --enable-static --prefix=/tmp/x",
        cwd="/out/build/libgpg-error",
        exit_status=77,
        hint="Re-run by hand.",
    )

    assert str(error).splitlines() == [
        "Error configuring.",
        "Hint: Re-run by hand.",
        "  step: configure",
        "  command: ./configure --enable-static --prefix=/tmp/x",
        "  cwd: /out/build/libgpg-error",
        "  exit_status: 77",
    ]
    payload = error.to_dict()
    assert payload["code"] == "E_EXTERNAL_TOOL"
    assert payload["context"] == {
        "step": "configure",
        "command": "./configure --enable-static --prefix=/tmp/x",
        "cwd": "/out/build/libgpg-error",
        "exit_status": "77",
    }


def test_io_error_always_names_path() -> None:
    error = IoError("Cannot create directory", path="/out/build", context={"operation": "prepare"})

    assert error.path == "/out/build"
    assert error.context == {"path": "/out/build", "operation": "prepare"}
    assert "hint" not in error.to_dict()
