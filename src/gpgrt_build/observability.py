"""Structured logging and observability helpers."""

from __future__ import annotations

import json
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, TextIO


@dataclass(slots=True)
class StructuredLogger:
    """Per-build record of every toolchain step, keyed by pipeline step.

    Each record names the step, the exact command line and its working
    directory, so a saved JSON-lines log is enough to replay a failed build.

    Echo lines go to ``stream`` (stderr unless overridden) so they never mix
    with link metadata written to stdout.
    """

    records: list[dict[str, Any]] = field(default_factory=list)
    stream: TextIO | None = None
    echo: bool = True

    def log(
        self,
        *,
        operation: str,
        step: str | None,
        message: str,
        command: str | None = None,
        cwd: str | None = None,
        level: str = "info",
        extra: dict[str, Any] | None = None,
    ) -> None:
        record: dict[str, Any] = {
            "level": level,
            "operation": operation,
            "step": step,
            "command": command,
            "cwd": cwd,
            "message": message,
        }
        if extra is not None:
            record["extra"] = extra
        self.records.append(record)
        if self.echo:
            print(message, file=self.stream if self.stream is not None else sys.stderr)

    def records_for_step(self, step: str) -> list[dict[str, Any]]:
        return [record for record in self.records if record.get("step") == step]

    def to_json_lines(self, path: str | Path) -> Path:
        output_path = Path(path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        lines = [json.dumps(record, sort_keys=True) for record in self.records]
        output_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return output_path
