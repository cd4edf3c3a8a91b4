"""
Trace recording for the hybrid workflow.

The engines never log on their own; the workflow reports each step
through ``TraceRecorder.record(event, **fields)``. A recorder:

- keeps every entry in memory
- writes JSON Lines when a trace file is attached
- prints a compact line per event when verbose
- forwards every event to the ``hybridcrypt`` logger at DEBUG
"""

import json
import logging
from typing import Any, TextIO

logger = logging.getLogger("hybridcrypt")


class TraceRecorder:
    """
    Records workflow events.

    Field values are plain JSON types or bytes (written as hex). Key
    material must be passed as a fingerprint, never raw.
    """

    def __init__(self, verbose: bool = False, trace_file: TextIO | None = None):
        self.verbose = verbose
        self.trace_file = trace_file
        self._records: list[dict[str, Any]] = []

    def record(self, event: str, **fields: Any) -> None:
        """Record a trace entry for ``event``."""
        entry = {"seq": len(self._records), "event": event, **fields}
        self._records.append(entry)

        if self.trace_file:
            self._write_jsonl(entry)

        if self.verbose:
            self._print_verbose(entry)

        logger.debug("%s %s", event, self._format_fields(fields))

    def _write_jsonl(self, record: dict[str, Any]) -> None:
        serializable = self._make_serializable(record)
        self.trace_file.write(json.dumps(serializable) + "\n")
        self.trace_file.flush()

    def _make_serializable(self, obj: Any) -> Any:
        if isinstance(obj, dict):
            return {k: self._make_serializable(v) for k, v in obj.items()}
        elif isinstance(obj, (list, tuple)):
            return [self._make_serializable(item) for item in obj]
        elif isinstance(obj, bytes):
            return obj.hex()
        else:
            return obj

    def _format_fields(self, fields: dict[str, Any]) -> str:
        parts = []
        for key, value in fields.items():
            if isinstance(value, bytes):
                value = value.hex()
            parts.append(f"{key}={value}")
        return " ".join(parts)

    def _print_verbose(self, record: dict[str, Any]) -> None:
        fields = {k: v for k, v in record.items() if k not in ("seq", "event")}
        print(f"S{record['seq']:03d} {record['event']:24s} {self._format_fields(fields)}")

    def events(self) -> list[str]:
        """Event names in recording order."""
        return [r["event"] for r in self._records]

    def get_records(self) -> list[dict[str, Any]]:
        return list(self._records)

    def clear(self) -> None:
        self._records.clear()


# ------------------------------------------------------------------
# Shared formatting functions
# ------------------------------------------------------------------

def print_header(title: str) -> None:
    """Print a section header."""
    print(f"\n{'#'*70}")
    print(f"# {title}")
    print(f"{'#'*70}")


def print_result(label: str, value: str, passed: bool = True) -> None:
    """Print a final result block with a pass/fail marker."""
    print(f"\n{'='*70}")
    print("RESULT")
    print(f"{'='*70}")
    print(f"{label}: {value}")

    status = "PASS" if passed else "FAIL"
    marker = "[OK]" if passed else "[ERROR]"
    print(f"Verification: {marker} {status}")
    print(f"{'='*70}")
