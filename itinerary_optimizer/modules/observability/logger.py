"""
Structured JSON logger for optimizer runs: append-only, one object per line.

Usage:
    from itinerary_optimizer.modules.observability.logger import StructuredLogger

    perf = StructuredLogger()
    perf.log("opt_3f9a1c", "PERFORMANCE", {"duration_ms": 41.2, "days": 3})

Records go to  <PERF_LOG_DIR>/<session_id>.jsonl  (default: logs/ under the
current working directory). Writing is skipped entirely when
PERF_LOGGING_ENABLED is false. Callers close a session once its records are in.
"""

from __future__ import annotations

import json
import os
import threading
from datetime import datetime, timezone
from pathlib import Path

from itinerary_optimizer import config


def default_logs_dir() -> Path:
    return Path(config.PERF_LOG_DIR) if config.PERF_LOG_DIR else Path.cwd() / "logs"


class StructuredLogger:
    """Thread-safe, append-only JSONL logger."""

    def __init__(
        self,
        logs_dir: Path | str | None = None,
        enabled: bool | None = None,
    ) -> None:
        self._logs_dir = Path(logs_dir) if logs_dir else default_logs_dir()
        self.enabled = config.PERF_LOGGING_ENABLED if enabled is None else enabled
        self._lock = threading.Lock()
        self._handles: dict[str, object] = {}  # session_id -> file handle

    # ── public API ────────────────────────────────────────────────────────

    def log(self, session_id: str, event_type: str, payload: dict) -> None:
        """Append one record to ``<session_id>.jsonl``."""
        if not self.enabled:
            return
        record = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "session_id": session_id,
            "event_type": event_type,
            "payload": payload,
        }
        line = json.dumps(record, default=str, ensure_ascii=False) + "\n"

        with self._lock:
            fh = self._handles.get(session_id) or self._open(session_id)
            fh.write(line)  # type: ignore[union-attr]
            fh.flush()  # type: ignore[union-attr]

    def close(self, session_id: str | None = None) -> None:
        with self._lock:
            if session_id:
                fh = self._handles.pop(session_id, None)
                if fh:
                    fh.close()  # type: ignore[union-attr]
                return
            for fh in self._handles.values():
                fh.close()  # type: ignore[union-attr]
            self._handles.clear()

    # ── internals ─────────────────────────────────────────────────────────

    def _open(self, session_id: str):  # noqa: ANN202
        os.makedirs(self._logs_dir, exist_ok=True)
        fh = open(self._logs_dir / f"{session_id}.jsonl", "a", encoding="utf-8")  # noqa: SIM115
        self._handles[session_id] = fh
        return fh
