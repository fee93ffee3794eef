# Copyright (C) 2025 Richard Owen
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.
"""Structured logging utilities used to trace event consolidation."""
from __future__ import annotations

import time
from collections import deque
from pathlib import Path
from threading import Lock
from typing import Any, Deque, List, Optional, TextIO, Tuple


class ConsolidationDebugger:
    """Helper object that streams consolidation decisions to disk.

    Parameters
    ----------
    output_dir : str, default="debug_logs"
        Directory where new session logs are created; created automatically when missing.
    """

    def __init__(self, output_dir: str = "debug_logs") -> None:
        """Initialise the debugger and start the first logging session.

        Parameters
        ----------
        output_dir : str
            Filesystem directory where log files are created or appended.
        """
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.log_file: Optional[TextIO] = None
        self.session_start = time.strftime("%Y%m%d_%H%M%S")
        self._lock = Lock()
        self._line_number = 1
        self._recent_events: Deque[Tuple[int, str]] = deque(maxlen=200)
        self.start_new_session()

    def __enter__(self) -> "ConsolidationDebugger":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def log_path(self) -> Path:
        """Return the file the current session writes to."""
        return self.output_dir / f"consolidation_debug_{self.session_start}.txt"

    def start_new_session(self) -> None:
        """Start a new debug logging session."""
        if self.log_file:
            self.log_file.close()

        self.log_file = open(self.log_path, "w", encoding="utf-8")
        self.log_file.write(f"=== Consolidation Debug Session: {time.strftime('%Y-%m-%d %H:%M:%S')} ===\n\n")

    def log_group_opened(self, kind: str, correlation_id: str, source_index: int) -> None:
        """Log the creation of a correlation group.

        Parameters
        ----------
        kind : str
            Group variant, ``"substitution"`` or ``"position"``.
        correlation_id : str
            Key of the new group.
        source_index : int
            Input position of the record that opened the group.
        """
        self._write_log("GROUP_OPENED", f"Kind: {kind} | Correlation: {correlation_id} | Source: #{source_index}")

    def log_pass_through(self, source_index: int, event_type: str, correlation_id: Optional[str] = None) -> None:
        """Log a record emitted without merging.

        Parameters
        ----------
        source_index : int
            Input position of the record.
        event_type : str
            Storage-level type of the record.
        correlation_id : str | None
            Correlation id carried by the record, if any.
        """
        correlation_str = f" | Correlation: {correlation_id}" if correlation_id else ""
        self._write_log("PASS_THROUGH", f"Source: #{source_index} | Type: {event_type}{correlation_str}")

    def log_composite(self, event_type: str, correlation_id: str, member_count: int) -> None:
        """Log a composite event synthesised from a group.

        Parameters
        ----------
        event_type : str
            Type assigned to the composite event.
        correlation_id : str
            Key of the group that produced it.
        member_count : int
            Number of raw records merged into the composite.
        """
        self._write_log(
            "COMPOSITE",
            f"Type: {event_type} | Correlation: {correlation_id} | Members: {member_count}",
        )

    def log_unparseable_timestamp(self, source_index: Optional[int], value: Any) -> None:
        """Log a ``created_at`` value that could not be parsed.

        Parameters
        ----------
        source_index : int | None
            Input position of the offending record, when known.
        value : Any
            The raw ``created_at`` value.
        """
        source_str = f"#{source_index}" if source_index is not None else "?"
        self._write_log("BAD_TIMESTAMP", f"Source: {source_str} | Value: {value!r}")

    def log_error(self, error_type: str, description: str) -> None:
        """Log an error or warning.

        Parameters
        ----------
        error_type : str
            Label describing the error classification.
        description : str
            Human-readable explanation of the issue.
        """
        self._write_log("ERROR", f"Type: {error_type} | Details: {description}")

    def _write_log(self, event_type: str, details: str) -> None:
        """Write a log entry to the file.

        Parameters
        ----------
        event_type : str
            Category label for the log entry.
        details : str
            Formatted message body to persist.
        """
        timestamp = time.strftime("%H:%M:%S")
        log_entry = f"[{timestamp}] {event_type}: {details}"

        with self._lock:
            line_no = self._line_number
            self._line_number += 1
            self._recent_events.append((line_no, log_entry))

            if self.log_file:
                self.log_file.write(f"{log_entry}\n")
                self.log_file.flush()

    def get_recent_events(self, limit: int = 20) -> List[str]:
        """Return the latest debug entries with line numbers.

        Parameters
        ----------
        limit : int
            Maximum number of entries to return.

        Returns
        -------
        List[str]
            Up to ``limit`` most recent log lines with prefixed line numbers.
        """
        with self._lock:
            selected = list(self._recent_events)[-limit:]
        return [f"{line_no:05d} {entry}" for line_no, entry in selected]

    def close(self) -> None:
        """Close the log file."""
        if self.log_file:
            self.log_file.close()
            self.log_file = None
