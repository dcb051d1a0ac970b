"""
Status Logger - keeps a leveled log of what a script run did.

SRP: This class has one responsibility - recording and echoing log lines.
"""

import threading
from datetime import datetime
from typing import List, Optional, TextIO
from dataclasses import dataclass


@dataclass
class LogEntry:
    """A single log entry."""
    timestamp: datetime
    message: str
    level: str = "INFO"

    def __str__(self) -> str:
        time_str = self.timestamp.strftime("%H:%M:%S")
        return f"[{time_str}] {self.level}: {self.message}"


class StatusLogger:
    """
    Collects log entries from the engine and the desktop collaborators.

    Entries are written from both the engine worker and the Tk thread, so
    appends are serialized with a lock.
    """

    def __init__(self, max_entries: int = 500, echo: Optional[TextIO] = None):
        """
        Initialize the logger.

        Args:
            max_entries: Maximum number of log entries to keep in memory
            echo: Optional stream every entry is printed to as it arrives
        """
        self._log_entries: List[LogEntry] = []
        self._max_entries = max_entries
        self._echo = echo
        self._lock = threading.Lock()

    def log_debug(self, message: str) -> None:
        """Log a debug message."""
        self._add_entry(message, "DEBUG")

    def log_info(self, message: str) -> None:
        """Log an informational message."""
        self._add_entry(message, "INFO")

    def log_warning(self, message: str) -> None:
        """Log a warning message."""
        self._add_entry(message, "WARNING")

    def log_error(self, message: str) -> None:
        """Log an error message."""
        self._add_entry(message, "ERROR")

    def get_recent_logs(self, count: int = 10) -> List[LogEntry]:
        """
        Get the most recent log entries.

        Args:
            count: Number of recent entries to return

        Returns:
            List of recent log entries
        """
        with self._lock:
            return self._log_entries[-count:]

    def get_all_logs(self) -> List[LogEntry]:
        """Returns all log entries."""
        with self._lock:
            return self._log_entries.copy()

    def messages(self, level: Optional[str] = None) -> List[str]:
        """Return the plain messages, optionally filtered by level."""
        return [e.message for e in self.get_all_logs() if level is None or e.level == level]

    def _add_entry(self, message: str, level: str) -> None:
        entry = LogEntry(
            timestamp=datetime.now(),
            message=message,
            level=level
        )

        with self._lock:
            self._log_entries.append(entry)

            # Trim old entries if we exceed max
            if len(self._log_entries) > self._max_entries:
                self._log_entries = self._log_entries[-self._max_entries:]

            if self._echo is not None:
                print(entry, file=self._echo, flush=True)
