"""
Render Log

Every render writes one entry to its own log (not to a central logging system).

Design:
- Logs stored in TSV files (human-readable, grep-able)
- Append-only (immutable history)
- Each logger has its own directory: logs/{name}/log.tsv
- Log rotation when file exceeds size limit
- Query logs with filters (level, custom fields)

Request handlers run concurrently, so writes go through a per-logger lock.
"""

import csv
import hashlib
import itertools
import threading
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Union


BASE_FIELDS = ['entry_id', 'timestamp', 'level', 'message']


class RenderLogger:
    """
    TSV logger for render outcomes.

    Entries are stored in:
    logs/{name}/log.tsv
    """

    def __init__(
        self,
        name: str,
        base_dir: Path | str,
        max_log_size: Optional[int] = None,
    ):
        """
        Initialize render logger.

        Args:
            name: Logger name (e.g., 'ssr', 'pages')
            base_dir: Base directory for log storage
            max_log_size: Maximum log file size in bytes before rotation
                         (default: 10MB)
        """
        self.name = name
        self.base_dir = Path(base_dir)
        self.max_log_size = max_log_size or (10 * 1024 * 1024)  # 10MB default

        self.log_dir = self.base_dir / 'logs' / name
        self.log_dir.mkdir(parents=True, exist_ok=True)

        self.log_file = self.log_dir / 'log.tsv'

        self._lock = threading.Lock()
        self._counter = itertools.count()

    def log(self, level: str, message: str, **kwargs) -> None:
        """
        Append an entry.

        Args:
            level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            message: Log message
            **kwargs: Additional fields to log (tag, duration_ms, path, etc.)
        """
        with self._lock:
            self._rotate_if_needed()

            timestamp = datetime.now().isoformat()
            entry = {
                'entry_id': self._generate_entry_id(timestamp, level, message),
                'timestamp': timestamp,
                'level': level,
                'message': _single_line(message),
                **{k: _single_line(v) for k, v in kwargs.items()},
            }

            # Don't log empty fields
            entry = {k: v for k, v in entry.items() if v is not None}

            fieldnames = self._get_fieldnames()
            new_fields = [key for key in entry if key not in fieldnames]

            if new_fields and self.log_file.exists():
                # Header changes: rewrite the file with the widened header
                self._rewrite_with_fields(fieldnames + new_fields)
            fieldnames = fieldnames + new_fields

            is_new_file = not self.log_file.exists()

            with open(self.log_file, 'a', newline='', encoding='utf-8') as f:
                writer = csv.DictWriter(f, fieldnames=fieldnames, delimiter='\t')

                if is_new_file:
                    writer.writeheader()

                writer.writerow(entry)

    def debug(self, message: str, **kwargs) -> None:
        """Log DEBUG level message"""
        self.log('DEBUG', message, **kwargs)

    def info(self, message: str, **kwargs) -> None:
        """Log INFO level message"""
        self.log('INFO', message, **kwargs)

    def warning(self, message: str, **kwargs) -> None:
        """Log WARNING level message"""
        self.log('WARNING', message, **kwargs)

    def error(self, message: str, **kwargs) -> None:
        """Log ERROR level message"""
        self.log('ERROR', message, **kwargs)

    def critical(self, message: str, **kwargs) -> None:
        """Log CRITICAL level message"""
        self.log('CRITICAL', message, **kwargs)

    def get_logs(
        self,
        level: Optional[Union[str, List[str]]] = None,
        limit: Optional[int] = None,
        offset: int = 0,
        **filters,
    ) -> List[Dict[str, Any]]:
        """
        Get log entries, oldest first.

        Args:
            level: Filter by level (string or list of strings)
            limit: Maximum number of entries to return
            offset: Number of entries to skip
            **filters: Additional filters (e.g., tag='BundleCompileError')

        Returns:
            List of log entries (dictionaries)
        """
        entries = []

        # Rotated files hold older entries
        for rotated_file in sorted(self.log_dir.glob('log-*.tsv')):
            entries.extend(self._read(rotated_file))

        if self.log_file.exists():
            entries.extend(self._read(self.log_file))

        if level is not None:
            if isinstance(level, str):
                level = [level]
            entries = [e for e in entries if e.get('level') in level]

        for key, value in filters.items():
            entries = [e for e in entries if e.get(key) == str(value)]

        if offset > 0:
            entries = entries[offset:]

        if limit is not None:
            entries = entries[:limit]

        return entries

    def clear(self) -> None:
        """Remove the current and rotated log files"""
        with self._lock:
            for path in self.log_dir.glob('log*.tsv'):
                path.unlink()

    def _read(self, path: Path) -> List[Dict[str, Any]]:
        with open(path, 'r', newline='', encoding='utf-8') as f:
            reader = csv.DictReader(f, delimiter='\t')
            return [
                {k: v for k, v in row.items() if v != ''}
                for row in reader
            ]

    def _get_fieldnames(self) -> List[str]:
        """Get existing fieldnames from log file"""
        if not self.log_file.exists():
            return list(BASE_FIELDS)

        with open(self.log_file, 'r', newline='', encoding='utf-8') as f:
            reader = csv.DictReader(f, delimiter='\t')
            return list(reader.fieldnames or BASE_FIELDS)

    def _rewrite_with_fields(self, fieldnames: List[str]) -> None:
        rows = self._read(self.log_file)
        with open(self.log_file, 'w', newline='', encoding='utf-8') as f:
            writer = csv.DictWriter(f, fieldnames=fieldnames, delimiter='\t')
            writer.writeheader()
            writer.writerows(rows)

    def _rotate_if_needed(self) -> None:
        """Rotate log file if it exceeds max size"""
        if not self.log_file.exists():
            return

        if self.log_file.stat().st_size < self.max_log_size:
            return

        # Rotate: rename current log to log-TIMESTAMP.tsv
        timestamp = datetime.now().strftime('%Y%m%d-%H%M%S-%f')
        rotated_name = self.log_dir / f'log-{timestamp}.tsv'
        suffix = 1
        while rotated_name.exists():
            rotated_name = self.log_dir / f'log-{timestamp}-{suffix}.tsv'
            suffix += 1

        self.log_file.rename(rotated_name)

        # Next log() call will create new log.tsv with header

    def _generate_entry_id(self, timestamp: str, level: str, message: str) -> str:
        """
        Generate unique entry ID.

        Hash of timestamp + logger name + message + a per-logger sequence number.
        """
        content = f"{timestamp}:{self.name}:{level}:{message}:{next(self._counter)}"
        return hashlib.sha256(content.encode()).hexdigest()[:16]


def _single_line(value: Any) -> Any:
    """Engine messages carry stack traces; keep one entry per TSV row"""
    if value is None:
        return None
    return ' | '.join(str(value).splitlines())
