"""Active log file ownership and once-per-day rotation."""

import logging
import os
import shutil
import threading
from datetime import date, datetime

logger = logging.getLogger(__name__)

DATE_FORMAT = "%Y-%m-%d"
LINE_TIME_FORMAT = "%Y/%m/%d %H:%M:%S.%f"


class LineWriter:
    """Writes prefixed, timestamped lines to an open text stream."""

    def __init__(self, stream, prefix: str = "", clock=None):
        self._stream = stream
        self._prefix = prefix
        self._clock = clock or datetime.now

    def write(self, line: str):
        stamp = self._clock().strftime(LINE_TIME_FORMAT)
        text = f"{self._prefix}{stamp} {line}"
        self._stream.write(text if text.endswith("\n") else text + "\n")
        self._stream.flush()


class FileRotator:
    """Owns the active file, its LineWriter and the rotation anchor.

    The (file, line writer) pair is only ever swapped while ``_lock`` is
    held, so the writer thread never sees a half-rotated state. The anchor
    is the calendar day the active file belongs to.
    """

    def __init__(self, directory: str, file_name: str, prefix: str = "", clock=None):
        self._directory = directory
        self._file_name = file_name
        self._prefix = prefix
        self._clock = clock or datetime.now
        self._lock = threading.Lock()
        self._file = None
        self._writer: LineWriter | None = None
        self._anchor: date | None = None

    @property
    def active_path(self) -> str:
        return os.path.join(self._directory, self._file_name)

    @property
    def anchor(self) -> date | None:
        return self._anchor

    @property
    def is_open(self) -> bool:
        return self._file is not None

    def backup_path(self, day: date) -> str:
        return f"{self.active_path}.{day.strftime(DATE_FORMAT)}"

    def today(self) -> date:
        return self._clock().date()

    def initial_anchor(self) -> date:
        """Day of the existing active file's last write, or today if there is none."""
        today = self.today()
        try:
            mtime = os.path.getmtime(self.active_path)
        except OSError:
            return today
        return min(datetime.fromtimestamp(mtime).date(), today)

    def start(self):
        """Set the anchor and open the active file, rotating first if it is stale."""
        self._anchor = self.initial_anchor()
        self._ensure_directory()
        if self.is_rotation_due():
            self.rotate()
        else:
            with self._lock:
                self._open()

    def is_rotation_due(self) -> bool:
        anchor = self._anchor
        return anchor is not None and self.today() > anchor

    def rotate(self) -> str | None:
        """Archive the active file under the anchor's date and reopen a fresh one.

        Returns the backup path, or None when there was nothing to archive.
        The anchor always advances to today and the active path is always
        reopened, even if archiving fails; the archive error is then raised.
        """
        today = self.today()
        with self._lock:
            self._close()
            backup = self.backup_path(self._anchor or today)
            try:
                archived = self._archive(backup)
            finally:
                self._anchor = today
                self._open()
        if archived:
            logger.info("Rotated %s -> %s", self.active_path, backup)
            return backup
        return None

    def write_line(self, line: str):
        with self._lock:
            if self._writer is None:
                raise OSError(f"Log file {self.active_path} is not open")
            self._writer.write(line)

    def close(self):
        with self._lock:
            self._close()

    def _archive(self, backup: str) -> bool:
        """Move the active file to ``backup``. Must be called with _lock held."""
        if not os.path.exists(self.active_path):
            return False
        if os.path.exists(backup):
            # Same-day backup already present: append rather than overwrite it.
            with open(self.active_path, "rb") as f_in, open(backup, "ab") as f_out:
                shutil.copyfileobj(f_in, f_out)
            os.remove(self.active_path)
        else:
            os.rename(self.active_path, backup)
        return True

    def _ensure_directory(self):
        try:
            os.makedirs(self._directory, exist_ok=True)
        except OSError as exc:
            logger.warning("Create dir %s failed: %s", self._directory, exc)

    def _open(self):
        """Open the active path for appending. Must be called with _lock held."""
        # Lone surrogates (undecodable file names) are escaped, not fatal.
        self._file = open(self.active_path, "a", encoding="utf-8", errors="backslashreplace")
        self._writer = LineWriter(self._file, self._prefix, self._clock)

    def _close(self):
        """Must be called with _lock held."""
        if self._file is not None and not self._file.closed:
            self._file.close()
        self._file = None
        self._writer = None
