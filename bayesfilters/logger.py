"""Mix-in that writes numeric data to a set of text log files."""

from __future__ import annotations

import logging

import numpy as np

_LOG = logging.getLogger(__name__)


class Logger:
    """Write rows of numbers to one ``.txt`` file per name from ``log_file_names``.

    Subclasses override :meth:`log_file_names` to choose the files and
    :meth:`log` to decide what to write through :meth:`logger`.
    """

    _log_enabled = False
    _folder_path = ""
    _file_name_prefix = ""
    _log_files: tuple = ()
    _log_names: tuple = ()

    @property
    def log_enabled(self) -> bool:
        return self._log_enabled

    @property
    def folder_path(self) -> str:
        return self._folder_path

    @property
    def file_name_prefix(self) -> str:
        return self._file_name_prefix

    @property
    def file_names(self) -> tuple:
        return self._log_names

    def enable_log(self, folder_path: str, file_name_prefix: str) -> bool:
        """Open the log files in append mode; return whether logging started."""
        if self._log_enabled:
            return False

        names = list(self.log_file_names(folder_path, file_name_prefix))
        if not names:
            _LOG.warning("Log facility could not be started due to missing file names.")
            return False

        self._folder_path = folder_path
        self._file_name_prefix = file_name_prefix

        files = []
        for name in names:
            try:
                files.append(open(name + ".txt", "a", encoding="utf-8"))
            except OSError:
                _LOG.warning("Log facility could not be started for file %s.txt.", name)
                for handle in files:
                    handle.close()
                return False

        self._log_files = tuple(files)
        self._log_names = tuple(names)
        self._log_enabled = True
        return True

    def disable_log(self) -> bool:
        """Close the log files; return whether logging was enabled."""
        if not self._log_enabled:
            return False
        for handle in self._log_files:
            handle.close()
        self._log_files = ()
        self._log_names = ()
        self._log_enabled = False
        return True

    def log_file_names(self, folder_path: str, file_name_prefix: str) -> list[str]:
        """Names of the log files, without extension. None by default."""
        _LOG.warning("Log file names were not provided. Did you override `log_file_names()`?")
        return []

    def log(self) -> None:
        """Write the current data to the log files.

        By default there is no data of its own to write, so only pending
        output in the open files is flushed.
        """
        for handle in self._log_files:
            handle.flush()

    def logger(self, *args) -> None:
        """Write each argument, as rows of space-separated numbers, to its file."""
        if not self._log_enabled:
            return
        if len(args) != len(self._log_files):
            raise ValueError(
                f"expected {len(self._log_files)} items to log, got {len(args)}"
            )
        for handle, data in zip(self._log_files, args):
            for row in np.atleast_2d(np.asarray(data, dtype=float)):
                handle.write(" ".join(repr(float(x)) for x in row) + "\n")
            handle.flush()