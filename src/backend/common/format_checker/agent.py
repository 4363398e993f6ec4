from __future__ import annotations

import logging
import os
import threading
from pathlib import Path
from typing import Optional

from .config import FormatCheckerConfiguration, load_configuration

LOGGER = logging.getLogger(__name__)


class ConfigAgent:
    """Holds the current configuration snapshot.

    Snapshots are immutable and replaced wholesale, so readers take the
    reference returned by ``config()`` without locking. Only writers serialize.
    """

    def __init__(self, config: Optional[FormatCheckerConfiguration] = None) -> None:
        self._config = config or FormatCheckerConfiguration()
        self._path: Optional[Path] = None
        self._mtime: Optional[float] = None
        self._write_lock = threading.Lock()

    def config(self) -> FormatCheckerConfiguration:
        return self._config

    def set(self, config: FormatCheckerConfiguration) -> None:
        with self._write_lock:
            self._config = config

    def load(self, path: str | Path) -> FormatCheckerConfiguration:
        """Load ``path`` and remember it for ``reload_if_changed``.

        Invalid files raise and leave the current snapshot in place.
        """
        path = Path(path)
        with self._write_lock:
            mtime = os.stat(path).st_mtime
            config = load_configuration(path)
            self._config = config
            self._path = path
            self._mtime = mtime
        LOGGER.info("Loaded format checker configuration from %s", path)
        return config

    def reload_if_changed(self) -> bool:
        if self._path is None:
            return False
        if os.stat(self._path).st_mtime == self._mtime:
            return False
        self.load(self._path)
        return True
