#!/usr/bin/env python3
"""
Detect content changes to the watched log file.

The watcher polls a fingerprint made of the modification time, size and a
SHA-256 digest of the content. A change is reported once the fingerprint has
stayed stable for the debounce window, so the several writes an editor makes
while saving collapse into one reload.
"""

from __future__ import annotations

import hashlib
import logging
import os
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Fingerprint:
    mtime_ns: int
    size: int
    digest: str


def _digest(path: Path) -> Optional[str]:
    try:
        with open(path, "rb") as handle:
            return hashlib.sha256(handle.read()).hexdigest()
    except OSError:
        return None


class FileWatcher:
    """
    Poll a file and report debounced content changes.

    Parameters
    ----------
    path : Path
        File to watch.
    debounce_seconds : float, optional
        Quiet time required before a change is reported.
    clock : Callable[[], float], optional
        Monotonic clock, replaceable in tests.
    """

    def __init__(
        self,
        path: Path,
        debounce_seconds: float = 0.2,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.path = Path(path)
        self.debounce_seconds = debounce_seconds
        self.clock = clock
        self._baseline: Optional[Fingerprint] = None
        self._candidate: Optional[Fingerprint] = None
        self._candidate_since = 0.0
        self._pending = False
        self._cached: Optional[Fingerprint] = None

    def fingerprint(self) -> Optional[Fingerprint]:
        """
        Return the current fingerprint, or None when the file is unreadable.
        """
        try:
            stat = os.stat(self.path)
        except OSError:
            self._cached = None
            return None
        cached = self._cached
        if cached and cached.mtime_ns == stat.st_mtime_ns and cached.size == stat.st_size:
            return cached
        digest = _digest(self.path)
        if digest is None:
            self._cached = None
            return None
        self._cached = Fingerprint(stat.st_mtime_ns, stat.st_size, digest)
        return self._cached

    def rehash(self) -> None:
        """
        Drop the cached digest so the next check reads the content again.

        Between calls the digest is reused while mtime and size are unchanged,
        so a same-size rewrite within one timestamp tick goes unnoticed until
        the next rehash.
        """
        self._cached = None

    def acknowledge(self) -> None:
        """
        Accept the file's current state as seen.

        Called right before the file is read, including after the program's
        own writes, so reading back a write never triggers another reload.
        """
        self._baseline = self.fingerprint()
        self._candidate = None
        self._pending = False

    def _changed(self, current: Optional[Fingerprint]) -> bool:
        baseline = self._baseline
        if baseline is None or current is None:
            return baseline != current
        # Touching a file without changing its bytes is not a content change.
        return baseline.digest != current.digest

    def poll(self) -> bool:
        """
        Check the file once.

        Returns
        -------
        bool
            True exactly once per settled burst of changes.
        """
        current = self.fingerprint()
        now = self.clock()
        if not self._changed(current):
            self._candidate = None
            self._pending = False
            return False
        if not self._pending or current != self._candidate:
            self._candidate = current
            self._candidate_since = now
            self._pending = True
            return False
        if now - self._candidate_since < self.debounce_seconds:
            return False
        logger.debug("change detected in %s", self.path)
        self._baseline = current
        self._candidate = None
        self._pending = False
        return True
