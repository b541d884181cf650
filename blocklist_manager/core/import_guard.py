# blocklist_manager/core/import_guard.py
import threading
from typing import Optional


class Permit:
    """
    Token for holding the import guard.

    Released when its ``with`` block exits, whatever the exit path.
    Releasing twice is a no-op.
    """

    def __init__(self, lock: threading.Lock):
        self._lock = lock
        self._released = False

    @property
    def released(self) -> bool:
        return self._released

    def release(self) -> None:
        if self._released:
            return
        self._released = True
        self._lock.release()

    def __enter__(self) -> "Permit":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()


class ImportGuard:
    """
    Single-slot guard admitting at most one import job.

    Only ever acquired non-blocking: callers see busy or free, nobody waits.
    One instance per application, handed to whoever needs it.
    """

    def __init__(self):
        self._lock = threading.Lock()

    def try_acquire(self) -> Optional[Permit]:
        if not self._lock.acquire(blocking=False):
            return None
        return Permit(self._lock)

    def locked(self) -> bool:
        return self._lock.locked()
