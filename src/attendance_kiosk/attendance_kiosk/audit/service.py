from __future__ import annotations

import logging
from concurrent.futures import Executor, Future
from typing import Any, Optional

from ..core.enums import Severity
from .model import ActivityAction, ActivityEntry
from .repository import ActivityLogRepository

logger = logging.getLogger(__name__)


class ActivityLogger:
    """Fire-and-forget writer for the activity log.

    With an executor the write runs in the background and the caller never
    waits for it; without one it runs inline. Either way a failing write is
    logged and dropped, never raised.
    """

    def __init__(self, logs: ActivityLogRepository, *, executor: Optional[Executor] = None):
        self._logs = logs
        self._executor = executor

    def record(
        self,
        action: ActivityAction,
        description: str,
        severity: Severity = Severity.INFO,
        metadata: Optional[dict[str, Any]] = None,
        *,
        employee_id: Optional[str] = None,
        employee_name: Optional[str] = None,
        scan_photo: Optional[str] = None,
    ) -> None:
        entry = ActivityEntry(
            action=action,
            description=description,
            severity=severity,
            employee_id=employee_id,
            employee_name=employee_name,
            metadata=dict(metadata or {}),
            scan_photo=scan_photo,
        )

        self._submit(self._write, entry, label=entry.action.value)

    def attach_photo(self, *, employee_id: str, action: ActivityAction, photo_ref: str) -> None:
        """Back-fill the photo of the employee's latest ``action`` entry."""
        self._submit(self._attach, employee_id, action, photo_ref, label=action.value)

    def _submit(self, fn, *args, label: str) -> None:
        if self._executor is None:
            fn(*args)
            return

        try:
            future = self._executor.submit(fn, *args)
        except RuntimeError:
            # Executor already shut down.
            logger.exception("Could not schedule activity log entry %s", label)
            return
        future.add_done_callback(_log_unexpected)

    def _write(self, entry: ActivityEntry) -> None:
        try:
            self._logs.create(entry)
        except Exception:
            logger.exception("Failed to log activity %s: %s", entry.action.value, entry.description)

    def _attach(self, employee_id: str, action: ActivityAction, photo_ref: str) -> None:
        try:
            found = self._logs.attach_scan_photo(employee_id=employee_id, action=action, photo_ref=photo_ref)
        except Exception:
            logger.exception("Failed to attach scan photo to %s of %s", action.value, employee_id)
            return
        if not found:
            logger.warning("No %s activity entry for %s to attach a photo to", action.value, employee_id)


def _log_unexpected(future: Future) -> None:
    exc = future.exception()
    if exc is not None:
        logger.error("Activity log task crashed: %r", exc)
