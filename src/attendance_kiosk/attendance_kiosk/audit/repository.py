from __future__ import annotations

from typing import Protocol

from .model import ActivityAction, ActivityEntry


class ActivityLogRepository(Protocol):
    def create(self, entry: ActivityEntry) -> int:
        raise NotImplementedError

    def attach_scan_photo(self, *, employee_id: str, action: ActivityAction, photo_ref: str) -> bool:
        """Set ``scan_photo`` on the newest ``action`` entry of the employee.

        Returns False when there is no such entry.
        """

        raise NotImplementedError
