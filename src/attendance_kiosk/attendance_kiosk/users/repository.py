from __future__ import annotations

from typing import Optional, Protocol

from .model import Employee


class EmployeeRepository(Protocol):
    """Read-only view of the identity directory.

    Note (DIP): services depend on this interface, not on a concrete database.
    """

    def get_by_email(self, email: str) -> Optional[Employee]:
        raise NotImplementedError

    def get_by_id(self, employee_id: str) -> Optional[Employee]:
        raise NotImplementedError
