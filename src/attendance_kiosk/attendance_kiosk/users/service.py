from __future__ import annotations

from ..common.validators import require_non_empty
from ..core.exceptions import EmployeeNotFoundError
from .model import Employee
from .repository import EmployeeRepository


class EmployeeDirectory:
    """Resolve a scanned code to an employee.

    The code is tried as an e-mail address first, then as an employee id.
    """

    def __init__(self, employees: EmployeeRepository):
        self._employees = employees

    def resolve(self, identifier: str) -> Employee:
        identifier = require_non_empty(identifier, "Email or employee ID")

        employee = self._employees.get_by_email(identifier)
        if employee is None:
            employee = self._employees.get_by_id(identifier)
        if employee is None:
            raise EmployeeNotFoundError("Employee not found")
        return employee
