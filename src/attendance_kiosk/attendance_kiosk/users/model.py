from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Employee:
    """Domain entity: an employee known to the identity directory.

    Note: Plain data object; no DB access code here.
    """

    employee_id: str
    email: str
    full_name: str
    department: Optional[str] = None
    position: Optional[str] = None
    profile_image: Optional[str] = None

    def display(self) -> dict:
        return {
            "name": self.full_name,
            "department": self.department,
            "position": self.position,
            "profile_image": self.profile_image,
        }
