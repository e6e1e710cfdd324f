"""
Employee Entity - read-only view of a directory record.

Only the fields the messaging rules need: the role and the assignment
links that point from an employee up to their HR and project manager.
"""

from dataclasses import dataclass
from typing import Optional

from portal_chat.domain.value_objects.employee_id import EmployeeId
from portal_chat.domain.value_objects.role import Role


@dataclass(frozen=True)
class Employee:
    id: EmployeeId
    role: Optional[Role]
    name: str = "Unknown"
    assigned_hr: Optional[EmployeeId] = None
    assigned_pm: Optional[EmployeeId] = None

    @classmethod
    def from_record(
        cls,
        id: str,
        role: Optional[str],
        name: Optional[str] = None,
        assigned_hr: Optional[str] = None,
        assigned_pm: Optional[str] = None,
    ) -> "Employee":
        """Build an Employee from raw directory fields."""
        return cls(
            id=EmployeeId(str(id)),
            role=Role.parse(role),
            name=name or "Unknown",
            assigned_hr=EmployeeId(str(assigned_hr)) if assigned_hr else None,
            assigned_pm=EmployeeId(str(assigned_pm)) if assigned_pm else None,
        )

    @property
    def role_label(self) -> str:
        return self.role.value if self.role else "employee"
