"""
Employee Directory Port - read-only employee lookup owned by the HR directory.
Implementations:
  portal_chat/infrastructure/memory/employee_directory.py
  portal_chat/infrastructure/persistence/prisma_employee_directory.py
"""

from abc import ABC, abstractmethod
from typing import Iterable, Optional

from portal_chat.domain.entities.employee import Employee
from portal_chat.domain.value_objects.employee_id import EmployeeId


class EmployeeDirectory(ABC):
    @abstractmethod
    async def get_by_id(self, employee_id: EmployeeId) -> Optional[Employee]: ...

    async def get_many(
        self, employee_ids: Iterable[EmployeeId]
    ) -> dict[EmployeeId, Employee]:
        found = {}
        for employee_id in set(employee_ids):
            employee = await self.get_by_id(employee_id)
            if employee:
                found[employee_id] = employee
        return found
