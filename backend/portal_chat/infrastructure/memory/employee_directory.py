"""
JSON-file Employee Directory.

Loads a snapshot of the HR directory from a JSON file. The file holds a list
of records (or {"employees": [...]}) with the fields
  id, name, role, assignedHr, assignedPm
"""

import json
import logging
from typing import Iterable, Optional

from portal_chat.domain.entities.employee import Employee
from portal_chat.domain.ports.repositories import EmployeeDirectory
from portal_chat.domain.value_objects.employee_id import EmployeeId

logger = logging.getLogger(__name__)


class InMemoryEmployeeDirectory(EmployeeDirectory):
    def __init__(self, employees: Iterable[Employee] = ()):
        self._employees: dict[EmployeeId, Employee] = {}
        for employee in employees:
            self.upsert(employee)

    @classmethod
    def from_records(cls, records: Iterable[dict]) -> "InMemoryEmployeeDirectory":
        return cls(
            Employee.from_record(
                id=record.get("id") or record.get("_id"),
                role=record.get("role"),
                name=record.get("name"),
                assigned_hr=record.get("assignedHr"),
                assigned_pm=record.get("assignedPm"),
            )
            for record in records
        )

    @classmethod
    def from_json_file(cls, path: str) -> "InMemoryEmployeeDirectory":
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            logger.warning(f"[Directory] {path} not found, starting empty")
            return cls()

        records = data.get("employees", []) if isinstance(data, dict) else data
        directory = cls.from_records(records)
        logger.info(f"[Directory] Loaded {len(directory)} employees from {path}")
        return directory

    def upsert(self, employee: Employee) -> None:
        """Replace a record, e.g. when an employee is reassigned."""
        self._employees[employee.id] = employee

    def __len__(self) -> int:
        return len(self._employees)

    async def get_by_id(self, employee_id: EmployeeId) -> Optional[Employee]:
        return self._employees.get(employee_id)
