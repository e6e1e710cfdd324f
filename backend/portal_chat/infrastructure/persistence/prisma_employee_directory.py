"""Prisma Employee Directory - reads the portal's employees table."""

from typing import Iterable, Optional
from prisma import Prisma
from prisma.models import Employee as PrismaEmployee
from portal_chat.domain.entities.employee import Employee
from portal_chat.domain.ports.repositories import EmployeeDirectory
from portal_chat.domain.value_objects.employee_id import EmployeeId


class PrismaEmployeeDirectory(EmployeeDirectory):
    _prisma: Prisma

    def __init__(self, prisma: Prisma):
        self._prisma = prisma

    def _to_entity(self, record: PrismaEmployee) -> Employee:
        return Employee.from_record(
            id=record.id,
            role=record.role,
            name=record.name,
            assigned_hr=record.assigned_hr,
            assigned_pm=record.assigned_pm,
        )

    async def get_by_id(self, employee_id: EmployeeId) -> Optional[Employee]:
        record = await self._prisma.employee.find_unique(
            where={"id": employee_id.value}
        )
        return self._to_entity(record) if record else None

    async def get_many(
        self, employee_ids: Iterable[EmployeeId]
    ) -> dict[EmployeeId, Employee]:
        ids = sorted({e.value for e in employee_ids})
        if not ids:
            return {}
        records = await self._prisma.employee.find_many(where={"id": {"in": ids}})
        employees = [self._to_entity(r) for r in records]
        return {e.id: e for e in employees}
