"""
Messaging policy - who may message whom.

Assignment is a directed link stored on the employee record (assigned_hr,
assigned_pm point from an employee up to their HR / PM), so each rule reads
the link from whichever side holds it.
"""

from portal_chat.domain.entities.employee import Employee
from portal_chat.domain.value_objects.role import Role

_DIRECTOR_AUDIENCE = {Role.HR, Role.PROJECT_MANAGER, Role.EMPLOYEE}


def can_message(sender: Employee, recipient: Employee) -> bool:
    if sender is None or recipient is None:
        return False
    if sender.id == recipient.id:
        return False

    if sender.role is Role.DIRECTOR:
        return recipient.role in _DIRECTOR_AUDIENCE

    if sender.role is Role.HR:
        if recipient.role is Role.DIRECTOR:
            return True
        if recipient.role is Role.EMPLOYEE:
            return recipient.assigned_hr == sender.id
        return False

    if sender.role is Role.PROJECT_MANAGER:
        if recipient.role is Role.DIRECTOR:
            return True
        if recipient.role is Role.EMPLOYEE:
            return recipient.assigned_pm == sender.id
        return False

    if sender.role is Role.EMPLOYEE:
        if recipient.role is Role.DIRECTOR:
            return True
        if recipient.role is Role.HR:
            return sender.assigned_hr == recipient.id
        if recipient.role is Role.PROJECT_MANAGER:
            return sender.assigned_pm == recipient.id
        return False

    return False


def can_view(a: Employee, b: Employee) -> bool:
    """A conversation stays visible while either direction is allowed."""
    return can_message(a, b) or can_message(b, a)
