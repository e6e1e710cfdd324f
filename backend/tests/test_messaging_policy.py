"""Tests for the role and assignment rules behind can_message / can_view."""

import pytest

from conftest import (
    DIRECTOR,
    EMPLOYEE,
    HR,
    OTHER_EMPLOYEE,
    OTHER_HR,
    PM,
    UNASSIGNED,
)
from portal_chat.domain.entities.employee import Employee
from portal_chat.domain.services.messaging_policy import can_message, can_view
from portal_chat.domain.value_objects.role import Role


def employee(id, role, assigned_hr=None, assigned_pm=None):
    return Employee.from_record(
        id=id, role=role, assigned_hr=assigned_hr, assigned_pm=assigned_pm
    )


DIRECTOR_E = employee(DIRECTOR, "director")
HR_E = employee(HR, "hr")
OTHER_HR_E = employee(OTHER_HR, "HR")
PM_E = employee(PM, "project managers")
EMPLOYEE_E = employee(EMPLOYEE, "employee", assigned_hr=HR, assigned_pm=PM)
OTHER_EMPLOYEE_E = employee(OTHER_EMPLOYEE, "employee", assigned_hr=OTHER_HR)
UNASSIGNED_E = employee(UNASSIGNED, "employee")


class TestRoleParsing:
    def test_roles_match_case_insensitively(self):
        assert Role.parse("Director") is Role.DIRECTOR
        assert Role.parse("  HR ") is Role.HR
        assert Role.parse("Project Managers") is Role.PROJECT_MANAGER

    def test_unknown_role_parses_to_none(self):
        assert Role.parse("contractor") is None
        assert Role.parse(None) is None


class TestCanMessage:
    @pytest.mark.parametrize(
        "recipient", [HR_E, PM_E, EMPLOYEE_E, UNASSIGNED_E], ids=lambda e: e.id.value
    )
    def test_director_reaches_every_other_role(self, recipient):
        assert can_message(DIRECTOR_E, recipient)

    def test_director_cannot_message_director(self):
        other_director = employee("dir-2", "director")
        assert not can_message(DIRECTOR_E, other_director)

    def test_everyone_reaches_the_director(self):
        for sender in (HR_E, PM_E, EMPLOYEE_E, UNASSIGNED_E):
            assert can_message(sender, DIRECTOR_E), sender.id

    def test_hr_reaches_only_assigned_employees(self):
        assert can_message(HR_E, EMPLOYEE_E)
        assert not can_message(HR_E, OTHER_EMPLOYEE_E)
        assert not can_message(HR_E, UNASSIGNED_E)

    def test_pm_reaches_only_assigned_employees(self):
        assert can_message(PM_E, EMPLOYEE_E)
        assert not can_message(PM_E, OTHER_EMPLOYEE_E)

    def test_employee_reaches_own_hr_and_pm(self):
        assert can_message(EMPLOYEE_E, HR_E)
        assert can_message(EMPLOYEE_E, PM_E)
        assert not can_message(EMPLOYEE_E, OTHER_HR_E)
        assert not can_message(OTHER_EMPLOYEE_E, PM_E)

    def test_peers_cannot_message_each_other(self):
        assert not can_message(HR_E, OTHER_HR_E)
        assert not can_message(HR_E, PM_E)
        assert not can_message(PM_E, HR_E)
        assert not can_message(EMPLOYEE_E, OTHER_EMPLOYEE_E)

    def test_self_and_missing_are_denied(self):
        assert not can_message(EMPLOYEE_E, EMPLOYEE_E)
        assert not can_message(DIRECTOR_E, None)
        assert not can_message(None, DIRECTOR_E)

    def test_unknown_role_has_no_rights(self):
        stranger = employee("x-1", "contractor", assigned_hr=HR)
        assert not can_message(stranger, HR_E)
        assert not can_message(stranger, DIRECTOR_E)
        assert not can_message(DIRECTOR_E, stranger)


class TestCanView:
    def test_view_allows_either_direction(self):
        assert can_view(HR_E, EMPLOYEE_E)
        assert can_view(EMPLOYEE_E, HR_E)
        assert can_view(DIRECTOR_E, PM_E)

    def test_view_denied_without_link(self):
        assert not can_view(HR_E, OTHER_EMPLOYEE_E)
        assert not can_view(OTHER_EMPLOYEE_E, HR_E)
