"""
Role Value Object - the closed set of portal roles.

Stored role strings are matched case-insensitively; anything outside the
set parses to None and is treated as having no messaging rights.
"""

from enum import Enum
from typing import Optional


class Role(str, Enum):
    DIRECTOR = "director"
    HR = "hr"
    PROJECT_MANAGER = "project managers"
    EMPLOYEE = "employee"

    @classmethod
    def parse(cls, raw: Optional[str]) -> Optional["Role"]:
        if not isinstance(raw, str):
            return None
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return None
