"""
EmployeeId Value Object - identity issued by the employee directory.
"""

from dataclasses import dataclass


@dataclass(frozen=True, order=True)
class EmployeeId:
    value: str

    def __post_init__(self):
        if not isinstance(self.value, str) or not self.value.strip():
            raise ValueError("EmployeeId cannot be empty")

    def __str__(self) -> str:
        return self.value
