"""
MessageId Value Object
"""

from dataclasses import dataclass
from uuid import UUID, uuid4


@dataclass(frozen=True)
class MessageId:
    value: str

    def __post_init__(self):
        if not self.value:
            raise ValueError("MessageId cannot be empty")

        UUID(self.value)  # Validate UUID format

    @classmethod
    def generate(cls) -> "MessageId":
        return cls(str(uuid4()))

    def __str__(self) -> str:
        return self.value
