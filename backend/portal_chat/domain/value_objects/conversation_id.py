"""
ConversationId Value Object - UUID wrapper for conversation identity.
"""

from dataclasses import dataclass
from uuid import UUID, uuid4


@dataclass(frozen=True)
class ConversationId:
    value: str  # presented as UUID string

    def __post_init__(self):
        if not self._is_valid_uuid(self.value):
            raise ValueError(f"Invalid conversation ID (UUID): {self.value}")

    def _is_valid_uuid(self, value: str) -> bool:
        """Check if string is a valid UUID."""
        try:
            UUID(value)
            return True
        except (TypeError, ValueError, AttributeError):
            return False

    @classmethod
    def generate(cls) -> "ConversationId":
        return cls(str(uuid4()))

    def __str__(self) -> str:
        return self.value
