"""Message DTOs for API responses (camelCase on the wire)."""

from datetime import datetime
from typing import Mapping, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from portal_chat.application.queries.messages import ContactItem, UnreadItem, UnreadSummary
from portal_chat.domain.entities.employee import Employee
from portal_chat.domain.entities.message import Message
from portal_chat.domain.value_objects.employee_id import EmployeeId


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class EmployeeRefDTO(CamelModel):
    """Sender / recipient populated with the fields the chat UI shows."""

    id: str = Field(alias="_id")
    name: str = "Unknown"
    role: Optional[str] = None

    @classmethod
    def resolve(
        cls, employee_id: EmployeeId, employees: Mapping[EmployeeId, Employee]
    ) -> "EmployeeRefDTO":
        employee = employees.get(employee_id)
        if employee is None:
            return cls(id=employee_id.value)
        return cls(id=employee.id.value, name=employee.name, role=employee.role_label)


class MessageDTO(CamelModel):
    """DTO for message data returned to frontend."""

    id: str = Field(alias="_id")
    conversation_id: str
    from_: str = Field(alias="from")
    to: str
    text: str
    delivered: bool
    seen: bool
    created_at: datetime

    @classmethod
    def from_entity(cls, message: Message) -> "MessageDTO":
        return cls(
            id=message.id.value,
            conversation_id=message.conversation_id.value,
            from_=message.sender_id.value,
            to=message.recipient_id.value,
            text=message.text,
            delivered=message.delivered,
            seen=message.seen,
            created_at=message.created_at,
        )


class ThreadMessageDTO(MessageDTO):
    """Thread entry with from / to populated as {_id, name, role}."""

    from_: EmployeeRefDTO = Field(alias="from")
    to: EmployeeRefDTO

    @classmethod
    def from_entity_with(
        cls, message: Message, participants: Mapping[EmployeeId, Employee]
    ) -> "ThreadMessageDTO":
        return cls(
            id=message.id.value,
            conversation_id=message.conversation_id.value,
            from_=EmployeeRefDTO.resolve(message.sender_id, participants),
            to=EmployeeRefDTO.resolve(message.recipient_id, participants),
            text=message.text,
            delivered=message.delivered,
            seen=message.seen,
            created_at=message.created_at,
        )


class ContactDTO(CamelModel):
    conversation_id: str
    other_employee_id: str
    other_name: str
    other_role: str
    last_message: str = ""
    last_message_at: datetime
    unread_count: int = 0

    @classmethod
    def from_item(cls, item: ContactItem) -> "ContactDTO":
        return cls(
            conversation_id=item.conversation_id.value,
            other_employee_id=item.other_employee_id.value,
            other_name=item.other_name,
            other_role=item.other_role,
            last_message=item.last_message,
            last_message_at=item.last_message_at,
            unread_count=item.unread_count,
        )


class UnreadItemDTO(CamelModel):
    conversation_id: str
    unread_count: int
    last_message: str = ""
    last_message_at: datetime
    last_message_from: Optional[EmployeeRefDTO] = None

    @classmethod
    def from_item(cls, item: UnreadItem) -> "UnreadItemDTO":
        sender = None
        if item.last_message_from is not None:
            known = {item.sender.id: item.sender} if item.sender else {}
            sender = EmployeeRefDTO.resolve(item.last_message_from, known)
        return cls(
            conversation_id=item.conversation_id.value,
            unread_count=item.unread_count,
            last_message=item.last_message,
            last_message_at=item.last_message_at,
            last_message_from=sender,
        )


class UnreadSummaryDTO(CamelModel):
    total_unread: int
    items: list[UnreadItemDTO]

    @classmethod
    def from_summary(cls, summary: UnreadSummary) -> "UnreadSummaryDTO":
        return cls(
            total_unread=summary.total_unread,
            items=[UnreadItemDTO.from_item(item) for item in summary.items],
        )
