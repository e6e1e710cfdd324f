"""
Messages API Router - FastAPI endpoints for 1:1 employee chat.

- Receives handlers via Dependency Injection (Dishka)
- Thin layer: only handles HTTP concerns (request/response)
- Delegates business logic to Application layer handlers
- Maps domain exceptions to status codes

Flow:
  HTTP Request → Router → Command/Query → Handler → Repository / Publisher
                                      ↓
  HTTP Response ← Router ← Result ←
"""

from logging import getLogger
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, status
from dishka.integrations.fastapi import FromDishka, inject
from pydantic import Field
from portal_chat.application.commands.messages import (
    MarkSeenCommand,
    MarkSeenHandler,
    SendMessageCommand,
    SendMessageHandler,
)
from portal_chat.application.queries.messages import (
    GetThreadHandler,
    GetThreadQuery,
    GetUnreadSummaryHandler,
    GetUnreadSummaryQuery,
    ListContactsHandler,
    ListContactsQuery,
)
from portal_chat.application.dto.messages import (
    CamelModel,
    ContactDTO,
    MessageDTO,
    ThreadMessageDTO,
    UnreadSummaryDTO,
)
from portal_chat.domain.exceptions import (
    AccessDeniedError,
    DomainValidationError,
    EntityNotFoundError,
    RateLimitExceededError,
)
from portal_chat.domain.value_objects.conversation_id import ConversationId
from portal_chat.domain.value_objects.employee_id import EmployeeId
from portal_chat.presentation.dependencies.auth import AuthUser, get_current_user

logger = getLogger(__name__)


# ==================== REQUEST/RESPONSE MODELS ====================


class SendMessageRequest(CamelModel):
    """
    Request body for sending a message.

    {"toEmployeeId": "...", "text": "..."}  ("content" is accepted too)
    """

    to_employee_id: str = Field(min_length=1)
    text: Optional[str] = None
    content: Optional[str] = None


class SendMessageResponse(CamelModel):
    message: str = "Message sent"
    data: MessageDTO
    conversation_id: str


class MarkSeenResponse(CamelModel):
    message: str = "Messages marked as seen"
    marked: int


# ==================== ROUTER ====================

router = APIRouter(prefix="/messages", tags=["messages"])


def _conversation_id(raw: str) -> ConversationId:
    try:
        return ConversationId(raw)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Conversation not found"
        ) from e


# ==================== ENDPOINTS ====================


@router.post(
    "",
    response_model=SendMessageResponse,
    status_code=status.HTTP_201_CREATED,
)
@inject
async def send_message(
    request: SendMessageRequest,
    handler: FromDishka[SendMessageHandler],
    current_user: AuthUser = Depends(get_current_user),
):
    """Send a 1:1 message to another employee."""
    try:
        recipient_id = EmployeeId(request.to_employee_id)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing sender or recipient",
        ) from e

    text = request.text if request.text is not None else request.content
    command = SendMessageCommand(
        sender_id=current_user.employee_id,
        recipient_id=recipient_id,
        text=text or "",
    )
    try:
        result = await handler.execute(command)
    except RateLimitExceededError as e:
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS, detail=str(e)
        ) from e
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except AccessDeniedError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e)) from e
    except DomainValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=e.message
        ) from e

    return SendMessageResponse(
        data=MessageDTO.from_entity(result.message),
        conversation_id=result.conversation.id.value,
    )


@router.get(
    "/contacts",
    response_model=list[ContactDTO],
    status_code=status.HTTP_200_OK,
)
@inject
async def list_contacts(
    handler: FromDishka[ListContactsHandler],
    current_user: AuthUser = Depends(get_current_user),
):
    """List the caller's conversations, most recent first."""
    try:
        contacts = await handler.execute(
            ListContactsQuery(employee_id=current_user.employee_id)
        )
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e

    return [ContactDTO.from_item(item) for item in contacts]


@router.get(
    "/thread/{conversation_id}",
    response_model=list[ThreadMessageDTO],
    status_code=status.HTTP_200_OK,
)
@inject
async def get_thread(
    conversation_id: str,
    handler: FromDishka[GetThreadHandler],
    current_user: AuthUser = Depends(get_current_user),
):
    """Full message history of a conversation, oldest first."""
    query = GetThreadQuery(
        employee_id=current_user.employee_id,
        conversation_id=_conversation_id(conversation_id),
    )
    try:
        result = await handler.execute(query)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except AccessDeniedError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e)) from e

    return [
        ThreadMessageDTO.from_entity_with(message, result.participants)
        for message in result.messages
    ]


@router.post(
    "/{conversation_id}/mark-seen",
    response_model=MarkSeenResponse,
    status_code=status.HTTP_200_OK,
)
@inject
async def mark_seen(
    conversation_id: str,
    handler: FromDishka[MarkSeenHandler],
    current_user: AuthUser = Depends(get_current_user),
):
    """Mark every message the caller received in the conversation as seen."""
    command = MarkSeenCommand(
        employee_id=current_user.employee_id,
        conversation_id=_conversation_id(conversation_id),
    )
    try:
        result = await handler.execute(command)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except AccessDeniedError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e)) from e

    return MarkSeenResponse(marked=result.marked)


@router.get(
    "/unread-summary",
    response_model=UnreadSummaryDTO,
    status_code=status.HTTP_200_OK,
)
@inject
async def unread_summary(
    handler: FromDishka[GetUnreadSummaryHandler],
    current_user: AuthUser = Depends(get_current_user),
):
    """Unread totals for the header and sidebar badges."""
    try:
        summary = await handler.execute(
            GetUnreadSummaryQuery(employee_id=current_user.employee_id)
        )
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e

    return UnreadSummaryDTO.from_summary(summary)
