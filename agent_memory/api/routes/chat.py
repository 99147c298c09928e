from datetime import datetime, timezone
from typing import Annotated

from fastapi import APIRouter, Depends, Header, Request, Response

from agent_memory.adapters.rate_limit.base import AbstractRateLimiter
from agent_memory.api.dependencies import get_chat_service, get_rate_limiter
from agent_memory.core.config import settings
from agent_memory.core.errors import ValidationAppError
from agent_memory.core.rate_limit import apply_rate_limit
from agent_memory.schemas.chat import ChatRequest, ChatResponse
from agent_memory.services.chat_service import ChatService

router = APIRouter(tags=["Chat"])


@router.post("/chat", response_model=ChatResponse)
async def chat(
    request: Request,
    response: Response,
    body: ChatRequest,
    chat_service: Annotated[ChatService, Depends(get_chat_service)],
    limiter: Annotated[AbstractRateLimiter, Depends(get_rate_limiter)],
    x_session_id: Annotated[str | None, Header(alias="X-Session-ID")] = None,
) -> ChatResponse:
    """Reply to a user message as an agent.

    The caller is rate limited by the ``X-Session-ID`` header, or by the body
    ``sessionId`` when no header is sent. When ``agentId`` is given, the
    agent's most relevant memories are added to the prompt and the message is
    remembered afterwards.

    Raises:
        RateLimitExceeded: 429 if the caller is over budget.
        ValidationAppError: 400 if the message exceeds the configured length.
    """
    apply_rate_limit(request, response, limiter, x_session_id or body.session_id)

    if len(body.message) > settings.app.max_chat_chars:
        raise ValidationAppError(
            code="message_too_long",
            message=f"message exceeds the maximum of {settings.app.max_chat_chars} characters",
            details={"max_value": settings.app.max_chat_chars, "actual_value": len(body.message)},
        )

    result = await chat_service.reply(body.message, agent_id=body.agent_id)
    return ChatResponse(
        reply=result.reply,
        memories_used=result.memories_used,
        agent_id=result.agent_id,
        session_id=body.session_id or "default",
        model=result.model,
        fallback=result.fallback,
        timestamp=datetime.now(timezone.utc),
    )
