from fastapi import APIRouter, Request
from pydantic import BaseModel

from app.api.deps import limiter
from app.core.config import settings
from app.services.chat import pick_response

router = APIRouter(tags=["chat"])


class ChatRequest(BaseModel):
    context: str = ""


class ChatResponse(BaseModel):
    response: str


@router.post("/chat", response_model=ChatResponse)
@limiter.limit(settings.chat_rate_limit)
def chat(request: Request, body: ChatRequest):
    """Reply with one of a fixed set of canned responses."""
    return ChatResponse(response=pick_response(body.context))
