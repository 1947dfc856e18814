"""Chat history routes."""

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from typing import List

from app.api.deps import get_workspace
from app.core.errors import InvalidIdentifierError
from app.services.history import HistoryStore
from app.services.workspace import Workspace

router = APIRouter(tags=["history"])


class CreateHistoryRequest(BaseModel):
    assistantTitle: str = Field(min_length=1)


class CreateHistoryResponse(BaseModel):
    message: str
    fileID: str


class DeleteHistoryRequest(BaseModel):
    assistantTitle: str = Field(min_length=1)
    chatHistoryID: str = Field(min_length=1)


class UpdateChatContextRequest(BaseModel):
    assistantTitle: str = Field(min_length=1)
    context: str = Field(min_length=1)


class FetchHistoryRequest(BaseModel):
    assistantTitle: str = Field(min_length=1)
    historyID: str = Field(min_length=1)


class FetchHistoryResponse(BaseModel):
    context: str


class ChatHistoryResponse(BaseModel):
    files: List[str]


class MessageResponse(BaseModel):
    message: str


def get_history_store(workspace: Workspace = Depends(get_workspace)) -> HistoryStore:
    return HistoryStore(workspace)


@router.get("/chat-history", response_model=ChatHistoryResponse)
def list_chat_history(store: HistoryStore = Depends(get_history_store)):
    """List the records kept for the "Lets Chat" pseudo-assistant."""
    return ChatHistoryResponse(files=store.list_root())


@router.post("/create-history", status_code=201, response_model=CreateHistoryResponse)
def create_history(body: CreateHistoryRequest, store: HistoryStore = Depends(get_history_store)):
    file_id = store.create(body.assistantTitle)
    return CreateHistoryResponse(message="History file created successfully", fileID=file_id)


@router.delete("/delete-history", response_model=MessageResponse)
def delete_history(body: DeleteHistoryRequest, store: HistoryStore = Depends(get_history_store)):
    store.delete(body.assistantTitle, body.chatHistoryID)
    return MessageResponse(message="History file deleted successfully")


@router.put("/update-chat-context/{history_path:path}", response_model=MessageResponse)
def update_chat_context(
    history_path: str,
    body: UpdateChatContextRequest,
    store: HistoryStore = Depends(get_history_store),
):
    """Overwrite a record with the raw ``context`` string.

    The record id is the last segment of the URL path.
    """
    history_id = history_path.rstrip("/").rsplit("/", 1)[-1]
    if not history_id:
        raise InvalidIdentifierError("History ID is required")
    store.update_context(body.assistantTitle, history_id, body.context)
    return MessageResponse(message="Chat context updated successfully")


@router.post("/fetch-history", response_model=FetchHistoryResponse)
def fetch_history(body: FetchHistoryRequest, store: HistoryStore = Depends(get_history_store)):
    return FetchHistoryResponse(context=store.fetch(body.assistantTitle, body.historyID))
