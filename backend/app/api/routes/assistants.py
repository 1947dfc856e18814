"""Assistant lifecycle and knowledge-base upload routes."""

import logging
from typing import List

from fastapi import APIRouter, Depends, File, Query, Request, UploadFile
from pydantic import BaseModel, Field

from app.api.deps import get_workspace, limiter
from app.core.config import settings
from app.services.assistants import AssistantStore, AssistantSummary, RoleSetting
from app.services.workspace import Workspace

logger = logging.getLogger(__name__)

router = APIRouter(tags=["assistants"])


class AssistantRequest(BaseModel):
    title: str = Field(min_length=1)
    roleSetting: str = ""


class RenameAssistantRequest(BaseModel):
    currentTitle: str = Field(min_length=1)
    newTitle: str = Field(min_length=1)


class MessageResponse(BaseModel):
    message: str


def get_assistant_store(workspace: Workspace = Depends(get_workspace)) -> AssistantStore:
    return AssistantStore(workspace)


@router.post("/createAssistant", status_code=201, response_model=MessageResponse)
def create_assistant(body: AssistantRequest, store: AssistantStore = Depends(get_assistant_store)):
    """Create the assistant directory, its KnowledgeBase folder and role file."""
    store.create(body.title, body.roleSetting)
    return MessageResponse(message="Assistant created successfully")


@router.delete("/deleteAssistant", response_model=MessageResponse)
def delete_assistant(
    title: str = Query(min_length=1),
    store: AssistantStore = Depends(get_assistant_store),
):
    store.delete(title)
    return MessageResponse(message="Assistant deleted successfully")


@router.put("/updateAssistant", response_model=MessageResponse)
def update_assistant(body: AssistantRequest, store: AssistantStore = Depends(get_assistant_store)):
    store.update_role_setting(body.title, body.roleSetting)
    return MessageResponse(message="Role setting updated successfully")


@router.put("/renameAssistant", response_model=MessageResponse)
def rename_assistant(body: RenameAssistantRequest, store: AssistantStore = Depends(get_assistant_store)):
    store.rename(body.currentTitle, body.newTitle)
    return MessageResponse(message="Assistant renamed successfully")


@router.get("/listAssistants", response_model=List[AssistantSummary])
def list_assistants(store: AssistantStore = Depends(get_assistant_store)):
    return store.list_assistants()


@router.get("/getRoleSetting", response_model=RoleSetting)
def get_role_setting(
    title: str = Query(min_length=1),
    store: AssistantStore = Depends(get_assistant_store),
):
    return store.get_role_setting(title)


# ── Upload ────────────────────────────────────────────────────────────

@router.post("/upload", response_model=MessageResponse)
@limiter.limit(settings.upload_rate_limit)
def upload_file(
    request: Request,
    title: str = Query(min_length=1),
    file: UploadFile = File(...),
    store: AssistantStore = Depends(get_assistant_store),
):
    """Stream a multipart ``file`` into ``assistants/<title>/KnowledgeBase``."""
    logger.info("Upload received: assistant=%s filename=%s", title, file.filename)
    store.save_upload(title, file.filename, file.file)
    return MessageResponse(message="File uploaded successfully")
