from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from typing import List

from app.api.deps import get_workspace
from app.services.knowledge_base import KnowledgeBaseFile, KnowledgeBaseStore
from app.services.workspace import Workspace

router = APIRouter(tags=["knowledge-base"])


class DirectoryRequest(BaseModel):
    name: str = Field(min_length=1)


class KnowledgeBaseRequest(BaseModel):
    knowledgeBaseName: str = Field(min_length=1)


class RenameDirectoryRequest(BaseModel):
    currentName: str = Field(min_length=1)
    newName: str = Field(min_length=1)


class DirectoryResponse(BaseModel):
    message: str


class ListDirectoriesResponse(BaseModel):
    directories: List[str]


class ListFilesResponse(BaseModel):
    files: List[KnowledgeBaseFile]


def get_knowledge_base_store(workspace: Workspace = Depends(get_workspace)) -> KnowledgeBaseStore:
    return KnowledgeBaseStore(workspace)


@router.post("/create-knowledgebase", status_code=201, response_model=DirectoryResponse)
def create_directory(body: DirectoryRequest, store: KnowledgeBaseStore = Depends(get_knowledge_base_store)):
    store.create_directory(body.name)
    return DirectoryResponse(message="Directory created successfully")


@router.get("/list-knowledgebase", response_model=ListDirectoriesResponse)
def list_directories(store: KnowledgeBaseStore = Depends(get_knowledge_base_store)):
    """List root-level directories, excluding ``assistants``."""
    return ListDirectoriesResponse(directories=store.list_directories())


@router.post("/delete-knowledgebase", response_model=DirectoryResponse)
def delete_directory(body: KnowledgeBaseRequest, store: KnowledgeBaseStore = Depends(get_knowledge_base_store)):
    store.delete_directory(body.knowledgeBaseName)
    return DirectoryResponse(message="Directory deleted successfully")


@router.put("/rename-knowledgebase", response_model=DirectoryResponse)
def rename_directory(body: RenameDirectoryRequest, store: KnowledgeBaseStore = Depends(get_knowledge_base_store)):
    store.rename_directory(body.currentName, body.newName)
    return DirectoryResponse(message="Directory renamed successfully")


@router.post("/list-files-knowledgebase", response_model=ListFilesResponse)
def list_files(body: KnowledgeBaseRequest, store: KnowledgeBaseStore = Depends(get_knowledge_base_store)):
    """List files of a directory given relative to the workspace root.

    The name is root-relative, so an assistant's uploads are listed with
    ``assistants/<title>/KnowledgeBase``.
    """
    return ListFilesResponse(files=store.list_files(body.knowledgeBaseName))
