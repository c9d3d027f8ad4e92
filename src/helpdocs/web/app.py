"""FastAPI application exposing the help document index read-only."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

from fastapi import FastAPI, HTTPException, Request
from pydantic import BaseModel

from helpdocs.config import AppConfig
from helpdocs.errors import DocumentIndexError
from helpdocs.index.cache import IndexCache
from helpdocs.index.paths import PathTranslator
from helpdocs.index.view import DocumentView, open_view
from helpdocs.models import Document

LOGGER = logging.getLogger(__name__)


class DocumentPayload(BaseModel):
    position: int
    path: str
    name: str
    role: str
    subject: str
    identifier: str
    parent: Optional[int] = None
    read: bool = True
    title: Optional[str] = None
    description: Optional[str] = None


class DocumentBody(DocumentPayload):
    body: str


class IndexPayload(BaseModel):
    root: str
    fingerprint: str
    documents: List[DocumentPayload]


class ResolvePayload(BaseModel):
    logical: str
    filesystem: str


def _payload(view: DocumentView, document: Document) -> dict:
    parent = view.parent_of(document)
    return {
        "position": document.index_position,
        "path": document.path,
        "name": document.name,
        "role": document.role.label(),
        "subject": document.subject,
        "identifier": document.identifier,
        "parent": parent.index_position if parent else None,
        "read": document.read,
        "title": document.title,
        "description": document.description,
    }


def _resolve_root(config: AppConfig, root: Path | None) -> Path:
    if root is not None:
        return root
    return config.resolve_root(Path.cwd())


def create_app(config: AppConfig | None = None) -> FastAPI:
    """Build the web application around a fresh index cache."""
    config = config or AppConfig()
    app = FastAPI(title="helpdocs", version="0.1.0")
    app.state.config = config
    app.state.cache = IndexCache(config)

    @app.on_event("startup")
    async def startup_event() -> None:
        logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")

    def _view(request: Request, root: Path | None, selected: str | None = None) -> DocumentView:
        resolved = _resolve_root(request.app.state.config, root)
        try:
            return open_view(request.app.state.cache, resolved, selected)
        except DocumentIndexError as exc:
            raise HTTPException(status_code=404, detail=str(exc))

    @app.get("/documents", response_model=IndexPayload)
    async def list_documents(
        request: Request, root: Path | None = None, select: str | None = None
    ) -> dict:
        """List the threaded index of the help root."""
        view = _view(request, root, select)
        return {
            "root": view.root,
            "fingerprint": view.fingerprint,
            "documents": [_payload(view, document) for document in view],
        }

    @app.get("/documents/{position}", response_model=DocumentBody)
    async def get_document(request: Request, position: int, root: Path | None = None) -> dict:
        """Return one document, including its body."""
        view = _view(request, root)
        if not 0 <= position < len(view):
            raise HTTPException(status_code=404, detail=f"No help document at position {position}")
        try:
            body = view.read_document(position)
        except OSError as exc:
            raise HTTPException(status_code=500, detail=str(exc))
        return {**_payload(view, view[position]), "body": body}

    @app.get("/resolve", response_model=ResolvePayload)
    async def resolve_path(
        request: Request, path: str, root: Path | None = None, validate: bool = False
    ) -> dict:
        """Translate a path between its help:// and filesystem forms."""
        resolved = _resolve_root(request.app.state.config, root)
        translator = PathTranslator(resolved, request.app.state.config.scheme)
        logical = translator.to_logical(path, validate=validate)
        filesystem = translator.to_filesystem(path, validate=validate)
        if logical is None or filesystem is None:
            raise HTTPException(status_code=404, detail=f"Cannot resolve {path}")
        return {"logical": logical, "filesystem": filesystem}

    return app


app = create_app()
