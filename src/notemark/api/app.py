"""FastAPI application exposing note operations as a local JSON API."""

import secrets
from typing import Any

from fastapi import Depends, FastAPI, HTTPException, Query, Security
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel, Field

from .. import __version__
from ..core.model import ParagraphType, Position, TaskStatus as Status


class AddTaskRequest(BaseModel):
    text: str
    position: Position = "end"
    heading: str | None = None
    status: Status | None = None
    priority: int | None = Field(None, ge=1, le=3)
    indent_level: int | None = Field(None, ge=0)


class UpdateTaskRequest(BaseModel):
    text: str | None = None
    status: Status | None = None


class InsertRequest(BaseModel):
    text: str
    position: Position
    heading: str | None = None
    line: int | None = None
    type: ParagraphType | None = None


class LineRangeRequest(BaseModel):
    start_line: int
    end_line: int
    dry_run: bool = False
    confirmation_token: str | None = None


class ReplaceLinesRequest(LineRangeRequest):
    text: str


class EditLineRequest(BaseModel):
    line: int
    text: str
    allow_empty: bool = False


class PropertyRequest(BaseModel):
    value: str


def _respond(result: dict[str, Any]) -> Any:
    if result.get("success"):
        return result
    return JSONResponse(status_code=400, content=result)


def create_app(runtime: Any, token: str | None = None, enable_cors: bool = False) -> FastAPI:
    """
    Create FastAPI application with runtime injected.

    Args:
        runtime: Runtime instance with note tools
        token: Bearer token for authentication (None to disable auth)
        enable_cors: Enable CORS middleware

    Returns:
        FastAPI application instance
    """
    app = FastAPI(
        title="notemark API",
        description="Local JSON API for structural note editing",
        version=__version__,
        docs_url="/docs" if token is None else None,
        redoc_url="/redoc" if token is None else None,
    )

    if enable_cors:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    security_scheme = HTTPBearer(auto_error=False)

    async def verify_token(
        credentials: HTTPAuthorizationCredentials | None = Security(security_scheme),  # noqa: B008
    ) -> None:
        """Verify bearer token; no-op when auth is disabled."""
        if token is None:
            return None
        if credentials is None or credentials.credentials != token:
            raise HTTPException(status_code=401, detail="Invalid or missing token")
        return None

    tools = runtime.tools

    @app.get("/health")
    async def health(auth: None = Depends(verify_token)) -> dict[str, Any]:
        """Health check endpoint."""
        return {"status": "ok", "version": __version__}

    @app.get("/preferences")
    async def get_preferences(auth: None = Depends(verify_token)) -> Any:
        return _respond(tools.get_preferences())

    @app.get("/notes")
    async def list_notes(
        folder: str | None = Query(None, description="Restrict to a folder"),
        auth: None = Depends(verify_token),
    ) -> list[str]:
        """List note filenames."""
        return list(runtime.store.list(folder))

    @app.get("/notes/{filename:path}/paragraphs")
    async def get_paragraphs(
        filename: str,
        start_line: int | None = Query(None, ge=1),
        end_line: int | None = Query(None, ge=1),
        offset: int = Query(0, ge=0),
        limit: int = Query(200, ge=1, le=1000),
        auth: None = Depends(verify_token),
    ) -> Any:
        return _respond(
            tools.get_paragraphs(
                filename, start_line=start_line, end_line=end_line, offset=offset, limit=limit
            )
        )

    @app.get("/notes/{filename:path}/search")
    async def search(
        filename: str,
        q: str = Query(..., description="Search query"),
        type: list[ParagraphType] | None = Query(None, description="Paragraph types"),
        auth: None = Depends(verify_token),
    ) -> Any:
        return _respond(tools.search_paragraphs(filename, q, types=type))

    @app.get("/notes/{filename:path}/tasks")
    async def list_tasks(
        filename: str,
        status: list[Status] | None = Query(None),
        auth: None = Depends(verify_token),
    ) -> Any:
        return _respond(tools.list_tasks(filename, status=status))

    @app.post("/notes/{filename:path}/tasks")
    async def add_task(
        filename: str, req: AddTaskRequest, auth: None = Depends(verify_token)
    ) -> Any:
        return _respond(tools.add_task(filename, **req.model_dump()))

    @app.patch("/notes/{filename:path}/tasks/{line_index}")
    async def update_task(
        filename: str,
        line_index: int,
        req: UpdateTaskRequest,
        auth: None = Depends(verify_token),
    ) -> Any:
        return _respond(tools.update_task(filename, line_index, text=req.text, status=req.status))

    @app.post("/notes/{filename:path}/insert")
    async def insert(filename: str, req: InsertRequest, auth: None = Depends(verify_token)) -> Any:
        return _respond(tools.insert(filename, **req.model_dump()))

    @app.post("/notes/{filename:path}/delete-lines")
    async def delete_lines(
        filename: str, req: LineRangeRequest, auth: None = Depends(verify_token)
    ) -> Any:
        return _respond(tools.delete_lines(filename, **req.model_dump()))

    @app.post("/notes/{filename:path}/replace-lines")
    async def replace_lines(
        filename: str, req: ReplaceLinesRequest, auth: None = Depends(verify_token)
    ) -> Any:
        return _respond(tools.replace_lines(filename, **req.model_dump()))

    @app.post("/notes/{filename:path}/edit-line")
    async def edit_line(
        filename: str, req: EditLineRequest, auth: None = Depends(verify_token)
    ) -> Any:
        return _respond(tools.edit_line(filename, **req.model_dump()))

    @app.get("/notes/{filename:path}/properties")
    async def get_properties(filename: str, auth: None = Depends(verify_token)) -> Any:
        return _respond(tools.get_properties(filename))

    @app.put("/notes/{filename:path}/properties/{key}")
    async def set_property(
        filename: str, key: str, req: PropertyRequest, auth: None = Depends(verify_token)
    ) -> Any:
        return _respond(tools.set_property(filename, key, req.value))

    @app.delete("/notes/{filename:path}/properties/{key}")
    async def remove_property(
        filename: str, key: str, auth: None = Depends(verify_token)
    ) -> Any:
        return _respond(tools.remove_property(filename, key))

    return app


def generate_token() -> str:
    """Generate a random bearer token."""
    return secrets.token_urlsafe(32)
