"""Directory endpoints of the file server (/api/fs/*).

Thin handlers over the injected DirectoryService. Failures raise
FileSystemError subclasses, which the app's exception handlers turn into
``{"error", "type", "details"}`` responses.
"""

from typing import Optional

from fastapi import APIRouter, Query

from api.dependencies import DirectoryServiceDep
from api.models import (
    ErrorResponse,
    PathRequest,
    ReadFileResponse,
    SuccessResponse,
    WriteFileRequest,
)

router = APIRouter(
    prefix="/api/fs",
    tags=["fs"],
    responses={
        400: {"model": ErrorResponse, "description": "Bad path or wrong node kind"},
        403: {"model": ErrorResponse, "description": "Path escapes the served root"},
        404: {"model": ErrorResponse, "description": "Path does not exist"},
    },
)


# Route Handlers


@router.get("/list")
def list_directory(
    service: DirectoryServiceDep,
    path: Optional[str] = Query(default=None, description="Directory to list"),
) -> list[dict]:
    """List a directory (default: the served root).

    Returns:
        Entries as ``{name, path, type, size, lastModified}``.
    """
    entries = service.list(path if path else service.root_path)
    return [entry.to_dict() for entry in entries]


@router.get("/read", response_model=ReadFileResponse)
def read_file(
    service: DirectoryServiceDep,
    path: str = Query(..., min_length=1, description="File to read"),
):
    return ReadFileResponse(content=service.read(path))


@router.post("/write", response_model=SuccessResponse)
def write_file(request: WriteFileRequest, service: DirectoryServiceDep):
    service.write(request.path, request.content)
    return SuccessResponse()


@router.post("/mkdir", response_model=SuccessResponse)
def make_directory(request: PathRequest, service: DirectoryServiceDep):
    """Create a directory and any missing parents (no error if it exists)."""
    service.mkdir(request.path)
    return SuccessResponse()


@router.delete("/delete", response_model=SuccessResponse)
def delete_path(request: PathRequest, service: DirectoryServiceDep):
    """Delete a file, or a directory and everything below it.

    The target path is sent in the JSON body.
    """
    service.delete(request.path)
    return SuccessResponse()
