"""Main entry point for the Light File Manager file server.

This module creates and configures the FastAPI app that exposes a local
directory over the ``/api/fs`` REST API used by the file manager's remote
backend.

To run the development server:
    uvicorn main:app --reload --port 3001

Or directly, using the configured host and port:
    python main.py
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from api.dependencies import (
    DirectoryServiceDep,
    initialize_directory_service,
    shutdown_directory_service,
)
from api.exceptions import (
    file_system_error_handler,
    generic_exception_handler,
    request_validation_handler,
)
from api.models import HealthResponse
from api.routes import fs as fs_routes
from logging_config import setup_logging
from models.exceptions import FileSystemError
from settings import get_settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Set up logging and the directory service; release them on shutdown."""
    settings = get_settings()
    setup_logging(settings)
    logger.info("Starting file server")
    initialize_directory_service(settings)

    yield

    logger.info("Shutting down file server")
    shutdown_directory_service()


app = FastAPI(
    title="Light File Manager",
    description="REST API exposing a local directory to the file manager",
    version="0.1.0",
    lifespan=lifespan,
)

# Browser front ends call the API from another origin
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

# Order matters: specific exceptions before general ones
app.add_exception_handler(FileSystemError, file_system_error_handler)
app.add_exception_handler(RequestValidationError, request_validation_handler)
app.add_exception_handler(Exception, generic_exception_handler)

app.include_router(fs_routes.router)


@app.get("/health", response_model=HealthResponse)
def health_check(service: DirectoryServiceDep):
    """Health check endpoint for monitoring."""
    return HealthResponse(root=service.root_path)


if __name__ == "__main__":
    settings = get_settings()
    uvicorn.run(app, host=settings.server_host, port=settings.server_port)
