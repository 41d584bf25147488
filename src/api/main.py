"""FastAPI application entry point."""

import os
import sys
import logging
import tomllib
from contextlib import asynccontextmanager
from pathlib import Path
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from dotenv import load_dotenv

# Load environment variables from .env file
# Must be called before settings are read
load_dotenv()

# main.py is at <root>/src/api/main.py, src is two levels up
_src_path = Path(__file__).parent.parent
sys.path.insert(0, str(_src_path))

from api.routes import auth, health, messages, users
from utils.config import get_settings
from utils.logging import setup_structured_logging
from adapter.sql.connection import get_engine, ensure_schema
from domain.model.errors import StorageError

SERVICE_NAME = "Direct Messages API"

setup_structured_logging(os.getenv("LOG_LEVEL", "INFO").upper(), service=SERVICE_NAME)

logger = logging.getLogger(__name__)

# Read version from pyproject.toml (single source of truth)
_project_root = _src_path.parent
with open(_project_root / "pyproject.toml", "rb") as f:
    VERSION = tomllib.load(f)["project"]["version"]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: fail fast on missing config, then create tables."""
    settings = get_settings()

    engine = get_engine(settings.database_url)
    if engine is not None:
        if ensure_schema(engine):
            logger.info("Database schema verified/created successfully")
        else:
            logger.warning("Failed to create database schema")
    else:
        logger.warning("Database unavailable, skipping schema creation")

    yield  # App runs here


app = FastAPI(
    title=SERVICE_NAME,
    description="Direct messages between users: auth, chat history and conversation list",
    version=VERSION,
    lifespan=lifespan,
)

# With JWT in the Authorization header:
# - CORS_ORIGINS="*": allow_credentials must be False (browsers reject credentials with wildcard)
# - explicit comma-separated origins: allow_credentials can be True
cors_origins_env = os.getenv("CORS_ORIGINS", "*")

if cors_origins_env == "*":
    cors_origins = ["*"]
    allow_credentials = False
    logger.warning(
        "CORS configured with wildcard origin ('*'). "
        "For production, set CORS_ORIGINS to specific domains (e.g., 'https://app.example.com')"
    )
else:
    cors_origins = [origin.strip() for origin in cors_origins_env.split(",")]
    allow_credentials = True
    logger.info(f"CORS configured with specific origins: {cors_origins}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StorageError)
async def storage_error_handler(request: Request, exc: StorageError):
    """Persistence failures are logged by the adapter; the caller gets no details."""
    logger.error("Request failed on storage error", extra={
        "path": request.url.path,
        "method": request.method,
    })
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


# Register routes
app.include_router(auth.router)
app.include_router(auth.me_router)
app.include_router(messages.router)
app.include_router(users.router)
app.include_router(health.router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "service": SERVICE_NAME,
        "version": VERSION,
        "status": "running"
    }


if __name__ == "__main__":
    import uvicorn
    port = get_settings().port
    # Application logs go through structured logging; uvicorn's access log is redundant
    uvicorn.run(
        app,
        host="0.0.0.0",
        port=port,
        access_log=False
    )
