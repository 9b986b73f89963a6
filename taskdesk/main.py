"""FastAPI application for the taskdesk task manager backend."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from taskdesk import settings
from taskdesk.database import create_db_and_tables
from taskdesk.errors import TaskdeskError, Unauthenticated, ValidationError
from taskdesk.routes.tasks import router as tasks_router
from taskdesk.routes.users import router as users_router

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create database tables on startup via SQLModel create_all."""
    create_db_and_tables()
    yield


app = FastAPI(title="Taskdesk Task Manager", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
    allow_headers=["Content-Type", "Authorization"],
)

app.include_router(tasks_router)
app.include_router(users_router)


@app.exception_handler(TaskdeskError)
async def taskdesk_error_handler(request: Request, exc: TaskdeskError) -> JSONResponse:
    logger.warning(
        "%s %s -> %d %s: %s",
        request.method, request.url.path, exc.status_code, exc.category, exc.message,
    )
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, Unauthenticated) else None
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=headers)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed input as a 400 validation_error, like the rest of the taxonomy."""
    details = [
        {
            "field": ".".join(str(part) for part in err["loc"] if part not in ("body", "query", "path")),
            "message": err["msg"],
        }
        for err in exc.errors()
    ]
    error = ValidationError("Invalid request", details=details)
    logger.warning("%s %s -> 400 validation_error: %s", request.method, request.url.path, details)
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


@app.get("/api/health")
def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "taskdesk-api"}
