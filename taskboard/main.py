import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import CORS_ORIGINS, LOG_DIR, LOG_LEVEL
from .database import create_tables
from .errors import TaskboardError
from .logging_setup import setup_logging
from .routers import projects, status, tasks

logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Taskboard API",
    description="Task and project management API with search, filters and statistics",
    version="1.0.0"
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(status.router, prefix="/api", tags=["status"])
app.include_router(tasks.router, prefix="/api", tags=["tasks"])
app.include_router(projects.router, prefix="/api", tags=["projects"])


@app.exception_handler(TaskboardError)
async def taskboard_error_handler(request: Request, exc: TaskboardError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    else:
        logger.info("%s %s rejected (%s): %s", request.method, request.url.path, exc.kind, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "error": exc.kind},
    )


# Configure logging and create tables on startup
@app.on_event("startup")
def on_startup():
    setup_logging(LOG_LEVEL, LOG_DIR)
    create_tables()
    logger.info("Taskboard API started")

@app.get("/")
def read_root():
    return {"message": "Taskboard API"}

@app.get("/health")
def health_check():
    return {"status": "healthy"}
