"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api import analytics, external_accounts, imports, snapshots
from config import settings
from database import init_db
from integrations.exceptions import CsvImportError, MissingColumnsError
from logging_config import setup_logging
from services.exceptions import NotFoundError, PersistenceError

setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables on startup."""
    init_db()
    logger.info("Database ready (%s environment)", settings.ENVIRONMENT)
    yield


app = FastAPI(
    title="Net Worth Tracker",
    description="Brokerage snapshot imports, external accounts and net-worth growth",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS configuration for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(CsvImportError)
def handle_csv_import_error(request: Request, exc: CsvImportError):
    if isinstance(exc, MissingColumnsError):
        errors = [f"Missing column: {column}" for column in exc.missing_columns]
    else:
        errors = [str(exc)]
    logger.info("Rejected upload (%s): %s", exc.source or "unknown source", exc)
    return JSONResponse(status_code=400, content={"detail": str(exc), "errors": errors})


@app.exception_handler(NotFoundError)
def handle_not_found(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(PersistenceError)
def handle_persistence_error(request: Request, exc: PersistenceError):
    logger.error("Persistence failure on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=500, content={"detail": "Could not save changes, please retry"})


# Include API routers
app.include_router(imports.router)
app.include_router(snapshots.router)
app.include_router(external_accounts.router)
app.include_router(analytics.router)


@app.get("/health")
def health_check():
    """Health check endpoint."""
    return {"status": "ok"}
