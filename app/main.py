import logging

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import settings
from app.routers import analyzer as analyzer_router
from app.core.errors import (
    AnalyzerException,
    analyzer_exception_handler,
    validation_exception_handler,
    unhandled_exception_handler,
)

logging.basicConfig(
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    level=settings.LOG_LEVEL.upper(),
)

app = FastAPI(
    title="Journal Analyzer API",
    description=(
        "**Journal analytics and AI prompt composition**\n\n"
        "Computes karma averages, trends and weekday patterns from journal "
        "entries and composes a deterministic prompt for an external AI assistant.\n\n"
        "All error responses follow the `{code, message, details}` envelope."
    ),
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# --- CORS ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Exception handlers (most specific first) ---
app.add_exception_handler(AnalyzerException, analyzer_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

# --- Routers ---
app.include_router(analyzer_router.router)


@app.get("/health", tags=["health"], summary="Health check")
def health():
    """Liveness probe. The service holds no external connections."""
    return {"status": "ok", "env": settings.APP_ENV}
