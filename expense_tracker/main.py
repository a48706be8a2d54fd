import logging
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from expense_tracker.api import (
    admin,
    auth,
    backup,
    categories,
    documents,
    financial_users,
    goals,
    loans,
    reports,
    settings as settings_api,
    transactions,
)
from expense_tracker.api.middleware import RequestIDMiddleware
from expense_tracker.core.config import settings
from expense_tracker.core.logging import setup_logging
from expense_tracker.database import create_db_and_tables
from expense_tracker.domain.exceptions import DomainException, NotFoundError, StateError, ValidationError

setup_logging(settings.log_level)
logger = logging.getLogger(__name__)

ERROR_STATUS = {
    ValidationError: 400,
    NotFoundError: 404,
    StateError: 409,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    create_db_and_tables()
    yield


async def domain_exception_handler(request: Request, exc: DomainException) -> JSONResponse:
    status_code = next((code for kind, code in ERROR_STATUS.items() if isinstance(exc, kind)), 400)
    body = {"detail": str(exc), "error": type(exc).__name__}
    if getattr(exc, "count", None) is not None:
        body["count"] = exc.count
    logger.info(
        "Request rejected",
        extra={
            "request_id": getattr(request.state, "request_id", "unknown"),
            "path": request.url.path,
            "error": type(exc).__name__,
            "detail": str(exc),
        },
    )
    return JSONResponse(status_code=status_code, content=body)


def create_app() -> FastAPI:
    app = FastAPI(
        title="Expense Tracker",
        description="Transactions, loans, categories, goals and reports per account",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestIDMiddleware)
    app.add_exception_handler(DomainException, domain_exception_handler)

    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name, "ts": datetime.utcnow().isoformat()}

    app.include_router(auth.router)
    app.include_router(transactions.router)
    app.include_router(loans.router)
    app.include_router(categories.router)
    app.include_router(financial_users.router)
    app.include_router(goals.router)
    app.include_router(settings_api.router)
    app.include_router(reports.router)
    app.include_router(reports.dashboard_router)
    app.include_router(documents.router)
    app.include_router(backup.router)
    app.include_router(admin.router)

    return app


app = create_app()
