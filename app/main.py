import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from supabase import create_client

from app.core.auth import build_identity_provider
from app.core.config import Settings, settings
from app.core.database import SessionLocal, make_session_factory
from app.core.errors import AuthError, RentalAppError, ValidationError
from app.core.logging_config import configure_logging
from app.api.routes.ai import router as ai_router
from app.api.routes.auth import router as auth_router
from app.api.routes.rentals import router as rentals_router
from app.services.rent_advisor import RentAdvisor
from app.services.supabase_auth import SupabaseAuthActions
from app.services.validation import field_errors

logger = logging.getLogger(__name__)


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    app_settings = app_settings or settings
    configure_logging(app_settings.LOG_LEVEL)

    # 1) Create the app FIRST
    app = FastAPI(title="Rental Ledger API")

    # 2) Build backing services once; dependencies read them from app.state
    app.state.settings = app_settings
    if app_settings.DATABASE_URL == settings.DATABASE_URL:
        app.state.session_factory = SessionLocal
    else:
        app.state.session_factory = make_session_factory(app_settings.DATABASE_URL)
    app.state.identity_provider = build_identity_provider(app_settings)
    app.state.rent_advisor = RentAdvisor.from_settings(app_settings)
    app.state.supabase = None
    app.state.auth_actions = None
    if app_settings.SUPABASE_URL and app_settings.SUPABASE_KEY:
        app.state.supabase = create_client(app_settings.SUPABASE_URL, app_settings.SUPABASE_KEY)
        app.state.auth_actions = SupabaseAuthActions.from_settings(app_settings, app.state.supabase)
    logger.info(
        "Starting with auth=%s store=%s suggestions=%s",
        app.state.identity_provider.name,
        app_settings.STORE_BACKEND,
        "on" if app.state.rent_advisor.available else "off",
    )

    # 3) Add CORS Middleware BEFORE routes
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # 4) Errors -> JSON, never a crash
    @app.exception_handler(RentalAppError)
    async def rental_app_error_handler(request: Request, exc: RentalAppError):
        headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthError) else None
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=headers)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        error = ValidationError(field_errors(exc.errors()))
        return JSONResponse(status_code=error.status_code, content=error.to_dict())

    # 5) Include routers AFTER app is created
    app.include_router(auth_router)
    app.include_router(rentals_router)
    app.include_router(ai_router)

    # 6) Health check endpoints
    @app.get("/health")
    def health():
        return {"ok": True, "service": "backend"}

    @app.get("/db-health")
    def db_health():
        db = app.state.session_factory()
        try:
            db.execute(text("select 1"))
            return {"ok": True, "db": "connected"}
        except SQLAlchemyError:
            logger.exception("Database health check failed")
            return JSONResponse(status_code=503, content={"ok": False, "db": "unavailable"})
        finally:
            db.close()

    return app


app = create_app()
