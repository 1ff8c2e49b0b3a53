from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import sessionmaker

from capacity_ledger.core.config import settings
from capacity_ledger.core.errors import AppError
from capacity_ledger.core.logging import configure_logging, logger
from capacity_ledger.api.router import api_router
from capacity_ledger.db.base import Base
from capacity_ledger.db.session import make_engine, make_session_factory
import capacity_ledger.db.models  # noqa: F401

def create_app(session_factory: sessionmaker | None = None) -> FastAPI:
    configure_logging(settings.ENV)
    app = FastAPI(title="Capacity Ledger", version="0.1.0")

    owns_engine = session_factory is None
    if owns_engine:
        engine = make_engine(settings.DATABASE_URL)
        session_factory = make_session_factory(engine)
    app.state.session_factory = session_factory

    origins = [o.strip() for o in settings.CORS_ORIGINS.split(",") if o.strip()]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins or ["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(AppError)
    def _app_error(request: Request, exc: AppError):
        logger.warning("request_rejected", path=request.url.path, code=exc.code, message=exc.message)
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.to_dict()})

    @app.get("/healthz")
    def healthz():
        return {"status": "ok"}

    @app.on_event("startup")
    def _startup():
        # Ensure tables exist for dev-only convenience; in prod rely on alembic
        if owns_engine and settings.ENV == "dev":
            Base.metadata.create_all(bind=engine)

    @app.on_event("shutdown")
    def _shutdown():
        if owns_engine:
            engine.dispose()

    app.include_router(api_router)
    logger.info("app_started", env=settings.ENV)
    return app

app = create_app()
