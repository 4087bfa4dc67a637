import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from quotes_api.api.quotes import router as quotes_router
from quotes_api.core.config import Settings
from quotes_api.core.errors import install_error_handlers
from quotes_api.core.request_context import install_request_context
from quotes_api.core.logging_config import setup_logging
from quotes_api.db.session import Base, build_engine, build_session_factory

_LOG = logging.getLogger("quotes_api")


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or Settings()
    setup_logging(settings.LOG_LEVEL, settings.LOG_FILE or None)

    engine = build_engine(settings.database_url, echo=settings.DB_ECHO)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if settings.DB_CREATE_TABLES:
            Base.metadata.create_all(bind=engine)
        _LOG.info("%s started (env=%s)", settings.APP_NAME, settings.APP_ENV)
        try:
            yield
        finally:
            _LOG.info("closing database connections")
            engine.dispose()

    app = FastAPI(title=settings.APP_NAME, version="0.1.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    install_request_context(app)
    install_error_handlers(app)

    app.include_router(quotes_router, prefix="/quotes", tags=["Quotes"])

    @app.get("/", include_in_schema=False)
    def landing():
        return JSONResponse({"service": settings.APP_NAME, "status": "ok"})

    @app.get("/health")
    def health():
        return {"status": "ok"}

    return app


app = create_app()
