import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

import models  # noqa: F401  registers every table on Base.metadata
from config import Settings
from database import Base, make_engine, make_session_factory
from routes import auth, trips, invitations
from utils.logger import API_LOGGER_NAME, setup_api_logger


def _field_errors(exc: RequestValidationError) -> list:
    details = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        details.append({"field": ".".join(loc) or None, "message": err.get("msg", "Invalid value")})
    return details


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings()
    api_logger = setup_api_logger(settings.LOG_FILE, settings.LOG_LEVEL)
    engine = make_engine(settings.DATABASE_URL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # A failed connection is reported but does not stop the server
        try:
            Base.metadata.create_all(bind=engine)
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            api_logger.info("Database connection established successfully!")
        except SQLAlchemyError:
            api_logger.exception("Database connection error")
        yield
        engine.dispose()

    app = FastAPI(title="Travel Planner API (Auth, Trips, Activities, Invitations)", lifespan=lifespan)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = make_session_factory(engine)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        api_logger.warning("HTTPException on %s %s | status=%s | detail=%s",
                           request.method, request.url.path, exc.status_code, exc.detail)
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail},
                            headers=getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        details = _field_errors(exc)
        api_logger.warning("Validation error on %s %s | %s", request.method, request.url.path, details)
        return JSONResponse(status_code=422, content={"error": "Invalid request.", "details": details})

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        api_logger.error("Unhandled exception on %s %s | error=%s",
                         request.method, request.url.path, str(exc), exc_info=exc)
        return JSONResponse(status_code=500, content={"error": "Internal Server Error"})

    @app.get("/api/test", tags=["Health"])
    def api_test():
        return {"message": "Hello from the Travel Planner backend!"}

    app.include_router(auth.router, prefix="/api")
    app.include_router(trips.router, prefix="/api")
    app.include_router(invitations.router, prefix="/api")

    return app


app = create_app()


if __name__ == "__main__":
    settings = app.state.settings
    logging.getLogger(API_LOGGER_NAME).info("Server is running on port %s", settings.PORT)
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)
