import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from swipe_api.api.api_v1.api import api_router
from swipe_api.core.config import Settings, settings as default_settings
from swipe_api.core.errors import SwipeError
from swipe_api.crud import AnswerStore
from swipe_api.initialization import ApplicationInitializer
from swipe_api.schemas import ErrorResponse

# Initialize logger for uvicorn
uvicorn_logger = logging.getLogger("uvicorn")

NO_CACHE_HEADERS = {
    "Cache-Control": "no-store, no-cache, must-revalidate, max-age=0",
    "Pragma": "no-cache",
}


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message).model_dump(by_alias=True),
        headers=NO_CACHE_HEADERS,
    )


def _describe_validation_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    field = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "query"))
    return f"{field}: {first.get('msg', 'invalid value')}" if field else first.get("msg", "Invalid request")


def create_app(settings: Optional[Settings] = None, store: Optional[AnswerStore] = None) -> FastAPI:
    """
    Build the API.

    A ready store can be injected (tests); otherwise the configured backend is
    built, its schema created and the test room seeded at startup.
    """
    settings = settings or default_settings
    uvicorn_logger.setLevel(settings.LOG_LEVEL.upper())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager for startup and shutdown events."""
        initializer = ApplicationInitializer(settings)

        try:
            uvicorn_logger.info("🚀 Starting Swipe API initialization...")
            if store is not None:
                app.state.store = store
                initializer.seed(store)
            else:
                app.state.store = initializer.initialize()
            uvicorn_logger.info(f"🎉 Swipe API ready (backend: {app.state.store.name})")
        except Exception as e:
            uvicorn_logger.error(f"🔥 Startup error: {e}")
            raise

        yield

        initializer.shutdown()

    app = FastAPI(
        title="Swipe API",
        description="Yes/no scenario answers per room with live aggregate counts",
        version="1.0.0",
        lifespan=lifespan,
    )

    # CORS Middleware Setup
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def no_store(request: Request, call_next):
        response = await call_next(request)
        response.headers.update(NO_CACHE_HEADERS)
        return response

    @app.exception_handler(SwipeError)
    async def swipe_error_handler(request: Request, exc: SwipeError):
        if exc.status_code >= 500:
            uvicorn_logger.error(f"❌ {request.method} {request.url.path} failed: {exc.message}")
        return _error_response(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return _error_response(400, _describe_validation_error(exc))

    # API Router Setup
    app.include_router(api_router, prefix="/api/v1")

    @app.get("/")
    def read_root():
        """Root endpoint with API information."""
        return {
            "message": "Swipe API is running!",
            "version": "1.0.0",
            "docs": "/docs",
            "health": "/health",
        }

    @app.get("/health")
    def health_check(request: Request):
        store = getattr(request.app.state, "store", None)
        if store is None:
            return {"status": "initializing"}
        healthy = store.ping()
        return {
            "status": "healthy" if healthy else "degraded",
            "backend": store.name,
        }

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
