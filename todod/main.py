import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import PlainTextResponse

from todod import responders
from todod.core.config import Settings, get_settings
from todod.errors import TodoError
from todod.routers import todos
from todod.services.todo_store import TodoStore

logger = logging.getLogger(__name__)


def describe_validation_error(exc: RequestValidationError) -> str:
    """Turn FastAPI's parse errors into a single readable message."""
    errors = exc.errors()
    if not errors:
        return "invalid request"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    if not location:
        return first["msg"]
    return f"{location}: {first['msg']}"


def create_app(
    settings: Settings | None = None, store: TodoStore | None = None
) -> FastAPI:
    """Build the application.

    When ``store`` is given it is used as is and left open on shutdown;
    otherwise one is built from ``settings`` at startup, the database is
    probed until it answers, and the pool is closed on shutdown.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owns_store = app.state.store is None
        if owns_store:
            app.state.store = TodoStore.from_settings(settings or get_settings())
            try:
                await app.state.store.wait_until_ready()
            except Exception:
                await app.state.store.close()
                app.state.store = None
                raise
        logger.info("api server started")
        yield
        logger.info("api server shutting down")
        if owns_store:
            await app.state.store.close()
            app.state.store = None
        logger.info("api server stopped")

    app = FastAPI(
        title="Todo API",
        description="Example todo service backed by PostgreSQL",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.store = store

    @app.exception_handler(TodoError)
    async def todo_error_handler(request: Request, exc: TodoError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc}")
        else:
            logger.info(f"{request.method} {request.url.path} rejected: {exc}")
        return responders.error(exc.status_code, exc)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        message = describe_validation_error(exc)
        logger.info(f"{request.method} {request.url.path} rejected: {message}")
        return responders.error(status.HTTP_400_BAD_REQUEST, message)

    @app.get("/healthz", response_class=PlainTextResponse)
    async def health_check():
        return "OK"

    # Include routers
    app.include_router(todos.router)

    return app


app = create_app()
