"""
# Blog Backend Application

Entry point of the Blog Backend API: a FastAPI application serving signup/login, posts,
comments and favorites on top of MongoDB.

## Application Factory

`create_app(settings)` builds the whole component graph from one explicitly constructed
`Settings` instance and stores it on `app.state.services`:

```
Settings ──► DatabaseManager ──► CredentialStore
        │                   ├──► ContentStore
        │                   └──► FavoritesLedger
        └──► TokenService
```

Nothing is created at import time. Tests pass their own settings and an in-memory
database manager:

```python
app = create_app(settings, db_manager=fake_db_manager)
with TestClient(app) as client:
    client.post("/signup", json={...})
```

## Lifespan

**Startup:** configure logging, connect to MongoDB (with retry/backoff), ensure indexes.
**Shutdown:** close the MongoDB client.

## Error Responses

Every error leaves the API as `{"success": false, "message": "..."}`:

| Source | Status |
|---|---|
| `BlogError` subclasses (`blog_backend.errors`) | the error's `status_code` |
| `HTTPException` raised by handlers | its `status_code` |
| Request validation | 422, with the validation `errors` attached |

## Running the Server

```bash
blog-backend
# or
uvicorn blog_backend.main:create_app --factory --host 0.0.0.0 --port 8000
```
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse
import uvicorn

from blog_backend import __version__
from blog_backend.config import Settings, get_settings
from blog_backend.database import DatabaseManager
from blog_backend.errors import BlogError
from blog_backend.managers.logging_manager import get_logger, setup_logging
from blog_backend.middleware import RequestLoggingMiddleware
from blog_backend.routes import auth_router, favorites_router, health_router, posts_router
from blog_backend.services.container import build_services
from blog_backend.services.token_service import Clock

logger = get_logger(prefix="[APP]")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Connect the database before serving and release it afterwards.

    Raises:
        ServerSelectionTimeoutError: If MongoDB stays unreachable, which aborts startup.
    """
    services = app.state.services
    settings = services.settings
    logger.info(
        "Starting Blog Backend %s (%s)", __version__, "production" if settings.is_production else "development"
    )

    await services.db_manager.connect()
    await services.db_manager.create_indexes()
    logger.info("Blog Backend ready")

    try:
        yield
    finally:
        logger.info("Shutting down Blog Backend")
        await services.db_manager.disconnect()


def _error_body(message) -> dict:
    return {"success": False, "message": message}


async def blog_error_handler(request: Request, exc: BlogError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=_error_body(exc.message), headers=exc.headers)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(exc.detail),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    body = _error_body("Invalid request")
    body["errors"] = jsonable_encoder(exc.errors())
    return JSONResponse(status_code=422, content=body)


def create_app(
    settings: Optional[Settings] = None,
    db_manager: Optional[DatabaseManager] = None,
    clock: Optional[Clock] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Configuration; defaults to the process settings from the environment.
        db_manager: Database manager to use instead of one built from `settings`.
        clock: Time source for token issuance and expiry checks.

    Returns:
        FastAPI: The configured application with routers, middleware and error handlers.
    """
    settings = settings or get_settings()
    setup_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title="Blog Backend API",
        description="Signup/login, posts, comments and favorites over MongoDB with JWT bearer authentication.",
        version=__version__,
        lifespan=lifespan,
        redirect_slashes=False,
    )
    app.state.services = build_services(settings, db_manager=db_manager, clock=clock)

    app.add_exception_handler(BlogError, blog_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
        max_age=3600,
    )
    app.add_middleware(RequestLoggingMiddleware)

    for router in (auth_router, posts_router, favorites_router, health_router):
        app.include_router(router)

    logger.debug("Configured CORS origins: %s", settings.cors_origins_list)
    return app


def run():
    """Console entry point: serve the application with uvicorn."""
    settings = get_settings()
    uvicorn.run(
        "blog_backend.main:create_app",
        factory=True,
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    run()
