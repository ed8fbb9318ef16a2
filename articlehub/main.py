import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import InterfaceError, OperationalError

from articlehub.cache import create_cache
from articlehub.config import settings
from articlehub.database import dispose_engine
from articlehub.exceptions import ArticleHubError
from articlehub.middleware import RequestLoggingMiddleware
from articlehub.routers import articles, auth

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    configure_logging()
    cache = create_cache(settings)
    await cache.connect()
    app.state.cache = cache
    yield
    # Shutdown
    await cache.disconnect()
    await dispose_engine()


app = FastAPI(
    title="Article Hub API",
    description="Articles owned by users, with cache-aside reads",
    version="1.0.0",
    lifespan=lifespan,
)

# Middleware
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Error mapping
@app.exception_handler(ArticleHubError)
async def articlehub_error_handler(request: Request, exc: ArticleHubError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.exception_handler(OperationalError)
@app.exception_handler(InterfaceError)
async def database_unavailable_handler(request: Request, exc: Exception):
    logger.error("Database unavailable during %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=503, content={"detail": "Service temporarily unavailable"})


# Routers
app.include_router(articles.router)
app.include_router(auth.router)


@app.get("/health")
async def health():
    return {"status": "healthy", "version": "1.0.0"}
