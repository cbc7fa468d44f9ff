import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from forum.config import settings
from forum.database import engine
from forum.handlers import register_exception_handlers
from forum.logging_config import configure_logging
from forum.middleware import RequestLoggingMiddleware
from forum.routers import auth, comments, posts, topics, users

configure_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting forum API (env=%s)", settings.APP_ENV)
    yield
    await engine.dispose()


app = FastAPI(
    title="Forum API",
    description="Posts, comments and topics with bearer-token ownership checks",
    version="1.0.0",
    lifespan=lifespan,
)

# Middleware
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Routers
app.include_router(auth.router)
app.include_router(users.router)
app.include_router(posts.router)
app.include_router(comments.router)
app.include_router(topics.router)

@app.get("/health")
async def health():
    return {"status": "healthy", "version": "1.0.0"}
