"""
Auth Bridge Backend - FastAPI Application

Issues AWS Cognito sessions for users who sign in with Discord.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from authbridge.config import get_settings
from authbridge.dependencies.directory import reset_directory
from authbridge.routers import cognito, discord, health
from authbridge.services.discord_oauth import close_discord_client

settings = get_settings()


# ==================== Logging Setup ====================

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s | %(levelname)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("authbridge")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Shutdown:
    - Close the Discord HTTP client
    - Drop the cached user pool client
    """
    logger.info(f"Starting Auth Bridge (log level {settings.log_level.upper()})")

    yield

    logger.info("Shutting down Auth Bridge...")
    await close_discord_client()
    reset_directory()


# Create FastAPI application
app = FastAPI(
    title="Auth Bridge API",
    description="""
## Discord to Cognito Authentication Bridge

Users sign in with Discord; sessions are issued by an AWS Cognito user pool.

### Flow
1. `POST /api/v1/discord/oauth` trades the Discord authorization code for a Discord token
2. `POST /api/v1/cognito/create-user` creates (or re-enables) the pool user and returns
   a Cognito refresh token and access token
3. `POST /api/v1/cognito/auth` exchanges the refresh token for a new access token

Passwords are generated internally, used once, and never stored or returned.
    """,
    version="0.1.0",
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log method, path, status and user agent for every request."""
    response = await call_next(request)
    logger.info(
        f"[{request.method}] {request.url.path} -> {response.status_code} "
        f"(user-agent: {request.headers.get('user-agent', 'unknown')})"
    )
    return response


# Include routers
app.include_router(health.router)
app.include_router(discord.router)
app.include_router(cognito.router)


@app.get("/", tags=["Root"])
async def root():
    """Root endpoint with API information."""
    return {
        "name": "Auth Bridge API",
        "version": "0.1.0",
        "docs": "/docs",
        "health": "/health",
    }
