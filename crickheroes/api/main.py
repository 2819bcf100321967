"""
CrickHeroes API Server

FastAPI server for the club portal: registration, sessions, roster
moderation, fixtures, results and the photo gallery.
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging
import os
import uvicorn
from slowapi.errors import RateLimitExceeded  # type: ignore

from crickheroes.api.routes import router, limiter as routes_limiter
from crickheroes.database import db
from crickheroes.utils.exceptions import ClubError

# Set up logging
# Allow log level to be configured via environment variable (default: INFO)
log_level = os.getenv("LOG_LEVEL", "INFO").upper()
numeric_level = getattr(logging, log_level, logging.INFO)
logging.basicConfig(
    level=numeric_level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan handler for startup and shutdown events."""
    logger.info("Starting up CrickHeroes API...")

    # Create tables that migrations haven't created yet
    try:
        await db.init_database()
        logger.info("Database initialized")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}", exc_info=True)
        # Don't raise - allow app to start so health checks can report

    yield  # App is running

    logger.info("Shutting down CrickHeroes API...")
    try:
        await db.close_database()
    except Exception as e:
        logger.error(f"Error closing database: {e}", exc_info=True)


app = FastAPI(
    title="CrickHeroes API",
    description="API for the CrickHeroes cricket club portal",
    version="1.0.0",
    lifespan=lifespan,
)

# Setup rate limiter
app.state.limiter = routes_limiter


# Every error response is rendered as {"message": "..."}


@app.exception_handler(ClubError)
async def club_error_handler(request: Request, exc: ClubError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"message": str(exc.detail)})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{field}: {first.get('msg')}" if field else first.get("msg")
    else:
        message = "Invalid request"
    return JSONResponse(status_code=400, content={"message": message})


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    return JSONResponse(
        status_code=429, content={"message": f"Rate limit exceeded: {exc.detail}"}
    )


# Add CORS middleware - origins configured via ALLOWED_ORIGINS env var
allowed_origins = os.getenv("ALLOWED_ORIGINS", "http://localhost:3000").split(",")
app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(router)


@app.get("/api/health")
async def health():
    return {"status": "ok"}


@app.get("/", response_class=HTMLResponse)
async def root():
    """API root endpoint - frontend is served separately."""
    return HTMLResponse(
        content="""
        <!DOCTYPE html>
        <html>
            <head>
                <title>CrickHeroes API</title>
                <style>
                    body { font-family: sans-serif; max-width: 800px; margin: 50px auto; padding: 20px; }
                    h1 { color: #f0c22c; }
                    a { color: #f0c22c; }
                </style>
            </head>
            <body>
                <h1>CrickHeroes API</h1>
                <p>API is running successfully!</p>
                <ul>
                    <li><a href="/docs">API Documentation</a> - Interactive API docs</li>
                    <li><a href="/api/health">Health Check</a> - System status</li>
                </ul>
            </body>
        </html>
    """
    )


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "8000")))
