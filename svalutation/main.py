from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
from typing import Optional
from .core.config import Settings, settings as default_settings
from .core.database import Database
from .api import students, teachers, remarks, observations
import logging
import sys

# Configure logging
logging.basicConfig(
    level=default_settings.log_level.upper(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stdout)
    ]
)
logger = logging.getLogger(__name__)

CORS_METHODS = ["GET", "POST", "PATCH", "DELETE", "OPTIONS"]
CORS_HEADERS = ["Origin", "Content-Type", "Accept", "Authorization"]


def cors_headers(settings: Settings) -> dict:
    return {
        "Access-Control-Allow-Origin": settings.cors_origin,
        "Access-Control-Allow-Credentials": "true",
        "Access-Control-Allow-Methods": ", ".join(CORS_METHODS),
        "Access-Control-Allow-Headers": ", ".join(CORS_HEADERS),
    }


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager"""
        logger.info("Starting Svalutation API...")
        database = Database(settings.database_url)
        app.state.database = database
        try:
            if settings.create_tables:
                await database.create_tables()
            logger.info("Application startup completed successfully")
            yield
        except Exception as e:
            logger.error(f"Error during application startup: {e}")
            raise
        finally:
            logger.info("Shutting down Svalutation API...")
            await database.close()
            logger.info("Application shutdown completed")

    app = FastAPI(
        title="Svalutation API",
        description="Student observation tracking API",
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc"
    )
    app.state.settings = settings

    # Errors go back as plain text, keeping any challenge headers
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        logger.error(f"HTTP {exc.status_code} error on {request.url}: {exc.detail}")
        return PlainTextResponse(
            str(exc.detail),
            status_code=exc.status_code,
            headers=getattr(exc, "headers", None)
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.error(f"Malformed request on {request.url}: {exc.errors()}")
        messages = [
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in exc.errors()
        ]
        return PlainTextResponse("\n".join(messages), status_code=400)

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception on {request.url}: {str(exc)}", exc_info=True)
        return PlainTextResponse("Internal server error", status_code=500)

    # Include API routers
    app.include_router(students.router, prefix="/api", tags=["Students"])
    app.include_router(teachers.router, prefix="/api", tags=["Teachers"])
    app.include_router(remarks.router, prefix="/api", tags=["Remarks"])
    app.include_router(observations.router, prefix="/api", tags=["Observations"])

    @app.get("/status", status_code=204, tags=["Health"])
    async def status_check():
        """Health check endpoint"""
        return Response(status_code=204)

    # Add middleware for request logging
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log all HTTP requests"""
        logger.info(f"Incoming request: {request.method} {request.url}")

        try:
            response = await call_next(request)
            logger.info(f"Request completed: {request.method} {request.url} - Status: {response.status_code}")
            return response
        except Exception as e:
            logger.error(f"Request failed: {request.method} {request.url} - Error: {str(e)}")
            raise

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.cors_origin],
        allow_credentials=True,
        allow_methods=CORS_METHODS,
        allow_headers=CORS_HEADERS,
    )

    # Registered last, so it wraps CORSMiddleware: OPTIONS never reaches
    # routing or auth, and every response carries the fixed CORS headers
    @app.middleware("http")
    async def fixed_cors_headers(request: Request, call_next):
        headers = cors_headers(settings)
        if request.method == "OPTIONS":
            return Response(status_code=200, headers=headers)

        response = await call_next(request)
        for name, value in headers.items():
            response.headers.setdefault(name, value)
        return response

    return app


app = create_app()
