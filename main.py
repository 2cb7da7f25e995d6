import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from analytics_app.config import settings
from analytics_app.database.connection import engine, Base
from analytics_app.exceptions import WebsiteNotFoundError
from analytics_app.api.v1 import send

# Import models to ensure they're registered with Base
from analytics_app.models import Website, VisitorSession, WebsiteEvent

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

# Create database tables
Base.metadata.create_all(bind=engine)

# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Pageview collector with deduplicated visitor sessions",
    debug=settings.debug
)


@app.exception_handler(WebsiteNotFoundError)
async def website_not_found_handler(request: Request, exc: WebsiteNotFoundError):
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"detail": str(exc)},
    )


@app.get("/")
def read_root():
    """Root endpoint with API information"""
    return {
        "message": f"Welcome to {settings.app_name}",
        "version": settings.app_version,
        "docs": "/docs",
        "redoc": "/redoc"
    }


@app.get("/health")
def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "environment": settings.environment,
        "cache_backend": settings.cache_backend,
        "event_storage_backend": settings.event_storage_backend,
    }


######## Include routers
app.include_router(send.router, prefix="/api")
