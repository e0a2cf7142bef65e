from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from contextlib import asynccontextmanager
from database import database
from routes import search
from services.invitation_lookup import InvitationLookupError, MSG_SERVER_ERROR

import os
import logging
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables
ROOT_DIR = Path(__file__).parent
load_dotenv(ROOT_DIR / '.env')

STATIC_DIR = ROOT_DIR / "static"
SERVICE_NAME = "Invitation Letter Lookup"
VERSION = "1.0.0"

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


# Lifespan context manager for startup/shutdown
@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: the record store connects lazily on the first search
    logger.info(f"Starting {SERVICE_NAME} API")

    yield

    # Shutdown
    logger.info(f"Shutting down {SERVICE_NAME} API")
    await database.close()

# Create FastAPI app
app = FastAPI(
    title=f"{SERVICE_NAME} API",
    description="Find an invitation letter by phone number",
    version=VERSION,
    lifespan=lifespan
)

# CORS configuration
app.add_middleware(
    CORSMiddleware,
    allow_credentials=True,
    allow_origins=os.environ.get('CORS_ORIGINS', '*').split(','),
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(search.router)

# Root endpoint
@app.get("/api")
async def root():
    return {
        "service": SERVICE_NAME,
        "version": VERSION,
        "status": "operational"
    }

# Health check; ?deep=true also pings the record store
@app.get("/api/health")
async def health_check(deep: bool = False):
    body = {
        "status": "healthy",
        "environment": os.getenv("ENVIRONMENT", "development")
    }
    if not deep:
        return body
    if await database.ping():
        body["database"] = "ok"
        return body
    body["status"] = "degraded"
    body["database"] = "unavailable"
    return JSONResponse(status_code=503, content=body)


@app.exception_handler(InvitationLookupError)
async def lookup_exception_handler(request: Request, exc: InvitationLookupError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message}
    )


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"error": MSG_SERVER_ERROR}
    )

# Lookup page, mounted after the API routes so /api/* takes precedence
if STATIC_DIR.is_dir():
    app.mount("/", StaticFiles(directory=STATIC_DIR, html=True), name="static")

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "server:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", "8001")),
        reload=os.getenv("ENVIRONMENT") == "development"
    )
