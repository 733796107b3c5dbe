"""
Memegen MCP Server - HTTP entry point.

This FastAPI application serves the same memegen tools as the stdio MCP
server, for callers that speak plain HTTP:
1. List tool definitions
2. Call a tool with a JSON object of arguments
3. Health and readiness checks

The service never renders images itself; create_meme returns a memegen.link URL.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from memegen_mcp.config import get_settings
from memegen_mcp.routes.tools import router as tools_router

# =============================================================================
# LOGGING CONFIGURATION
# =============================================================================

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

logger = logging.getLogger(__name__)


# =============================================================================
# APPLICATION LIFESPAN
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Handles startup and shutdown events.
    """
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")
    logger.info(f"Debug mode: {settings.DEBUG}")
    logger.info(f"Memegen API base: {settings.MEMEGEN_API_BASE}")
    logger.info(f"CORS origins: {settings.cors_origins_list}")

    yield

    logger.info("Application shutdown")


# =============================================================================
# APPLICATION INSTANCE
# =============================================================================

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="""
## Memegen MCP Server

Tools for browsing memegen.link templates and building meme image URLs.

### Key Endpoints

- `GET /api/v1/tools` - List tools and their input schemas
- `POST /api/v1/tools/{name}` - Call a tool
- `GET /api/v1/health` - Health check
- `GET /api/v1/health/ready` - Readiness check
    """,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)


# =============================================================================
# MIDDLEWARE
# =============================================================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# ROUTES
# =============================================================================

app.include_router(tools_router)


@app.get("/", include_in_schema=False)
async def root():
    """Root endpoint - points at the API documentation."""
    return {
        "message": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "docs": "/docs",
        "health": "/api/v1/health",
    }


# =============================================================================
# MAIN ENTRY POINT
# =============================================================================

def run() -> None:
    import uvicorn

    uvicorn.run(
        "memegen_mcp.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )


if __name__ == "__main__":
    run()
