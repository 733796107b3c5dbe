# Routes package - HTTP endpoints for the tool API
from memegen_mcp.routes.tools import router

__all__ = ["router"]
