# Services package - memegen API client, URL builder and tool dispatch
from memegen_mcp.services.memegen import MemegenService
from memegen_mcp.services.tools import ToolDispatcher
from memegen_mcp.services.url_builder import build_meme_url, encode_text_segment

__all__ = [
    "MemegenService",
    "ToolDispatcher",
    "build_meme_url",
    "encode_text_segment",
]
