"""
MCP Server Tools

This module provides MCP tool wrappers for the vidlens video pipeline.
"""

# Import all MCP tools to register them with the server
from mcp_server.tools.extract_video_frames_tool import extract_video_frames
from mcp_server.tools.analyze_video_tool import analyze_video_content
from mcp_server.tools.analyze_image_batch_tool import analyze_image_batch
from mcp_server.tools.get_video_info_tool import get_video_info
from mcp_server.tools.video_script_tool import generate_video_script
from mcp_server.tools.image_script_tool import generate_image_script

__all__ = [
    "extract_video_frames",
    "analyze_video_content",
    "analyze_image_batch",
    "get_video_info",
    "generate_video_script",
    "generate_image_script",
]
