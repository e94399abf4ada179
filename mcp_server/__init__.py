"""
vidlens MCP Server

MCP (Model Context Protocol) server exposing video frame extraction,
Hunyuan vision analysis and shooting-script generation as tools.
"""

__version__ = "1.0.0"
