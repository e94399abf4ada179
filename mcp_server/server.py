from fastmcp import FastMCP
from loguru import logger
from starlette.responses import JSONResponse

from vidlens import __version__

SERVER_NAME = "vidlens MCP Server"

try:
    logger.info("Instantiating the FastMCP object")
    mcp = FastMCP(name=SERVER_NAME)
    logger.info("Successfully created an instance of FastMCP server")
except Exception as e:
    logger.exception(f"Exception occurred while creating an instance of FastMCP Server: {e}")
    raise

# Health probe endpoint, only served by the HTTP transports
@mcp.custom_route("/", methods=["GET"])
async def health_check(request):
    """Health probe endpoint for container orchestration and monitoring"""
    return JSONResponse({
        "status": "healthy",
        "service": SERVER_NAME,
        "version": __version__
    })
