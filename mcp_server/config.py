"""Configuration for MCP Server."""

from dataclasses import dataclass, field
from typing import Optional

from vidlens.providers.credentials import StartupCredentials


@dataclass
class MCPServerConfig:
    """Runtime options for the MCP server process."""

    transport: str = "stdio"
    host: str = "127.0.0.1"
    port: int = 8000
    path: str = "/mcp"

    # Fallback credentials given on the command line
    startup: StartupCredentials = field(default_factory=StartupCredentials)


server_config = MCPServerConfig()


def set_startup_credentials(
    secret_id: Optional[str] = None,
    secret_key: Optional[str] = None,
    region: Optional[str] = None,
) -> StartupCredentials:
    server_config.startup = StartupCredentials(secret_id=secret_id, secret_key=secret_key, region=region)
    return server_config.startup


def get_startup_credentials() -> StartupCredentials:
    return server_config.startup
