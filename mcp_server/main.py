import argparse

from loguru import logger

from vidlens.config import VidlensConfig
from vidlens.custom_logger import log_manager

from mcp_server.config import server_config, set_startup_credentials
from mcp_server.server import mcp
import mcp_server.tools  # noqa: F401  registers the tools


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="vidlens MCP server")
    parser.add_argument("--secret-id", help="Tencent Cloud SecretId used when neither env nor call provides one")
    parser.add_argument("--secret-key", help="Tencent Cloud SecretKey used when neither env nor call provides one")
    parser.add_argument("--region", help="Tencent Cloud region (default ap-beijing)")
    parser.add_argument(
        "--transport",
        choices=["stdio", "streamable-http", "sse"],
        default=server_config.transport,
        help="MCP transport (default stdio)",
    )
    parser.add_argument("--host", default=server_config.host)
    parser.add_argument("--port", type=int, default=server_config.port)
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    config = VidlensConfig()
    log_manager.configure(config.logging)
    logger.info(f"{config.app_name} {config.app_version} starting")

    startup = set_startup_credentials(args.secret_id, args.secret_key, args.region)
    if startup.secret_id and startup.secret_key:
        logger.info("Startup credentials provided on the command line")

    server_config.transport = args.transport
    if args.transport == "stdio":
        logger.info("Starting vidlens MCP Server on stdio")
        mcp.run(transport="stdio")
    else:
        logger.info(f"Starting vidlens MCP Server on http://{args.host}:{args.port}{server_config.path}")
        mcp.run(transport=args.transport, host=args.host, port=args.port, path=server_config.path)


if __name__ == '__main__':
    main()
