"""MCP stdio server exposing the GitHub tools"""

import logging
from typing import Any, Dict, List, Optional

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

from .configuration import PROJECT_NAME, ApplicationConfig
from .core.handlers import CallToolHandler

logger = logging.getLogger(__name__)

INSTRUCTIONS = (
    "GitHub MCP server with multi-account support. Use the 'account' parameter "
    "to specify which GitHub account to use (e.g., 'home' or 'work'). If not "
    "specified, the default account will be used."
)


def create_server(handler: CallToolHandler) -> Server:
    """Build the low-level MCP server around ``handler``"""
    server = Server(PROJECT_NAME, instructions=INSTRUCTIONS)

    @server.list_tools()
    async def list_tools() -> List[Tool]:
        return handler.list_tools()

    @server.call_tool()
    async def call_tool(name: str, arguments: Optional[Dict[str, Any]]) -> List[TextContent]:
        # Raised errors become isError results carrying only the message
        return await handler.call_tool(name, arguments)

    return server


async def serve(
    config: ApplicationConfig, handler: Optional[CallToolHandler] = None
) -> None:
    """Run the server over stdio until the client disconnects"""
    handler = handler or CallToolHandler(config)
    server = create_server(handler)

    logger.info(
        f"🚀 Starting {PROJECT_NAME} with {len(config.accounts)} account(s), "
        f"default '{config.default_account}'"
    )

    options = server.create_initialization_options()
    try:
        async with stdio_server() as (read_stream, write_stream):
            logger.info("Server running. Waiting for requests...")
            await server.run(read_stream, write_stream, options)
    finally:
        logger.info(f"{PROJECT_NAME} shutting down.")
