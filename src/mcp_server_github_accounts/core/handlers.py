"""Tool call handlers for the GitHub multi-account MCP server"""

import logging
import os
import time
from typing import Any, Dict, List, Optional

from mcp.types import TextContent

from ..configuration import ApplicationConfig
from ..error_handling import ProtocolError, classify_error, log_error
from ..github import GhGateway
from .tools import GitHubToolRouter, ToolRegistry

logger = logging.getLogger(__name__)


class CallToolHandler:
    """Centralized tool call handler using the router system"""

    def __init__(
        self,
        config: Optional[ApplicationConfig] = None,
        gateway: Optional[GhGateway] = None,
    ):
        if gateway is None:
            if config is None:
                raise ValueError("CallToolHandler needs a config or a gateway")
            gateway = GhGateway(config)

        self.gateway = gateway
        self.registry = ToolRegistry()
        self.registry.initialize_default_tools()
        self.router = GitHubToolRouter(self.registry, gateway)

    def list_tools(self):
        return self.registry.list_tools()

    async def call_tool(
        self, name: str, arguments: Optional[Dict[str, Any]]
    ) -> List[TextContent]:
        """Main tool call entry point.

        Failures are logged here and re-raised as ``ProtocolError`` carrying
        only the error message; the MCP server reports that as an error
        result to the client.
        """
        request_id = os.urandom(4).hex()
        account = (arguments or {}).get("account")
        extra = {"request_id": request_id, "tool": name, "account": account}

        logger.info(f"🔧 [{request_id}] Tool call: {name}", extra=extra)
        start_time = time.time()

        try:
            result = await self.router.route_tool_call(name, arguments)
        except Exception as e:
            duration = time.time() - start_time
            log_error(classify_error(e, operation=name, request_id=request_id))
            logger.info(
                f"❌ [{request_id}] Tool '{name}' failed after {duration:.2f}s",
                extra={**extra, "duration_ms": round(duration * 1000)},
            )
            raise ProtocolError(str(e)) from e

        duration = time.time() - start_time
        logger.info(
            f"✅ [{request_id}] Tool '{name}' completed in {duration:.2f}s",
            extra={**extra, "duration_ms": round(duration * 1000)},
        )
        return result
