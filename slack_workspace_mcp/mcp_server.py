"""MCP server exposing Slack workspace tools over stdio, SSE and streamable HTTP."""

import argparse
import asyncio
import contextlib
import logging
import sys
from typing import Any, Optional

from mcp.server import Server
from mcp.server.sse import SseServerTransport
from mcp.server.stdio import stdio_server
from mcp.server.streamable_http_manager import StreamableHTTPSessionManager
from mcp.types import TextContent, Tool
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import Response
from starlette.routing import Mount, Route

from .config import ConfigError, get_config
from .slack_client import SlackClient
from .tools import TOOLS, TOOLS_BY_NAME, render

SERVER_NAME = "slack-workspace-mcp"

logger = logging.getLogger(__name__)


def create_server(client: SlackClient) -> Server:
    """Build an MCP server whose tools are backed by the given client."""
    server = Server(SERVER_NAME)

    @server.list_tools()
    async def list_tools() -> list[Tool]:
        """List available Slack tools."""
        return [spec.as_tool() for spec in TOOLS]

    @server.call_tool()
    async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
        """Handle tool calls.

        Provider errors come back as ordinary output. Anything raised here
        (unknown tool, transport failure) is reported by the server as a
        failed tool call.
        """
        spec = TOOLS_BY_NAME.get(name)
        if spec is None:
            raise ValueError(f"Unknown tool: {name}")

        logger.debug("Tool call %s", name)
        payload = await spec.handler(client, arguments or {})
        return render(payload)

    return server


def create_http_app(server: Server) -> Starlette:
    """Serve the MCP server over SSE (/sse) and streamable HTTP (/mcp).

    Unknown paths fall through to Starlette's 404.
    """
    sse = SseServerTransport("/sse/message/")
    session_manager = StreamableHTTPSessionManager(app=server, stateless=True)

    async def handle_sse(request: Request) -> Response:
        async with sse.connect_sse(request.scope, request.receive, request._send) as (read_stream, write_stream):
            await server.run(read_stream, write_stream, server.create_initialization_options())
        return Response()

    async def handle_streamable_http(scope, receive, send) -> None:
        await session_manager.handle_request(scope, receive, send)

    @contextlib.asynccontextmanager
    async def lifespan(app: Starlette):
        async with session_manager.run():
            yield

    return Starlette(
        routes=[
            Route("/sse", endpoint=handle_sse, methods=["GET"]),
            Mount("/sse/message/", app=sse.handle_post_message),
            Mount("/mcp", app=handle_streamable_http),
        ],
        lifespan=lifespan,
    )


async def run_stdio(server: Server):
    """Run the MCP server on stdin/stdout."""
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())


def run_http(server: Server, host: str, port: int, log_level: str):
    import uvicorn

    uvicorn.run(create_http_app(server), host=host, port=port, log_level=log_level.lower())


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Serve Slack workspace tools over the Model Context Protocol",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # stdio, for MCP clients that spawn the server
  %(prog)s

  # SSE on /sse and streamable HTTP on /mcp
  %(prog)s --transport http --port 8000
        """,
    )

    parser.add_argument(
        "--transport", "-t",
        choices=["stdio", "http"],
        default="stdio",
        help="Transport to serve on (default: stdio)",
    )

    parser.add_argument(
        "--host",
        type=str,
        default="127.0.0.1",
        help="Host to bind for the http transport (default: 127.0.0.1)",
    )

    parser.add_argument(
        "--port", "-p",
        type=int,
        default=8000,
        help="Port to bind for the http transport (default: 8000)",
    )

    parser.add_argument(
        "--log-level",
        type=str,
        help="Logging level (default: SLACK_MCP_LOG_LEVEL or INFO)",
    )

    return parser


def main(argv: Optional[list[str]] = None):
    """Entry point."""
    args = build_parser().parse_args(argv)

    try:
        config = get_config()
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    log_level = (args.log_level or config.log_level).upper()
    # stdout carries the stdio transport, so logs go to stderr
    logging.basicConfig(
        stream=sys.stderr,
        level=log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    client = SlackClient(workspace=config)
    server = create_server(client)
    logger.info(
        "Starting %s (%s transport, %s channel listing)",
        SERVER_NAME,
        args.transport,
        "pinned" if config.channel_ids else "open",
    )

    if args.transport == "http":
        run_http(server, args.host, args.port, log_level)
    else:
        asyncio.run(run_stdio(server))


if __name__ == "__main__":
    main()
