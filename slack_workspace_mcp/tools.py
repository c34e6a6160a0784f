"""Tool table binding MCP tool names to SlackClient operations."""

import json
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from mcp.types import TextContent, Tool

from .slack_client import SlackClient, SlackPayload

Handler = Callable[[SlackClient, dict[str, Any]], Awaitable[SlackPayload]]

THREAD_TS_DESCRIPTION = (
    "The timestamp of the parent message in the format '1234567890.123456'. "
    "Timestamps in the format without the period can be converted by adding "
    "the period such that 6 numbers come after it."
)


@dataclass(frozen=True)
class ToolSpec:
    """One MCP tool: its name, argument schema and handler."""
    name: str
    description: str
    properties: dict[str, dict[str, Any]]
    required: tuple[str, ...]
    handler: Handler

    @property
    def input_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": self.properties,
            "required": list(self.required),
        }

    def as_tool(self) -> Tool:
        return Tool(name=self.name, description=self.description, inputSchema=self.input_schema)


def _given(args: dict[str, Any], *names: str) -> dict[str, Any]:
    """Pick the optional arguments the caller actually supplied."""
    return {name: args[name] for name in names if args.get(name) is not None}


def render(payload: SlackPayload) -> list[TextContent]:
    """Wrap a provider response as a single JSON text block."""
    return [TextContent(type="text", text=json.dumps(payload))]


async def _list_channels(client: SlackClient, args: dict[str, Any]) -> SlackPayload:
    return await client.list_channels(**_given(args, "limit", "cursor"))


async def _post_message(client: SlackClient, args: dict[str, Any]) -> SlackPayload:
    return await client.post_message(args["channel_id"], args["text"])


async def _reply_to_thread(client: SlackClient, args: dict[str, Any]) -> SlackPayload:
    return await client.post_reply(args["channel_id"], args["thread_ts"], args["text"])


async def _add_reaction(client: SlackClient, args: dict[str, Any]) -> SlackPayload:
    return await client.add_reaction(args["channel_id"], args["timestamp"], args["reaction"])


async def _get_channel_history(client: SlackClient, args: dict[str, Any]) -> SlackPayload:
    return await client.get_channel_history(args["channel_id"], **_given(args, "limit"))


async def _get_thread_replies(client: SlackClient, args: dict[str, Any]) -> SlackPayload:
    return await client.get_thread_replies(args["channel_id"], args["thread_ts"])


async def _get_users(client: SlackClient, args: dict[str, Any]) -> SlackPayload:
    return await client.get_users(**_given(args, "limit", "cursor"))


async def _get_user_profile(client: SlackClient, args: dict[str, Any]) -> SlackPayload:
    return await client.get_user_profile(args["user_id"])


TOOLS: list[ToolSpec] = [
    ToolSpec(
        name="slack_list_channels",
        description="List public channels in the workspace with pagination",
        properties={
            "limit": {
                "type": "number",
                "description": "Maximum number of channels to return (default 100, max 200)",
                "default": 100,
            },
            "cursor": {
                "type": "string",
                "description": "Pagination cursor for next page of results",
            },
        },
        required=(),
        handler=_list_channels,
    ),
    ToolSpec(
        name="slack_post_message",
        description="Post a new message to a Slack channel",
        properties={
            "channel_id": {
                "type": "string",
                "description": "The ID of the channel to post to",
            },
            "text": {
                "type": "string",
                "description": "The message text to post",
            },
        },
        required=("channel_id", "text"),
        handler=_post_message,
    ),
    ToolSpec(
        name="slack_reply_to_thread",
        description="Reply to a specific message thread in Slack",
        properties={
            "channel_id": {
                "type": "string",
                "description": "The ID of the channel containing the thread",
            },
            "thread_ts": {
                "type": "string",
                "description": THREAD_TS_DESCRIPTION,
            },
            "text": {
                "type": "string",
                "description": "The reply text",
            },
        },
        required=("channel_id", "thread_ts", "text"),
        handler=_reply_to_thread,
    ),
    ToolSpec(
        name="slack_add_reaction",
        description="Add a reaction emoji to a message",
        properties={
            "channel_id": {
                "type": "string",
                "description": "The ID of the channel containing the message",
            },
            "timestamp": {
                "type": "string",
                "description": "The timestamp of the message to react to",
            },
            "reaction": {
                "type": "string",
                "description": "The name of the emoji reaction (without ::)",
            },
        },
        required=("channel_id", "timestamp", "reaction"),
        handler=_add_reaction,
    ),
    ToolSpec(
        name="slack_get_channel_history",
        description="Get recent messages from a channel",
        properties={
            "channel_id": {
                "type": "string",
                "description": "The ID of the channel",
            },
            "limit": {
                "type": "number",
                "description": "Number of messages to retrieve (default 10)",
                "default": 10,
            },
        },
        required=("channel_id",),
        handler=_get_channel_history,
    ),
    ToolSpec(
        name="slack_get_thread_replies",
        description="Get all replies in a message thread",
        properties={
            "channel_id": {
                "type": "string",
                "description": "The ID of the channel containing the thread",
            },
            "thread_ts": {
                "type": "string",
                "description": THREAD_TS_DESCRIPTION,
            },
        },
        required=("channel_id", "thread_ts"),
        handler=_get_thread_replies,
    ),
    ToolSpec(
        name="slack_get_users",
        description="Get a list of all users in the workspace with their basic profile information",
        properties={
            "cursor": {
                "type": "string",
                "description": "Pagination cursor for next page of results",
            },
            "limit": {
                "type": "number",
                "description": "Maximum number of users to return (default 100, max 200)",
                "default": 100,
            },
        },
        required=(),
        handler=_get_users,
    ),
    ToolSpec(
        name="slack_get_user_profile",
        description="Get detailed profile information for a specific user",
        properties={
            "user_id": {
                "type": "string",
                "description": "The ID of the user",
            },
        },
        required=("user_id",),
        handler=_get_user_profile,
    ),
]

TOOLS_BY_NAME: dict[str, ToolSpec] = {spec.name: spec for spec in TOOLS}
