"""Slack Web API client that returns provider responses untouched."""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Optional, Union

import aiohttp
from slack_sdk.errors import SlackApiError
from slack_sdk.web.async_client import AsyncWebClient

from .config import WorkspaceConfig

logger = logging.getLogger(__name__)

# Slack caps conversations.list and users.list pages at 200 entries
MAX_PAGE_SIZE = 200
DEFAULT_PAGE_SIZE = 100
DEFAULT_HISTORY_LIMIT = 10

# Decoded Slack body; a non-JSON error body arrives as the raw string
SlackPayload = Union[dict[str, Any], str]


class SlackTransportError(Exception):
    """The request to Slack never produced a response (connection, DNS, timeout)."""

    def __init__(self, method: str, cause: BaseException):
        super().__init__(f"{method} failed: {str(cause) or type(cause).__name__}")
        self.method = method
        self.cause = cause


@dataclass(frozen=True)
class OpenListing:
    """Channels are discovered through paginated conversations.list."""


@dataclass(frozen=True)
class PinnedListing:
    """Channels come from a fixed allow-list, looked up one by one."""
    channel_ids: tuple[str, ...]


ListingMode = Union[OpenListing, PinnedListing]


def listing_mode_for(workspace: WorkspaceConfig) -> ListingMode:
    if workspace.channel_ids:
        return PinnedListing(tuple(workspace.channel_ids))
    return OpenListing()


@dataclass
class SlackClient:
    """Client for a single Slack workspace.

    Every method performs exactly one Web API call (the pinned channel
    listing performs one per pinned id) and returns the decoded body as-is,
    including bodies with ``ok: false``.
    """
    workspace: WorkspaceConfig
    client: AsyncWebClient = field(init=False)
    listing: ListingMode = field(init=False)

    def __post_init__(self):
        # retry_handlers=[] turns off the SDK's connection-error retry
        self.client = AsyncWebClient(
            token=self.workspace.bot_token,
            timeout=self.workspace.timeout,
            retry_handlers=[],
        )
        self.listing = listing_mode_for(self.workspace)

    async def _call(self, method: str, request: Awaitable) -> SlackPayload:
        """Await a Web API request and unwrap its body."""
        logger.debug("Calling Slack %s", method)
        try:
            response = await request
        except SlackApiError as e:
            data = e.response.data
            error = data.get("error") if isinstance(data, dict) else None
            logger.info("Slack %s returned error: %s", method, error or e.response.status_code)
            return data
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.warning("Slack %s transport failure: %r", method, e)
            raise SlackTransportError(method, e) from e
        return response.data

    async def list_channels(self, limit: int = DEFAULT_PAGE_SIZE, cursor: Optional[str] = None) -> SlackPayload:
        """List public channels, or the pinned channels when configured."""
        if isinstance(self.listing, PinnedListing):
            return await self._list_pinned_channels(self.listing.channel_ids)

        kwargs = {
            "types": "public_channel",
            "exclude_archived": True,
            "limit": min(int(limit), MAX_PAGE_SIZE),
            "team_id": self.workspace.team_id,
        }
        if cursor:
            kwargs["cursor"] = cursor
        return await self._call("conversations.list", self.client.conversations_list(**kwargs))

    async def _list_pinned_channels(self, channel_ids: tuple[str, ...]) -> SlackPayload:
        # Sequential lookups keep the result in pinned-list order
        channels = []
        for channel_id in channel_ids:
            data = await self._call("conversations.info", self.client.conversations_info(channel=channel_id))
            ok = isinstance(data, dict) and data.get("ok")
            channel = data.get("channel") if ok else None
            if not channel or channel.get("is_archived"):
                logger.debug("Skipping pinned channel %s", channel_id)
                continue
            channels.append(channel)

        return {
            "ok": True,
            "channels": channels,
            "response_metadata": {"next_cursor": ""},
        }

    # Write methods

    async def post_message(self, channel_id: str, text: str) -> SlackPayload:
        """Post a top-level message to a channel."""
        return await self._call(
            "chat.postMessage",
            self.client.chat_postMessage(channel=channel_id, text=text),
        )

    async def post_reply(self, channel_id: str, thread_ts: str, text: str) -> SlackPayload:
        """Post a message into the thread whose parent is thread_ts."""
        return await self._call(
            "chat.postMessage",
            self.client.chat_postMessage(channel=channel_id, thread_ts=thread_ts, text=text),
        )

    async def add_reaction(self, channel_id: str, timestamp: str, reaction: str) -> SlackPayload:
        """Add an emoji reaction. The name is sent as given, without colons."""
        return await self._call(
            "reactions.add",
            self.client.reactions_add(channel=channel_id, timestamp=timestamp, name=reaction),
        )

    # Read methods

    async def get_channel_history(self, channel_id: str, limit: int = DEFAULT_HISTORY_LIMIT) -> SlackPayload:
        return await self._call(
            "conversations.history",
            self.client.conversations_history(channel=channel_id, limit=int(limit)),
        )

    async def get_thread_replies(self, channel_id: str, thread_ts: str) -> SlackPayload:
        return await self._call(
            "conversations.replies",
            self.client.conversations_replies(channel=channel_id, ts=thread_ts),
        )

    async def get_users(self, limit: int = DEFAULT_PAGE_SIZE, cursor: Optional[str] = None) -> SlackPayload:
        """List workspace members, one page at a time."""
        kwargs = {
            "limit": min(int(limit), MAX_PAGE_SIZE),
            "team_id": self.workspace.team_id,
        }
        if cursor:
            kwargs["cursor"] = cursor
        return await self._call("users.list", self.client.users_list(**kwargs))

    async def get_user_profile(self, user_id: str) -> SlackPayload:
        return await self._call(
            "users.profile.get",
            self.client.users_profile_get(user=user_id, include_labels=True),
        )
