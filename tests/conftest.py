import pytest

from slack_workspace_mcp.config import WorkspaceConfig
from slack_workspace_mcp.slack_client import SlackClient
from slack_sdk.errors import SlackApiError


class FakeResponse:
    def __init__(self, data, status_code=200):
        self.data = data
        self.status_code = status_code


class FakeWebClient:
    """Stands in for AsyncWebClient: records calls, replays canned bodies.

    ``responses`` maps a Web API method name to either a body, a
    ``(status_code, body)`` pair, an exception instance to raise, or a
    callable taking the call kwargs and returning one of those. Bodies that
    are not a 200 with ``ok: true`` raise ``SlackApiError`` like the SDK does.
    """

    def __init__(self, responses=None):
        self.responses = responses or {}
        self.calls = []

    async def _request(self, method, kwargs):
        self.calls.append((method, kwargs))
        result = self.responses.get(method, {"ok": True})
        if callable(result):
            result = result(kwargs)
        if isinstance(result, BaseException):
            raise result
        status_code, body = result if isinstance(result, tuple) else (200, result)
        response = FakeResponse(body, status_code)
        if status_code != 200 or not isinstance(body, dict) or not body.get("ok"):
            raise SlackApiError("The request to the Slack API failed.", response)
        return response

    async def conversations_list(self, **kwargs):
        return await self._request("conversations.list", kwargs)

    async def conversations_info(self, **kwargs):
        return await self._request("conversations.info", kwargs)

    async def chat_postMessage(self, **kwargs):
        return await self._request("chat.postMessage", kwargs)

    async def reactions_add(self, **kwargs):
        return await self._request("reactions.add", kwargs)

    async def conversations_history(self, **kwargs):
        return await self._request("conversations.history", kwargs)

    async def conversations_replies(self, **kwargs):
        return await self._request("conversations.replies", kwargs)

    async def users_list(self, **kwargs):
        return await self._request("users.list", kwargs)

    async def users_profile_get(self, **kwargs):
        return await self._request("users.profile.get", kwargs)


def make_client(responses=None, channel_ids=None):
    workspace = WorkspaceConfig(bot_token="xoxb-test", team_id="T123", channel_ids=channel_ids)
    client = SlackClient(workspace=workspace)
    client.client = FakeWebClient(responses)
    return client


@pytest.fixture(autouse=True)
def _clean_slack_env(monkeypatch):
    for name in ("SLACK_BOT_TOKEN", "SLACK_TEAM_ID", "SLACK_CHANNEL_IDS", "SLACK_MCP_TIMEOUT", "SLACK_MCP_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
