"""ChatCompletionClient - HTTP communication with an OpenAI-compatible endpoint."""

import asyncio
import json

import aiohttp

from agent.config import AgentConfig, ApiConfig
from agent.exceptions import ReasoningApiError, ReasoningConnectionError
from agent.response import ChatResponse, ToolCall, Usage


class ChatCompletionClient:
    """Stateless async client for ``POST {endpoint}/chat/completions``.

    Every call issues exactly one request. Failures are raised to the caller;
    nothing is retried.
    """

    def __init__(
        self,
        api: ApiConfig,
        connect_timeout: float = 10.0,
        read_timeout: float = 120.0,
    ):
        self.api = api
        self.connect_timeout = connect_timeout
        self.read_timeout = read_timeout

    @classmethod
    def from_config(cls, config: AgentConfig) -> "ChatCompletionClient":
        return cls(
            api=config.api,
            connect_timeout=config.http.connect_timeout,
            read_timeout=config.http.read_timeout,
        )

    @property
    def url(self) -> str:
        return f"{self.api.endpoint.rstrip('/')}/chat/completions"

    async def chat_completion(
        self,
        messages: list[dict],
        tools: list[dict] | None = None,
    ) -> ChatResponse:
        """Send the conversation (and tool schemas) and return the first choice."""
        payload = self.build_payload(messages, tools)
        data = await self._post(payload)
        return self.parse_response(data)

    async def test_connection(self) -> str:
        """Send a one-word prompt and return the reply text."""
        payload = {
            "model": self.api.model,
            "messages": [{"role": "user", "content": "Say 'Hello' in one word."}],
            "max_tokens": 10,
            "temperature": 0.0,
        }
        data = await self._post(payload)
        response = self.parse_response(data)
        return response.content or "Connected"

    def build_payload(self, messages: list[dict], tools: list[dict] | None = None) -> dict:
        payload = {
            "model": self.api.model,
            "messages": messages,
            "max_tokens": self.api.max_tokens,
            "temperature": self.api.temperature,
        }
        if tools:
            payload["tools"] = tools
            payload["tool_choice"] = "auto"
        return payload

    @staticmethod
    def parse_response(data: dict) -> ChatResponse:
        """Pick the first choice out of a chat-completion body."""
        choices = data.get("choices") if isinstance(data, dict) else None
        if not choices:
            raise ReasoningApiError("No response from API", body=json.dumps(data, default=str))

        choice = choices[0] or {}
        message = choice.get("message") or {}

        tool_calls: list[ToolCall] = []
        for raw in message.get("tool_calls") or []:
            function = raw.get("function") or {}
            arguments = function.get("arguments")
            if arguments is None:
                arguments = "{}"
            elif not isinstance(arguments, str):
                # Some servers send the arguments already decoded.
                arguments = json.dumps(arguments)
            tool_calls.append(
                ToolCall(
                    id=str(raw.get("id", "")),
                    name=str(function.get("name", "")),
                    arguments=arguments,
                )
            )

        usage = None
        usage_raw = data.get("usage")
        if isinstance(usage_raw, dict):
            usage = Usage(
                prompt_tokens=int(usage_raw.get("prompt_tokens") or 0),
                completion_tokens=int(usage_raw.get("completion_tokens") or 0),
                total_tokens=int(usage_raw.get("total_tokens") or 0),
            )

        return ChatResponse(
            content=message.get("content"),
            tool_calls=tool_calls,
            finish_reason=choice.get("finish_reason"),
            usage=usage,
        )

    async def _post(self, payload: dict) -> dict:
        headers = {
            "Authorization": f"Bearer {self.api.api_key}",
            "Content-Type": "application/json",
        }
        try:
            async with aiohttp.ClientSession(timeout=self._timeout()) as session:
                async with session.post(self.url, json=payload, headers=headers) as resp:
                    if resp.status < 200 or resp.status >= 300:
                        body = await resp.text()
                        raise ReasoningApiError(
                            f"API error (HTTP {resp.status}): {body}",
                            status=resp.status,
                            body=body,
                        )
                    try:
                        return await resp.json(content_type=None)
                    except json.JSONDecodeError as e:
                        raise ReasoningApiError(
                            f"API returned invalid JSON: {e}", status=resp.status
                        ) from e
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise ReasoningConnectionError(
                f"Cannot reach chat endpoint at {self.url}: {str(e) or type(e).__name__}"
            ) from e

    def _timeout(self) -> aiohttp.ClientTimeout:
        """Build a client timeout configuration from settings."""
        return aiohttp.ClientTimeout(
            total=None,
            connect=self.connect_timeout,
            sock_connect=self.connect_timeout,
            sock_read=self.read_timeout,
        )
