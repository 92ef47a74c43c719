"""Chat-completion provider speaking the OpenAI-compatible HTTP API."""

from __future__ import annotations

import json
import uuid
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import httpx

from slimbot.config import ProviderConfig

DEFAULT_API_URL = "https://api.openai.com/v1/chat/completions"
CHAT_COMPLETIONS_PATH = "/v1/chat/completions"
_PREVIEW_CHARS = 100


class ProviderError(Exception):
    """Raised when a chat request fails or its response cannot be understood."""


class FinishReason(Enum):
    """Why the model stopped generating."""

    STOP = "stop"
    TOOL_CALLS = "tool_calls"
    LENGTH = "length"
    ERROR = "error"

    @classmethod
    def parse(cls, value: str | None) -> FinishReason:
        """Map an API ``finish_reason``; missing or unknown values become ERROR."""
        if value in ("stop", "tool_calls", "length"):
            return cls(value)
        return cls.ERROR

    def __str__(self) -> str:
        return self.value


@dataclass
class Usage:
    """Token accounting reported by the API."""

    prompt_tokens: int = 0
    prompt_cache_hit_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0

    def __str__(self) -> str:
        return (
            f"Usage(prompt={self.prompt_tokens}, cache_hit={self.prompt_cache_hit_tokens}, "
            f"completion={self.completion_tokens}, total={self.total_tokens})"
        )


@dataclass
class ToolCall:
    """A function call requested by the model."""

    id: str
    name: str
    args: Any = field(default_factory=dict)


@dataclass
class ToolDefinition:
    """A function the model may call, described by a JSON schema."""

    name: str
    description: str
    parameters: Any = field(default_factory=dict)


@dataclass
class LLMResponse:
    """The parsed first choice of a chat completion."""

    content: str | None
    tool_calls: list[ToolCall] | None
    finish_reason: FinishReason
    usage: Usage = field(default_factory=Usage)

    def __str__(self) -> str:
        text = self.content if self.content is not None else "(empty)"
        preview = json.dumps(text[:_PREVIEW_CHARS], ensure_ascii=False)
        tool_count = len(self.tool_calls) if self.tool_calls is not None else 0
        return (
            f"LLMResponse {{ finish: {self.finish_reason}, content: {preview}, "
            f"tool_calls: {tool_count}, {self.usage} }}"
        )


def resolve_api_url(config: ProviderConfig) -> str:
    """``api_url`` if set, else ``base_url`` + the completions path, else the default."""
    if config.api_url:
        return config.api_url
    if config.base_url:
        return config.base_url.rstrip("/") + CHAT_COMPLETIONS_PATH
    return DEFAULT_API_URL


def _dump_args(args: Any) -> str:
    return json.dumps(args, ensure_ascii=False, separators=(",", ":"), sort_keys=True)


def _encode_tool_call(call: ToolCall | Mapping[str, Any]) -> dict[str, Any]:
    if isinstance(call, Mapping):
        call = ToolCall(id=call["id"], name=call["name"], args=call.get("args", {}))
    return {
        "id": call.id,
        "type": "function",
        "function": {"name": call.name, "arguments": _dump_args(call.args)},
    }


def _encode_message(message: Mapping[str, Any]) -> dict[str, Any]:
    role = message.get("role")
    if role in ("system", "user"):
        return {"role": role, "content": message.get("content", "")}
    if role == "assistant":
        encoded: dict[str, Any] = {"role": "assistant", "content": message.get("content")}
        calls = message.get("tool_calls")
        if calls is not None:
            encoded["tool_calls"] = [_encode_tool_call(call) for call in calls]
        return encoded
    if role == "tool":
        encoded = {
            "role": "tool",
            "content": message.get("content", ""),
            "tool_call_id": message.get("tool_call_id", ""),
        }
        name = message.get("name")
        if name is not None:
            encoded["name"] = name
        return encoded
    raise ProviderError(f"Unknown message role: {role!r}")


def build_request_body(
    config: ProviderConfig,
    messages: Sequence[Mapping[str, Any]],
    tools: Sequence[ToolDefinition] | None = None,
) -> dict[str, Any]:
    """The JSON body of a chat-completion request.

    Messages are mappings with a ``role`` of system, user, assistant or tool.
    """
    body: dict[str, Any] = {
        "model": config.model,
        "messages": [_encode_message(m) for m in messages],
        "temperature": config.temperature,
        "max_tokens": config.max_tokens,
    }
    if tools is not None:
        body["tools"] = [
            {
                "type": "function",
                "function": {
                    "name": tool.name,
                    "description": tool.description,
                    "parameters": tool.parameters,
                },
            }
            for tool in tools
        ]
    return body


def _require(condition: bool, what: str) -> None:
    if not condition:
        raise ProviderError(f"Failed to parse API response: {what}")


def _parse_tool_call(raw: Any) -> ToolCall:
    _require(isinstance(raw, dict), "tool call must be an object")
    call_id = raw.get("id")
    _require(call_id is None or isinstance(call_id, str), "tool call id must be a string")
    _require(isinstance(raw.get("type"), str), "tool call type must be a string")
    function = raw.get("function")
    _require(isinstance(function, dict), "tool call function must be an object")
    name = function.get("name")
    arguments = function.get("arguments")
    _require(isinstance(name, str), "function name must be a string")
    _require(isinstance(arguments, str), "function arguments must be a string")
    try:
        args = json.loads(arguments)
    except ValueError:
        args = {}
    return ToolCall(id=call_id or str(uuid.uuid4()), name=name, args=args)


def _count(usage: dict[str, Any], key: str) -> int:
    value = usage.get(key)
    if value is None:
        return 0
    _require(
        isinstance(value, int) and not isinstance(value, bool) and value >= 0,
        f"usage `{key}` must be a non-negative integer",
    )
    return value


def parse_response(data: Any) -> LLMResponse:
    """Turn a decoded chat-completion response into an ``LLMResponse``.

    Tool calls without an id are given a fresh UUID; unparsable arguments become ``{}``.
    """
    _require(isinstance(data, dict), "response must be an object")
    choices = data.get("choices")
    _require(isinstance(choices, list), "missing field `choices`")
    for choice in choices:
        _require(isinstance(choice, dict), "choice must be an object")
        _require(isinstance(choice.get("message"), dict), "missing field `message`")
    if not choices:
        raise ProviderError("API response has no result")

    choice = choices[0]
    message = choice["message"]
    finish = choice.get("finish_reason")
    _require(finish is None or isinstance(finish, str), "finish_reason must be a string")
    content = message.get("content")
    _require(content is None or isinstance(content, str), "content must be a string")

    raw_calls = message.get("tool_calls")
    tool_calls = None
    if raw_calls is not None:
        _require(isinstance(raw_calls, list), "tool_calls must be a list")
        tool_calls = [_parse_tool_call(raw) for raw in raw_calls]

    raw_usage = data.get("usage")
    usage = Usage()
    if raw_usage is not None:
        _require(isinstance(raw_usage, dict), "usage must be an object")
        usage = Usage(
            prompt_tokens=_count(raw_usage, "prompt_tokens"),
            prompt_cache_hit_tokens=_count(raw_usage, "prompt_cache_hit_tokens"),
            completion_tokens=_count(raw_usage, "completion_tokens"),
            total_tokens=_count(raw_usage, "total_tokens"),
        )

    return LLMResponse(
        content=content,
        tool_calls=tool_calls,
        finish_reason=FinishReason.parse(finish),
        usage=usage,
    )


class OpenAIProvider:
    """Sends chat requests to an OpenAI-compatible endpoint."""

    def __init__(self, config: ProviderConfig, client: httpx.AsyncClient | None = None) -> None:
        self.config = config
        self.client = client
        self.api_url = resolve_api_url(config)

    async def chat(
        self,
        messages: Sequence[Mapping[str, Any]],
        tools: Sequence[ToolDefinition] | None = None,
    ) -> LLMResponse:
        """Send one chat-completion request and parse its first choice."""
        body = build_request_body(self.config, messages, tools)
        headers = {
            "Authorization": f"Bearer {self.config.api_key}",
            "Content-Type": "application/json",
        }
        try:
            if self.client is not None:
                response = await self.client.post(self.api_url, json=body, headers=headers)
            else:
                async with httpx.AsyncClient(timeout=None) as client:
                    response = await client.post(self.api_url, json=body, headers=headers)
        except httpx.HTTPError as exc:
            raise ProviderError(f"API request failed: {exc}") from exc

        if not response.is_success:
            raise ProviderError(
                f"API request failed: {response.status_code} {response.reason_phrase}"
                f" - {response.text}"
            )
        try:
            data = response.json()
        except ValueError as exc:
            raise ProviderError(f"Failed to parse API response: {exc}") from exc
        return parse_response(data)