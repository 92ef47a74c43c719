"""Application configuration: loading, validation and saving of config.json."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

DEFAULT_PROVIDER_TYPE = "openai"
DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_TOKENS = 4096
DEFAULT_MAX_ITERATIONS = 40
DEFAULT_TIMEOUT_SECONDS = 120
DEFAULT_MAX_TOOL_RESULT_CHARS = 8000
DEFAULT_PERSIST_TOOL_RESULTS = True

_MISSING = object()
_REQUIRED_PROVIDER_FIELDS = ("api_key", "model")


class ConfigError(Exception):
    """Raised when a configuration cannot be read, parsed or validated."""


def _field(data: Any, key: str, kind: type | tuple[type, ...], default: Any = _MISSING) -> Any:
    if not isinstance(data, dict):
        raise ConfigError(f"expected an object, got {type(data).__name__}")
    if key not in data:
        if default is _MISSING:
            raise ConfigError(f"missing field `{key}`")
        return default
    value = data[key]
    kinds = kind if isinstance(kind, tuple) else (kind,)
    if bool not in kinds and isinstance(value, bool):
        raise ConfigError(f"invalid type for `{key}`: expected {kinds[0].__name__}")
    if not isinstance(value, kinds):
        raise ConfigError(f"invalid type for `{key}`: expected {kinds[0].__name__}")
    if int in kinds and float not in kinds and value < 0:
        raise ConfigError(f"invalid value for `{key}`: must not be negative")
    return value


@dataclass
class ProviderConfig:
    """Connection settings for one LLM provider."""

    api_key: str
    model: str
    type: str = DEFAULT_PROVIDER_TYPE
    api_url: str = ""
    base_url: str = ""
    temperature: float = DEFAULT_TEMPERATURE
    max_tokens: int = DEFAULT_MAX_TOKENS

    @classmethod
    def from_dict(cls, data: Any) -> ProviderConfig:
        required = {name: _field(data, name, str) for name in _REQUIRED_PROVIDER_FIELDS}
        return cls(
            type=_field(data, "type", str, DEFAULT_PROVIDER_TYPE),
            api_url=_field(data, "api_url", str, ""),
            base_url=_field(data, "base_url", str, ""),
            temperature=float(_field(data, "temperature", (float, int), DEFAULT_TEMPERATURE)),
            max_tokens=_field(data, "max_tokens", int, DEFAULT_MAX_TOKENS),
            **required,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "api_url": self.api_url,
            "base_url": self.base_url,
            "api_key": self.api_key,
            "model": self.model,
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }


@dataclass
class AgentConfig:
    """Agent run settings; ``provider`` names a key of ``Config.providers``."""

    provider: str
    max_iterations: int = DEFAULT_MAX_ITERATIONS
    timeout_seconds: int = DEFAULT_TIMEOUT_SECONDS
    max_tool_result_chars: int = DEFAULT_MAX_TOOL_RESULT_CHARS
    persist_tool_results: bool = DEFAULT_PERSIST_TOOL_RESULTS

    @classmethod
    def from_dict(cls, data: Any) -> AgentConfig:
        return cls(
            provider=_field(data, "provider", str),
            max_iterations=_field(data, "max_iterations", int, DEFAULT_MAX_ITERATIONS),
            timeout_seconds=_field(data, "timeout_seconds", int, DEFAULT_TIMEOUT_SECONDS),
            max_tool_result_chars=_field(
                data, "max_tool_result_chars", int, DEFAULT_MAX_TOOL_RESULT_CHARS
            ),
            persist_tool_results=_field(
                data, "persist_tool_results", bool, DEFAULT_PERSIST_TOOL_RESULTS
            ),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "provider": self.provider,
            "max_iterations": self.max_iterations,
            "timeout_seconds": self.timeout_seconds,
            "max_tool_result_chars": self.max_tool_result_chars,
            "persist_tool_results": self.persist_tool_results,
        }


@dataclass
class ToolEntry:
    """A tool listed in the configuration."""

    name: str
    enabled: bool = True

    @classmethod
    def from_dict(cls, data: Any) -> ToolEntry:
        return cls(name=_field(data, "name", str), enabled=_field(data, "enabled", bool, True))

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "enabled": self.enabled}


@dataclass
class ChannelEntry:
    """A channel listed in the configuration, with its free-form settings."""

    type: str
    enabled: bool = True
    config: Any = None

    @classmethod
    def from_dict(cls, data: Any) -> ChannelEntry:
        return cls(
            type=_field(data, "type", str),
            enabled=_field(data, "enabled", bool, True),
            config=data.get("config"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "enabled": self.enabled, "config": self.config}


@dataclass
class Config:
    """Top-level application configuration."""

    agent: AgentConfig
    providers: dict[str, ProviderConfig]
    tools: list[ToolEntry] = field(default_factory=list)
    channels: list[ChannelEntry] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> Config:
        agent = AgentConfig.from_dict(_field(data, "agent", dict))
        providers = {
            name: ProviderConfig.from_dict(entry)
            for name, entry in _field(data, "providers", dict).items()
        }
        tools = [ToolEntry.from_dict(entry) for entry in _field(data, "tools", list, [])]
        channels = [ChannelEntry.from_dict(entry) for entry in _field(data, "channels", list, [])]
        return cls(agent=agent, providers=providers, tools=tools, channels=channels)

    def to_dict(self) -> dict[str, Any]:
        return {
            "agent": self.agent.to_dict(),
            "providers": {name: p.to_dict() for name, p in self.providers.items()},
            "tools": [t.to_dict() for t in self.tools],
            "channels": [c.to_dict() for c in self.channels],
        }

    @classmethod
    def load(cls, path: str | Path) -> Config:
        """Read, parse and validate a configuration file."""
        try:
            content = Path(path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise ConfigError(f"Failed to read config.json: {exc}") from exc
        try:
            config = cls.from_dict(json.loads(content))
        except (ValueError, ConfigError) as exc:
            raise ConfigError(f"Invalid config.json format: {exc}") from exc
        config.validate()
        return config

    def save(self, path: str | Path) -> None:
        """Write the configuration as pretty-printed JSON, creating parent directories."""
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(json.dumps(self.to_dict(), indent=2), encoding="utf-8")

    def validate(self) -> None:
        """Check that the agent references a usable provider."""
        name = self.agent.provider
        if not name:
            raise ConfigError("agent.provider must not be empty")
        provider = self.providers.get(name)
        if provider is None:
            raise ConfigError(f"Provider '{name}' referenced by agent not found in providers")
        if not provider.api_key:
            raise ConfigError(
                f"provider '{name}'.api_key must not be empty. Set it in your config file."
            )
        if not provider.model:
            raise ConfigError(f"provider '{name}'.model must not be empty")