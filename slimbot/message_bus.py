"""Bounded async queues carrying requests to the agent and results back."""

from __future__ import annotations

import asyncio
import json
from dataclasses import asdict, dataclass
from typing import Any

INBOUND_CAPACITY = 32
OUTBOUND_CAPACITY = 32


@dataclass
class BusRequest:
    """A user message submitted by a channel for a session."""

    session_id: str
    content: str
    channel_inject: str | None = None
    hook: Any = None


@dataclass
class BusResult:
    """The final answer of a task, routed back to its channel."""

    session_id: str
    task_id: str
    content: str

    def to_json(self) -> str:
        return json.dumps(asdict(self), ensure_ascii=False)

    @classmethod
    def from_json(cls, text: str) -> BusResult:
        data = json.loads(text)
        if not isinstance(data, dict):
            raise ValueError("bus result must be a JSON object")
        values = {}
        for key in ("session_id", "task_id", "content"):
            value = data.get(key)
            if not isinstance(value, str):
                raise ValueError(f"bus result field `{key}` must be a string")
            values[key] = value
        return cls(**values)


class MessageBus:
    """Inbound and outbound queues; a full queue makes senders wait.

    ``try_send_*`` raise ``asyncio.QueueFull`` instead of waiting.
    """

    def __init__(self) -> None:
        self.inbound: asyncio.Queue[BusRequest] = asyncio.Queue(maxsize=INBOUND_CAPACITY)
        self.outbound: asyncio.Queue[BusResult] = asyncio.Queue(maxsize=OUTBOUND_CAPACITY)

    async def send_inbound(self, request: BusRequest) -> None:
        await self.inbound.put(request)

    def try_send_inbound(self, request: BusRequest) -> None:
        self.inbound.put_nowait(request)

    async def recv_inbound(self) -> BusRequest:
        return await self.inbound.get()

    async def send_outbound(self, result: BusResult) -> None:
        await self.outbound.put(result)

    def try_send_outbound(self, result: BusResult) -> None:
        self.outbound.put_nowait(result)

    async def recv_outbound(self) -> BusResult:
        return await self.outbound.get()