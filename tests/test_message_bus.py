import asyncio
import json

import pytest

from slimbot.message_bus import (
    INBOUND_CAPACITY,
    BusRequest,
    BusResult,
    MessageBus,
)


@pytest.mark.asyncio
async def test_inbound_request_flow():
    bus = MessageBus()
    await bus.send_inbound(BusRequest(session_id="test:chat1", content="hello"))
    received = await bus.recv_inbound()
    assert received.session_id == "test:chat1"
    assert received.content == "hello"
    assert received.channel_inject is None


@pytest.mark.asyncio
async def test_outbound_result_flow():
    bus = MessageBus()
    await bus.send_outbound(
        BusResult(session_id="test:chat1", task_id="task-123", content="final answer")
    )
    received = await bus.recv_outbound()
    assert received == BusResult("test:chat1", "task-123", "final answer")


@pytest.mark.asyncio
async def test_inbound_channel_fills_up():
    bus = MessageBus()
    for i in range(32):
        bus.try_send_inbound(BusRequest(session_id=f"test:{i}", content=f"msg {i}"))
    assert bus.inbound.qsize() == INBOUND_CAPACITY == 32
    with pytest.raises(asyncio.QueueFull):
        bus.try_send_inbound(BusRequest(session_id="overflow", content="overflow"))


@pytest.mark.asyncio
async def test_outbound_channel_fills_up():
    bus = MessageBus()
    for i in range(32):
        bus.try_send_outbound(BusResult(f"s{i}", f"t{i}", "x"))
    with pytest.raises(asyncio.QueueFull):
        bus.try_send_outbound(BusResult("s", "t", "x"))


@pytest.mark.asyncio
async def test_fifo_order():
    bus = MessageBus()
    for i in range(3):
        await bus.send_inbound(BusRequest(session_id="s", content=str(i)))
    got = [(await bus.recv_inbound()).content for _ in range(3)]
    assert got == ["0", "1", "2"]


@pytest.mark.asyncio
async def test_concurrent_inbound_outbound():
    bus = MessageBus()

    async def worker():
        req = await bus.recv_inbound()
        await bus.send_outbound(
            BusResult(req.session_id, "task-1", f"processed: {req.content}")
        )

    task = asyncio.create_task(worker())
    await bus.send_inbound(BusRequest(session_id="test:1", content="do something"))
    result = await asyncio.wait_for(bus.recv_outbound(), timeout=5)
    await task
    assert result.content == "processed: do something"
    assert result.session_id == "test:1"


def test_bus_result_serde_round_trip():
    result = BusResult(session_id="cli:abc", task_id="task-42", content="some result")
    restored = BusResult.from_json(result.to_json())
    assert restored.session_id == "cli:abc"
    assert restored.task_id == "task-42"
    assert restored.content == "some result"


def test_bus_result_json_fields():
    data = json.loads(BusResult("a", "b", "c").to_json())
    assert data == {"session_id": "a", "task_id": "b", "content": "c"}


def test_bus_result_from_json_rejects_missing_field():
    with pytest.raises(ValueError):
        BusResult.from_json('{"session_id": "a", "content": "c"}')