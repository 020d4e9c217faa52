# tests/test_websocket.py
"""
ConnectionManager fan-out.
"""
import pytest

from faber.lib.websocket import ConnectionManager


class FakeSocket:
    def __init__(self, fail=False):
        self.fail = fail
        self.accepted = False
        self.sent = []

    async def accept(self):
        self.accepted = True

    async def send_json(self, message):
        if self.fail:
            raise RuntimeError("socket closed")
        self.sent.append(message)


@pytest.mark.asyncio
async def test_progress_reaches_only_its_project():
    manager = ConnectionManager()
    mine, other = FakeSocket(), FakeSocket()
    await manager.connect(mine, "p1")
    await manager.connect(other, "p2")

    await manager.broadcast_progress("p1", "generate", 42, "Running primary strategy")

    assert mine.accepted
    assert mine.sent[0]["type"] == "GENERATION_PROGRESS"
    assert mine.sent[0]["progress"] == 42
    assert other.sent == []


@pytest.mark.asyncio
async def test_dead_sockets_are_dropped():
    manager = ConnectionManager()
    alive, dead = FakeSocket(), FakeSocket(fail=True)
    await manager.connect(alive, "p1")
    await manager.connect(dead, "p1")

    await manager.broadcast_preview_status("p1", {"status": "success"})

    assert alive.sent[0]["type"] == "PREVIEW_STATUS"
    assert alive.sent[0]["session"] == {"status": "success"}
    assert manager.count("p1") == 1

    await manager.disconnect(alive, "p1")
    assert manager.count("p1") == 0
    assert "p1" not in manager.active_connections
