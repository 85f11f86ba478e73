import asyncio

import pytest

from pyrecurmail.dispatch.base import Dispatcher, DispatchResult
from pyrecurmail.server.scheduler import JobScheduler
from pyrecurmail.storage.memory_storage import MemoryJobRegistry


class RecordingDispatcher(Dispatcher):
    """Test dispatcher that records every call and can be told to fail or stall."""

    def __init__(self):
        self.calls = []
        self.fail = False
        self.error = None  # exception to raise instead of returning a result
        self.delays = {}  # recipient -> seconds to wait before answering

    async def send(self, recipient, subject, html_body):
        self.calls.append((recipient, subject, html_body))
        delay = self.delays.get(recipient)
        if delay:
            await asyncio.sleep(delay)
        if self.error is not None:
            raise self.error
        if self.fail:
            return DispatchResult.fail("mailbox unavailable")
        return DispatchResult.ok()

    def calls_for(self, recipient):
        return [call for call in self.calls if call[0] == recipient]


@pytest.fixture
def dispatcher():
    return RecordingDispatcher()


@pytest.fixture
def registry():
    return MemoryJobRegistry()


@pytest.fixture
def scheduler(registry, dispatcher):
    return JobScheduler(registry, dispatcher)
