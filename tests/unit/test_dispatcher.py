"""
Message dispatcher tests.
"""

import asyncio

import pytest

from agent.dispatcher import MessageDispatcher


class TestMessageDispatcher:

    @pytest.mark.asyncio
    async def test_processes_every_message(self):
        handled = []

        async def handler(message):
            handled.append(message)

        dispatcher = MessageDispatcher(handler, workers=2)
        dispatcher.start()
        for i in range(5):
            dispatcher.submit(i)

        await dispatcher.join()
        await dispatcher.stop()

        assert sorted(handled) == [0, 1, 2, 3, 4]
        assert dispatcher.processed == 5
        assert dispatcher.failed == 0
        assert dispatcher.pending == 0

    @pytest.mark.asyncio
    async def test_failures_logged_and_counted(self, caplog):
        async def handler(message):
            if message == "boom":
                raise RuntimeError("handler exploded")

        dispatcher = MessageDispatcher(handler, workers=1)
        dispatcher.start()
        dispatcher.submit("boom")
        dispatcher.submit("fine")

        await dispatcher.join()
        await dispatcher.stop()

        assert dispatcher.failed == 1
        assert dispatcher.processed == 1
        assert "Unhandled error in dispatched message" in caplog.text

    @pytest.mark.asyncio
    async def test_messages_run_concurrently(self):
        release = asyncio.Event()
        started = []

        async def handler(message):
            started.append(message)
            await release.wait()

        dispatcher = MessageDispatcher(handler, workers=3)
        dispatcher.start()
        for i in range(3):
            dispatcher.submit(i)

        for _ in range(50):
            if len(started) == 3:
                break
            await asyncio.sleep(0.01)
        assert len(started) == 3

        release.set()
        await dispatcher.stop()

    @pytest.mark.asyncio
    async def test_stop_times_out_on_stuck_handler(self):
        async def handler(message):
            await asyncio.sleep(3600)

        dispatcher = MessageDispatcher(handler, workers=1)
        dispatcher.start()
        dispatcher.submit("stuck")
        await asyncio.sleep(0)

        await dispatcher.stop(timeout=0.05)

        assert dispatcher.running is False

    def test_submit_before_start_raises(self):
        dispatcher = MessageDispatcher(lambda m: None)
        with pytest.raises(RuntimeError):
            dispatcher.submit("x")

    @pytest.mark.asyncio
    async def test_submit_after_stop_raises(self):
        handled = []

        async def handler(message):
            handled.append(message)

        dispatcher = MessageDispatcher(handler, workers=1)
        dispatcher.start()
        await dispatcher.stop()

        with pytest.raises(RuntimeError, match="not running"):
            dispatcher.submit("late")
        assert handled == []
        assert dispatcher.pending == 0

    @pytest.mark.asyncio
    async def test_restart_after_stop_accepts_messages(self):
        handled = []

        async def handler(message):
            handled.append(message)

        dispatcher = MessageDispatcher(handler, workers=1)
        dispatcher.start()
        await dispatcher.stop()
        dispatcher.start()
        dispatcher.submit("again")
        await dispatcher.join()
        await dispatcher.stop()

        assert handled == ["again"]
