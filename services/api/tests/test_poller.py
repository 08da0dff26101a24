"""
Tests for the asyncio dashboard poller.

Run with: pytest tests/test_poller.py -v
"""
import asyncio

import httpx
import pytest

from core.poller import DashboardPoller, payload_changed


def _payload(rows, headers=("Fase",)):
    return {"success": True, "data": rows, "headers": list(headers), "timestamp": "t", "cached": False}


class SheetServer:
    """MockTransport handler serving whatever `payload` currently is."""

    def __init__(self, payload):
        self.payload = payload
        self.calls = 0
        self.status = 200

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls += 1
        assert request.url.path == "/api/data"
        return httpx.Response(self.status, json=self.payload)


def make_poller(server, **kwargs):
    client = httpx.AsyncClient(transport=httpx.MockTransport(server), base_url="http://dash")
    return DashboardPoller("http://dash", client=client, **kwargs), client


class TestPayloadChanged:
    def test_first_payload_is_not_a_change(self):
        assert payload_changed(None, _payload([{"Fase": "FINAL"}])) is False

    def test_same_rows_new_timestamp(self):
        a = _payload([{"Fase": "FINAL"}])
        b = dict(a, timestamp="later", cached=True)
        assert payload_changed(a, b) is False

    def test_rows_differ(self):
        assert payload_changed(_payload([]), _payload([{"Fase": "FINAL"}])) is True

    def test_headers_differ(self):
        assert payload_changed(_payload([], ["A"]), _payload([], ["B"])) is True


class TestPollOnce:
    def test_change_callback(self):
        server = SheetServer(_payload([{"Fase": "SEMI"}]))
        seen = []

        async def run():
            poller, client = make_poller(server, on_change=seen.append)
            assert await poller.poll_once() is False
            assert await poller.poll_once() is False

            server.payload = _payload([{"Fase": "FINAL"}])
            assert await poller.poll_once() is True
            await client.aclose()

        asyncio.run(run())
        assert server.calls == 3
        assert seen == [_payload([{"Fase": "FINAL"}])]

    def test_async_callback_is_awaited(self):
        server = SheetServer(_payload([]))
        seen = []

        async def on_change(payload):
            await asyncio.sleep(0)
            seen.append(payload)

        async def run():
            poller, client = make_poller(server, on_change=on_change)
            await poller.poll_once()
            server.payload = _payload([{"Fase": "X"}])
            await poller.poll_once()
            await client.aclose()

        asyncio.run(run())
        assert len(seen) == 1

    def test_http_error_raises(self):
        server = SheetServer({"success": False, "error": "Failed to fetch spreadsheet data"})
        server.status = 500

        async def run():
            poller, client = make_poller(server)
            with pytest.raises(httpx.HTTPStatusError):
                await poller.poll_once()
            await client.aclose()

        asyncio.run(run())


class TestLoop:
    def test_start_and_stop(self):
        server = SheetServer(_payload([]))

        async def run():
            poller, client = make_poller(server, interval=0.01)
            poller.start()
            assert poller.running
            for _ in range(100):
                if server.calls >= 3:
                    break
                await asyncio.sleep(0.01)
            await poller.stop()
            assert not poller.running
            calls = server.calls
            await asyncio.sleep(0.05)
            assert server.calls == calls
            await client.aclose()

        asyncio.run(run())
        assert server.calls >= 3

    def test_loop_survives_errors(self):
        server = SheetServer(_payload([]))
        server.status = 503

        async def run():
            poller, client = make_poller(server, interval=0.01)
            poller.start()
            for _ in range(100):
                if server.calls >= 2:
                    break
                await asyncio.sleep(0.01)
            assert poller.running
            await poller.stop()
            await client.aclose()

        asyncio.run(run())
        assert server.calls >= 2

    def test_stop_without_start(self):
        server = SheetServer(_payload([]))

        async def run():
            poller, client = make_poller(server)
            await poller.stop()
            await client.aclose()

        asyncio.run(run())

    def test_callback_error_is_logged_and_loop_continues(self, caplog):
        server = SheetServer(_payload([]))

        def on_change(payload):
            raise KeyError("Fase")

        async def run():
            poller, client = make_poller(server, interval=0.01, on_change=on_change)
            await poller.poll_once()
            server.payload = _payload([{"Fase": "FINAL"}])
            assert await poller.poll_once() is True
            assert poller.last_payload == server.payload

            poller.start()
            calls = server.calls
            for _ in range(100):
                if server.calls >= calls + 2:
                    break
                await asyncio.sleep(0.01)
            assert poller.running
            await poller.stop()
            await client.aclose()

        asyncio.run(run())
        assert "on_change callback failed" in caplog.text
