# services/api/core/poller.py
"""
Cooperative polling of /api/data.

Same refresh cycle as the browser client: fetch on a fixed interval,
compare with the previous payload, report changes. The loop is an asyncio
task owned by the poller; stop() cancels it.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, Optional, Union

import httpx

logger = logging.getLogger(__name__)

Payload = Dict[str, Any]
ChangeCallback = Callable[[Payload], Union[None, Awaitable[None]]]


def payload_changed(previous: Optional[Payload], current: Payload) -> bool:
    """True when rows or headers differ. The first payload is not a change."""
    if previous is None:
        return False
    return (
        previous.get("data") != current.get("data")
        or previous.get("headers") != current.get("headers")
    )


class DashboardPoller:
    def __init__(
        self,
        base_url: str,
        interval: float = 30.0,
        on_change: Optional[ChangeCallback] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.interval = interval
        self.on_change = on_change
        self._client = client or httpx.AsyncClient(base_url=base_url)
        self._owns_client = client is None
        self._task: Optional[asyncio.Task] = None
        self.last_payload: Optional[Payload] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def poll_once(self) -> bool:
        """
        Fetch once and update last_payload.

        Returns:
            True if the data changed since the previous poll.
        """
        resp = await self._client.get("/api/data", headers={"Cache-Control": "no-cache"})
        resp.raise_for_status()
        payload = resp.json()
        if not payload.get("success", False):
            raise RuntimeError(payload.get("error") or "dashboard returned success=false")

        changed = payload_changed(self.last_payload, payload)
        self.last_payload = payload
        if changed and self.on_change is not None:
            try:
                result = self.on_change(payload)
                if asyncio.iscoroutine(result):
                    await result
            except Exception:
                logger.exception("on_change callback failed")
        return changed

    async def _run(self) -> None:
        while True:
            try:
                await self.poll_once()
            except (httpx.HTTPError, ValueError, RuntimeError) as e:
                # Keep polling; the next tick may succeed
                logger.warning(f"Poll failed: {e}")
            await asyncio.sleep(self.interval)

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is not None:
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
        if self._owns_client:
            await self._client.aclose()
